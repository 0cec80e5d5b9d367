from shelfwatch.analysis import analyze_stock_levels
from shelfwatch.data.backends.csv_backend import CsvInventoryStore
from shelfwatch.seed_data import gen_count_series, main

ARGS = ["--scale", "small", "--days", "10", "--start-date", "2024-10-01", "--seed", "7"]


def test_seed_writes_loadable_tables(tmp_path):
    assert main(ARGS + ["--output-dir", str(tmp_path)]) == 0

    store = CsvInventoryStore(tmp_path)
    items = store.list_items("user-001")
    assert len(items) == 12
    by_item = store.get_observations_by_item("user-001")
    assert all(len(counts) == 10 for counts in by_item.values())
    assert len(store.list_suppliers()) == 4

    last_day = max(o.observed_at for counts in by_item.values() for o in counts)
    analysis = analyze_stock_levels(by_item, 7, now=last_day)
    bucketed = analysis.low_stock_items + analysis.critical_items + analysis.healthy_stock_items
    assert bucketed


def test_seed_is_reproducible(tmp_path):
    main(ARGS + ["--output-dir", str(tmp_path / "a")])
    main(ARGS + ["--output-dir", str(tmp_path / "b")])
    for table in ["items", "photos", "counts", "suppliers", "supplier_products"]:
        assert (tmp_path / "a" / f"{table}.csv").read_text() == (tmp_path / "b" / f"{table}.csv").read_text()


def test_no_overwrite(tmp_path):
    main(ARGS + ["--output-dir", str(tmp_path)])
    assert main(ARGS + ["--output-dir", str(tmp_path), "--no-overwrite"]) == 2


def test_count_series_never_negative():
    series = gen_count_series(60, restock=False)
    assert len(series) == 60
    assert all(q >= 0 for q in series)
