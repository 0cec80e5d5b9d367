from datetime import datetime, timedelta, timezone

import pytest

from shelfwatch.analysis.rounding import round_half_up
from shelfwatch.analysis.stock_analyzer import (
    analyze_stock_levels,
    calculate_trend,
    compute_stock_trend,
    get_items_needing_reorder,
    get_risk_level,
    observations_in_window,
    predict_stock_out,
    rank_by_risk,
)
from shelfwatch.data.models import Observation, StockTrend

DAY0 = datetime(2024, 10, 1, 9, 0, tzinfo=timezone.utc)


def obs(qty, day, name="Widgets"):
    return Observation(item_name=name, quantity=qty, observed_at=DAY0 + timedelta(days=day))


def series(name, *points):
    return [obs(q, d, name) for d, q in points]


# ---- trend and risk ----

def test_thirty_percent_decline_is_high_risk_low_stock():
    analysis = analyze_stock_levels({"Widgets": series("Widgets", (0, 100), (7, 70))}, 7, now=DAY0 + timedelta(days=7))
    assert len(analysis.low_stock_items) == 1
    trend = analysis.low_stock_items[0]
    assert trend.decline_percentage == 30
    assert trend.risk_level == "high"
    assert trend.trend == "decreasing"
    assert trend.previous_quantity == 100 and trend.current_quantity == 70
    assert trend.days_tracked == 7
    assert analysis.critical_items == [] and analysis.healthy_stock_items == []


def test_fifty_percent_decline_is_critical_only():
    analysis = analyze_stock_levels({"Widgets": series("Widgets", (0, 100), (5, 50))}, 7, now=DAY0 + timedelta(days=5))
    assert [t.item_name for t in analysis.critical_items] == ["Widgets"]
    assert analysis.low_stock_items == []


def test_medium_decreasing_item_lands_in_no_bucket():
    analysis = analyze_stock_levels({"Widgets": series("Widgets", (0, 100), (3, 80))}, 7, now=DAY0 + timedelta(days=3))
    assert analysis.low_stock_items == []
    assert analysis.critical_items == []
    assert analysis.healthy_stock_items == []


def test_increase_reports_negative_decline_and_is_healthy():
    trend = compute_stock_trend("Widgets", series("Widgets", (0, 100), (2, 120)), 7, now=DAY0 + timedelta(days=2))
    assert trend.decline_percentage == -20
    assert trend.trend == "increasing"
    assert trend.risk_level == "low"


def test_increase_from_zero_keeps_zero_decline():
    trend = compute_stock_trend("Widgets", series("Widgets", (0, 0), (1, 10)), 7, now=DAY0 + timedelta(days=1))
    assert trend.decline_percentage == 0
    assert trend.trend == "increasing"
    assert trend.risk_level == "low"


def test_risk_uses_unrounded_decline():
    # 29.9% rounds to 30 for display but is still medium risk
    trend = compute_stock_trend("Widgets", series("Widgets", (0, 1000), (1, 701)), 7, now=DAY0 + timedelta(days=1))
    assert trend.decline_percentage == 30
    assert trend.risk_level == "medium"


def test_decline_rounds_half_up():
    trend = compute_stock_trend("Widgets", series("Widgets", (0, 8), (1, 7)), 7, now=DAY0 + timedelta(days=1))
    assert trend.decline_percentage == 13


@pytest.mark.parametrize("current,previous,expected", [
    (100, 100, "stable"),
    (104, 100, "stable"),
    (96, 100, "stable"),
    (105, 100, "increasing"),
    (95, 100, "decreasing"),
    (0, 0, "stable"),
])
def test_calculate_trend(current, previous, expected):
    assert calculate_trend(current, previous) == expected


@pytest.mark.parametrize("decline,expected", [
    (50, "critical"), (49.9, "high"), (30, "high"), (29.9, "medium"), (15, "medium"), (14.9, "low"), (-10, "low"),
])
def test_get_risk_level(decline, expected):
    assert get_risk_level(decline) == expected


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(-2.5) == -2
    assert round_half_up(0.25, 1) == 0.3


# ---- windowing ----

def test_items_with_fewer_than_two_counts_in_window_are_excluded():
    now = DAY0 + timedelta(days=10)
    by_item = {
        "Single": series("Single", (10, 5)),
        "Stale": series("Stale", (0, 100), (10, 20)),
        "Fresh": series("Fresh", (4, 100), (10, 20)),
    }
    analysis = analyze_stock_levels(by_item, 7, now=now)
    names = {t.item_name for t in analysis.critical_items + analysis.low_stock_items + analysis.healthy_stock_items}
    assert names == {"Fresh"}


def test_window_bounds_are_inclusive_and_output_sorted():
    now = DAY0 + timedelta(days=7)
    shuffled = [obs(70, 7), obs(100, 0), obs(85, 3)]
    assert [o.quantity for o in observations_in_window(shuffled, 7, now)] == [100, 85, 70]


def test_naive_reference_time_is_treated_as_utc():
    naive_now = (DAY0 + timedelta(days=7)).replace(tzinfo=None)
    trend = compute_stock_trend("Widgets", series("Widgets", (0, 100), (7, 70)), 7, now=naive_now)
    assert trend is not None and trend.decline_percentage == 30


def test_analysis_is_deterministic():
    now = DAY0 + timedelta(days=7)
    by_item = {
        "A": series("A", (0, 100), (7, 40)),
        "B": series("B", (1, 50), (6, 60)),
        "C": series("C", (2, 90), (7, 60)),
    }
    first = analyze_stock_levels(by_item, 7, now=now)
    second = analyze_stock_levels(by_item, 7, now=now)
    assert first.model_dump_json() == second.model_dump_json()
    assert first.analyzed_at == now


def test_items_needing_reorder_are_ordered_by_risk():
    now = DAY0 + timedelta(days=7)
    by_item = {
        "High": series("High", (0, 100), (7, 65)),
        "Critical": series("Critical", (0, 100), (7, 10)),
        "Healthy": series("Healthy", (0, 100), (7, 99)),
    }
    assert [t.item_name for t in get_items_needing_reorder(by_item, 7, now=now)] == ["Critical", "High"]


# ---- stock-out prediction ----

def test_rank_by_risk_keeps_input_order_within_a_level():
    def trend(name, risk):
        return StockTrend(
            item_name=name, current_quantity=1, previous_quantity=2,
            decline_percentage=50, days_tracked=7, trend="decreasing", risk_level=risk,
        )

    ranked = rank_by_risk([trend("a", "medium"), trend("b", "critical"), trend("c", "high"), trend("d", "critical")])
    assert [t.item_name for t in ranked] == ["b", "d", "c", "a"]


def test_predict_stock_out_from_first_and_last_count():
    now = DAY0 + timedelta(days=10)
    prediction = predict_stock_out(series("Widgets", (0, 100), (4, 95), (10, 50)), 14, now=now)
    assert prediction.estimated_daily_usage == 5.0
    assert prediction.days_until_stock_out == 10
    assert prediction.current_quantity == 50
    assert prediction.estimated_stock_out_date == now + timedelta(days=10)


def test_predict_stock_out_uses_at_least_one_day():
    now = DAY0 + timedelta(hours=6)
    counts = [
        Observation(item_name="Widgets", quantity=100, observed_at=DAY0),
        Observation(item_name="Widgets", quantity=90, observed_at=DAY0 + timedelta(hours=6)),
    ]
    prediction = predict_stock_out(counts, 14, now=now)
    assert prediction.estimated_daily_usage == 10.0
    assert prediction.days_until_stock_out == 9


def test_predict_stock_out_rounds_usage_to_one_decimal():
    prediction = predict_stock_out(series("Widgets", (0, 100), (3, 90)), 14, now=DAY0 + timedelta(days=3))
    assert prediction.estimated_daily_usage == 3.3
    assert prediction.days_until_stock_out == 27


@pytest.mark.parametrize("points", [
    [(0, 100)],
    [(0, 100), (5, 100)],
    [(0, 50), (5, 80)],
    [(0, 50), (5, 0)],
])
def test_predict_stock_out_returns_none(points):
    assert predict_stock_out(series("Widgets", *points), 14, now=DAY0 + timedelta(days=5)) is None
