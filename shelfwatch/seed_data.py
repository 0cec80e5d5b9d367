#!/usr/bin/env python3
"""
seed_data.py

Generates a realistic stock-count history as CSVs under a local folder
(default: the configured data_dir), in the layout CsvInventoryStore reads.

Each item starts near its shelf capacity, is drawn down by a noisy daily usage
and is restocked once it falls below its reorder point, producing the
decline-then-restock series the analysis expects. A few items are left without
a restock at the end so there is something to reorder.

Tables written:
- items, photos, counts, suppliers, supplier_products

Run:
  python -m shelfwatch.seed_data --scale small --days 30
"""

from __future__ import annotations
import argparse
import csv
import random
import sys
import uuid
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from pathlib import Path
from typing import Dict, List, Optional

from shelfwatch.config import get_config
from shelfwatch.data.backends.csv_backend import TABLE_COLUMNS, resolve_data_dir
from shelfwatch.logging import get_logger

logger = get_logger(__name__)

# -----------------------------
# Config & helper structures
# -----------------------------

CATALOGUE: Dict[str, List[str]] = {
    "Beverages": ["Coca Cola 330ml", "Sparkling Water 500ml", "Orange Juice 1L", "Cold Brew Coffee"],
    "Snacks": ["Salted Crisps", "Chocolate Bar", "Trail Mix", "Granola Bar"],
    "Household": ["Paper Towels", "Dish Soap", "Trash Bags", "Sponges"],
    "Building": ["Cement Bags", "Wood Screws", "Drywall Sheets", "Paint Rollers"],
    "Office": ["Printer Paper", "Ballpoint Pens", "Sticky Notes", "Staples"],
}

SUPPLIER_CITIES = ["Austin, TX", "Denver, CO", "Portland, OR", "Chicago, IL", "Boston, MA", "Phoenix, AZ"]
SUPPLIER_SUFFIXES = ["Wholesale", "Distribution", "Supply Co", "Trading"]

COUNT_TIME = time(9, 0, 0)


@dataclass
class Scale:
    users: int
    items_per_user: int
    suppliers: int


SCALES: Dict[str, Scale] = {
    "small":  Scale(1,  12,  4),
    "medium": Scale(5,  20, 10),
    "large":  Scale(20, 20, 25),
}


# -----------------------------
# Utility functions
# -----------------------------

def new_id() -> str:
    return str(uuid.UUID(int=random.getrandbits(128)))


def all_products() -> List[str]:
    return [name for names in CATALOGUE.values() for name in names]


def price_round(p: float) -> float:
    return round(max(p, 0.01), 2)


# -----------------------------
# Core generators
# -----------------------------

def gen_items(users: List[str], per_user: int, created: datetime) -> List[Dict]:
    products = all_products()
    items = []
    for user_id in users:
        for name in random.sample(products, k=min(per_user, len(products))):
            items.append({
                "item_id": new_id(),
                "user_id": user_id,
                "item_name": name,
                "created_at": created.isoformat(),
            })
    return items


def gen_photos(users: List[str], start_d: date, days: int) -> Dict[tuple, Dict]:
    photos = {}
    for user_id in users:
        for d in range(days):
            day = start_d + timedelta(days=d)
            ts = datetime.combine(day, COUNT_TIME, tzinfo=timezone.utc)
            photos[(user_id, day)] = {
                "photo_id": new_id(),
                "user_id": user_id,
                "storage_path": f"seed/{user_id}/{day.isoformat()}.jpg",
                "description": "Seeded shelf photo",
                "analysis_data": "{}",
                "created_at": ts.isoformat(),
            }
    return photos


def gen_count_series(days: int, restock: bool) -> List[int]:
    """Daily counts: noisy drawdown, instant restock to capacity below the reorder point."""
    capacity = random.randint(150, 400)
    usage = random.uniform(0.04, 0.12) * capacity
    reorder_point = int(capacity * random.uniform(0.2, 0.35))

    series = []
    level = capacity - random.randint(0, capacity // 4)
    for _ in range(days):
        series.append(level)
        level = max(0, int(level - random.gauss(usage, usage * 0.25)))
        if restock and level < reorder_point:
            level = capacity
    return series


def gen_counts(items: List[Dict], photos: Dict[tuple, Dict], start_d: date, days: int) -> List[Dict]:
    counts = []
    for item in items:
        # about a quarter of the items are never restocked, so they trend down
        series = gen_count_series(days, restock=random.random() > 0.25)
        for d, quantity in enumerate(series):
            day = start_d + timedelta(days=d)
            photo = photos[(item["user_id"], day)]
            counts.append({
                "count_id": new_id(),
                "item_id": item["item_id"],
                "photo_id": photo["photo_id"],
                "quantity": quantity,
                "confidence_score": round(random.uniform(0.85, 1.0), 2),
                "created_at": photo["created_at"],
            })
    return counts


def gen_suppliers(n: int) -> tuple:
    suppliers, offers = [], []
    products = all_products()
    for i in range(1, n + 1):
        supplier_id = new_id()
        city = random.choice(SUPPLIER_CITIES)
        name = f"{city.split(',')[0]} {random.choice(SUPPLIER_SUFFIXES)} {i}"
        suppliers.append({
            "supplier_id": supplier_id,
            "name": name,
            "contact_phone": f"+1-555-{random.randint(100, 999)}-{random.randint(1000, 9999)}",
            "contact_email": f"orders{i}@{name.split()[0].lower()}-supply.example",
            "location": city,
        })
        for product in random.sample(products, k=random.randint(4, 10)):
            offers.append({
                "supplier_id": supplier_id,
                "product_name": product,
                "unit_price": price_round(random.uniform(0.5, 25.0)),
                "currency": "USD",
                "min_order_quantity": random.choice([1, 10, 25, 50]),
                "lead_time_days": random.randint(1, 7),
            })
    return suppliers, offers


# -----------------------------
# CSV writer
# -----------------------------

def write_csv(path: Path, rows: List[Dict], headers: List[str]) -> None:
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=headers)
        w.writeheader()
        for r in rows:
            w.writerow(r)


# -----------------------------
# Main
# -----------------------------

def main(argv: Optional[List[str]] = None) -> int:
    config = get_config()

    parser = argparse.ArgumentParser(description="Generate a fake stock-count history to CSVs.")
    parser.add_argument("--scale", choices=SCALES.keys(), default=config.default_seed_scale)
    parser.add_argument("--days", type=int, default=config.default_seed_days, help="Number of days of counts.")
    parser.add_argument("--start-date", type=str, default=None, help="YYYY-MM-DD (defaults to today - days + 1)")
    parser.add_argument("--output-dir", type=str, default=config.data_dir)
    parser.add_argument("--seed", type=int, default=config.default_seed_value)
    parser.add_argument("--no-overwrite", action="store_true", help="Fail if CSVs already exist.")
    args = parser.parse_args(argv)

    if args.days < 1:
        parser.error("--days must be at least 1")

    random.seed(args.seed)

    scale = SCALES[args.scale]
    outdir = resolve_data_dir(args.output_dir)
    outdir.mkdir(parents=True, exist_ok=True)

    tables = ["items", "photos", "counts", "suppliers", "supplier_products"]
    files = {t: outdir / f"{t}.csv" for t in tables}
    if args.no_overwrite:
        for p in files.values():
            if p.exists():
                print(f"Refusing to overwrite existing file: {p}", file=sys.stderr)
                return 2

    # time window
    if args.start_date:
        start_d = date.fromisoformat(args.start_date)
    else:
        start_d = datetime.now(timezone.utc).date() - timedelta(days=args.days - 1)
    created = datetime.combine(start_d, time(0, 0, 0), tzinfo=timezone.utc)

    users = [f"user-{i:03d}" for i in range(1, scale.users + 1)]
    items = gen_items(users, scale.items_per_user, created)
    photos = gen_photos(users, start_d, args.days)
    counts = gen_counts(items, photos, start_d, args.days)
    suppliers, offers = gen_suppliers(scale.suppliers)

    write_csv(files["items"], items, TABLE_COLUMNS["items"])
    write_csv(files["photos"], list(photos.values()), TABLE_COLUMNS["photos"])
    write_csv(files["counts"], counts, TABLE_COLUMNS["counts"])
    write_csv(files["suppliers"], suppliers, TABLE_COLUMNS["suppliers"])
    write_csv(files["supplier_products"], offers, TABLE_COLUMNS["supplier_products"])

    logger.info(f"Generated data in {outdir}")
    logger.info(f" users: {len(users)} | items: {len(items)} | photos: {len(photos)} | counts: {len(counts)}")
    logger.info(f" suppliers: {len(suppliers)} | supplier_products: {len(offers)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
