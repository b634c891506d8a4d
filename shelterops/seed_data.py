#!/usr/bin/env python3
"""
seed_data.py

Generates realistic fake shelter inventory data to CSVs under a local folder (default: sample_data).

Entities:
- items, lots, transactions

The ledger is internally consistent: for every item, the opening balance plus all
IN/ADJUST minus all OUT equals the remaining quantity across its lots, so the trend
reports reconstruct a sensible history.

Run:
  python -m shelterops.seed_data --scale small --days 60
"""

from __future__ import annotations
import argparse
import csv
import os
import random
import sys
from dataclasses import dataclass
from datetime import datetime, timedelta, date, time, tzinfo
from typing import Dict, List, Tuple, Optional, get_args

from .config import get_config, get_report_timezone
from .data.models import TransactionType
from .logging import get_logger
from .reports.trends import today_in

logger = get_logger(__name__)

# -----------------------------
# Config & helper structures
# -----------------------------

CATEGORIES = {
    "Food": ["Canned Soup", "Peanut Butter", "Rice (2lb)", "Cereal", "Granola Bars", "Pasta"],
    "Hygiene": ["Toothbrush", "Toothpaste", "Shampoo", "Bar Soap", "Deodorant", "Razors"],
    "Clothing": ["Socks (pair)", "Winter Coat", "T-Shirt", "Underwear", "Gloves", "Hat"],
    "Bedding": ["Blanket", "Pillow", "Sleeping Bag", "Sheet Set"],
    "Baby": ["Diapers (size 3)", "Baby Wipes", "Formula", "Onesie"],
    "First Aid": ["Bandages", "Pain Reliever", "Hand Sanitizer", "Face Masks"],
}

TXN_TYPES = list(get_args(TransactionType))  # IN, OUT, ADJUST

@dataclass
class Scale:
    organizations: int
    items_per_org: int
    events_per_item_day: float  # rough mean

SCALES: Dict[str, Scale] = {
    "small":  Scale(2,  15, 0.6),
    "medium": Scale(5,  30, 1.0),
    "large":  Scale(20, 30, 1.5),
}


# -----------------------------
# Utility functions
# -----------------------------

def ensure_dir(path: str) -> None:
    if not os.path.exists(path):
        os.makedirs(path, exist_ok=True)

def rand_id(prefix: str, n: int) -> str:
    return f"{prefix}-{n:05d}"

def all_item_names() -> List[Tuple[str, str]]:
    return [(cat, name) for cat, names in CATEGORIES.items() for name in names]


# -----------------------------
# Core generators
# -----------------------------

def gen_organizations(n: int) -> List[str]:
    return [rand_id("org", i) for i in range(1, n + 1)]

def gen_items(organizations: List[str], per_org: int, rnd: random.Random) -> List[Dict]:
    items = []
    item_counter = 0
    catalog = all_item_names()
    for org in organizations:
        for category, name in rnd.sample(catalog, k=min(per_org, len(catalog))):
            item_counter += 1
            items.append({
                "item_id": rand_id("item", item_counter),
                "organization_id": org,
                "name": name,
                "category": category,
                # a few retired items that reports should leave out
                "active": rnd.random() > 0.05,
            })
    return items

def gen_transactions(
    items: List[Dict],
    start_d: date,
    end_d: date,
    events_per_item_day: float,
    rnd: random.Random,
    tz: Optional[tzinfo] = None,
) -> Tuple[List[Dict], Dict[str, int], Dict[str, int]]:
    """Walk each item's balance forward day by day.

    Returns the transaction rows plus opening and closing balance per item_id.
    OUT never takes a balance below zero. Timestamps are daytime wall-clock
    hours in tz (system local time when None), so each lands on its own
    report day.
    """
    transactions: List[Dict] = []
    opening: Dict[str, int] = {}
    closing: Dict[str, int] = {}
    txn_counter = 0
    days = (end_d - start_d).days + 1

    for it in items:
        balance = rnd.randint(0, 80)
        opening[it["item_id"]] = balance
        for d in range(days):
            day = start_d + timedelta(days=d)
            # geometric draw for a small event count
            events = 0
            p = events_per_item_day / (1.0 + events_per_item_day)
            while rnd.random() < p:
                events += 1

            for _ in range(events):
                kind = rnd.choices(TXN_TYPES, weights=[0.4, 0.5, 0.1])[0]
                if kind == "OUT":
                    if balance == 0:
                        continue
                    qty = rnd.randint(1, min(balance, 10))
                    balance -= qty
                else:
                    qty = rnd.randint(1, 25) if kind == "IN" else rnd.randint(1, 5)
                    balance += qty

                txn_counter += 1
                ts = datetime.combine(day, time(rnd.randint(8, 19), rnd.randint(0, 59)))
                ts = ts.replace(tzinfo=tz) if tz is not None else ts.astimezone()
                transactions.append({
                    "transaction_id": rand_id("txn", txn_counter),
                    "organization_id": it["organization_id"],
                    "item_id": it["item_id"],
                    "type": kind,
                    "quantity": qty,
                    "created_at": ts.isoformat(timespec="seconds"),
                })
        closing[it["item_id"]] = balance

    transactions.sort(key=lambda t: t["created_at"])
    return transactions, opening, closing

def gen_lots(items: List[Dict], closing: Dict[str, int], end_d: date, rnd: random.Random) -> List[Dict]:
    """Split each item's closing balance across one to three lots."""
    lots: List[Dict] = []
    lot_counter = 0
    for it in items:
        remaining = closing.get(it["item_id"], 0)
        n_lots = rnd.randint(1, 3)
        for i in range(n_lots):
            qty = remaining if i == n_lots - 1 else rnd.randint(0, remaining)
            remaining -= qty
            lot_counter += 1
            expires = None
            if it["category"] in ("Food", "Baby", "First Aid"):
                expires = (end_d + timedelta(days=rnd.randint(-10, 365))).isoformat()
            lots.append({
                "lot_id": rand_id("lot", lot_counter),
                "item_id": it["item_id"],
                "organization_id": it["organization_id"],
                "remaining_qty": qty,
                "expiration_date": expires,
            })
    return lots


# -----------------------------
# CSV writer
# -----------------------------

def write_csv(path: str, rows: List[Dict], headers: List[str]) -> None:
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

    parser = argparse.ArgumentParser(description="Generate fake shelter inventory data to CSVs.")
    parser.add_argument("--scale", choices=SCALES.keys(), default=config.default_seed_scale)
    parser.add_argument("--days", type=int, default=config.default_seed_days, help="Number of days of ledger history.")
    parser.add_argument("--end-date", type=str, default=None, help="YYYY-MM-DD (defaults to today)")
    parser.add_argument("--output-dir", type=str, default=config.data_dir)
    parser.add_argument("--seed", type=int, default=config.default_seed_value)
    parser.add_argument("--no-overwrite", action="store_true", help="Fail if CSVs already exist.")
    args = parser.parse_args(argv)

    rnd = random.Random(args.seed)

    scale = SCALES[args.scale]
    outdir = args.output_dir
    ensure_dir(outdir)

    files = {
        "items": os.path.join(outdir, "items.csv"),
        "lots": os.path.join(outdir, "lots.csv"),
        "transactions": os.path.join(outdir, "transactions.csv"),
    }
    if args.no_overwrite:
        for p in files.values():
            if os.path.exists(p):
                print(f"Refusing to overwrite existing file: {p}", file=sys.stderr)
                return 2

    tz = get_report_timezone()
    end_d = date.fromisoformat(args.end_date) if args.end_date else today_in(tz)
    start_d = end_d - timedelta(days=args.days - 1)

    organizations = gen_organizations(scale.organizations)
    items = gen_items(organizations, scale.items_per_org, rnd)
    transactions, _, closing = gen_transactions(items, start_d, end_d, scale.events_per_item_day, rnd, tz)
    lots = gen_lots(items, closing, end_d, rnd)

    write_csv(files["items"], items,
              ["item_id", "organization_id", "name", "category", "active"])
    write_csv(files["lots"], lots,
              ["lot_id", "item_id", "organization_id", "remaining_qty", "expiration_date"])
    write_csv(files["transactions"], transactions,
              ["transaction_id", "organization_id", "item_id", "type", "quantity", "created_at"])

    logger.info(f"Generated data in {outdir} for {start_d} to {end_d}")
    logger.info(f" organizations: {len(organizations)} | items: {len(items)} | lots: {len(lots)}")
    logger.info(f" transactions: {len(transactions)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
