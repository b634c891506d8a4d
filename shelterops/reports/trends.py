"""
trends.py

Reconstructs a day-by-day on-hand series for an inventory report.

The only trustworthy absolute number is today's on-hand quantity, so the
series is anchored on the last day and walked backward through the ledger,
undoing each day's net change:

    on_hand[n-1] = current_on_hand
    on_hand[i]   = on_hand[i+1] - (in[i+1] - out[i+1])

ADJUST transactions count as IN (recounts are recorded as stock additions).
Bad rows never abort a report: a missing or non-numeric quantity counts as 0,
and a row whose timestamp cannot be parsed is skipped.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta, tzinfo
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import pandas as pd
from pydantic import BaseModel

from ..data.models import DayBucket, TrendPoint, TrendSummary
from ..logging import get_logger

logger = get_logger(__name__)

IN_TYPES = ("IN", "ADJUST")
OUT_TYPES = ("OUT",)

DAY_KEY_FORMAT = "%Y-%m-%d"

Transactions = Union[pd.DataFrame, Iterable[Union[Mapping[str, Any], BaseModel]]]


# -----------------------------
# Helpers
# -----------------------------

def coerce_quantity(value: Any) -> float:
    """Return value as a number, or 0 when it is missing or not numeric."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def today_in(tz: Optional[tzinfo] = None) -> date:
    """Today's calendar date in tz (system local time when tz is None)."""
    return datetime.now(tz).date()


def to_day_key(value: Any, tz: Optional[tzinfo] = None) -> Optional[str]:
    """Local calendar-date key for a timestamp, or None if it cannot be parsed.

    Naive timestamps are taken as already local. Aware timestamps are
    converted to tz, or to system local time when tz is None.
    """
    if value is None:
        return None
    try:
        ts = pd.Timestamp(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if pd.isna(ts):
        return None

    dt = ts.to_pydatetime()
    if dt.tzinfo is not None:
        dt = dt.astimezone(tz)
    return dt.strftime(DAY_KEY_FORMAT)


def _to_frame(transactions: Transactions) -> pd.DataFrame:
    if isinstance(transactions, pd.DataFrame):
        df = transactions.copy()
    else:
        rows = []
        for t in transactions:
            if isinstance(t, BaseModel):
                rows.append(t.model_dump())
            else:
                rows.append(dict(t))
        df = pd.DataFrame(rows)
    return df.reindex(columns=["type", "quantity", "created_at"])


# -----------------------------
# TrendReconstructor
# -----------------------------

class TrendReconstructor:
    """Turns a transaction ledger plus current on-hand into a daily trend.

    Pure and synchronous: nothing is cached between calls and inputs are
    never mutated, so one instance can serve concurrent reports.

    Args:
        tz: Time zone used to derive day keys and "today". None means system
            local time.
    """

    def __init__(self, tz: Optional[tzinfo] = None) -> None:
        self.tz = tz

    def build_day_keys(self, range_days: int, today: Optional[date] = None) -> List[str]:
        """Return range_days contiguous day keys, oldest first, ending at today."""
        if range_days <= 0:
            return []
        if today is None:
            today = today_in(self.tz)
        elif isinstance(today, datetime):
            today = today.date()

        start = today - timedelta(days=range_days - 1)
        return [(start + timedelta(days=i)).strftime(DAY_KEY_FORMAT) for i in range(range_days)]

    def aggregate_by_day(self, transactions: Transactions, day_keys: Sequence[str]) -> Dict[str, DayBucket]:
        """Sum IN/ADJUST and OUT quantities per day key.

        Every key in day_keys is present in the result, in the same order.
        Transactions outside day_keys or with an unparseable timestamp are
        dropped.
        """
        buckets = {k: DayBucket(day=k) for k in day_keys}

        df = _to_frame(transactions)
        if df.empty or not buckets:
            return buckets

        df["day"] = df["created_at"].map(lambda v: to_day_key(v, self.tz))
        df["qty"] = df["quantity"].map(coerce_quantity)
        df["kind"] = df["type"].astype(str).str.strip().str.upper()

        unparseable = int(df["day"].isna().sum())
        if unparseable:
            logger.debug(f"Skipping {unparseable} transaction(s) with unparseable timestamps")

        df = df[df["day"].isin(list(buckets))].copy()
        if df.empty:
            return buckets

        df["in_qty"] = df["qty"].where(df["kind"].isin(IN_TYPES), 0.0)
        df["out_qty"] = df["qty"].where(df["kind"].isin(OUT_TYPES), 0.0)
        totals = df.groupby("day")[["in_qty", "out_qty"]].sum()

        for day, row in totals.iterrows():
            buckets[day] = DayBucket(day=day, total_in=float(row["in_qty"]), total_out=float(row["out_qty"]))
        return buckets

    def reconstruct_on_hand(self, daily: Sequence[DayBucket], current_on_hand: Any) -> List[TrendPoint]:
        """Anchor the last day on current_on_hand and walk backward.

        Negative results are returned as-is; they mean the ledger and the
        current count disagree, which the caller should get to see.
        """
        n = len(daily)
        if n == 0:
            return []

        on_hand = [0.0] * n
        on_hand[n - 1] = coerce_quantity(current_on_hand)
        for i in range(n - 2, -1, -1):
            on_hand[i] = on_hand[i + 1] - daily[i + 1].net

        return [
            TrendPoint(
                day=d.day,
                on_hand=on_hand[i],
                net_change=d.net,
                total_in=d.total_in,
                total_out=d.total_out,
            )
            for i, d in enumerate(daily)
        ]

    def summarize(self, series: Sequence[TrendPoint], current_on_hand: Any = 0) -> TrendSummary:
        """Totals over the series; current_on_hand is used only if it is empty."""
        total_in = sum(p.total_in for p in series)
        total_out = sum(p.total_out for p in series)
        current = series[-1].on_hand if series else coerce_quantity(current_on_hand)
        return TrendSummary(
            current_on_hand=current,
            total_in=total_in,
            total_out=total_out,
            net_change=total_in - total_out,
        )

    def reconstruct(
        self,
        transactions: Transactions,
        current_on_hand: Any,
        range_days: int,
        today: Optional[date] = None,
    ) -> tuple[List[str], List[TrendPoint], TrendSummary]:
        """Run the whole pipeline: day keys, buckets, series, summary."""
        day_keys = self.build_day_keys(range_days, today)
        buckets = self.aggregate_by_day(transactions, day_keys)
        series = self.reconstruct_on_hand([buckets[k] for k in day_keys], current_on_hand)
        summary = self.summarize(series, current_on_hand)
        logger.debug(
            f"Reconstructed {len(series)} day(s): in={summary.total_in} out={summary.total_out} "
            f"on_hand={summary.current_on_hand}"
        )
        return day_keys, series, summary
