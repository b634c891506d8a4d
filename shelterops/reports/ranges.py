from __future__ import annotations

from datetime import date, datetime, tzinfo
from typing import Dict, Literal, Optional, get_args

ReportRange = Literal["day", "week", "month", "year"]

RANGE_DAYS: Dict[str, int] = {
    "day": 1,
    "week": 7,
    "month": 30,
    "year": 365,
}


def range_to_days(report_range: str) -> int:
    """Number of calendar days (ending today) covered by a report range."""
    try:
        return RANGE_DAYS[report_range]
    except KeyError:
        raise ValueError(
            f"Unknown report range '{report_range}'. Must be one of: {list(get_args(ReportRange))}"
        ) from None


def range_label(report_range: str) -> str:
    range_to_days(report_range)
    return report_range.capitalize()


def since_timestamp(day_key: str, tz: Optional[tzinfo] = None) -> datetime:
    """Midnight at the start of day_key, as an aware datetime.

    This is the inclusive lower bound used when querying the ledger for a range.
    """
    start = datetime.combine(date.fromisoformat(day_key), datetime.min.time())
    if tz is not None:
        return start.replace(tzinfo=tz)
    # System local time, with the offset in effect on that date
    return start.astimezone()
