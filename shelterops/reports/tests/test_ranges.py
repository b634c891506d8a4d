import pytest
from datetime import datetime, timedelta, timezone

from shelterops.reports.ranges import range_label, range_to_days, since_timestamp

@pytest.mark.parametrize("name,days", [("day", 1), ("week", 7), ("month", 30), ("year", 365)])
def test_range_to_days(name, days):
    assert range_to_days(name) == days

def test_unknown_range_raises():
    with pytest.raises(ValueError):
        range_to_days("quarter")

def test_range_label():
    assert [range_label(r) for r in ("day", "week", "month", "year")] == ["Day", "Week", "Month", "Year"]

def test_since_timestamp_is_midnight_in_zone():
    plus_two = timezone(timedelta(hours=2))
    since = since_timestamp("2024-01-28", plus_two)
    assert since == datetime(2024, 1, 28, 0, 0, tzinfo=plus_two)
    assert since.astimezone(timezone.utc) == datetime(2024, 1, 27, 22, 0, tzinfo=timezone.utc)

def test_since_timestamp_defaults_to_local_time():
    since = since_timestamp("2024-06-15")
    assert since.tzinfo is not None
    assert (since.year, since.month, since.day, since.hour) == (2024, 6, 15, 0)
