import copy
import pytest
import pandas as pd
from datetime import date, datetime, timedelta, timezone

from shelterops.data.models import DayBucket, TransactionRecord
from shelterops.reports.trends import TrendReconstructor, coerce_quantity, to_day_key

TODAY = date(2024, 1, 3)

@pytest.fixture
def reconstructor():
    return TrendReconstructor(tz=timezone.utc)

def txn(kind, qty, created_at, item_id="item-00001"):
    return {"type": kind, "quantity": qty, "created_at": created_at, "item_id": item_id}

def ledger_over(days, today=TODAY):
    """A busy ledger with a few movements every day of the range."""
    rows = []
    for d in range(days):
        day = today - timedelta(days=d)
        rows.append(txn("IN", (d % 7) + 1, f"{day.isoformat()}T09:00:00Z"))
        rows.append(txn("OUT", (d % 3) + 2, f"{day.isoformat()}T15:30:00Z"))
        if d % 5 == 0:
            rows.append(txn("ADJUST", 4, f"{day.isoformat()}T18:00:00Z"))
    return rows

# -----------------------------
# build_day_keys
# -----------------------------

@pytest.mark.parametrize("days", [1, 7, 30, 365])
def test_day_keys_cover_range_ending_today(reconstructor, days):
    """Exactly N unique, contiguous, ascending keys ending at today."""
    keys = reconstructor.build_day_keys(days, TODAY)
    assert len(keys) == days
    assert len(set(keys)) == days
    assert keys[-1] == "2024-01-03"
    parsed = [date.fromisoformat(k) for k in keys]
    assert all(b - a == timedelta(days=1) for a, b in zip(parsed, parsed[1:]))

def test_day_keys_cross_year_boundary(reconstructor):
    keys = reconstructor.build_day_keys(7, TODAY)
    assert keys[0] == "2023-12-28"
    assert "2023-12-31" in keys

def test_day_keys_accepts_datetime(reconstructor):
    keys = reconstructor.build_day_keys(2, datetime(2024, 3, 1, 23, 59))
    assert keys == ["2024-02-29", "2024-03-01"]

def test_day_keys_non_positive_is_empty(reconstructor):
    assert reconstructor.build_day_keys(0, TODAY) == []

# -----------------------------
# Reconstruction scenarios
# -----------------------------

def test_backward_reconstruction_three_days(reconstructor):
    """Current 10, IN 5 on day 2, OUT 2 on day 3 -> 7, 12, 10."""
    transactions = [
        txn("IN", 5, "2024-01-02T10:00:00Z"),
        txn("OUT", 2, "2024-01-03T11:00:00Z"),
    ]
    keys, series, summary = reconstructor.reconstruct(transactions, 10, 3, TODAY)

    assert keys == ["2024-01-01", "2024-01-02", "2024-01-03"]
    assert [p.on_hand for p in series] == [7, 12, 10]
    assert [p.net_change for p in series] == [0, 5, -2]
    assert summary.total_in == 5
    assert summary.total_out == 2
    assert summary.net_change == 3
    assert summary.current_on_hand == 10

def test_conservation_between_consecutive_days(reconstructor):
    _, series, _ = reconstructor.reconstruct(ledger_over(30), 250, 30, TODAY)
    for prev, cur in zip(series, series[1:]):
        assert prev.on_hand + cur.net_change == pytest.approx(cur.on_hand)

@pytest.mark.parametrize("current", [0, 3.5, 250])
def test_last_day_is_anchored_on_current_quantity(reconstructor, current):
    _, series, summary = reconstructor.reconstruct(ledger_over(30), current, 30, TODAY)
    assert series[-1].on_hand == current
    assert summary.current_on_hand == current

def test_empty_ledger_gives_flat_line(reconstructor):
    keys, series, summary = reconstructor.reconstruct([], 42, 30, TODAY)
    assert len(series) == 30
    assert all(p.total_in == 0 and p.total_out == 0 for p in series)
    assert all(p.on_hand == 42 for p in series)
    assert summary.total_in == summary.total_out == 0

def test_no_transactions_over_a_week(reconstructor):
    _, series, summary = reconstructor.reconstruct(pd.DataFrame(), 9, 7, TODAY)
    assert [p.on_hand for p in series] == [9] * 7
    assert summary.net_change == 0

def test_negative_on_hand_is_not_clamped(reconstructor):
    """Ledger says 5 came in today but only 0 are on hand: yesterday shows -5."""
    _, series, _ = reconstructor.reconstruct([txn("IN", 5, "2024-01-03T08:00:00Z")], 0, 2, TODAY)
    assert [p.on_hand for p in series] == [-5, 0]

# -----------------------------
# aggregate_by_day
# -----------------------------

def test_adjust_counts_like_in(reconstructor):
    keys = reconstructor.build_day_keys(1, TODAY)
    adjust = reconstructor.aggregate_by_day([txn("ADJUST", 4, "2024-01-03T12:00:00Z")], keys)
    stock_in = reconstructor.aggregate_by_day([txn("IN", 4, "2024-01-03T12:00:00Z")], keys)
    assert adjust["2024-01-03"].total_in == 4
    assert adjust["2024-01-03"].total_out == 0
    assert adjust == stock_in

def test_transactions_outside_range_are_excluded(reconstructor):
    keys = reconstructor.build_day_keys(3, TODAY)
    buckets = reconstructor.aggregate_by_day(
        [
            txn("IN", 100, "2023-12-31T23:00:00Z"),
            txn("OUT", 50, "2024-01-04T01:00:00Z"),
            txn("IN", 1, "2024-01-01T00:00:00Z"),
        ],
        keys,
    )
    assert list(buckets) == keys
    assert sum(b.total_in for b in buckets.values()) == 1
    assert sum(b.total_out for b in buckets.values()) == 0

def test_every_day_key_present_even_without_movements(reconstructor):
    keys = reconstructor.build_day_keys(7, TODAY)
    buckets = reconstructor.aggregate_by_day([txn("OUT", 2, "2024-01-01T10:00:00Z")], keys)
    assert list(buckets) == keys
    assert buckets["2024-01-01"].total_out == 2
    assert buckets["2023-12-30"] == DayBucket(day="2023-12-30")

@pytest.mark.parametrize("qty", [None, "", "abc", float("nan")])
def test_bad_quantity_counts_as_zero(reconstructor, qty):
    keys = reconstructor.build_day_keys(1, TODAY)
    buckets = reconstructor.aggregate_by_day(
        [txn("IN", qty, "2024-01-03T09:00:00Z"), txn("IN", 3, "2024-01-03T10:00:00Z")], keys
    )
    assert buckets["2024-01-03"].total_in == 3

def test_unparseable_timestamps_are_skipped(reconstructor):
    keys = reconstructor.build_day_keys(1, TODAY)
    buckets = reconstructor.aggregate_by_day(
        [
            txn("IN", 7, "not-a-date"),
            txn("IN", 7, None),
            txn("OUT", 1, "2024-01-03T09:00:00Z"),
        ],
        keys,
    )
    assert buckets["2024-01-03"].total_in == 0
    assert buckets["2024-01-03"].total_out == 1

def test_unknown_type_is_ignored(reconstructor):
    keys = reconstructor.build_day_keys(1, TODAY)
    buckets = reconstructor.aggregate_by_day([txn("TRANSFER", 9, "2024-01-03T09:00:00Z")], keys)
    assert buckets["2024-01-03"].total_in == 0
    assert buckets["2024-01-03"].total_out == 0

def test_aggregation_is_repeatable_and_leaves_input_alone(reconstructor):
    keys = reconstructor.build_day_keys(30, TODAY)
    rows = ledger_over(30)
    before = copy.deepcopy(rows)

    first = reconstructor.aggregate_by_day(rows, keys)
    second = reconstructor.aggregate_by_day(rows, keys)

    assert first == second
    assert rows == before

def test_dataframe_input_is_not_modified(reconstructor):
    keys = reconstructor.build_day_keys(30, TODAY)
    df = pd.DataFrame(ledger_over(30))
    columns = list(df.columns)
    reconstructor.aggregate_by_day(df, keys)
    assert list(df.columns) == columns

def test_dataframe_models_and_dicts_agree(reconstructor):
    keys = reconstructor.build_day_keys(30, TODAY)
    rows = ledger_over(30)
    from_dicts = reconstructor.aggregate_by_day(rows, keys)
    from_frame = reconstructor.aggregate_by_day(pd.DataFrame(rows), keys)
    from_models = reconstructor.aggregate_by_day([TransactionRecord(**r) for r in rows], keys)
    assert from_dicts == from_frame == from_models

def test_day_key_uses_report_timezone():
    """An evening transaction in UTC-5 lands on the next UTC day."""
    reconstructor = TrendReconstructor(tz=timezone.utc)
    keys = reconstructor.build_day_keys(2, TODAY)
    buckets = reconstructor.aggregate_by_day([txn("IN", 2, "2024-01-02T21:00:00-05:00")], keys)
    assert buckets["2024-01-03"].total_in == 2
    assert buckets["2024-01-02"].total_in == 0

# -----------------------------
# reconstruct_on_hand / summarize
# -----------------------------

def test_reconstruct_empty_daily_is_empty(reconstructor):
    assert reconstructor.reconstruct_on_hand([], 10) == []

def test_summarize_empty_series_uses_supplied_quantity(reconstructor):
    summary = reconstructor.summarize([], 17)
    assert summary.current_on_hand == 17
    assert summary.total_in == summary.total_out == summary.net_change == 0

def test_trend_point_serializes_in_and_out_keys(reconstructor):
    daily = [DayBucket(day="2024-01-03", total_in=2, total_out=1)]
    point = reconstructor.reconstruct_on_hand(daily, 5)[0]
    assert point.model_dump(by_alias=True) == {
        "day": "2024-01-03", "on_hand": 5, "net_change": 1, "in": 2, "out": 1,
    }

# -----------------------------
# Helpers
# -----------------------------

@pytest.mark.parametrize("value,expected", [
    (5, 5), ("3", 3), (2.5, 2.5), (None, 0), ("x", 0), (float("nan"), 0), (True, 0),
])
def test_coerce_quantity(value, expected):
    assert coerce_quantity(value) == expected

def test_to_day_key_naive_is_already_local():
    assert to_day_key("2024-01-02T23:30:00", timezone.utc) == "2024-01-02"

def test_to_day_key_converts_aware_timestamps():
    minus_five = timezone(timedelta(hours=-5))
    assert to_day_key("2024-01-03T02:00:00Z", minus_five) == "2024-01-02"
    assert to_day_key(datetime(2024, 1, 3, 2, tzinfo=timezone.utc), timezone.utc) == "2024-01-03"

@pytest.mark.parametrize("value", [None, "", "garbage", float("nan")])
def test_to_day_key_unparseable(value):
    assert to_day_key(value, timezone.utc) is None
