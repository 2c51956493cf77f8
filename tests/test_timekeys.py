"""Tests for calendar bucketing."""

from datetime import date, datetime

import pytest

from vaultlens.models import Granularity
from vaultlens.timekeys import (
    advance,
    bucket_key,
    bucket_start,
    format_bucket_label,
    iter_buckets,
    parse_granularity,
    same_bucket,
)


def test_weekly_keys_equal_within_iso_week():
    # 2024-01-15 is a Monday
    keys = {bucket_key(datetime(2024, 1, d, 23, 30), Granularity.WEEKLY) for d in range(15, 22)}
    assert keys == {"2024-01-15"}
    assert bucket_key(datetime(2024, 1, 22), Granularity.WEEKLY) != "2024-01-15"


def test_weekly_bucket_crosses_year_boundary():
    # Sunday 2023-12-31 belongs to the week starting Monday 2023-12-25
    assert bucket_start(date(2023, 12, 31), "weekly") == datetime(2023, 12, 25)
    assert same_bucket(date(2024, 1, 1), date(2024, 1, 7), "weekly")


def test_bucket_keys_per_granularity():
    when = datetime(2024, 5, 17, 14, 5)
    assert bucket_key(when, "daily") == "2024-05-17"
    assert bucket_key(when, "monthly") == "2024-05"
    assert bucket_key(when, "quarterly") == "2024-Q2"
    assert bucket_key(when, "yearly") == "2024"


def test_bucket_start_is_midnight():
    when = datetime(2024, 8, 20, 18, 45)
    assert bucket_start(when, "daily") == datetime(2024, 8, 20)
    assert bucket_start(when, "monthly") == datetime(2024, 8, 1)
    assert bucket_start(when, "quarterly") == datetime(2024, 7, 1)
    assert bucket_start(when, "yearly") == datetime(2024, 1, 1)


def test_advance_lands_on_next_bucket():
    for g in Granularity:
        start = bucket_start(datetime(2024, 1, 31), g)
        nxt = advance(start, g)
        assert nxt > start
        assert not same_bucket(start, nxt, g)
        assert bucket_start(nxt, g) == nxt


def test_advance_month_end_clamps():
    assert advance(datetime(2024, 1, 31), "monthly") == datetime(2024, 2, 29)


def test_iter_buckets_inclusive():
    starts = list(iter_buckets(datetime(2024, 1, 1), datetime(2024, 1, 3, 12), "daily"))
    assert starts == [datetime(2024, 1, 1), datetime(2024, 1, 2), datetime(2024, 1, 3)]
    assert len(list(iter_buckets(date(2024, 2, 10), date(2024, 11, 1), "quarterly"))) == 4


def test_format_bucket_label_uses_iso_week_year():
    assert format_bucket_label(date(2024, 12, 30), "weekly") == "2025-W01"
    assert format_bucket_label(date(2024, 1, 15), "weekly") == "2024-W03"
    assert format_bucket_label(date(2024, 3, 9), "quarterly") == "2024-Q1"


def test_unknown_granularity_rejected():
    with pytest.raises(ValueError, match="hourly"):
        parse_granularity("hourly")
    assert parse_granularity(" Weekly ") is Granularity.WEEKLY
