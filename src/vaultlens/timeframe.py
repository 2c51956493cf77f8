"""Relative time-frame filters (this week, last 30 days, ...)."""

from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Iterable

from dateutil.relativedelta import relativedelta

from .models import Granularity, ResolvedDateAnchor
from .timekeys import advance, bucket_start


class TimeFrame(str, Enum):
    ALL_TIME = "all-time"
    THIS_YEAR = "this-year"
    LAST_YEAR = "last-year"
    THIS_MONTH = "this-month"
    LAST_MONTH = "last-month"
    THIS_WEEK = "this-week"
    LAST_WEEK = "last-week"
    LAST_7_DAYS = "last-7-days"
    LAST_30_DAYS = "last-30-days"
    LAST_90_DAYS = "last-90-days"
    LAST_365_DAYS = "last-365-days"


TIME_FRAME_LABELS = {
    TimeFrame.ALL_TIME: "All time",
    TimeFrame.THIS_YEAR: "This year",
    TimeFrame.LAST_YEAR: "Last year",
    TimeFrame.THIS_MONTH: "This month",
    TimeFrame.LAST_MONTH: "Last month",
    TimeFrame.THIS_WEEK: "This week",
    TimeFrame.LAST_WEEK: "Last week",
    TimeFrame.LAST_7_DAYS: "Last 7 days",
    TimeFrame.LAST_30_DAYS: "Last 30 days",
    TimeFrame.LAST_90_DAYS: "Last 90 days",
    TimeFrame.LAST_365_DAYS: "Last 365 days",
}

_TRAILING_DAYS = {
    TimeFrame.LAST_7_DAYS: 7,
    TimeFrame.LAST_30_DAYS: 30,
    TimeFrame.LAST_90_DAYS: 90,
    TimeFrame.LAST_365_DAYS: 365,
}


def parse_time_frame(value: TimeFrame | str | None) -> TimeFrame:
    if value is None:
        return TimeFrame.ALL_TIME
    if isinstance(value, TimeFrame):
        return value
    try:
        return TimeFrame(str(value).strip().lower())
    except ValueError:
        choices = ", ".join(t.value for t in TimeFrame)
        raise ValueError(f"Unknown time frame: {value!r} (expected one of: {choices})") from None


def _period(start: datetime, granularity: Granularity) -> tuple[datetime, datetime]:
    end = advance(start, granularity, 1) - timedelta(microseconds=1)
    return start, end


def time_frame_range(frame: TimeFrame | str, today: date | None = None) -> tuple[datetime, datetime] | None:
    """Inclusive (start, end) for a time frame, or None for all time."""
    frame = parse_time_frame(frame)
    if frame is TimeFrame.ALL_TIME:
        return None

    now = today or date.today()
    midnight = datetime(now.year, now.month, now.day)

    if frame in _TRAILING_DAYS:
        start = midnight - timedelta(days=_TRAILING_DAYS[frame] - 1)
        return start, midnight + timedelta(days=1) - timedelta(microseconds=1)

    if frame is TimeFrame.THIS_YEAR:
        return _period(bucket_start(midnight, Granularity.YEARLY), Granularity.YEARLY)
    if frame is TimeFrame.LAST_YEAR:
        return _period(bucket_start(midnight - relativedelta(years=1), Granularity.YEARLY), Granularity.YEARLY)
    if frame is TimeFrame.THIS_MONTH:
        return _period(bucket_start(midnight, Granularity.MONTHLY), Granularity.MONTHLY)
    if frame is TimeFrame.LAST_MONTH:
        return _period(bucket_start(midnight - relativedelta(months=1), Granularity.MONTHLY), Granularity.MONTHLY)
    if frame is TimeFrame.THIS_WEEK:
        return _period(bucket_start(midnight, Granularity.WEEKLY), Granularity.WEEKLY)
    return _period(bucket_start(midnight - timedelta(days=7), Granularity.WEEKLY), Granularity.WEEKLY)


def filter_by_time_frame(
    entries: Iterable[Any],
    anchors: dict[Any, ResolvedDateAnchor | None],
    frame: TimeFrame | str,
    today: date | None = None,
) -> list[Any]:
    """Keep entries anchored inside the frame. Entries with no anchor are kept."""
    window = time_frame_range(frame, today)
    if window is None:
        return list(entries)

    start, end = window
    kept = []
    for entry in entries:
        anchor = anchors.get(entry)
        if anchor is None or start <= anchor.date <= end:
            kept.append(entry)
    return kept
