"""Calendar bucketing: keys, bucket starts and stepping at a granularity."""

from datetime import date, datetime, timedelta
from typing import Iterator

from dateutil.relativedelta import relativedelta

from .models import Granularity


def parse_granularity(value: Granularity | str) -> Granularity:
    """Coerce a granularity name to the enum, failing loudly on unknown values."""
    if isinstance(value, Granularity):
        return value
    try:
        return Granularity(str(value).strip().lower())
    except ValueError:
        choices = ", ".join(g.value for g in Granularity)
        raise ValueError(f"Unknown granularity: {value!r} (expected one of: {choices})") from None


def _as_datetime(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day)


def quarter_of(value: date | datetime) -> int:
    return (value.month - 1) // 3 + 1


def bucket_start(value: date | datetime, granularity: Granularity | str) -> datetime:
    """Return midnight at the start of the period containing ``value``."""
    g = parse_granularity(granularity)
    day = _as_datetime(value).replace(hour=0, minute=0, second=0, microsecond=0)

    if g is Granularity.DAILY:
        return day
    if g is Granularity.WEEKLY:
        return day - timedelta(days=day.weekday())
    if g is Granularity.MONTHLY:
        return day.replace(day=1)
    if g is Granularity.QUARTERLY:
        return day.replace(month=(quarter_of(day) - 1) * 3 + 1, day=1)
    return day.replace(month=1, day=1)


def bucket_key(value: date | datetime, granularity: Granularity | str) -> str:
    """Canonical key of the period containing ``value``.

    Weekly keys are the ISO date of that week's Monday.
    """
    g = parse_granularity(granularity)
    d = _as_datetime(value)

    if g is Granularity.DAILY:
        return d.date().isoformat()
    if g is Granularity.WEEKLY:
        return bucket_start(d, g).date().isoformat()
    if g is Granularity.MONTHLY:
        return f"{d.year:04d}-{d.month:02d}"
    if g is Granularity.QUARTERLY:
        return f"{d.year:04d}-Q{quarter_of(d)}"
    return f"{d.year:04d}"


def advance(value: date | datetime, granularity: Granularity | str, n: int = 1) -> datetime:
    """Move ``value`` forward (or back, for negative ``n``) by ``n`` periods."""
    g = parse_granularity(granularity)
    d = _as_datetime(value)

    if g is Granularity.DAILY:
        return d + timedelta(days=n)
    if g is Granularity.WEEKLY:
        return d + timedelta(weeks=n)
    if g is Granularity.MONTHLY:
        return d + relativedelta(months=n)
    if g is Granularity.QUARTERLY:
        return d + relativedelta(months=3 * n)
    return d + relativedelta(years=n)


def same_bucket(a: date | datetime, b: date | datetime, granularity: Granularity | str) -> bool:
    return bucket_key(a, granularity) == bucket_key(b, granularity)


def iter_buckets(start: date | datetime, end: date | datetime, granularity: Granularity | str) -> Iterator[datetime]:
    """Yield every bucket start from the bucket of ``start`` to that of ``end``, inclusive."""
    g = parse_granularity(granularity)
    current = bucket_start(start, g)
    last = bucket_start(end, g)
    while current <= last:
        yield current
        try:
            current = advance(current, g, 1)
        except (OverflowError, ValueError):
            return


def format_bucket_label(value: date | datetime, granularity: Granularity | str) -> str:
    """Human-facing label for a bucket, e.g. ``2024-W03`` or ``2024-Q1``."""
    g = parse_granularity(granularity)
    d = _as_datetime(value)

    if g is Granularity.WEEKLY:
        iso_year, iso_week, _ = d.isocalendar()
        return f"{iso_year:04d}-W{iso_week:02d}"
    return bucket_key(d, g)
