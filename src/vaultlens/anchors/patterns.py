"""Date patterns recognised in note filenames."""

import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable

from ..models import Granularity


@dataclass(frozen=True)
class FilenameDate:
    date: datetime
    granularity: Granularity


def date_from_iso_week(year: int, week: int) -> datetime | None:
    """Monday of ISO week ``week`` of ``year``.

    Week 1 is the week containing January 4th. Weeks outside 1..53 are rejected.
    """
    if week < 1 or week > 53:
        return None
    try:
        jan4 = datetime(year, 1, 4)
    except ValueError:
        return None
    week1_monday = jan4 - timedelta(days=jan4.weekday())
    try:
        return week1_monday + timedelta(weeks=week - 1)
    except OverflowError:
        return None


def _daily(m: re.Match) -> datetime | None:
    try:
        return datetime(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError:
        return None


def _weekly(m: re.Match) -> datetime | None:
    return date_from_iso_week(int(m.group(1)), int(m.group(2)))


def _monthly(m: re.Match) -> datetime | None:
    try:
        return datetime(int(m.group(1)), int(m.group(2)), 1)
    except ValueError:
        return None


def _quarterly(m: re.Match) -> datetime | None:
    try:
        return datetime(int(m.group(1)), (int(m.group(2)) - 1) * 3 + 1, 1)
    except ValueError:
        return None


def _yearly(m: re.Match) -> datetime | None:
    try:
        return datetime(int(m.group(1)), 1, 1)
    except ValueError:
        return None


# Most specific first.
DATE_PATTERNS: list[tuple[re.Pattern, Granularity, Callable[[re.Match], datetime | None]]] = [
    (re.compile(r"^(\d{4})-(\d{2})-(\d{2})$"), Granularity.DAILY, _daily),
    (re.compile(r"^(\d{4})-W(\d{2})$"), Granularity.WEEKLY, _weekly),
    (re.compile(r"^(\d{4})-(\d{2})$"), Granularity.MONTHLY, _monthly),
    (re.compile(r"^(\d{4})-Q([1-4])$"), Granularity.QUARTERLY, _quarterly),
    (re.compile(r"^(\d{4})$"), Granularity.YEARLY, _yearly),
]


def parse_filename_date(filename: str) -> FilenameDate | None:
    """Parse a filename stem (no extension) against the known date patterns."""
    name = filename.strip()
    for regex, granularity, parser in DATE_PATTERNS:
        match = regex.match(name)
        if match:
            parsed = parser(match)
            if parsed is not None:
                return FilenameDate(date=parsed, granularity=granularity)
    return None


def format_title_with_weekday(basename: str) -> str:
    """``2025-01-15`` -> ``2025-01-15 (Wednesday)``; other names unchanged."""
    parsed = parse_filename_date(basename)
    if parsed is None or parsed.granularity is not Granularity.DAILY:
        return basename
    return f"{basename} ({parsed.date.strftime('%A')})"


def today_note_name(today: date | None = None) -> str:
    return (today or date.today()).isoformat()
