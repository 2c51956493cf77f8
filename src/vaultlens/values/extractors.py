"""Normalize raw property values into numbers, booleans, lists and dates."""

import math
import re
from datetime import date, datetime
from typing import Any

from dateutil import parser as date_parser

_NUMBER_PREFIX = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_TRUE_WORDS = {"true", "yes"}
_FALSE_WORDS = {"false", "no"}
_EMPTY_WORDS = {"", "null", "undefined", "none"}

# Tried in order after ISO-8601. Day-first formats win over month-first.
DATE_FORMATS = [
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%d-%m-%Y",
    "%d/%m/%Y",
    "%d.%m.%Y",
    "%m-%d-%Y",
    "%m/%d/%Y",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%d-%m-%Y %H:%M:%S",
    "%d/%m/%Y %H:%M:%S",
    "%m-%d-%Y %H:%M:%S",
    "%m/%d/%Y %H:%M:%S",
]

_DATE_SHAPE = re.compile(r"^\d{1,4}[-/.]\d{1,2}[-/.]\d{1,4}")


def is_truthy_wrapper(value: Any) -> bool:
    """True for host values exposing ``is_truthy()`` alongside ``str()``."""
    return callable(getattr(value, "is_truthy", None))


def _text(value: Any) -> str | None:
    if value is None:
        return None
    if is_truthy_wrapper(value) and not value.is_truthy():
        return None
    return str(value).strip()


def extract_number(value: Any) -> float | None:
    """Return the numeric value, or None.

    Booleans and boolean-like strings are not numbers; see ``extract_boolean``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
        return None if math.isnan(number) or math.isinf(number) else number
    if isinstance(value, (list, tuple, dict, date)):
        return None

    text = _text(value)
    if not text or text.lower() in _TRUE_WORDS | _FALSE_WORDS:
        return None
    match = _NUMBER_PREFIX.match(text)
    if not match:
        return None
    number = float(match.group(0))
    return None if math.isnan(number) or math.isinf(number) else number


def extract_boolean(value: Any) -> bool | None:
    """Return True/False for boolean and yes/no values, None otherwise."""
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float, list, tuple, dict, date)):
        return None

    text = str(value).strip().lower()
    if text in _TRUE_WORDS:
        return True
    if text in _FALSE_WORDS:
        return False
    return None


def _split_items(text: str) -> list[str]:
    items = []
    for item in text.split(","):
        item = item.strip().strip("\"'").strip()
        if item:
            items.append(item)
    return items


def extract_list(value: Any) -> list[str]:
    """Flatten a value into list items.

    Handles real lists, ``[a, b]`` strings and comma separated strings. A plain
    scalar becomes a one-item list.
    """
    if value is None or isinstance(value, dict):
        return []
    if isinstance(value, (list, tuple)):
        from .labels import derive_label

        items = []
        for item in value:
            if isinstance(item, (list, tuple)):
                items.extend(extract_list(item))
                continue
            label = derive_label(item)
            if label:
                items.append(label)
        return items

    text = _text(value)
    if not text:
        return []
    if text.startswith("[") and text.endswith("]") and not text.startswith("[["):
        return _split_items(text[1:-1])
    if "," in text:
        return _split_items(text)
    return [text]


def _to_local_naive(value: datetime) -> datetime | None:
    """Drop tzinfo after converting to local time. None when the shift leaves the calendar."""
    if value.tzinfo is None:
        return value
    try:
        return value.astimezone().replace(tzinfo=None)
    except (OverflowError, ValueError, OSError):
        return None


def extract_date(value: Any) -> datetime | None:
    """Parse a generic date/time value into a naive local datetime."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return _to_local_naive(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, (int, float, list, tuple, dict)):
        return None

    text = _text(value)
    if not text or text.lower() in _EMPTY_WORDS:
        return None

    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        parsed = None
    if parsed is not None:
        return _to_local_naive(parsed)

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue

    # Permissive fallback only for strings that look like dates; dateutil will
    # otherwise happily turn "7" into the 7th of the current month.
    if not _DATE_SHAPE.match(text) and not re.search(r"[A-Za-z]{3,}", text):
        return None
    try:
        return _to_local_naive(date_parser.parse(text))
    except (ValueError, OverflowError):
        return None


def is_date_like(value: Any) -> bool:
    return extract_date(value) is not None
