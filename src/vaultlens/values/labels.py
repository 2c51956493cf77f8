"""Derive human-readable labels from arbitrary property values.

The same derivation is used wherever a raw value becomes a category key or a
visible label, so pie slices, timeline captions and tag lists always agree.

Rules, in order:
    - ``None`` and empty strings have no label.
    - Host "truthy wrappers" (objects with ``is_truthy()``) have no label when
      falsy, otherwise their trimmed ``str()``.
    - Lists derive each element and join the non-empty results with ``", "``.
    - Mappings prefer ``display``, ``value``, ``name``, ``label``, ``text`` or
      ``data``; link-like mappings (``icon`` or ``subpath`` keys) fall back to
      the filename stem of ``path``.
    - Strings that look like JSON are parsed and derived once.
    - ``[[target|alias]]`` wikilinks derive the alias or the target's stem.
"""

import json
import math
import re
from datetime import date, datetime
from pathlib import PurePosixPath
from typing import Any

from .extractors import is_truthy_wrapper

DEFAULT_MAX_DEPTH = 10

PREFERRED_FIELDS = ("display", "value", "name", "label", "text", "data")
LINK_MARKERS = ("icon", "subpath")

_WIKILINK = re.compile(r"^\[\[([^\]|#]+)(?:#[^\]|]*)?(?:\|([^\]]+))?\]\]$")


def _stem(path: str) -> str | None:
    stem = PurePosixPath(str(path).replace("\\", "/")).stem.strip()
    return stem or None


def _format_number(value: int | float) -> str | None:
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        if value.is_integer():
            return str(int(value))
    return str(value)


def _looks_like_json(text: str) -> bool:
    return (text.startswith("{") and text.endswith("}")) or (
        text.startswith("[") and text.endswith("]") and not text.startswith("[[")
    )


def _get_field(value: Any, name: str) -> Any:
    if isinstance(value, dict):
        return value.get(name)
    return getattr(value, name, None)


def _has_field(value: Any, name: str) -> bool:
    if isinstance(value, dict):
        return name in value
    return hasattr(value, name)


def derive_label(
    value: Any,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
    unknown_fallback: str | None = None,
    _depth: int = 0,
    _parsed: bool = False,
) -> str | None:
    """Return the display label for ``value``, or None when it has none."""
    if _depth > max_depth or value is None:
        return None

    def recurse(inner: Any, parsed: bool = _parsed) -> str | None:
        return derive_label(
            inner,
            max_depth=max_depth,
            unknown_fallback=unknown_fallback,
            _depth=_depth + 1,
            _parsed=parsed,
        )

    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return _format_number(value)
    if isinstance(value, datetime):
        if (value.hour, value.minute, value.second, value.microsecond) == (0, 0, 0, 0):
            return value.date().isoformat()
        return value.isoformat(sep=" ", timespec="minutes")
    if isinstance(value, date):
        return value.isoformat()

    if isinstance(value, str):
        text = value.strip()
        if not text or text in ("null", "undefined"):
            return None
        link = _WIKILINK.match(text)
        if link:
            alias = link.group(2)
            return alias.strip() if alias and alias.strip() else _stem(link.group(1))
        if not _parsed and _looks_like_json(text):
            try:
                decoded = json.loads(text)
            except ValueError:
                return text
            return recurse(decoded, parsed=True)
        return text

    if is_truthy_wrapper(value):
        if not value.is_truthy():
            return None
        text = str(value).strip()
        return recurse(text) if text else None

    if isinstance(value, (list, tuple, set, frozenset)):
        labels = [recurse(item) for item in value]
        joined = ", ".join(label for label in labels if label)
        return joined or None

    for name in PREFERRED_FIELDS:
        inner = _get_field(value, name)
        if inner is not None:
            label = recurse(inner)
            if label:
                return label

    if any(_has_field(value, marker) for marker in LINK_MARKERS):
        path = _get_field(value, "path")
        if path:
            stem = _stem(path)
            if stem:
                return stem
        return unknown_fallback

    if not isinstance(value, dict) and type(value).__str__ is not object.__str__:
        text = str(value).strip()
        return text or None

    return unknown_fallback


def capitalize_boolean(label: str) -> str:
    """Render ``true``/``false`` as ``True``/``False``; other labels pass through."""
    lowered = label.lower()
    if lowered == "true":
        return "True"
    if lowered == "false":
        return "False"
    return label
