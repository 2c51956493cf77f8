"""Resolve one canonical date per entry from ranked sources."""

import logging
from datetime import datetime
from pathlib import PurePosixPath
from typing import Any, Iterable, Sequence

from ..models import AnchorSource, DateAnchorConfig, ResolvedDateAnchor
from ..values.datapoints import read_property
from ..values.extractors import extract_date, is_date_like
from .patterns import parse_filename_date

logger = logging.getLogger(__name__)


def property_source(property_id: str, priority: int) -> DateAnchorConfig:
    return DateAnchorConfig(source=AnchorSource.PROPERTY, priority=priority, property_id=property_id)


def filename_source(priority: int) -> DateAnchorConfig:
    return DateAnchorConfig(source=AnchorSource.FILENAME, priority=priority)


def metadata_source(priority: int, field: str = "ctime") -> DateAnchorConfig:
    if field not in ("ctime", "mtime"):
        raise ValueError(f"Unknown metadata field for date anchor: {field!r} (expected ctime or mtime)")
    return DateAnchorConfig(source=AnchorSource.METADATA, priority=priority, field=field)


DEFAULT_SOURCES: tuple[DateAnchorConfig, ...] = (
    filename_source(1),
    property_source("date", 2),
    property_source("created", 3),
    metadata_source(4),
)


def entry_basename(entry: Any) -> str | None:
    name = getattr(entry, "basename", None)
    if name:
        return str(name)
    path = getattr(entry, "path", None)
    if path:
        return PurePosixPath(str(path)).stem
    return None


class DateAnchorResolver:
    """Tries each configured source in priority order; the first success wins.

    The resolver is stateless apart from its source list, so one instance can
    be shared across render cycles.
    """

    def __init__(self, sources: Sequence[DateAnchorConfig] | None = None):
        self.sources = tuple(sorted(sources or DEFAULT_SOURCES, key=lambda s: s.priority))

    @classmethod
    def with_property_override(cls, property_id: str | None) -> "DateAnchorResolver":
        """A user-selected anchor property always beats filename inference."""
        if not property_id:
            return cls()
        return cls([property_source(property_id, 0), filename_source(1), metadata_source(2)])

    def resolve(self, entry: Any) -> ResolvedDateAnchor | None:
        for config in self.sources:
            found = self._try_source(entry, config)
            if found is not None:
                return ResolvedDateAnchor(date=found, source=config.source, priority=config.priority)
        return None

    def resolve_all(self, entries: Iterable[Any]) -> dict[Any, ResolvedDateAnchor | None]:
        """Map every entry (by identity) to its anchor or None."""
        anchors = {entry: self.resolve(entry) for entry in entries}
        missing = sum(1 for a in anchors.values() if a is None)
        if missing:
            logger.debug(f"{missing} of {len(anchors)} entries have no date anchor")
        return anchors

    def _try_source(self, entry: Any, config: DateAnchorConfig) -> datetime | None:
        if config.source is AnchorSource.FILENAME:
            name = entry_basename(entry)
            parsed = parse_filename_date(name) if name else None
            return parsed.date if parsed else None

        if config.source is AnchorSource.PROPERTY:
            if not config.property_id:
                return None
            return extract_date(read_property(entry, config.property_id))

        if config.source is AnchorSource.METADATA:
            stamp = getattr(entry, config.field, None)
            if isinstance(stamp, datetime):
                return stamp
            if isinstance(stamp, (int, float)) and stamp > 0:
                return datetime.fromtimestamp(stamp)
            return None

        return None


def find_date_properties(entries: Sequence[Any], property_ids: Iterable[str]) -> list[str]:
    """Property ids for which at least one entry holds a date-like value."""
    found = []
    for property_id in property_ids:
        if property_id.startswith("file."):
            continue
        if any(is_date_like(read_property(entry, property_id)) for entry in entries):
            found.append(property_id)
    return found
