"""Per-render-cycle memoization of anchors and data points.

The host may hand back semantically identical entries as brand-new objects
between updates. Anchors are keyed by entry identity, so a cache built for the
old objects would silently miss (or serve points built from orphaned entries).
``start_cycle`` therefore compares the new entry list against a snapshot of
the previous one and drops everything when identity changed, even if the count
did not.
"""

import logging
import weakref
from typing import Any, Protocol, Sequence

from ..models import ResolvedDateAnchor, VisualizationDataPoint

logger = logging.getLogger(__name__)


class SnapshotComparator(Protocol):
    """Decides whether an entry list is the same collection as a prior snapshot."""

    def capture(self, entries: Sequence[Any]) -> Any:
        ...

    def matches(self, snapshot: Any, entries: Sequence[Any]) -> bool:
        ...


class _StrongRef:
    """Stands in for a weak reference to objects that do not support one."""
    __slots__ = ("obj",)

    def __init__(self, obj: Any):
        self.obj = obj

    def __call__(self) -> Any:
        return self.obj


def _ref(entry: Any) -> Any:
    try:
        return weakref.ref(entry)
    except TypeError:
        # tuples, namedtuples and __slots__ classes
        return _StrongRef(entry)


class IdentitySnapshotComparator:
    """Same objects, same order.

    Holds weak references where the entry type allows them and strong ones
    otherwise.
    """

    def capture(self, entries: Sequence[Any]) -> tuple[Any, ...]:
        return tuple(_ref(entry) for entry in entries)

    def matches(self, snapshot: tuple[Any, ...] | None, entries: Sequence[Any]) -> bool:
        if snapshot is None or len(snapshot) != len(entries):
            return False
        return all(ref() is entry for ref, entry in zip(snapshot, entries))


class RenderCache:
    """Anchor map and per-property data points for one rendering context.

    Not shared between independent renderers; each owns its own instance.
    """

    def __init__(self, comparator: SnapshotComparator | None = None):
        self.comparator = comparator or IdentitySnapshotComparator()
        self._snapshot: Any = None
        self._anchors: dict[Any, ResolvedDateAnchor | None] | None = None
        self._data_points: dict[str, tuple[VisualizationDataPoint, ...]] = {}

    def start_cycle(self, entries: Sequence[Any]) -> bool:
        """Begin a render cycle. Returns True when the caches were invalidated."""
        entries = list(entries)
        if self.comparator.matches(self._snapshot, entries):
            return False

        if self._snapshot is not None:
            logger.debug(f"Entry identity changed ({len(entries)} entries); invalidating render cache")
        self._anchors = None
        self._data_points.clear()
        self._snapshot = self.comparator.capture(entries)
        return True

    def get_anchors(self) -> dict[Any, ResolvedDateAnchor | None] | None:
        return self._anchors

    def set_anchors(self, anchors: dict[Any, ResolvedDateAnchor | None]) -> None:
        self._anchors = anchors

    def get_data_points(self, property_id: str) -> tuple[VisualizationDataPoint, ...] | None:
        return self._data_points.get(property_id)

    def set_data_points(self, property_id: str, points: Sequence[VisualizationDataPoint]) -> None:
        self._data_points[property_id] = tuple(points)

    def clear_all(self) -> None:
        """Forget everything, including the entry snapshot."""
        self._anchors = None
        self._data_points.clear()
        self._snapshot = None
