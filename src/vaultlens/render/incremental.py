"""Decide between an in-place data refresh and a full rebuild."""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from ..models import PropertyView, VisualizationType

logger = logging.getLogger(__name__)


def _freeze(settings: dict[str, Any]) -> tuple[tuple[str, str], ...]:
    return tuple(sorted((str(k), repr(v)) for k, v in settings.items()))


@dataclass(frozen=True)
class VisualizationSignature:
    id: str
    type: VisualizationType
    settings: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True)
class PropertySignature:
    property_id: str
    visualizations: tuple[VisualizationSignature, ...] = ()


@dataclass(frozen=True)
class StructuralSignature:
    """What must stay fixed for an incremental update to be safe.

    ``settings`` carries view-wide knobs that change aggregate shape or input,
    e.g. granularity, the date anchor property or the empty-values toggle.
    """
    properties: tuple[PropertySignature, ...] = ()
    settings: tuple[tuple[str, str], ...] = field(default=())

    @property
    def visualization_count(self) -> int:
        return sum(len(p.visualizations) for p in self.properties)

    def property_ids(self) -> set[str]:
        return {p.property_id for p in self.properties}

    def get(self, property_id: str) -> PropertySignature | None:
        for prop in self.properties:
            if prop.property_id == property_id:
                return prop
        return None


def build_signature(views: Iterable[PropertyView], settings: dict[str, Any] | None = None) -> StructuralSignature:
    return StructuralSignature(
        properties=tuple(
            PropertySignature(
                property_id=view.property_id,
                visualizations=tuple(
                    VisualizationSignature(id=v.id, type=v.type, settings=_freeze(v.settings))
                    for v in view.visualizations
                ),
            )
            for view in views
        ),
        settings=_freeze(settings or {}),
    )


def can_incrementally_update(previous: StructuralSignature | None, new: StructuralSignature) -> bool:
    """True only when the existing aggregates can be refilled in place.

    Requires at least one existing visualization, the same set of property
    ids, and per property the same visualization count, types and settings.
    """
    if previous is None or previous.visualization_count == 0:
        return False

    if previous.settings != new.settings:
        logger.debug("View settings changed; full rebuild")
        return False

    if previous.property_ids() != new.property_ids():
        logger.debug("Configured properties changed; full rebuild")
        return False

    for prop in new.properties:
        before = previous.get(prop.property_id)
        if before is None or len(before.visualizations) != len(prop.visualizations):
            logger.debug(f"Visualization count changed for {prop.property_id}; full rebuild")
            return False
        for old_viz, new_viz in zip(before.visualizations, prop.visualizations):
            if old_viz != new_viz:
                logger.debug(f"Visualization {new_viz.id} changed type or settings; full rebuild")
                return False

    return True
