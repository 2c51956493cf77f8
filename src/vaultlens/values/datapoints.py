"""Build visualization data points from entries and resolved anchors."""

from typing import Any, Iterable

from ..models import ResolvedDateAnchor, VisualizationDataPoint
from .extractors import extract_boolean, extract_list, extract_number
from .labels import DEFAULT_MAX_DEPTH, derive_label


def read_property(entry: Any, property_id: str) -> Any:
    getter = getattr(entry, "get_property", None)
    if getter is None:
        return None
    return getter(property_id)


def make_data_point(
    entry: Any,
    raw_value: Any,
    anchor: ResolvedDateAnchor | None,
    max_label_depth: int = DEFAULT_MAX_DEPTH,
) -> VisualizationDataPoint:
    """Extract every value kind from ``raw_value`` once.

    ``normalized_numeric`` falls back to 1.0/0.0 for boolean values so habit
    style properties still produce heatmap intensities and chart series.
    """
    number = extract_number(raw_value)
    boolean = extract_boolean(raw_value)
    if number is None and boolean is not None:
        number = 1.0 if boolean else 0.0

    return VisualizationDataPoint(
        entry_ref=entry,
        date_anchor=anchor,
        raw_value=raw_value,
        normalized_numeric=number,
        display_label=derive_label(raw_value, max_depth=max_label_depth),
        boolean_value=boolean,
        list_values=tuple(extract_list(raw_value)),
    )


def has_value(point: VisualizationDataPoint) -> bool:
    return (
        point.normalized_numeric is not None
        or point.boolean_value is not None
        or bool(point.list_values)
        or bool(point.display_label)
    )


def build_data_points(
    entries: Iterable[Any],
    property_id: str,
    anchors: dict[Any, ResolvedDateAnchor | None],
    show_empty_values: bool = True,
    max_label_depth: int = DEFAULT_MAX_DEPTH,
) -> tuple[VisualizationDataPoint, ...]:
    """One data point per entry for ``property_id``, in entry order.

    With ``show_empty_values`` off, entries whose value carries nothing
    displayable are left out.
    """
    points = []
    for entry in entries:
        point = make_data_point(
            entry,
            read_property(entry, property_id),
            anchors.get(entry),
            max_label_depth=max_label_depth,
        )
        if show_empty_values or has_value(point):
            points.append(point)
    return tuple(points)
