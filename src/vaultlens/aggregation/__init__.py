"""Aggregation engine: one pure function per output shape."""

from typing import Any, Sequence

from ..models import AggregateShape, CasePolicy, Granularity, VisualizationDataPoint, VisualizationType
from .categorical import aggregate_categorical, aggregate_tag_cloud
from .heatmap import aggregate_heatmap
from .points import aggregate_bubble, aggregate_scatter
from .series import aggregate_list_series, aggregate_time_series, has_list_data
from .timeline import aggregate_timeline

_SHAPES = {
    VisualizationType.HEATMAP: AggregateShape.HEATMAP,
    VisualizationType.LINE_CHART: AggregateShape.TIME_SERIES,
    VisualizationType.BAR_CHART: AggregateShape.TIME_SERIES,
    VisualizationType.AREA_CHART: AggregateShape.TIME_SERIES,
    VisualizationType.RADAR_CHART: AggregateShape.TIME_SERIES,
    VisualizationType.PIE_CHART: AggregateShape.CATEGORICAL,
    VisualizationType.DOUGHNUT_CHART: AggregateShape.CATEGORICAL,
    VisualizationType.POLAR_AREA_CHART: AggregateShape.CATEGORICAL,
    VisualizationType.SCATTER_CHART: AggregateShape.SCATTER,
    VisualizationType.BUBBLE_CHART: AggregateShape.BUBBLE,
    VisualizationType.TAG_CLOUD: AggregateShape.TAG_CLOUD,
    VisualizationType.TIMELINE: AggregateShape.TIMELINE,
}


def parse_visualization_type(value: VisualizationType | str) -> VisualizationType:
    if isinstance(value, VisualizationType):
        return value
    try:
        return VisualizationType(str(value).strip().lower())
    except ValueError:
        choices = ", ".join(v.value for v in VisualizationType)
        raise ValueError(f"Unknown visualization type: {value!r} (expected one of: {choices})") from None


def shape_for(value: VisualizationType | AggregateShape | str) -> AggregateShape:
    """The aggregate shape a visualization type (or shape name) needs."""
    if isinstance(value, AggregateShape):
        return value
    try:
        return AggregateShape(str(value))
    except ValueError:
        return _SHAPES[parse_visualization_type(value)]


def aggregate(
    shape: VisualizationType | AggregateShape | str,
    points: Sequence[VisualizationDataPoint],
    property_id: str,
    display_name: str,
    granularity: Granularity | str = Granularity.DAILY,
    show_empty_dates: bool = False,
    case_policy: CasePolicy | None = None,
) -> Any:
    """Compute the aggregate for ``shape``.

    ``case_policy`` applies to both categorical and tag-cloud grouping when
    given; otherwise each keeps its own default.
    """
    shape = shape_for(shape)

    if shape is AggregateShape.HEATMAP:
        return aggregate_heatmap(points, property_id, display_name, granularity, show_empty_dates)
    if shape is AggregateShape.TIME_SERIES:
        if has_list_data(points):
            return aggregate_list_series(points, property_id, display_name, granularity)
        return aggregate_time_series(points, property_id, display_name, granularity)
    if shape is AggregateShape.CATEGORICAL:
        return aggregate_categorical(points, property_id, display_name, case_policy or CasePolicy.INSENSITIVE)
    if shape is AggregateShape.SCATTER:
        return aggregate_scatter(points, property_id, display_name)
    if shape is AggregateShape.BUBBLE:
        return aggregate_bubble(points, property_id, display_name, granularity)
    if shape is AggregateShape.TAG_CLOUD:
        return aggregate_tag_cloud(points, property_id, display_name, case_policy or CasePolicy.SENSITIVE)
    return aggregate_timeline(points, property_id, display_name)


__all__ = [
    "aggregate",
    "aggregate_bubble",
    "aggregate_categorical",
    "aggregate_heatmap",
    "aggregate_list_series",
    "aggregate_scatter",
    "aggregate_tag_cloud",
    "aggregate_time_series",
    "aggregate_timeline",
    "has_list_data",
    "parse_visualization_type",
    "shape_for",
]
