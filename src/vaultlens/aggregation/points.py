"""Scatter and bubble aggregations on a normalized 0..100 time axis."""

from typing import Sequence

import numpy as np

from ..models import (
    BubbleChartData,
    BubblePoint,
    Granularity,
    ScatterChartData,
    ScatterPoint,
    VisualizationDataPoint,
)
from ..timekeys import parse_granularity
from .buckets import dated, group_by_bucket, normalized_position, sorted_buckets

MIN_RADIUS = 5.0
MAX_RADIUS = 30.0


def aggregate_scatter(
    points: Sequence[VisualizationDataPoint],
    property_id: str,
    display_name: str,
) -> ScatterChartData:
    """One point per dated numeric entry: x is normalized time, y the raw value."""
    valid = [p for p in dated(points) if p.normalized_numeric is not None]
    if not valid:
        return ScatterChartData(property_id, display_name, (), ())

    dates = [p.date_anchor.date for p in valid]
    earliest, latest = min(dates), max(dates)

    return ScatterChartData(
        property_id=property_id,
        display_name=display_name,
        points=tuple(
            ScatterPoint(x=normalized_position(p.date_anchor.date, earliest, latest), y=p.normalized_numeric)
            for p in valid
        ),
        file_paths=tuple(p.file_path for p in valid),
    )


def aggregate_bubble(
    points: Sequence[VisualizationDataPoint],
    property_id: str,
    display_name: str,
    granularity: Granularity | str = Granularity.DAILY,
) -> BubbleChartData:
    """One bubble per bucket: mean value on y, radius scaled by entry count."""
    g = parse_granularity(granularity)
    valid = [p for p in dated(points) if p.normalized_numeric is not None]
    if not valid:
        return BubbleChartData(property_id, display_name, (), ())

    ordered = sorted_buckets(group_by_bucket(valid, g))
    earliest, latest = ordered[0].start, ordered[-1].start
    max_count = max(len(b.points) for b in ordered)

    bubbles = []
    for bucket in ordered:
        radius = MIN_RADIUS + (len(bucket.points) / max_count) * (MAX_RADIUS - MIN_RADIUS)
        bubbles.append(BubblePoint(
            x=normalized_position(bucket.start, earliest, latest),
            y=float(np.mean(bucket.numeric_values())),
            r=radius,
        ))

    return BubbleChartData(
        property_id=property_id,
        display_name=display_name,
        points=tuple(bubbles),
        file_paths=tuple(b.file_paths() for b in ordered),
    )
