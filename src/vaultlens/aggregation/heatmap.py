"""Heatmap aggregation: average value per calendar bucket."""

from datetime import datetime
from typing import Sequence

import numpy as np

from ..models import Granularity, HeatmapCell, HeatmapData, VisualizationDataPoint
from ..timekeys import bucket_key, iter_buckets, parse_granularity
from .buckets import dated, group_by_bucket


def aggregate_heatmap(
    points: Sequence[VisualizationDataPoint],
    property_id: str,
    display_name: str,
    granularity: Granularity | str = Granularity.DAILY,
    show_empty_dates: bool = False,
) -> HeatmapData:
    """Bucket dated points and average their numeric values.

    A bucket with entries but no numeric values gets ``value=None``. With
    ``show_empty_dates``, every bucket between the first and last date that has
    no entries is filled with a zero-count cell so the grid has no gaps. The
    value range defaults to 0..1 when there is no numeric data at all.
    """
    g = parse_granularity(granularity)
    valid = dated(points)

    if not valid:
        now = datetime.now()
        return HeatmapData(property_id, display_name, g, (), now, now, 0.0, 1.0)

    dates = [p.date_anchor.date for p in valid]
    min_date, max_date = min(dates), max(dates)
    buckets = group_by_bucket(valid, g)

    cells = []
    bucket_values = []
    for bucket in buckets.values():
        numbers = bucket.numeric_values()
        value = float(np.mean(numbers)) if numbers else None
        if value is not None:
            bucket_values.append(value)
        cells.append(HeatmapCell(
            date=bucket.start,
            key=bucket.key,
            value=value,
            count=len(bucket.points),
            file_paths=bucket.file_paths(),
        ))

    if show_empty_dates:
        for start in iter_buckets(min_date, max_date, g):
            key = bucket_key(start, g)
            if key not in buckets:
                cells.append(HeatmapCell(date=start, key=key, value=None, count=0))

    cells.sort(key=lambda c: c.date)

    if bucket_values:
        min_value, max_value = float(np.min(bucket_values)), float(np.max(bucket_values))
    else:
        min_value, max_value = 0.0, 1.0

    return HeatmapData(
        property_id=property_id,
        display_name=display_name,
        granularity=g,
        cells=tuple(cells),
        min_date=min_date,
        max_date=max_date,
        min_value=min_value,
        max_value=max_value,
    )
