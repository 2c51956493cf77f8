"""Time-series aggregations for line, bar, area and radar charts."""

from typing import Sequence

import numpy as np

from ..models import ChartData, ChartDataset, Granularity, VisualizationDataPoint
from ..timekeys import format_bucket_label, parse_granularity
from .buckets import dated, group_by_bucket, sorted_buckets, unique_paths


def aggregate_time_series(
    points: Sequence[VisualizationDataPoint],
    property_id: str,
    display_name: str,
    granularity: Granularity | str = Granularity.DAILY,
) -> ChartData:
    """Mean numeric value per bucket, ascending by date.

    Unlike the heatmap, buckets without numeric values are dropped entirely.
    """
    g = parse_granularity(granularity)
    numeric = [p for p in dated(points) if p.normalized_numeric is not None]
    if not numeric:
        return ChartData(property_id, display_name, (), ())

    ordered = sorted_buckets(group_by_bucket(numeric, g))
    dataset = ChartDataset(
        label=display_name,
        data=tuple(float(np.mean(b.numeric_values())) for b in ordered),
        file_paths=tuple(b.file_paths() for b in ordered),
    )
    return ChartData(
        property_id=property_id,
        display_name=display_name,
        labels=tuple(format_bucket_label(b.start, g) for b in ordered),
        datasets=(dataset,),
    )


def has_list_data(points: Sequence[VisualizationDataPoint]) -> bool:
    """True when some point holds list items and is neither numeric nor boolean."""
    return any(
        p.list_values and p.normalized_numeric is None and p.boolean_value is None
        for p in points
    )


def _capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]


def aggregate_list_series(
    points: Sequence[VisualizationDataPoint],
    property_id: str,
    display_name: str,
    granularity: Granularity | str = Granularity.DAILY,
) -> ChartData:
    """One dataset per distinct list item, counting entries per bucket.

    Items are grouped case-insensitively and labelled with a capitalised form;
    datasets are ordered alphabetically.
    """
    g = parse_granularity(granularity)
    listed = [p for p in dated(points) if p.list_values]
    if not listed:
        return ChartData(property_id, display_name, (), ())

    ordered = sorted_buckets(group_by_bucket(listed, g))

    labels: dict[str, str] = {}
    for point in listed:
        for item in point.list_values:
            labels.setdefault(item.casefold(), _capitalize(item))

    datasets = []
    for key in sorted(labels, key=lambda k: labels[k].casefold()):
        counts = []
        paths = []
        for bucket in ordered:
            carriers = [p for p in bucket.points if key in {i.casefold() for i in p.list_values}]
            counts.append(float(len(unique_paths(carriers))))
            paths.append(unique_paths(carriers))
        datasets.append(ChartDataset(label=labels[key], data=tuple(counts), file_paths=tuple(paths)))

    return ChartData(
        property_id=property_id,
        display_name=display_name,
        labels=tuple(format_bucket_label(b.start, g) for b in ordered),
        datasets=tuple(datasets),
    )
