"""Shared time-bucket grouping for the date-based aggregations."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

from ..models import Granularity, VisualizationDataPoint
from ..timekeys import bucket_key, bucket_start


@dataclass
class Bucket:
    key: str
    start: datetime
    points: list[VisualizationDataPoint] = field(default_factory=list)

    def numeric_values(self) -> list[float]:
        return [p.normalized_numeric for p in self.points if p.normalized_numeric is not None]

    def file_paths(self) -> tuple[str, ...]:
        return unique_paths(self.points)


def dated(points: Iterable[VisualizationDataPoint]) -> list[VisualizationDataPoint]:
    return [p for p in points if p.date_anchor is not None]


def group_by_bucket(points: Iterable[VisualizationDataPoint], granularity: Granularity) -> dict[str, Bucket]:
    """Group dated points by bucket key, keyed in first-seen order."""
    buckets: dict[str, Bucket] = {}
    for point in points:
        when = point.date_anchor.date
        key = bucket_key(when, granularity)
        if key not in buckets:
            buckets[key] = Bucket(key=key, start=bucket_start(when, granularity))
        buckets[key].points.append(point)
    return buckets


def sorted_buckets(buckets: dict[str, Bucket]) -> list[Bucket]:
    return sorted(buckets.values(), key=lambda b: b.start)


def unique_paths(points: Iterable[VisualizationDataPoint]) -> tuple[str, ...]:
    """File paths of the points' entries, each once, in first-seen order."""
    return tuple(dict.fromkeys(p.file_path for p in points))


def normalized_position(when: datetime, earliest: datetime, latest: datetime) -> float:
    """Place ``when`` on a 0..100 axis between ``earliest`` and ``latest``."""
    span = (latest - earliest).total_seconds() or 1.0
    return (when - earliest).total_seconds() / span * 100
