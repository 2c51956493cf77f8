"""Timeline aggregation: one point per dated entry."""

from datetime import datetime
from typing import Sequence

from ..models import TimelineData, TimelinePoint, VisualizationDataPoint
from ..values.labels import capitalize_boolean
from .buckets import dated


def aggregate_timeline(
    points: Sequence[VisualizationDataPoint],
    property_id: str,
    display_name: str,
) -> TimelineData:
    valid = dated(points)
    timeline = sorted(
        (
            TimelinePoint(
                date=p.date_anchor.date,
                label=capitalize_boolean(p.display_label) if p.display_label else "",
                value=p.normalized_numeric,
                file_paths=(p.file_path,),
            )
            for p in valid
        ),
        key=lambda t: t.date,
    )

    if not timeline:
        now = datetime.now()
        return TimelineData(property_id, display_name, (), now, now)

    return TimelineData(
        property_id=property_id,
        display_name=display_name,
        points=tuple(timeline),
        min_date=timeline[0].date,
        max_date=timeline[-1].date,
    )
