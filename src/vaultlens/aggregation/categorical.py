"""Date-free aggregations: categorical distribution and tag frequency."""

from dataclasses import dataclass, field
from typing import Sequence

from ..models import (
    CasePolicy,
    PieChartData,
    TagCloudData,
    TagCloudItem,
    VisualizationDataPoint,
)
from ..values.labels import capitalize_boolean


@dataclass
class _Group:
    label: str
    count: int = 0
    paths: dict[str, None] = field(default_factory=dict)

    def add(self, path: str) -> None:
        self.count += 1
        self.paths.setdefault(path)


def _group_key(label: str, policy: CasePolicy) -> str:
    return label.casefold() if policy is CasePolicy.INSENSITIVE else label


def aggregate_categorical(
    points: Sequence[VisualizationDataPoint],
    property_id: str,
    display_name: str,
    case_policy: CasePolicy = CasePolicy.INSENSITIVE,
) -> PieChartData:
    """Count points per display label, most frequent first.

    Ties keep the order in which labels were first seen. Points without a
    label are skipped rather than reported as an empty category. When any
    point is boolean, booleans are labelled ``True``/``False``.
    """
    is_boolean = any(p.boolean_value is not None for p in points)
    groups: dict[str, _Group] = {}

    for point in points:
        if is_boolean and point.boolean_value is not None:
            label = "True" if point.boolean_value else "False"
        elif point.display_label:
            label = capitalize_boolean(point.display_label)
        else:
            continue

        key = _group_key(label, case_policy)
        if key not in groups:
            groups[key] = _Group(label=label)
        groups[key].add(point.file_path)

    ranked = sorted(groups.values(), key=lambda g: g.count, reverse=True)
    return PieChartData(
        property_id=property_id,
        display_name=display_name,
        labels=tuple(g.label for g in ranked),
        values=tuple(g.count for g in ranked),
        file_paths=tuple(tuple(g.paths) for g in ranked),
        is_boolean_data=is_boolean,
    )


def aggregate_tag_cloud(
    points: Sequence[VisualizationDataPoint],
    property_id: str,
    display_name: str,
    case_policy: CasePolicy = CasePolicy.SENSITIVE,
) -> TagCloudData:
    """Frequency of every list item across all points.

    Frequency counts occurrences; back-references list each entry once.
    """
    groups: dict[str, _Group] = {}

    for point in points:
        for tag in point.list_values:
            key = _group_key(tag, case_policy)
            if key not in groups:
                groups[key] = _Group(label=tag)
            groups[key].add(point.file_path)

    ranked = sorted(groups.values(), key=lambda g: g.count, reverse=True)
    return TagCloudData(
        property_id=property_id,
        display_name=display_name,
        tags=tuple(TagCloudItem(tag=g.label, frequency=g.count, file_paths=tuple(g.paths)) for g in ranked),
        max_frequency=max((g.count for g in ranked), default=0),
    )
