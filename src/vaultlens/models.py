"""Data models used throughout vaultlens."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class Granularity(str, Enum):
    """Calendar period size used for bucketing."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class VisualizationType(str, Enum):
    """Visualization kinds a presentation layer may attach to a property."""
    HEATMAP = "heatmap"
    LINE_CHART = "line-chart"
    BAR_CHART = "bar-chart"
    AREA_CHART = "area-chart"
    PIE_CHART = "pie-chart"
    DOUGHNUT_CHART = "doughnut-chart"
    RADAR_CHART = "radar-chart"
    POLAR_AREA_CHART = "polar-area-chart"
    SCATTER_CHART = "scatter-chart"
    BUBBLE_CHART = "bubble-chart"
    TAG_CLOUD = "tag-cloud"
    TIMELINE = "timeline"


class AggregateShape(str, Enum):
    """The seven aggregate output shapes."""
    HEATMAP = "heatmap"
    TIME_SERIES = "time-series"
    CATEGORICAL = "categorical"
    SCATTER = "scatter"
    BUBBLE = "bubble"
    TAG_CLOUD = "tag-cloud"
    TIMELINE = "timeline"


class AnchorSource(str, Enum):
    """Where a resolved date anchor came from."""
    PROPERTY = "property"
    FILENAME = "filename"
    METADATA = "metadata"


class CasePolicy(str, Enum):
    """How category and tag keys are compared when grouping."""
    SENSITIVE = "sensitive"
    INSENSITIVE = "insensitive"


@dataclass(frozen=True)
class DateAnchorConfig:
    """One ranked date source. Lower priority wins."""
    source: AnchorSource
    priority: int
    property_id: str | None = None
    field: str = "ctime"  # metadata only: "ctime" or "mtime"


@dataclass(frozen=True)
class ResolvedDateAnchor:
    """The canonical timestamp attributed to an entry."""
    date: datetime
    source: AnchorSource
    priority: int


@dataclass(frozen=True, eq=False)
class VisualizationDataPoint:
    """One entry's value for one property, built once per render cycle."""
    entry_ref: Any
    date_anchor: ResolvedDateAnchor | None
    raw_value: Any
    normalized_numeric: float | None
    display_label: str | None
    boolean_value: bool | None = None
    list_values: tuple[str, ...] = ()

    @property
    def file_path(self) -> str:
        return str(getattr(self.entry_ref, "path", ""))


# ---------------------------------------------------------------------------
# Aggregate results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HeatmapCell:
    date: datetime
    key: str
    value: float | None
    count: int
    file_paths: tuple[str, ...] = ()


@dataclass(frozen=True)
class HeatmapData:
    """Intensity grid: one cell per occupied (or synthesized) bucket."""
    property_id: str
    display_name: str
    granularity: Granularity
    cells: tuple[HeatmapCell, ...]
    min_date: datetime
    max_date: datetime
    min_value: float
    max_value: float


@dataclass(frozen=True)
class ChartDataset:
    label: str
    data: tuple[float, ...]
    file_paths: tuple[tuple[str, ...], ...]


@dataclass(frozen=True)
class ChartData:
    """Time-series chart: ordered bucket labels and one or more datasets."""
    property_id: str
    display_name: str
    labels: tuple[str, ...]
    datasets: tuple[ChartDataset, ...]


@dataclass(frozen=True)
class PieChartData:
    """Categorical distribution sorted by count, descending."""
    property_id: str
    display_name: str
    labels: tuple[str, ...]
    values: tuple[int, ...]
    file_paths: tuple[tuple[str, ...], ...]
    is_boolean_data: bool = False


@dataclass(frozen=True)
class ScatterPoint:
    x: float
    y: float


@dataclass(frozen=True)
class ScatterChartData:
    property_id: str
    display_name: str
    points: tuple[ScatterPoint, ...]
    file_paths: tuple[str, ...]


@dataclass(frozen=True)
class BubblePoint:
    x: float
    y: float
    r: float


@dataclass(frozen=True)
class BubbleChartData:
    property_id: str
    display_name: str
    points: tuple[BubblePoint, ...]
    file_paths: tuple[tuple[str, ...], ...]


@dataclass(frozen=True)
class TagCloudItem:
    tag: str
    frequency: int
    file_paths: tuple[str, ...]


@dataclass(frozen=True)
class TagCloudData:
    property_id: str
    display_name: str
    tags: tuple[TagCloudItem, ...]
    max_frequency: int


@dataclass(frozen=True)
class TimelinePoint:
    date: datetime
    label: str
    value: float | None
    file_paths: tuple[str, ...]


@dataclass(frozen=True)
class TimelineData:
    property_id: str
    display_name: str
    points: tuple[TimelinePoint, ...]
    min_date: datetime
    max_date: datetime


# ---------------------------------------------------------------------------
# View configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class VisualizationConfig:
    """One visualization attached to a property."""
    id: str
    type: VisualizationType
    settings: dict[str, Any] = field(default_factory=dict, hash=False)


@dataclass(frozen=True)
class PropertyView:
    """A configured property and the visualizations attached to it."""
    property_id: str
    display_name: str
    visualizations: tuple[VisualizationConfig, ...] = ()
