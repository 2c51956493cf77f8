"""Tests for the aggregation engine."""

from datetime import datetime

import pytest

from vaultlens.aggregation import (
    aggregate,
    aggregate_bubble,
    aggregate_categorical,
    aggregate_heatmap,
    aggregate_list_series,
    aggregate_scatter,
    aggregate_tag_cloud,
    aggregate_time_series,
    aggregate_timeline,
    shape_for,
)
from vaultlens.models import (
    AggregateShape,
    AnchorSource,
    CasePolicy,
    ChartData,
    PieChartData,
    ResolvedDateAnchor,
    VisualizationType,
)
from vaultlens.values.datapoints import make_data_point
from vaultlens.vault.entry import VaultEntry


def _make_entry(path, props=None, ctime=None):
    return VaultEntry(
        path=path,
        basename=path.rsplit("/", 1)[-1].removesuffix(".md"),
        ctime=ctime or datetime(2024, 1, 1, 9, 0),
        mtime=datetime(2024, 1, 1, 9, 0),
        properties=dict(props or {}),
    )


_counter = iter(range(10_000))


def point(value, when=None, path=None):
    entry = _make_entry(path or f"notes/n{next(_counter)}.md")
    anchor = ResolvedDateAnchor(when, AnchorSource.PROPERTY, 0) if when else None
    return make_data_point(entry, value, anchor)


def test_heatmap_fills_empty_dates():
    points = [point(2, datetime(2024, 1, 1, 8)), point(4, datetime(2024, 1, 3, 20))]
    heatmap = aggregate_heatmap(points, "mood", "Mood", "daily", show_empty_dates=True)

    assert [c.key for c in heatmap.cells] == ["2024-01-01", "2024-01-02", "2024-01-03"]
    gap = heatmap.cells[1]
    assert gap.count == 0
    assert gap.value is None
    assert gap.file_paths == ()
    assert (heatmap.min_value, heatmap.max_value) == (2.0, 4.0)


def test_heatmap_averages_bucket_and_skips_undated():
    points = [
        point(2, datetime(2024, 1, 1, 8)),
        point(5, datetime(2024, 1, 1, 21)),
        point("text", datetime(2024, 1, 1, 22)),
        point(9),
    ]
    heatmap = aggregate_heatmap(points, "mood", "Mood")
    assert len(heatmap.cells) == 1
    cell = heatmap.cells[0]
    assert cell.value == pytest.approx(3.5)
    assert cell.count == 3
    assert len(cell.file_paths) == 3


def test_heatmap_without_numbers_has_unit_range():
    heatmap = aggregate_heatmap([point("text", datetime(2024, 1, 1))], "p", "P")
    assert heatmap.cells[0].value is None
    assert heatmap.cells[0].count == 1
    assert (heatmap.min_value, heatmap.max_value) == (0.0, 1.0)


def test_empty_input_gives_empty_aggregates():
    assert aggregate_heatmap([], "p", "P").cells == ()
    assert aggregate_time_series([], "p", "P").labels == ()
    assert aggregate_categorical([], "p", "P").labels == ()
    assert aggregate_tag_cloud([], "p", "P").max_frequency == 0
    assert aggregate_timeline([], "p", "P").points == ()
    assert aggregate_scatter([], "p", "P").points == ()
    assert aggregate_bubble([], "p", "P").points == ()


def test_time_series_drops_non_numeric_buckets():
    points = [
        point(3, datetime(2024, 1, 2)),
        point("n/a", datetime(2024, 1, 1)),
        point(1, datetime(2024, 1, 2, 12)),
    ]
    chart = aggregate_time_series(points, "km", "Distance")
    assert chart.labels == ("2024-01-02",)
    assert chart.datasets[0].data == (2.0,)
    assert chart.datasets[0].label == "Distance"


def test_time_series_sorted_and_weekly_labels():
    points = [point(1, datetime(2024, 1, 10)), point(5, datetime(2024, 1, 2))]
    chart = aggregate_time_series(points, "km", "Distance", "weekly")
    assert chart.labels == ("2024-W01", "2024-W02")
    assert chart.datasets[0].data == (5.0, 1.0)


def test_list_series_counts_carriers_per_bucket():
    points = [
        point(["run", "Swim"], datetime(2024, 1, 1)),
        point(["RUN"], datetime(2024, 1, 1)),
        point(["swim"], datetime(2024, 1, 2)),
    ]
    chart = aggregate_list_series(points, "sport", "Sport")
    assert chart.labels == ("2024-01-01", "2024-01-02")
    assert [d.label for d in chart.datasets] == ["Run", "Swim"]
    run, swim = chart.datasets
    assert run.data == (2.0, 0.0)
    assert swim.data == (1.0, 1.0)
    assert run.file_paths[1] == ()


def test_dispatch_uses_list_series_for_list_data():
    points = [point(["a", "b"], datetime(2024, 1, 1))]
    chart = aggregate(VisualizationType.BAR_CHART, points, "p", "P")
    assert isinstance(chart, ChartData)
    assert len(chart.datasets) == 2


def test_categorical_collapses_case_and_skips_empty():
    points = [point("Running"), point("running"), point("RUNNING"), point(""), point(None), point("Yoga")]
    pie = aggregate_categorical(points, "sport", "Sport")
    assert pie.labels == ("Running", "Yoga")
    assert pie.values == (3, 1)
    assert "" not in pie.labels
    assert len(pie.file_paths[0]) == 3
    assert pie.is_boolean_data is False


def test_categorical_case_sensitive_policy():
    pie = aggregate_categorical([point("Run"), point("run")], "p", "P", CasePolicy.SENSITIVE)
    assert pie.values == (1, 1)


def test_categorical_ties_keep_first_seen_order():
    pie = aggregate_categorical([point("b"), point("a"), point("a"), point("c"), point("b")], "p", "P")
    assert pie.labels == ("b", "a", "c")


def test_categorical_boolean_labels():
    pie = aggregate_categorical([point(True), point("yes"), point(False)], "done", "Done")
    assert pie.is_boolean_data is True
    assert pie.labels == ("True", "False")
    assert pie.values == (2, 1)


def test_tag_cloud_counts_occurrences_but_lists_paths_once():
    cloud = aggregate_tag_cloud([point(["running", "running"], path="a.md")], "tags", "Tags")
    assert len(cloud.tags) == 1
    item = cloud.tags[0]
    assert item.tag == "running"
    assert item.frequency == 2
    assert item.file_paths == ("a.md",)
    assert cloud.max_frequency == 2


def test_tag_cloud_is_case_sensitive_by_default():
    points = [point(["Work"]), point(["work"]), point(["work"])]
    cloud = aggregate_tag_cloud(points, "tags", "Tags")
    assert [(t.tag, t.frequency) for t in cloud.tags] == [("work", 2), ("Work", 1)]
    cloud = aggregate_tag_cloud(points, "tags", "Tags", CasePolicy.INSENSITIVE)
    assert [(t.tag, t.frequency) for t in cloud.tags] == [("Work", 3)]


def test_scatter_positions_normalized():
    points = [point(1, datetime(2024, 1, 1)), point(3, datetime(2024, 1, 3)), point(2, datetime(2024, 1, 2))]
    scatter = aggregate_scatter(points, "p", "P")
    xs = sorted(p.x for p in scatter.points)
    assert xs == [0.0, 50.0, 100.0]
    assert len(scatter.file_paths) == 3


def test_bubble_radius_scales_with_count():
    points = [
        point(2, datetime(2024, 1, 1)),
        point(4, datetime(2024, 1, 1, 12)),
        point(6, datetime(2024, 1, 2)),
    ]
    bubble = aggregate_bubble(points, "p", "P")
    first, second = bubble.points
    assert first.y == pytest.approx(3.0)
    assert first.r == pytest.approx(30.0)
    assert second.r == pytest.approx(17.5)
    assert bubble.file_paths[0] and len(bubble.file_paths[0]) == 2


def test_timeline_sorted_with_capitalized_booleans():
    points = [point(True, datetime(2024, 1, 2)), point("note", datetime(2024, 1, 1)), point("x")]
    timeline = aggregate_timeline(points, "p", "P")
    assert [p.label for p in timeline.points] == ["note", "True"]
    assert timeline.min_date == datetime(2024, 1, 1)
    assert timeline.max_date == datetime(2024, 1, 2)


def test_shape_for_types():
    assert shape_for("line-chart") is AggregateShape.TIME_SERIES
    assert shape_for(VisualizationType.POLAR_AREA_CHART) is AggregateShape.CATEGORICAL
    assert shape_for("tag-cloud") is AggregateShape.TAG_CLOUD
    with pytest.raises(ValueError):
        shape_for("sankey")


def test_dispatch_categorical():
    assert isinstance(aggregate("pie-chart", [point("a")], "p", "P"), PieChartData)


def test_heatmap_empty_dates_up_to_last_representable_year():
    points = [point(1, datetime(2024, 1, 1)), point(2, datetime(9999, 12, 31))]
    heatmap = aggregate_heatmap(points, "m", "M", "yearly", show_empty_dates=True)
    assert heatmap.cells[0].key == "2024"
    assert heatmap.cells[-1].key == "9999"
    assert len(heatmap.cells) == 9999 - 2024 + 1
