"""Tests for date anchor resolution."""

from datetime import datetime

from vaultlens.anchors import (
    DateAnchorResolver,
    date_from_iso_week,
    filename_source,
    find_date_properties,
    metadata_source,
    parse_filename_date,
    property_source,
)
from vaultlens.anchors.patterns import format_title_with_weekday, today_note_name
from vaultlens.models import AnchorSource, Granularity
from vaultlens.vault.entry import VaultEntry


def _make_entry(path, props=None, ctime=None):
    return VaultEntry(
        path=path,
        basename=path.rsplit("/", 1)[-1].removesuffix(".md"),
        ctime=ctime or datetime(2024, 1, 1, 9, 0),
        mtime=datetime(2024, 1, 1, 9, 0),
        properties=dict(props or {}),
    )


def test_parse_daily_filename():
    parsed = parse_filename_date("2024-01-15")
    assert parsed.granularity is Granularity.DAILY
    assert (parsed.date.year, parsed.date.month, parsed.date.day) == (2024, 1, 15)


def test_parse_weekly_filename_is_monday():
    parsed = parse_filename_date("2024-W01")
    assert parsed.granularity is Granularity.WEEKLY
    assert parsed.date.weekday() == 0
    assert parsed.date == datetime(2024, 1, 1)
    assert parse_filename_date("2021-W01").date == datetime(2021, 1, 4)


def test_parse_other_granularities():
    assert parse_filename_date("2024-03").date == datetime(2024, 3, 1)
    assert parse_filename_date("2024-Q3").date == datetime(2024, 7, 1)
    assert parse_filename_date("2024").granularity is Granularity.YEARLY


def test_parse_filename_rejects_non_dates():
    assert parse_filename_date("not-a-date") is None
    assert parse_filename_date("2024-13") is None
    assert parse_filename_date("2024-02-30") is None
    assert parse_filename_date("Meeting 2024-01-15") is None
    assert date_from_iso_week(2024, 54) is None


def test_resolver_default_order_prefers_filename():
    entry = _make_entry("daily/2024-01-15.md", {"date": "2023-05-05"})
    anchor = DateAnchorResolver().resolve(entry)
    assert anchor.source is AnchorSource.FILENAME
    assert anchor.date == datetime(2024, 1, 15)
    assert anchor.priority == 1


def test_resolver_falls_back_to_properties_then_ctime():
    created = datetime(2022, 6, 1, 7, 30)
    by_prop = _make_entry("notes/idea.md", {"created": "2023-05-05"})
    by_ctime = _make_entry("notes/other.md", {}, ctime=created)

    resolver = DateAnchorResolver()
    anchor = resolver.resolve(by_prop)
    assert anchor.source is AnchorSource.PROPERTY
    assert anchor.date == datetime(2023, 5, 5)

    anchor = resolver.resolve(by_ctime)
    assert anchor.source is AnchorSource.METADATA
    assert anchor.date == created


def test_property_override_beats_filename():
    entry = _make_entry("2024-01-15.md", {"when": "2020-02-02"})
    anchor = DateAnchorResolver.with_property_override("when").resolve(entry)
    assert anchor.source is AnchorSource.PROPERTY
    assert anchor.priority == 0
    assert anchor.date == datetime(2020, 2, 2)


def test_resolver_returns_none_when_no_source_matches():
    class Bare:
        path = "x.md"

        def get_property(self, property_id):
            return None

    resolver = DateAnchorResolver([filename_source(1), property_source("date", 2), metadata_source(3)])
    assert resolver.resolve(Bare()) is None


def test_resolve_all_keys_by_identity():
    a = _make_entry("2024-01-01.md")
    b = _make_entry("2024-01-01.md")
    anchors = DateAnchorResolver().resolve_all([a, b])
    assert len(anchors) == 2
    assert anchors[a] is not anchors[b]


def test_sources_sorted_by_priority():
    resolver = DateAnchorResolver([metadata_source(9), filename_source(3)])
    assert [s.priority for s in resolver.sources] == [3, 9]


def test_find_date_properties():
    entries = [
        _make_entry("a.md", {"due": "2024-01-02", "mood": 3}),
        _make_entry("b.md", {"mood": "good"}),
    ]
    assert find_date_properties(entries, ["due", "mood", "file.ctime"]) == ["due"]


def test_title_helpers():
    assert format_title_with_weekday("2025-01-15") == "2025-01-15 (Wednesday)"
    assert format_title_with_weekday("2025-W03") == "2025-W03"
    assert today_note_name(datetime(2024, 2, 3).date()) == "2024-02-03"


def test_out_of_range_week_fails_the_source():
    assert parse_filename_date("9999-W53") is None
    assert date_from_iso_week(9999, 53) is None

    created = datetime(2023, 4, 5, 6, 7)
    entry = _make_entry("9999-W53.md", ctime=created)
    anchor = DateAnchorResolver().resolve(entry)
    assert anchor.source is AnchorSource.METADATA
    assert anchor.date == created


def test_out_of_range_property_falls_through():
    entry = _make_entry("idea.md", {"date": "0001-01-01T00:00:00+14:00", "created": "2022-02-02"})
    anchors = DateAnchorResolver().resolve_all([entry])
    assert anchors[entry].source is AnchorSource.PROPERTY
    assert anchors[entry].date == datetime(2022, 2, 2)
