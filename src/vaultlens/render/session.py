"""Render session: ties the resolver, cache, decider and aggregation together."""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Sequence

from ..aggregation import aggregate
from ..anchors import DateAnchorResolver
from ..config import case_policy, parse_views
from ..models import PropertyView
from ..timeframe import TimeFrame, filter_by_time_frame, parse_time_frame
from ..timekeys import parse_granularity
from ..values.datapoints import build_data_points
from .cache import RenderCache
from .incremental import StructuralSignature, build_signature, can_incrementally_update

logger = logging.getLogger(__name__)

SIGNATURE_SETTINGS = ("granularity", "date_anchor_property", "show_empty_values", "time_frame", "grouping_case")


@dataclass
class RefreshResult:
    """Aggregates keyed by (property_id, visualization_id)."""
    aggregates: dict[tuple[str, str], Any] = field(default_factory=dict)
    incremental: bool = False
    cache_invalidated: bool = False


class RenderSession:
    """One rendering context over a vault. Owns its own cache."""

    def __init__(self, config: dict[str, Any], views: Sequence[PropertyView] | None = None):
        self.config = config
        self.views = list(views) if views is not None else parse_views(config)
        self.granularity = parse_granularity(config.get("granularity", "daily"))
        self.time_frame = parse_time_frame(config.get("time_frame"))
        self.case_policy = case_policy(config)
        self.show_empty_values = bool(config.get("show_empty_values", True))
        self.label_max_depth = config.get("label_max_depth", 10)
        self.resolver = DateAnchorResolver.with_property_override(config.get("date_anchor_property"))
        self.cache = RenderCache()
        self.prev_signature: StructuralSignature | None = None
        self.window_day: date | None = None

    def signature(self) -> StructuralSignature:
        return build_signature(self.views, {k: self.config.get(k) for k in SIGNATURE_SETTINGS})

    def refresh(self, entries: Sequence[Any], today: date | None = None) -> RefreshResult:
        """Recompute every configured aggregate for ``entries``.

        A relative time frame moves with the calendar, so cached data points
        are dropped when the day changes between refreshes.
        """
        today = today or date.today()
        entries = list(entries)
        invalidated = self.cache.start_cycle(entries)

        signature = self.signature()
        incremental = can_incrementally_update(self.prev_signature, signature)
        if not incremental:
            self.cache.clear_all()
            self.cache.start_cycle(entries)
            invalidated = True
        self.prev_signature = signature

        if self.time_frame is not TimeFrame.ALL_TIME and today != self.window_day:
            if self.window_day is not None and not invalidated:
                logger.debug(f"Day changed to {today}; rebuilding {self.time_frame.value} window")
                self.cache.clear_all()
                self.cache.start_cycle(entries)
                invalidated = True
        self.window_day = today

        anchors = self.cache.get_anchors()
        if anchors is None:
            anchors = self.resolver.resolve_all(entries)
            self.cache.set_anchors(anchors)
        visible = filter_by_time_frame(entries, anchors, self.time_frame, today)

        result = RefreshResult(incremental=incremental, cache_invalidated=invalidated)
        for view in self.views:
            points = self.cache.get_data_points(view.property_id)
            if points is None:
                points = build_data_points(
                    visible,
                    view.property_id,
                    anchors,
                    show_empty_values=self.show_empty_values,
                    max_label_depth=self.label_max_depth,
                )
                self.cache.set_data_points(view.property_id, points)

            for viz in view.visualizations:
                result.aggregates[(view.property_id, viz.id)] = aggregate(
                    viz.type,
                    points,
                    view.property_id,
                    view.display_name,
                    granularity=viz.settings.get("granularity", self.granularity),
                    show_empty_dates=self.show_empty_values,
                    case_policy=self.case_policy,
                )

        logger.debug(
            f"Refreshed {len(result.aggregates)} aggregates over {len(visible)} entries "
            f"({'incremental' if incremental else 'full rebuild'})"
        )
        return result
