from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

import pandas as pd

from .config import FAST_TRANSITION_POINT_LIMIT, OPACITY_ONLY_MIN_PCT, TOP_N_COLLEGES, TRANSITION_POINT_LIMIT
from .filters import FilterState
from .metrics import (
    STACK_ORDER,
    college_ranking,
    distribution_density,
    distribution_summary,
    filter_by_cgpa,
    histogram_bins,
    placement_insights,
    scatter_sample,
    scatter_visual_state,
)
from .records import RecordStore

VIEW_NAMES = ("histogram", "scatter", "ranking", "distribution")


@dataclass(frozen=True)
class HistogramView:
    bins: pd.DataFrame
    filtered_count: int
    excluded: int
    stack_order: tuple = STACK_ORDER

    @property
    def is_empty(self) -> bool:
        return self.filtered_count == 0


@dataclass(frozen=True)
class ScatterView:
    points: pd.DataFrame
    sample_pct: int
    mode: str = "full"

    @property
    def count(self) -> int:
        return len(self.points)

    @property
    def is_empty(self) -> bool:
        return self.count == 0

    @property
    def use_transitions(self) -> bool:
        return self.count < TRANSITION_POINT_LIMIT

    @property
    def transition_ms(self) -> int:
        if self.count < FAST_TRANSITION_POINT_LIMIT:
            return 250
        if self.count < TRANSITION_POINT_LIMIT:
            return 100
        return 0


@dataclass(frozen=True)
class RankingView:
    colleges: pd.DataFrame
    placed_count: int
    sort_mode: str
    search_query: str = ""

    @property
    def is_empty(self) -> bool:
        return self.placed_count == 0

    @property
    def search_no_results(self) -> bool:
        return bool(self.search_query) and self.placed_count > 0 and self.colleges.empty


@dataclass(frozen=True)
class DistributionView:
    summary: pd.DataFrame
    density: pd.DataFrame
    placed_count: int

    @property
    def is_empty(self) -> bool:
        return self.placed_count == 0


@dataclass(frozen=True)
class DashboardViews:
    """Everything one recompute pass produced, built from a single filtered set."""

    state: FilterState
    total: int
    filtered: pd.DataFrame
    histogram: HistogramView
    scatter: ScatterView
    ranking: RankingView
    distribution: DistributionView
    insights: Dict[str, object] = field(default_factory=dict)

    @property
    def filtered_count(self) -> int:
        return len(self.filtered)

    def is_empty(self, view: str) -> bool:
        if view not in VIEW_NAMES:
            raise KeyError(f"Unknown view '{view}'")
        return getattr(self, view).is_empty

    def empty_states(self) -> Dict[str, bool]:
        return {name: self.is_empty(name) for name in VIEW_NAMES}


def build_views(
    store: RecordStore,
    state: FilterState,
    previous: Optional[DashboardViews] = None,
    cgpa_only: bool = False,
    top_n: int = TOP_N_COLLEGES,
) -> DashboardViews:
    """Derive every view's data from ``store`` under ``state``.

    The CGPA-filtered set is computed once here and handed to each
    derivation. ``previous`` and ``cgpa_only`` only decide the scatter
    redraw hint: a range-only change over an unchanged, dense sample can
    update opacity in place.
    """

    frame = store.frame
    filtered = filter_by_cgpa(frame, state.cgpa_range)
    placed_count = int((filtered["placement"] == "Yes").sum())

    bins = histogram_bins(filtered)
    histogram = HistogramView(bins=bins, filtered_count=len(filtered), excluded=len(filtered) - int(bins["total"].sum()))

    sample = scatter_sample(frame, state.sample_pct, state.placement_filter, state.internship_filter)
    points = scatter_visual_state(sample, filtered, state.cgpa_range, state.selected_college)
    mode = "full"
    if (
        cgpa_only
        and previous is not None
        and state.sample_pct > OPACITY_ONLY_MIN_PCT
        and not previous.scatter.is_empty
        and previous.scatter.points["record_id"].tolist() == points["record_id"].tolist()
    ):
        mode = "opacity-only"
    scatter = ScatterView(points=points, sample_pct=state.sample_pct, mode=mode)

    ranking = RankingView(
        colleges=college_ranking(filtered, state.sort_mode, state.search_query, state.selected_college, top_n=top_n),
        placed_count=placed_count,
        sort_mode=state.sort_mode.value,
        search_query=state.search_query,
    )

    distribution = DistributionView(
        summary=distribution_summary(filtered),
        density=distribution_density(filtered),
        placed_count=placed_count,
    )

    return DashboardViews(
        state=state,
        total=len(store),
        filtered=filtered,
        histogram=histogram,
        scatter=scatter,
        ranking=ranking,
        distribution=distribution,
        insights=placement_insights(filtered),
    )
