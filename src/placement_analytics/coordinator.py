"""Owns the filter state and keeps the four views consistent.

Every entry point mutates ``FilterState`` and then triggers (or schedules)
one recompute pass. Range drags are coalesced per frame and the sampling
slider and search box are debounced; their instant readouts (``state`` for
the slider, ``search_text`` for the box) update synchronously.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from .config import DashboardSettings
from .filters import FilterState
from .projections import DashboardViews, build_views
from .records import RecordStore
from .scheduler import Debouncer, FrameCoalescer, Scheduler
from .status import StatusReport, status_report

logger = logging.getLogger(__name__)

ViewListener = Callable[[DashboardViews], None]

LAYOUTS = ("2rows", "3rows")


class DashboardCoordinator:
    def __init__(
        self,
        store: RecordStore,
        settings: Optional[DashboardSettings] = None,
        scheduler: Optional[Scheduler] = None,
        state: Optional[FilterState] = None,
    ):
        self.store = store
        self.settings = settings or DashboardSettings()
        self.scheduler = scheduler or Scheduler()
        self.state = state or FilterState()
        self.search_text = self.state.search_query
        self.layout = LAYOUTS[0]
        self.recompute_count = 0
        self._listeners: List[ViewListener] = []
        self._views: Optional[DashboardViews] = None

        self._frame = FrameCoalescer(self.scheduler, lambda: self._recompute("cgpa-range", cgpa_only=True), self.settings.frame_ms, name="cgpa-frame")
        self._sample_debounce = Debouncer(self.scheduler, self.settings.sample_debounce_ms, lambda: self._recompute("sample-pct"), name="sample-debounce")
        self._search_debounce = Debouncer(self.scheduler, self.settings.search_debounce_ms, self._commit_search, name="search-debounce")

        self._recompute("init")

    # ----- views and listeners -----

    @property
    def views(self) -> DashboardViews:
        return self._views

    def subscribe(self, listener: ViewListener) -> Callable[[], None]:
        """Register ``listener`` for every future pass; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def is_empty(self, view: str) -> bool:
        return self.views.is_empty(view)

    def status(self) -> StatusReport:
        return status_report(self.store, self.state, self.views)

    # ----- CGPA range (frame coalesced) -----

    def set_cgpa_range(self, lo: float, hi: float) -> FilterState:
        self.state = self.state.with_cgpa_range(lo, hi)
        self._frame.request()
        return self.state

    # ----- scatter controls -----

    def set_sample_pct(self, pct: float) -> int:
        self.state = self.state.with_sample_pct(pct)
        self._sample_debounce()
        return self.state.sample_pct

    def set_placement_filter(self, value) -> None:
        self.state = self.state.with_placement_filter(value)
        self._recompute("placement-filter")

    def set_internship_filter(self, value) -> None:
        self.state = self.state.with_internship_filter(value)
        self._recompute("internship-filter")

    # ----- ranking controls -----

    def set_sort_mode(self, value) -> None:
        self.state = self.state.with_sort_mode(value)
        self._recompute("sort-mode")

    def set_search_query(self, text: str) -> None:
        self.search_text = text or ""
        self._search_debounce()

    def clear_search(self) -> None:
        self._search_debounce.cancel()
        self.search_text = ""
        self.state = self.state.with_search_query("")
        self._recompute("search-cleared")

    def _commit_search(self) -> None:
        self.state = self.state.with_search_query(self.search_text)
        self._recompute("search")

    # ----- selection -----

    def select_college(self, college: Optional[str]) -> Optional[str]:
        self.state = self.state.with_selection_toggled(college)
        self._recompute("selection")
        return self.state.selected_college

    def clear_selection(self) -> None:
        self.state = self.state.without_selection()
        self._recompute("selection-cleared")

    # ----- layout, reset, flushing -----

    def toggle_layout(self) -> str:
        # Presentational only; no recompute.
        self.layout = LAYOUTS[1] if self.layout == LAYOUTS[0] else LAYOUTS[0]
        return self.layout

    def reset(self) -> DashboardViews:
        """Restore every filter default at once and run one full pass."""
        cancelled = self.scheduler.cancel_all()
        if cancelled:
            logger.debug("Reset discarded %d pending task(s)", cancelled)
        self.state = FilterState()
        self.search_text = ""
        return self._recompute("reset")

    def refresh(self) -> DashboardViews:
        return self._recompute("refresh")

    def poll(self) -> int:
        """Run whatever debounced or frame work is due."""
        return self.scheduler.run_due()

    def flush(self) -> int:
        """Run all pending work now."""
        return self.scheduler.run_all()

    @property
    def has_pending(self) -> bool:
        return bool(self.scheduler.pending)

    # ----- the pass -----

    def _recompute(self, reason: str, cgpa_only: bool = False) -> DashboardViews:
        # The pass reads the current state, so pending range/sample work is covered.
        self._frame.cancel()
        self._sample_debounce.cancel()

        views = build_views(self.store, self.state, previous=self._views, cgpa_only=cgpa_only)
        self._views = views
        self.recompute_count += 1
        logger.debug(
            "Recompute #%d (%s): %d/%d records, %d scatter points (%s)",
            self.recompute_count,
            reason,
            views.filtered_count,
            views.total,
            views.scatter.count,
            views.scatter.mode,
        )
        for listener in list(self._listeners):
            listener(views)
        return views
