from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, Optional

from .filters import FilterState, SortMode
from .records import RecordStore


@dataclass(frozen=True)
class StatusReport:
    records: str
    cgpa_range: str
    sample: str
    selection: str

    def as_dict(self) -> Dict[str, str]:
        return asdict(self)


def format_cgpa_range(state: FilterState) -> str:
    lo, hi = state.cgpa_range
    return f"{lo:.1f} - {hi:.1f}"


def status_report(store: RecordStore, state: FilterState, views) -> StatusReport:
    """Status bar text for the current state and the last pass. Pure."""
    return StatusReport(
        records=f"{views.filtered_count} / {len(store)}",
        cgpa_range=format_cgpa_range(state),
        sample=f"{state.sample_pct}% ({views.scatter.count} pts)",
        selection=state.selected_college or "none",
    )


def subtitle_for_ranking(views, state: Optional[FilterState] = None) -> str:
    state = state or views.state
    sort_label = "by rate" if state.sort_mode is SortMode.RATE else "by count"
    search_label = f', search: "{state.search_query}"' if state.search_query else ""
    return f"({views.ranking.placed_count} placed, sorted {sort_label}{search_label})"
