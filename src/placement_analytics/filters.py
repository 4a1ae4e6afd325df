from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple

from .config import CGPA_DOMAIN, DEFAULT_SAMPLE_PCT
from .errors import FilterValueError


class PlacementFilter(str, Enum):
    ALL = "all"
    PLACED = "placed"
    NOT_PLACED = "not-placed"


class InternshipFilter(str, Enum):
    ALL = "all"
    YES = "yes"
    NO = "no"


class SortMode(str, Enum):
    COUNT = "count"
    RATE = "rate"


def coerce_choice(enum_cls, value):
    """Return ``value`` as a member of ``enum_cls`` or raise FilterValueError."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError as exc:
        allowed = ", ".join(member.value for member in enum_cls)
        raise FilterValueError(f"Unsupported {enum_cls.__name__} '{value}' (expected one of: {allowed})") from exc


def normalize_cgpa_range(lo: float, hi: float) -> Tuple[float, float]:
    """Clamp both bounds into the CGPA domain and swap them if reversed."""
    domain_lo, domain_hi = CGPA_DOMAIN
    lo = min(max(float(lo), domain_lo), domain_hi)
    hi = min(max(float(hi), domain_lo), domain_hi)
    if lo > hi:
        lo, hi = hi, lo
    return lo, hi


def clamp_sample_pct(pct: float) -> int:
    return int(min(max(round(float(pct)), 0), 100))


@dataclass(frozen=True)
class FilterState:
    """Every user-controlled filter, as one immutable value.

    Mutation goes through ``replace``-style helpers so the coordinator can
    swap the whole state atomically.
    """

    cgpa_range: Tuple[float, float] = CGPA_DOMAIN
    sample_pct: int = DEFAULT_SAMPLE_PCT
    placement_filter: PlacementFilter = PlacementFilter.ALL
    internship_filter: InternshipFilter = InternshipFilter.ALL
    sort_mode: SortMode = SortMode.COUNT
    search_query: str = ""
    selected_college: Optional[str] = None

    def with_cgpa_range(self, lo: float, hi: float) -> "FilterState":
        return replace(self, cgpa_range=normalize_cgpa_range(lo, hi))

    def with_sample_pct(self, pct: float) -> "FilterState":
        return replace(self, sample_pct=clamp_sample_pct(pct))

    def with_placement_filter(self, value) -> "FilterState":
        return replace(self, placement_filter=coerce_choice(PlacementFilter, value))

    def with_internship_filter(self, value) -> "FilterState":
        return replace(self, internship_filter=coerce_choice(InternshipFilter, value))

    def with_sort_mode(self, value) -> "FilterState":
        return replace(self, sort_mode=coerce_choice(SortMode, value))

    def with_search_query(self, text: Optional[str]) -> "FilterState":
        return replace(self, search_query=(text or "").strip().lower())

    def with_selection_toggled(self, college: Optional[str]) -> "FilterState":
        # Selecting the current college again clears the selection.
        if college is None or college == self.selected_college:
            return replace(self, selected_college=None)
        return replace(self, selected_college=college)

    def without_selection(self) -> "FilterState":
        return replace(self, selected_college=None)

    def is_default(self) -> bool:
        return self == FilterState()
