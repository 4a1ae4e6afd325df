import pytest

from placement_analytics.config import DashboardSettings
from placement_analytics.errors import FilterValueError
from placement_analytics.filters import (
    FilterState,
    InternshipFilter,
    PlacementFilter,
    SortMode,
    clamp_sample_pct,
    coerce_choice,
    normalize_cgpa_range,
)


def test_defaults():
    state = FilterState()
    assert state.cgpa_range == (4.0, 11.0)
    assert state.sample_pct == 5
    assert state.placement_filter is PlacementFilter.ALL
    assert state.internship_filter is InternshipFilter.ALL
    assert state.sort_mode is SortMode.COUNT
    assert state.search_query == ""
    assert state.selected_college is None
    assert state.is_default()


def test_cgpa_range_is_swapped_and_clamped():
    assert normalize_cgpa_range(9.0, 6.5) == (6.5, 9.0)
    assert normalize_cgpa_range(2.0, 12.0) == (4.0, 11.0)
    state = FilterState().with_cgpa_range(10.0, 7.0)
    assert state.cgpa_range == (7.0, 10.0)


def test_sample_pct_is_clamped_integer():
    assert clamp_sample_pct(-5) == 0
    assert clamp_sample_pct(140) == 100
    assert clamp_sample_pct(12.6) == 13
    assert FilterState().with_sample_pct(50.0).sample_pct == 50


def test_coerce_choice_accepts_values_and_members():
    assert coerce_choice(PlacementFilter, "not-placed") is PlacementFilter.NOT_PLACED
    assert coerce_choice(InternshipFilter, " YES ") is InternshipFilter.YES
    assert coerce_choice(SortMode, SortMode.RATE) is SortMode.RATE


def test_coerce_choice_rejects_unknown_values():
    with pytest.raises(FilterValueError, match="expected one of: count, rate"):
        coerce_choice(SortMode, "alphabetical")
    # Still a ValueError for callers that only know the builtin.
    with pytest.raises(ValueError):
        FilterState().with_placement_filter("maybe")


def test_search_query_is_trimmed_and_lowercased():
    assert FilterState().with_search_query("  CLG00 ").search_query == "clg00"
    assert FilterState().with_search_query(None).search_query == ""


def test_selection_toggle_twice_returns_to_none():
    state = FilterState().with_selection_toggled("CLG0003")
    assert state.selected_college == "CLG0003"
    assert state.with_selection_toggled("CLG0003").selected_college is None


def test_selection_switches_between_colleges():
    state = FilterState().with_selection_toggled("CLG0001").with_selection_toggled("CLG0002")
    assert state.selected_college == "CLG0002"
    assert state.without_selection().selected_college is None


def test_state_is_immutable():
    state = FilterState()
    with pytest.raises(AttributeError):
        state.sample_pct = 10  # type: ignore[misc]
    assert state.with_sample_pct(10) != state


def test_settings_from_env_applies_valid_values():
    settings = DashboardSettings.from_env(
        {
            "PLACEMENT_DATA_PATH": "/tmp/placements.csv",
            "PLACEMENT_SEED": "11",
            "PLACEMENT_SEARCH_DEBOUNCE_MS": "350",
            "PLACEMENT_SAMPLE_DEBOUNCE_MS": "not-a-number",
        }
    )
    assert str(settings.data_path) == "/tmp/placements.csv"
    assert settings.seed == 11
    assert settings.search_debounce_ms == 350.0
    assert settings.sample_debounce_ms == 100.0
    assert settings.frame_ms == 16.0


def test_settings_from_empty_env_uses_defaults():
    assert DashboardSettings.from_env({}) == DashboardSettings()
