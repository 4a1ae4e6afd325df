from placement_analytics.filters import FilterState
from placement_analytics.projections import build_views
from placement_analytics.status import StatusReport, status_report, subtitle_for_ranking


def test_status_report_formats_current_pass(store):
    state = FilterState(sample_pct=100).with_cgpa_range(7, 9).with_selection_toggled("CLG0004")
    views = build_views(store, state)
    report = status_report(store, state, views)
    assert report == StatusReport(
        records="5 / 12",
        cgpa_range="7.0 - 9.0",
        sample="100% (12 pts)",
        selection="CLG0004",
    )
    assert report.as_dict()["records"] == "5 / 12"


def test_status_report_defaults(store):
    state = FilterState()
    views = build_views(store, state)
    report = status_report(store, state, views)
    assert report.records == "12 / 12"
    assert report.cgpa_range == "4.0 - 11.0"
    assert report.sample == f"5% ({views.scatter.count} pts)"
    assert report.selection == "none"


def test_ranking_subtitle(store):
    views = build_views(store, FilterState().with_cgpa_range(7, 9))
    assert subtitle_for_ranking(views) == "(4 placed, sorted by count)"

    state = FilterState().with_sort_mode("rate").with_search_query("CLG")
    views = build_views(store, state)
    assert subtitle_for_ranking(views, state) == '(6 placed, sorted by rate, search: "clg")'


def test_coordinator_status_tracks_selection(coordinator):
    coordinator.select_college("CLG0002")
    assert coordinator.status().selection == "CLG0002"
    coordinator.set_cgpa_range(8.0, 9.0)
    # Status reads the state immediately; counts follow the last pass.
    assert coordinator.status().cgpa_range == "8.0 - 9.0"
    assert coordinator.status().records == "12 / 12"
    coordinator.flush()
    assert coordinator.status().records == "2 / 12"
