"""Streamlit dashboard for college placement analytics.

The page is a thin shell: every widget callback forwards to the
``DashboardCoordinator`` kept in ``st.session_state``, and each script run
flushes the coordinator's scheduler so the charts below read one consistent
recompute pass.
"""

import sys
from functools import partial
from pathlib import Path
from typing import Optional, Tuple

import pandas as pd
import streamlit as st

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
for path in (ROOT, SRC):
    path_str = str(path)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)

from app.ui import AppShell, empty_state, kpi_row, section_header, status_bar  # noqa: E402
from placement_analytics import invariants, plots  # noqa: E402
from placement_analytics.config import CGPA_DOMAIN, CGPA_STEP, DashboardSettings  # noqa: E402
from placement_analytics.coordinator import DashboardCoordinator  # noqa: E402
from placement_analytics.errors import LoadError  # noqa: E402
from placement_analytics.filters import FilterState, InternshipFilter, PlacementFilter, SortMode  # noqa: E402
from placement_analytics.io import build_store, load_records  # noqa: E402
from placement_analytics.records import RecordStore  # noqa: E402
from placement_analytics.status import subtitle_for_ranking  # noqa: E402
from tools.generate_synthetic import generate_synthetic_dataset  # noqa: E402

st.set_page_config(page_title="College Placement Analytics", layout="wide", page_icon="🎓")


PLACEMENT_LABELS = {PlacementFilter.ALL: "All", PlacementFilter.PLACED: "Placed", PlacementFilter.NOT_PLACED: "Not placed"}
INTERNSHIP_LABELS = {InternshipFilter.ALL: "All", InternshipFilter.YES: "With internship", InternshipFilter.NO: "Without internship"}
SORT_LABELS = {SortMode.COUNT: "Placed count", SortMode.RATE: "Placement rate"}
NO_SELECTION = "(none)"
CLICKABLE_VIEWS = ("scatter", "ranking")

EMPTY_MESSAGES = {
    "histogram": "No students in this CGPA range.",
    "scatter": "No sampled students match these filters.",
    "ranking": "No placed students in this CGPA range.",
    "distribution": "No placed students in this CGPA range.",
}


def _settings() -> DashboardSettings:
    if st.session_state.get("settings") is None:
        st.session_state["settings"] = DashboardSettings.from_env()
    return st.session_state["settings"]


def _load_source(settings: DashboardSettings, synthetic_mode: bool, upload) -> Tuple[Optional[RecordStore], Optional[str]]:
    if upload is not None:
        label = f"Uploaded: {upload.name}"
        if st.session_state.get("source_label") == label:
            return st.session_state.get("store"), label
        return load_records(upload, seed=settings.seed), label

    if synthetic_mode:
        label = "Synthetic demo dataset"
        if st.session_state.get("source_label") == label:
            return st.session_state.get("store"), label
        raw_df = generate_synthetic_dataset(seed=settings.seed if settings.seed is not None else 42)
        return build_store(raw_df, seed=settings.seed, source=label), label

    path = settings.data_path if settings.data_path.is_absolute() else ROOT / settings.data_path
    label = f"Dataset: {settings.data_path}"
    if st.session_state.get("source_label") == label:
        return st.session_state.get("store"), label
    return load_records(path, seed=settings.seed), label


def _coordinator() -> DashboardCoordinator:
    return st.session_state["coordinator"]


def _sync_widgets(state: FilterState) -> None:
    st.session_state["cgpa_range"] = tuple(state.cgpa_range)
    st.session_state["sample_pct"] = state.sample_pct
    st.session_state["placement_filter"] = state.placement_filter
    st.session_state["internship_filter"] = state.internship_filter
    st.session_state["sort_mode"] = state.sort_mode
    st.session_state["search_text"] = state.search_query
    st.session_state["selected_college"] = state.selected_college or NO_SELECTION


def _install_coordinator(store: RecordStore, label: str, settings: DashboardSettings) -> None:
    coordinator = DashboardCoordinator(store, settings=settings)
    st.session_state["store"] = store
    st.session_state["source_label"] = label
    st.session_state["coordinator"] = coordinator
    st.session_state["chart_epoch"] = 0
    st.session_state["figures"] = {}
    _sync_widgets(coordinator.state)


# ----- widget callbacks -----


def _on_cgpa_range():
    lo, hi = st.session_state["cgpa_range"]
    _coordinator().set_cgpa_range(lo, hi)


def _on_sample_pct():
    _coordinator().set_sample_pct(st.session_state["sample_pct"])


def _on_placement_filter():
    _coordinator().set_placement_filter(st.session_state["placement_filter"])


def _on_internship_filter():
    _coordinator().set_internship_filter(st.session_state["internship_filter"])


def _on_sort_mode():
    _coordinator().set_sort_mode(st.session_state["sort_mode"])


def _on_search():
    _coordinator().set_search_query(st.session_state["search_text"])


def _on_clear_search():
    _coordinator().clear_search()
    st.session_state["search_text"] = ""


def _on_select_college():
    value = st.session_state["selected_college"]
    coordinator = _coordinator()
    if value == NO_SELECTION:
        coordinator.clear_selection()
    elif value != coordinator.state.selected_college:
        coordinator.select_college(value)


def _chart_key(view: str) -> str:
    # Bumped after each handled click so the next click starts from an empty selection.
    return f"chart-{view}-{st.session_state.get('chart_epoch', 0)}"


def _on_chart_select(view: str):
    fig = st.session_state.get("figures", {}).get(view)
    if fig is None:
        return
    college = plots.college_from_selection(st.session_state.get(_chart_key(view)), fig)
    if college is None:
        return
    selected = _coordinator().select_college(college)
    st.session_state["selected_college"] = selected or NO_SELECTION
    st.session_state["chart_epoch"] = st.session_state.get("chart_epoch", 0) + 1


def _on_clear_selection():
    _coordinator().clear_selection()
    st.session_state["selected_college"] = NO_SELECTION


def _on_toggle_layout():
    _coordinator().toggle_layout()


def _on_reset():
    coordinator = _coordinator()
    coordinator.reset()
    _sync_widgets(coordinator.state)


# ----- rendering -----


def _render_controls(coordinator: DashboardCoordinator) -> None:
    st.sidebar.header("Filters")
    lo, hi = CGPA_DOMAIN
    st.sidebar.slider("CGPA range", min_value=lo, max_value=hi, step=CGPA_STEP, key="cgpa_range", on_change=_on_cgpa_range)

    st.sidebar.subheader("Scatter")
    st.sidebar.slider("Sample size (%)", min_value=0, max_value=100, step=1, key="sample_pct", on_change=_on_sample_pct)
    st.sidebar.selectbox(
        "Placement",
        options=list(PlacementFilter),
        format_func=PLACEMENT_LABELS.get,
        key="placement_filter",
        on_change=_on_placement_filter,
    )
    st.sidebar.selectbox(
        "Internship",
        options=list(InternshipFilter),
        format_func=INTERNSHIP_LABELS.get,
        key="internship_filter",
        on_change=_on_internship_filter,
    )

    st.sidebar.subheader("College ranking")
    st.sidebar.selectbox("Sort by", options=list(SortMode), format_func=SORT_LABELS.get, key="sort_mode", on_change=_on_sort_mode)
    st.sidebar.text_input("Search colleges", key="search_text", on_change=_on_search, placeholder="e.g. CLG0012")
    if coordinator.search_text:
        st.sidebar.button("Clear search", on_click=_on_clear_search)

    st.sidebar.subheader("Selection")
    options = [NO_SELECTION] + coordinator.store.colleges()
    if st.session_state.get("selected_college") not in options:
        st.session_state["selected_college"] = NO_SELECTION
    st.sidebar.selectbox("Highlight college", options=options, key="selected_college", on_change=_on_select_college)
    if coordinator.state.selected_college:
        st.sidebar.button("Clear selection", on_click=_on_clear_selection)

    st.sidebar.divider()
    left, right = st.sidebar.columns(2)
    left.button("Swap layout", on_click=_on_toggle_layout)
    right.button("Reset", type="primary", on_click=_on_reset)


def _render_status(coordinator: DashboardCoordinator) -> None:
    report = coordinator.status()
    status_bar(
        {
            "Records": report.records,
            "CGPA": report.cgpa_range,
            "Sample": report.sample,
            "Selected": report.selection,
        },
        selected=coordinator.state.selected_college is not None,
    )


def _render_insights(insights: dict) -> None:
    avg_cgpa = insights.get("avg_cgpa_placed")
    kpi_row(
        [
            {"label": "Placement rate", "value": f"{insights['placement_rate']:.1f}%", "hint": f"{insights['placed']} of {insights['total']} students"},
            {"label": "With internship", "value": f"{insights['internship_rate']:.1f}%", "hint": "placed"},
            {"label": "Without internship", "value": f"{insights['no_internship_rate']:.1f}%", "hint": "placed"},
            {"label": "Avg CGPA (placed)", "value": f"{avg_cgpa:.2f}" if avg_cgpa is not None else "-", "hint": ""},
        ]
    )


def _chart(coordinator: DashboardCoordinator, view: str) -> None:
    views = coordinator.views
    if view == "histogram":
        section_header("CGPA distribution", "Stacked by placement outcome, 0.5 CGPA bins")
        fig = plots.placement_histogram(views.histogram.bins, views.histogram.stack_order)
    elif view == "scatter":
        section_header("IQ vs CGPA", f"{views.scatter.count} sampled students; click a point to highlight its college")
        fig = plots.scatter_chart(views.scatter.points)
    elif view == "ranking":
        section_header("Top colleges", f"{subtitle_for_ranking(views)}; click a bar to highlight")
        if views.ranking.search_no_results:
            empty_state(f'No colleges match "{views.ranking.search_query}".')
            return
        fig = plots.ranking_bar(views.ranking.colleges, views.ranking.sort_mode)
    else:
        section_header("Skill distributions", "Placed students in the CGPA range")
        fig = plots.distribution_violin(views.distribution.summary, views.distribution.density)

    if coordinator.is_empty(view):
        empty_state(EMPTY_MESSAGES[view])
        return
    fig = plots.style_fig(fig)
    if view not in CLICKABLE_VIEWS:
        st.plotly_chart(fig, use_container_width=True, key=f"chart-{view}")
        return
    st.session_state.setdefault("figures", {})[view] = fig
    st.plotly_chart(
        fig,
        use_container_width=True,
        key=_chart_key(view),
        on_select=partial(_on_chart_select, view),
        selection_mode="points",
    )


def _render_views(coordinator: DashboardCoordinator) -> None:
    if coordinator.layout == "2rows":
        top = st.columns(2)
        bottom = st.columns(2)
        slots = [(top[0], "histogram"), (top[1], "scatter"), (bottom[0], "ranking"), (bottom[1], "distribution")]
    else:
        first = st.container()
        middle = st.columns(2)
        last = st.container()
        slots = [(first, "histogram"), (middle[0], "scatter"), (middle[1], "ranking"), (last, "distribution")]
    for slot, view in slots:
        with slot:
            _chart(coordinator, view)


def _render_quality(store: RecordStore) -> None:
    with st.expander("Data quality"):
        res_df = pd.DataFrame(invariants.run_invariants(store))
        res_df["detail"] = res_df["detail"].astype(str)
        st.dataframe(res_df, use_container_width=True, hide_index=True)


def main():
    settings = _settings()
    shell = AppShell("College Placement Analytics", "CGPA, skills and college outcomes, linked across four views")
    shell.header()

    st.sidebar.header("Data source")
    synthetic_mode = st.sidebar.toggle(
        "Use synthetic demo dataset",
        value=st.session_state.get("synthetic_mode", False),
        help="Generate a random placement dataset instead of reading the configured file",
    )
    st.session_state["synthetic_mode"] = synthetic_mode
    uploader = st.sidebar.file_uploader("Upload placement CSV", type=["csv"])

    try:
        store, label = _load_source(settings, synthetic_mode, uploader)
    except LoadError as exc:
        st.error(f"Unable to load data: {exc}")
        st.info("Upload a CollegePlacement CSV or enable the synthetic demo dataset.")
        return

    if label != st.session_state.get("source_label"):
        _install_coordinator(store, label, settings)
    st.sidebar.success(label)
    if store.missing_fields:
        st.warning(f"Columns not found, treated as missing: {', '.join(store.missing_fields)}")

    coordinator = _coordinator()
    _render_controls(coordinator)
    # Debounced and frame-coalesced work lands before anything is drawn.
    coordinator.flush()

    _render_status(coordinator)
    _render_insights(coordinator.views.insights)
    _render_views(coordinator)
    _render_quality(store)


if __name__ == "__main__":
    main()
