import numpy as np
import pandas as pd
import pytest

from placement_analytics import metrics
from placement_analytics.filters import InternshipFilter, PlacementFilter, SortMode


def _bin(bins: pd.DataFrame, label: str) -> pd.Series:
    return bins.set_index("bin").loc[label]


def test_three_record_example(make_frame):
    df = make_frame(cgpa=[4.2, 7.8, 9.9], placement=["Yes", "No", "Yes"])
    filtered = metrics.filter_by_cgpa(df, (7, 10))
    assert filtered["cgpa"].tolist() == [7.8, 9.9]

    bins = metrics.histogram_bins(filtered)
    assert _bin(bins, "7.5")["total"] == 1
    assert _bin(bins, "7.5")["placed"] == 0
    assert _bin(bins, "9.5")["total"] == 1
    assert _bin(bins, "9.5")["placed"] == 1
    assert bins["total"].sum() == 2


def test_filter_swaps_reversed_bounds_and_skips_nan(make_frame):
    df = make_frame(cgpa=[5.0, 7.0, float("nan"), 10.0], placement=["No"] * 4)
    assert metrics.filter_by_cgpa(df, (10, 7))["cgpa"].tolist() == [7.0, 10.0]
    assert len(metrics.filter_by_cgpa(df, (4, 11))) == 3


def test_histogram_bins_are_fixed_and_partition(frame):
    bins = metrics.histogram_bins(frame)
    assert len(bins) == 14
    assert bins["bin"].iloc[0] == "4.0"
    assert bins["bin"].iloc[-1] == "10.5"
    assert list(bins.columns) == metrics.HISTOGRAM_COLUMNS
    assert bins["total"].sum() == len(frame)
    assert (bins["placed"] + bins["not_placed"] == bins["total"]).all()
    assert _bin(bins, "5.5")["total"] == 2
    assert _bin(bins, "7.5")["placed"] == 1

    # Edges come from the domain, not the data.
    narrow = metrics.histogram_bins(metrics.filter_by_cgpa(frame, (9.0, 10.0)))
    assert narrow["bin"].tolist() == bins["bin"].tolist()


def test_histogram_excludes_domain_upper_bound(make_frame):
    df = make_frame(cgpa=[11.0, 4.0], placement=["Yes", "No"])
    bins = metrics.histogram_bins(df)
    assert bins["total"].sum() == 1
    assert _bin(bins, "4.0")["not_placed"] == 1


def test_distribution_summary_over_placed_students(frame):
    summary = metrics.distribution_summary(frame).set_index("category")
    assert list(summary.index) == ["communication", "extra_curricular", "academic_perf"]
    comm = summary.loc["communication"]
    assert comm["name"] == "Communication Skills"
    assert comm["count"] == 6
    assert comm["min"] == 6
    assert comm["q1"] == pytest.approx(7.0)
    assert comm["median"] == pytest.approx(7.5)
    assert comm["q3"] == pytest.approx(8.75)
    assert comm["max"] == 9
    assert comm["mean"] == pytest.approx(46 / 6)


def test_distribution_density_shares_one_scale(frame):
    density = metrics.distribution_density(frame)
    assert list(density.columns) == metrics.DENSITY_COLUMNS
    assert len(density) == 150
    assert density["width"].max() == pytest.approx(1.0)
    per_category = density.groupby("category")["width"].max()
    assert (per_category <= 1.0 + 1e-12).all()
    assert density["y"].iloc[0] == 0.0
    assert density["y"].max() < 11.0


def test_distribution_density_skips_empty_categories(make_frame):
    df = make_frame(cgpa=[8.0, 9.0], placement=["Yes", "Yes"], communication=[float("nan")] * 2)
    density = metrics.distribution_density(df)
    assert set(density["category"]) == {"extra_curricular", "academic_perf"}


def test_college_ranking_by_count(frame):
    ranking = metrics.college_ranking(frame, SortMode.COUNT)
    assert ranking["college_id"].tolist() == ["CLG0003", "CLG0004", "CLG0001", "CLG0002"]
    assert ranking["count"].tolist() == [2, 2, 1, 1]
    assert ranking["rank_by_count"].tolist() == [1, 2, 3, 4]
    assert ranking["rank_by_rate"].tolist() == [2, 1, 4, 3]
    for row in ranking.itertuples():
        assert row.rate == pytest.approx(row.count / row.total * 100)
    assert ranking["overall_rate"].iloc[0] == pytest.approx(50.0)
    assert ranking.set_index("college_id").loc["CLG0004", "rate_vs_overall"] == pytest.approx(50.0)


def test_college_ranking_by_rate(frame):
    ranking = metrics.college_ranking(frame, "rate")
    assert ranking["college_id"].tolist() == ["CLG0004", "CLG0003", "CLG0002", "CLG0001"]
    assert ranking["rate"].is_monotonic_decreasing


def test_ranking_uses_filtered_set(frame):
    filtered = metrics.filter_by_cgpa(frame, (7.0, 9.0))
    by_count = metrics.college_ranking(filtered, SortMode.COUNT)
    assert by_count["college_id"].tolist() == ["CLG0004", "CLG0002", "CLG0003"]
    by_rate = metrics.college_ranking(filtered, SortMode.RATE)
    assert by_rate["college_id"].tolist() == ["CLG0003", "CLG0004", "CLG0002"]


def test_search_narrows_but_keeps_top_set_ranks(frame):
    ranking = metrics.college_ranking(frame, SortMode.COUNT, search_query="  clg0004 ")
    assert ranking["college_id"].tolist() == ["CLG0004"]
    assert ranking["rank_by_count"].iloc[0] == 2
    assert ranking["rank_by_rate"].iloc[0] == 1

    none = metrics.college_ranking(frame, SortMode.COUNT, search_query="zzz")
    assert none.empty
    assert list(none.columns) == metrics.RANKING_COLUMNS


def test_ranking_truncates_to_top_ten(make_frame):
    colleges = [f"C{i:02d}" for i in range(1, 13)]
    df = make_frame(cgpa=[8.0] * 12, placement=["Yes"] * 12, college_id=colleges)
    ranking = metrics.college_ranking(df, SortMode.COUNT)
    assert len(ranking) == 10
    assert ranking["college_id"].tolist() == colleges[:10]

    outside = metrics.college_ranking(df, SortMode.COUNT, search_query="c11")
    assert outside["college_id"].tolist() == ["C11"]
    assert pd.isna(outside["rank_by_count"].iloc[0])


def test_ranking_skips_colleges_without_placements(make_frame):
    df = make_frame(
        cgpa=[8.0, 8.0, 8.0],
        placement=["No", "Yes", "No"],
        college_id=["A", "B", ""],
    )
    ranking = metrics.college_ranking(df, SortMode.RATE)
    assert ranking["college_id"].tolist() == ["B"]


def test_ranking_marks_selected_college(frame):
    ranking = metrics.college_ranking(frame, SortMode.COUNT, selected_college="CLG0001")
    assert ranking.set_index("college_id")["is_selected"].to_dict() == {
        "CLG0003": False,
        "CLG0004": False,
        "CLG0001": True,
        "CLG0002": False,
    }


def test_scatter_sample_is_monotonic(frame):
    previous = set()
    for pct in (0, 10, 25, 50, 75, 100):
        current = set(metrics.scatter_sample(frame, pct)["record_id"])
        assert previous <= current
        previous = current
    assert len(previous) == len(frame)
    assert metrics.scatter_sample(frame, 0).empty


def test_scatter_sample_applies_categorical_filters(frame):
    placed = metrics.scatter_sample(frame, 100, PlacementFilter.PLACED)
    assert (placed["placement"] == "Yes").all()
    assert len(placed) == 6

    both = metrics.scatter_sample(frame, 100, "not-placed", InternshipFilter.YES)
    assert both["record_id"].tolist() == [3]

    no_internship = metrics.scatter_sample(frame, 100, internship_filter="no")
    assert (no_internship["internship"] == "No").all()


def test_scatter_ignores_cgpa_range(frame):
    sample = metrics.scatter_sample(frame, 100)
    filtered = metrics.filter_by_cgpa(frame, (9.0, 11.0))
    points = metrics.scatter_visual_state(sample, filtered, (9.0, 11.0))
    assert len(points) == len(frame)
    assert points["in_range"].sum() == 2


def test_visual_state_without_selection(make_frame):
    df = make_frame(cgpa=[6.0, 8.0, 9.5], placement=["No", "Yes", "Yes"], college_id=["A", "B", "A"])
    filtered = metrics.filter_by_cgpa(df, (7.0, 10.0))
    points = metrics.scatter_visual_state(df, filtered, (7.0, 10.0))
    assert points["opacity"].tolist() == [0.15, 0.85, 0.85]
    assert points["scale"].tolist() == [0.7, 1.0, 1.0]
    assert points["stroke"].tolist() == ["#fff"] * 3
    assert not points["is_selected"].any()
    assert points["cgpa_top_pct"].tolist() == [100.0, 50.0, 0.0]
    assert points["iq_top_pct"].tolist() == [0.0, 0.0, 0.0]


def test_visual_state_with_selection(make_frame):
    df = make_frame(cgpa=[6.0, 8.0, 9.5], placement=["No", "Yes", "Yes"], college_id=["A", "B", "A"])
    filtered = metrics.filter_by_cgpa(df, (7.0, 10.0))
    points = metrics.scatter_visual_state(df, filtered, (7.0, 10.0), selected_college="A")
    assert points["opacity"].tolist() == [0.4, 0.2, 1.0]
    assert points["scale"].tolist() == [1.0, 1.0, 1.6]
    assert points["stroke"].tolist() == ["#f39c12", "#fff", "#f39c12"]
    assert points["stroke_width"].tolist() == [2.0, 0.5, 2.0]

    faded = metrics.scatter_visual_state(df, filtered, (7.0, 10.0), selected_college="B")
    assert faded["opacity"].tolist() == [0.08, 1.0, 0.2]


def test_visual_state_percentiles_need_a_reference(make_frame):
    df = make_frame(cgpa=[6.0], placement=["No"])
    points = metrics.scatter_visual_state(df, df.iloc[0:0], (9.0, 10.0))
    assert np.isnan(points["cgpa_top_pct"].iloc[0])


def test_placement_insights(frame):
    insights = metrics.placement_insights(frame)
    assert insights["total"] == 12
    assert insights["placed"] == 6
    assert insights["placement_rate"] == pytest.approx(50.0)
    assert insights["internship_rate"] == pytest.approx(500 / 6)
    assert insights["no_internship_rate"] == pytest.approx(100 / 6)
    assert insights["avg_cgpa_placed"] == pytest.approx(51.05 / 6)


def test_empty_filtered_set_yields_empty_aggregates(frame):
    empty = metrics.filter_by_cgpa(frame, (4.0, 4.5))
    assert empty.empty

    bins = metrics.histogram_bins(empty)
    assert len(bins) == 14 and bins["total"].sum() == 0
    assert metrics.college_ranking(empty).empty
    summary = metrics.distribution_summary(empty)
    assert (summary["count"] == 0).all() and (summary["median"] == 0.0).all()
    assert metrics.distribution_density(empty).empty

    insights = metrics.placement_insights(empty)
    assert insights["total"] == 0
    assert insights["placement_rate"] == 0.0
    assert insights["avg_cgpa_placed"] is None
