from typing import Dict, Optional, Tuple

import numpy as np
import pandas as pd

from .config import (
    BIN_WIDTH,
    CGPA_DOMAIN,
    KDE_BANDWIDTH,
    KDE_DOMAIN,
    KDE_RESOLUTION,
    TOP_N_COLLEGES,
)
from .filters import InternshipFilter, PlacementFilter, SortMode, coerce_choice
from .stats import kde_sample_points, kernel_density, summarize, top_percent

DISTRIBUTION_CATEGORIES = [
    ("communication", "Communication Skills"),
    ("extra_curricular", "Extra Curricular"),
    ("academic_perf", "Academic Performance"),
]

# Bottom to top.
STACK_ORDER = ("not_placed", "placed")

HISTOGRAM_COLUMNS = ["bin", "bin_start", "bin_end", "not_placed", "placed", "total"]
RANKING_COLUMNS = [
    "college_id",
    "count",
    "total",
    "rate",
    "rank_by_count",
    "rank_by_rate",
    "overall_rate",
    "rate_vs_overall",
    "is_selected",
]
SUMMARY_COLUMNS = ["category", "name", "count", "min", "q1", "median", "q3", "max", "mean"]
DENSITY_COLUMNS = ["category", "name", "y", "density", "width"]


def _placed(df: pd.DataFrame) -> pd.Series:
    return df["placement"] == "Yes"


def filter_by_cgpa(df: pd.DataFrame, cgpa_range: Tuple[float, float]) -> pd.DataFrame:
    """Rows with lo <= cgpa <= hi. Reversed bounds are swapped; NaN cgpa never matches."""

    lo, hi = cgpa_range
    if lo > hi:
        lo, hi = hi, lo
    return df[(df["cgpa"] >= lo) & (df["cgpa"] <= hi)]


def bin_edges(domain: Tuple[float, float] = CGPA_DOMAIN, width: float = BIN_WIDTH) -> np.ndarray:
    lo, hi = domain
    n_bins = int(round((hi - lo) / width))
    return np.linspace(lo, hi, n_bins + 1)


def histogram_bins(df: pd.DataFrame, domain: Tuple[float, float] = CGPA_DOMAIN, width: float = BIN_WIDTH) -> pd.DataFrame:
    """Placed / not-placed counts per fixed-width CGPA bin.

    Edges come from the global domain, so bins never move as data is
    filtered. Bins are closed below and open above; values outside the
    domain (including the domain's upper bound) fall in no bin.
    """

    edges = bin_edges(domain, width)
    codes = pd.cut(df["cgpa"], bins=edges, right=False, labels=False)
    placed = _placed(df)

    rows = []
    for idx, (start, end) in enumerate(zip(edges[:-1], edges[1:])):
        in_bin = codes == idx
        placed_count = int((in_bin & placed).sum())
        total = int(in_bin.sum())
        rows.append(
            {
                "bin": f"{float(start):.1f}",
                "bin_start": float(start),
                "bin_end": float(end),
                "not_placed": total - placed_count,
                "placed": placed_count,
                "total": total,
            }
        )
    return pd.DataFrame(rows, columns=HISTOGRAM_COLUMNS)


def distribution_summary(df: pd.DataFrame) -> pd.DataFrame:
    """Quartiles, extremes and mean per skill category over placed students."""

    placed = df[_placed(df)]
    rows = []
    for key, name in DISTRIBUTION_CATEGORIES:
        stats = summarize(placed[key])
        rows.append({"category": key, "name": name, **stats})
    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


def distribution_density(
    df: pd.DataFrame,
    bandwidth: float = KDE_BANDWIDTH,
    resolution: int = KDE_RESOLUTION,
    domain: Tuple[float, float] = KDE_DOMAIN,
) -> pd.DataFrame:
    """Long-form KDE curves for the placed students of each category.

    ``width`` is density divided by the largest peak across all categories,
    so the three shapes share one scale. Categories with no values have no
    rows.
    """

    placed = df[_placed(df)]
    points = kde_sample_points(domain, resolution)
    curves = []
    for key, name in DISTRIBUTION_CATEGORIES:
        values = placed[key].dropna()
        if values.empty:
            continue
        curves.append((key, name, kernel_density(values, points, bandwidth)))

    if not curves:
        return pd.DataFrame(columns=DENSITY_COLUMNS)

    peak = max(float(density.max()) for _, _, density in curves)
    frames = []
    for key, name, density in curves:
        frames.append(
            pd.DataFrame(
                {
                    "category": key,
                    "name": name,
                    "y": points,
                    "density": density,
                    "width": density / peak if peak > 0 else np.zeros_like(density),
                }
            )
        )
    return pd.concat(frames, ignore_index=True)[DENSITY_COLUMNS]


def college_rollup(df: pd.DataFrame) -> pd.DataFrame:
    """Placed count, total and placement rate per college.

    Only colleges with at least one placed student are listed; blank college
    ids (unresolved column) are skipped.
    """

    data = df[df["college_id"] != ""]
    grouped = data.groupby("college_id", sort=True)
    rows = []
    for college_id, subset in grouped:
        count = int(_placed(subset).sum())
        if count == 0:
            continue
        total = len(subset)
        rows.append({"college_id": college_id, "count": count, "total": total, "rate": count / total * 100})
    return pd.DataFrame(rows, columns=["college_id", "count", "total", "rate"])


def sort_rollup(rollup: pd.DataFrame, sort_mode=SortMode.COUNT) -> pd.DataFrame:
    key = coerce_choice(SortMode, sort_mode).value
    # Ties fall back to college id so the order is deterministic.
    return rollup.sort_values(by=[key, "college_id"], ascending=[False, True], kind="mergesort").reset_index(drop=True)


def _rank_positions(top: pd.DataFrame, key) -> pd.Series:
    ordered = sort_rollup(top, key)
    return pd.Series(np.arange(1, len(ordered) + 1), index=ordered["college_id"])


def college_ranking(
    df: pd.DataFrame,
    sort_mode=SortMode.COUNT,
    search_query: str = "",
    selected_college: Optional[str] = None,
    top_n: int = TOP_N_COLLEGES,
) -> pd.DataFrame:
    """Top colleges by placed count or placement rate.

    Ranks are computed inside the top-N set before the search narrows it,
    so a college keeps the same "#N by count, #M by rate" annotation while
    the user types. Colleges outside that set have no rank.
    """

    rollup = college_rollup(df)
    if rollup.empty:
        return pd.DataFrame(columns=RANKING_COLUMNS)

    top = sort_rollup(rollup, sort_mode).head(top_n)
    count_rank = _rank_positions(top, SortMode.COUNT)
    rate_rank = _rank_positions(top, SortMode.RATE)

    query = (search_query or "").strip().lower()
    visible = rollup
    if query:
        visible = rollup[rollup["college_id"].str.lower().str.contains(query, regex=False)]
    visible = sort_rollup(visible, sort_mode).head(top_n).copy()

    total = len(df)
    overall_rate = _placed(df).sum() / total * 100 if total else 0.0

    visible["rank_by_count"] = visible["college_id"].map(count_rank).astype("Int64")
    visible["rank_by_rate"] = visible["college_id"].map(rate_rank).astype("Int64")
    visible["overall_rate"] = float(overall_rate)
    visible["rate_vs_overall"] = visible["rate"] - overall_rate
    visible["is_selected"] = visible["college_id"] == selected_college
    return visible[RANKING_COLUMNS].reset_index(drop=True)


def scatter_sample(
    df: pd.DataFrame,
    sample_pct: float,
    placement_filter=PlacementFilter.ALL,
    internship_filter=InternshipFilter.ALL,
) -> pd.DataFrame:
    """Stable sample of the full store, then categorical filters.

    A record is sampled when its fixed key is below pct/100, so raising the
    percentage only ever adds records.
    """

    threshold = float(sample_pct) / 100
    sampled = df[df["sample_key"] < threshold]

    placement = coerce_choice(PlacementFilter, placement_filter)
    if placement is PlacementFilter.PLACED:
        sampled = sampled[sampled["placement"] == "Yes"]
    elif placement is PlacementFilter.NOT_PLACED:
        sampled = sampled[sampled["placement"] == "No"]

    internship = coerce_choice(InternshipFilter, internship_filter)
    if internship is InternshipFilter.YES:
        sampled = sampled[sampled["internship"] == "Yes"]
    elif internship is InternshipFilter.NO:
        sampled = sampled[sampled["internship"] == "No"]

    return sampled


def scatter_visual_state(
    sample: pd.DataFrame,
    filtered: pd.DataFrame,
    cgpa_range: Tuple[float, float],
    selected_college: Optional[str] = None,
) -> pd.DataFrame:
    """Attach the brushing/linking weights to each sampled point.

    The CGPA range dims points instead of removing them. Percentile
    annotations are relative to the CGPA-filtered set.
    """

    lo, hi = cgpa_range
    if lo > hi:
        lo, hi = hi, lo

    data = sample.copy()
    in_range = (data["cgpa"] >= lo) & (data["cgpa"] <= hi)
    if selected_college is None:
        selected = pd.Series(False, index=data.index)
    else:
        selected = data["college_id"] == selected_college

    if selected_college is None:
        opacity = np.where(in_range, 0.85, 0.15)
    else:
        opacity = np.where(selected, np.where(in_range, 1.0, 0.4), np.where(in_range, 0.2, 0.08))
    scale = np.where(selected, np.where(in_range, 1.6, 1.0), np.where(in_range, 1.0, 0.7))

    data["in_range"] = in_range
    data["is_selected"] = selected
    data["opacity"] = opacity
    data["scale"] = scale
    data["stroke"] = np.where(selected, "#f39c12", "#fff")
    data["stroke_width"] = np.where(selected, 2.0, 0.5)

    iq_ref = np.sort(filtered["iq"].dropna().to_numpy(dtype=float))
    cgpa_ref = np.sort(filtered["cgpa"].dropna().to_numpy(dtype=float))
    data["iq_top_pct"] = [top_percent(iq_ref, value) for value in data["iq"]]
    data["cgpa_top_pct"] = [top_percent(cgpa_ref, value) for value in data["cgpa"]]
    return data


def placement_insights(df: pd.DataFrame) -> Dict[str, object]:
    total = len(df)
    placed = _placed(df)
    placed_count = int(placed.sum())

    def _rate(mask: pd.Series) -> float:
        subset = int(mask.sum())
        return float((mask & placed).sum() / subset * 100) if subset else 0.0

    avg_cgpa = df.loc[placed, "cgpa"].mean() if placed_count else None
    return {
        "total": total,
        "placed": placed_count,
        "placement_rate": placed_count / total * 100 if total else 0.0,
        "internship_rate": _rate(df["internship"] == "Yes"),
        "no_internship_rate": _rate(df["internship"] == "No"),
        "avg_cgpa_placed": None if avg_cgpa is None or pd.isna(avg_cgpa) else float(avg_cgpa),
    }
