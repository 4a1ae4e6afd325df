from typing import Optional

import numpy as np
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from .config import CGPA_DOMAIN, KDE_DOMAIN

PLACEMENT_COLORS = {"placed": "#27ae60", "not_placed": "#e74c3c"}
INTERNSHIP_COLORS = {"Yes": "#27ae60", "No": "#e74c3c"}
PLACEMENT_SYMBOLS = {"Yes": "circle", "No": "x"}
CATEGORY_COLORS = {
    "communication": "#e67e22",
    "extra_curricular": "#9b59b6",
    "academic_perf": "#3498db",
}
BAR_COLOR = "#3498db"
SELECTED_COLOR = "#f39c12"
BASE_MARKER_SIZE = 8


def placement_histogram(bins: pd.DataFrame, stack_order=("not_placed", "placed")) -> go.Figure:
    if bins.empty or int(bins["total"].sum()) == 0:
        return go.Figure()
    labels = {"not_placed": "Not placed", "placed": "Placed"}
    fig = go.Figure()
    # First trace sits at the bottom of the stack.
    for key in stack_order:
        fig.add_trace(
            go.Bar(
                x=bins["bin_start"] + (bins["bin_end"] - bins["bin_start"]) / 2,
                y=bins[key],
                width=bins["bin_end"] - bins["bin_start"],
                name=labels[key],
                marker_color=PLACEMENT_COLORS[key],
                customdata=bins[["bin", "total"]].to_numpy(),
                hovertemplate="Bin %{customdata[0]}<br>" + labels[key] + ": %{y}<br>Total: %{customdata[1]}<extra></extra>",
            )
        )
    fig.update_layout(barmode="stack", bargap=0.05, title="CGPA distribution by placement")
    fig.update_xaxes(title="CGPA", range=list(CGPA_DOMAIN))
    fig.update_yaxes(title="Students")
    return fig


def scatter_chart(points: pd.DataFrame) -> go.Figure:
    """IQ vs CGPA; colour is internship, symbol is placement.

    Opacity, size and outline come from the precomputed visual state, so the
    figure never decides what is in range or selected.
    """

    if points.empty:
        return go.Figure()
    fig = go.Figure()
    for internship, subset in points.groupby("internship", sort=True):
        fig.add_trace(
            go.Scatter(
                x=subset["iq"],
                y=subset["cgpa"],
                mode="markers",
                name=f"Internship: {internship or 'unknown'}",
                marker=dict(
                    color=INTERNSHIP_COLORS.get(internship, "#888"),
                    symbol=[PLACEMENT_SYMBOLS.get(p, "circle") for p in subset["placement"]],
                    size=(subset["scale"] * BASE_MARKER_SIZE).tolist(),
                    opacity=subset["opacity"].tolist(),
                    line=dict(color=subset["stroke"].tolist(), width=subset["stroke_width"].tolist()),
                ),
                customdata=subset[["college_id", "placement", "iq_top_pct", "cgpa_top_pct"]].to_numpy(),
                hovertemplate=(
                    "College %{customdata[0]}<br>IQ %{x} (top %{customdata[2]:.0f}%)"
                    "<br>CGPA %{y} (top %{customdata[3]:.0f}%)<br>Placed: %{customdata[1]}<extra></extra>"
                ),
            )
        )
    fig.update_layout(title="IQ vs CGPA")
    fig.update_xaxes(title="IQ score")
    fig.update_yaxes(title="CGPA")
    return fig


def ranking_bar(colleges: pd.DataFrame, sort_mode: str = "count") -> go.Figure:
    if colleges.empty:
        return go.Figure()
    value = "rate" if sort_mode == "rate" else "count"
    data = colleges.copy()
    data["color"] = np.where(data["is_selected"], SELECTED_COLOR, BAR_COLOR)
    for col in ("rank_by_count", "rank_by_rate"):
        data[col] = data[col].to_numpy(dtype=float, na_value=np.nan)
    fig = px.bar(
        data,
        x=value,
        y="college_id",
        orientation="h",
        title="Top colleges by placement",
        hover_data={"count": True, "total": True, "rate": ":.1f", "rank_by_count": True, "rank_by_rate": True},
        labels={"college_id": "College", "count": "Placed students", "rate": "Placement rate (%)"},
    )
    fig.update_traces(marker_color=data["color"].tolist())
    # Highest first.
    fig.update_yaxes(categoryorder="array", categoryarray=data["college_id"].tolist()[::-1])
    return fig


def distribution_violin(summary: pd.DataFrame, density: pd.DataFrame) -> go.Figure:
    """Mirrored KDE areas with an inner quartile box per skill category."""

    if density.empty:
        return go.Figure()
    fig = go.Figure()
    for position, (category, curve) in enumerate(density.groupby("category", sort=False)):
        name = curve["name"].iloc[0]
        color = CATEGORY_COLORS.get(category, BAR_COLOR)
        half = curve["width"].to_numpy() * 0.4
        fig.add_trace(
            go.Scatter(
                x=np.concatenate([position - half, (position + half)[::-1]]),
                y=np.concatenate([curve["y"].to_numpy(), curve["y"].to_numpy()[::-1]]),
                fill="toself",
                mode="lines",
                line=dict(color=color, width=1),
                opacity=0.6,
                name=name,
                hoverinfo="skip",
            )
        )
        stats = summary[summary["category"] == category]
        if stats.empty or int(stats["count"].iloc[0]) == 0:
            continue
        row = stats.iloc[0]
        fig.add_trace(
            go.Box(
                x=[position],
                q1=[row["q1"]],
                median=[row["median"]],
                q3=[row["q3"]],
                lowerfence=[row["min"]],
                upperfence=[row["max"]],
                mean=[row["mean"]],
                width=0.12,
                marker_color=color,
                name=f"{name} quartiles",
                showlegend=False,
            )
        )
    categories = list(dict.fromkeys(density["name"]))
    fig.update_layout(title="Skill distributions of placed students")
    fig.update_xaxes(tickvals=list(range(len(categories))), ticktext=categories)
    fig.update_yaxes(title="Score", range=list(KDE_DOMAIN))
    return fig


def style_fig(fig: go.Figure, title: Optional[str] = None) -> go.Figure:
    fig.update_layout(
        title=title or fig.layout.title.text,
        margin=dict(t=60, r=24, b=40, l=24),
        template="plotly_white",
        font=dict(family="Inter, sans-serif", size=12),
        hoverlabel=dict(font_size=12),
    )
    return fig


def college_from_selection(selection, fig: go.Figure) -> Optional[str]:
    """College id under the first clicked point of a Streamlit plotly selection.

    Ranking bars carry the id on ``y``; scatter points carry it as the first
    ``customdata`` column. Points that do not map onto ``fig`` are skipped.
    """

    points = ((selection or {}).get("selection") or {}).get("points") or []
    for point in points:
        curve, index = point.get("curve_number"), point.get("point_index")
        if curve is None or index is None or not 0 <= curve < len(fig.data):
            continue
        trace = fig.data[curve]
        if trace.type == "bar" and trace.y is not None and index < len(trace.y):
            return str(trace.y[index])
        if trace.customdata is not None and index < len(trace.customdata):
            return str(trace.customdata[index][0])
    return None
