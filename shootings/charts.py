from __future__ import annotations

import calendar
import math
from typing import Dict, Optional

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import pydeck as pdk


BOROUGH_CENTROIDS: Dict[str, tuple[float, float]] = {
    "BRONX": (40.8448, -73.8648),
    "BROOKLYN": (40.6782, -73.9442),
    "MANHATTAN": (40.7831, -73.9712),
    "QUEENS": (40.7282, -73.7949),
    "STATEN ISLAND": (40.5795, -74.1502),
}

MURDER_LABELS = {True: "Fatal", False: "Survived"}
UNRECORDED_LABEL = "Unrecorded"


def _outcome_labels(flags: pd.Series) -> pd.Series:
    return flags.astype(object).map(MURDER_LABELS).fillna(UNRECORDED_LABEL)


def _base_layout(fig: go.Figure, title: str, x_title: str, y_title: str) -> go.Figure:
    fig.update_layout(
        title=title,
        xaxis_title=x_title,
        yaxis_title=y_title,
        margin=dict(l=10, r=10, t=60, b=20),
        height=340,
    )
    return fig


def plot_yearly_trend(by_year: pd.DataFrame, predictions: Optional[pd.DataFrame] = None) -> go.Figure:
    if by_year.empty:
        return go.Figure()
    fig = go.Figure(
        go.Bar(x=by_year["year"], y=by_year["count"], name="Incidents", marker_color="#4c78a8")
    )
    if predictions is not None and not predictions.empty:
        fig.add_trace(
            go.Scatter(
                x=predictions["year"],
                y=predictions["predicted"],
                mode="lines+markers",
                name="Linear fit",
                line=dict(color="#e45756", width=3),
            )
        )
    return _base_layout(fig, "Shooting Incidents per Year", "Year", "Incidents")


def plot_survival_ratio(by_year_murder: pd.DataFrame) -> go.Figure:
    if by_year_murder.empty:
        return go.Figure()
    data = by_year_murder.assign(outcome=_outcome_labels(by_year_murder["is_murder"]))
    fig = px.bar(
        data,
        x="year",
        y="ratio",
        color="outcome",
        text="ratio_label",
        barmode="stack",
        color_discrete_map={"Fatal": "#b22222", "Survived": "#9ecae1"},
    )
    return _base_layout(fig, "Victim Outcome by Year", "Year", "Share of incidents (%)")


def plot_monthly_pattern(by_month_murder: pd.DataFrame) -> go.Figure:
    if by_month_murder.empty:
        return go.Figure()
    data = by_month_murder.assign(
        outcome=_outcome_labels(by_month_murder["is_murder"]),
        month_name=by_month_murder["month"].map(lambda m: calendar.month_abbr[int(m)]),
    )
    fig = px.line(data, x="month_name", y="count", color="outcome", markers=True)
    return _base_layout(fig, "Incidents by Month", "Month", "Incidents")


def plot_category_breakdown(table: pd.DataFrame, category: str, title: str) -> go.Figure:
    if table.empty:
        return go.Figure()
    data = table.assign(**{category: table[category].fillna("(missing)")})
    fig = px.bar(data, x="year", y="count", color=category, barmode="stack")
    return _base_layout(fig, title, "Year", "Incidents")


def build_borough_map(by_borough: pd.DataFrame) -> pdk.Deck:
    """Circle per borough sized by total incidents."""
    rows = by_borough[by_borough["borough"].isin(BOROUGH_CENTROIDS)]
    max_count = rows["count"].max() if not rows.empty else 0

    records = []
    for borough, count in zip(rows["borough"], rows["count"]):
        lat, lon = BOROUGH_CENTROIDS[borough]
        if max_count and max_count > 0:
            radius = 600.0 + math.sqrt(count / max_count) * 2400.0
        else:
            radius = 600.0
        records.append(
            {
                "borough": borough.title(),
                "count": int(count),
                "latitude": lat,
                "longitude": lon,
                "radius": radius,
            }
        )

    scatter = pdk.Layer(
        "ScatterplotLayer",
        data=records,
        get_position=["longitude", "latitude"],
        get_fill_color=[220, 72, 65, 180],
        get_radius="radius",
        pickable=True,
        stroked=True,
        get_line_color=[255, 255, 255, 200],
        line_width_min_pixels=1,
    )

    tooltip = {
        "html": "<b>{borough}</b><br/>Incidents: {count}",
        "style": {"backgroundColor": "rgba(15,17,22,0.85)", "color": "white"},
    }

    view_state = pdk.ViewState(latitude=40.70, longitude=-73.95, zoom=9.3, pitch=0)

    return pdk.Deck(layers=[scatter], initial_view_state=view_state, tooltip=tooltip, height=360)


def format_trend_summary(summary: Dict[str, float]) -> str:
    arrow = "▲" if summary["slope"] > 0 else "▼" if summary["slope"] < 0 else "■"
    return (
        f"{arrow} {summary['slope']:+.1f} incidents/year "
        f"(R² {summary['r_squared']:.2f}, p {summary['p_value']:.3f})"
    )
