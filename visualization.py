# visualization.py
import streamlit as st
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
from collections.abc import Sequence

from calculations import FREE_TIME, project_activity_timeline
from config import FREE_TIME_COLOR


def _hex_to_rgba(color: str, alpha: float) -> str:
    color = color.lstrip("#")
    r, g, b = (int(color[i:i + 2], 16) for i in (0, 2, 4))
    return f"rgba({r}, {g}, {b}, {alpha})"


def show_activity_pie(activity_stats: Sequence) -> None:
    """Render the share of life spent on each activity as a donut chart."""

    if not activity_stats:
        st.info("Add activities to see how your time is distributed.")
        return

    df = pd.DataFrame(
        {
            "Activity": [s.name for s in activity_stats],
            "Years": [s.years for s in activity_stats],
            "Share (%)": [s.percentage for s in activity_stats],
        }
    )
    fig = px.pie(
        df,
        names="Activity",
        values="Years",
        hole=0.45,
        color="Activity",
        color_discrete_map={s.name: s.color for s in activity_stats},
    )
    fig.update_traces(textinfo="percent+label", hovertemplate="%{label}: %{value:.1f} years")
    fig.update_layout(margin=dict(t=0, b=0, l=0, r=0), showlegend=False)
    st.plotly_chart(fig, use_container_width=True, config={"displayModeBar": False})


def show_projection_chart(future_projections: Sequence, activity_stats: Sequence = ()) -> None:
    """Render years spent so far against projected remaining years per activity."""

    if not future_projections:
        return

    df = pd.DataFrame(
        {
            "Activity": [p.activity for p in future_projections],
            "Years So Far": [p.years_so_far for p in future_projections],
            "Projected Remaining Years": [p.years_remaining for p in future_projections],
        }
    )
    fig = px.bar(
        df,
        x="Activity",
        y=["Years So Far", "Projected Remaining Years"],
        barmode="group",
        labels={"value": "Years", "variable": "Period"},
    )

    colors = {s.name: s.color for s in activity_stats}
    colors.setdefault(FREE_TIME, FREE_TIME_COLOR)
    bar_colors = [colors.get(name, FREE_TIME_COLOR) for name in df["Activity"]]
    fig.data[0].marker.color = [_hex_to_rgba(c, 0.5) for c in bar_colors]
    fig.data[1].marker.color = [_hex_to_rgba(c, 1.0) for c in bar_colors]

    fig.update_layout(margin=dict(t=0, b=0, l=0, r=0), showlegend=False)
    st.plotly_chart(fig, use_container_width=True, config={"displayModeBar": False})


def show_timeline_chart(activities: Sequence, life_expectancy: float, current_age: float | None = None) -> None:
    """Stacked area of cumulative years per activity from birth to life expectancy."""

    if not activities or life_expectancy <= 0:
        return

    ages, series = project_activity_timeline(activities, life_expectancy)
    df = pd.DataFrame({"Age": ages, **series})
    names = list(series.keys())
    fig = px.area(df, x="Age", y=names, labels={"value": "Cumulative years", "variable": "Activity"})

    colors = {a.name: a.color for a in activities if a.color}
    colors[FREE_TIME] = FREE_TIME_COLOR
    for trace in fig.data:
        color = colors.get(trace.name)
        if color:
            trace.line.color = _hex_to_rgba(color, 1.0)
            trace.fillcolor = _hex_to_rgba(color, 0.35)

    if current_age is not None:
        fig.add_vline(x=current_age, line_dash="dash", line_color="rgba(59, 130, 246, 1.0)")
    fig.update_layout(margin=dict(t=0, b=0, l=0, r=0), showlegend=True)
    st.plotly_chart(fig, use_container_width=True, config={"displayModeBar": False})


def show_trend_chart(result) -> None:
    """Compare original and modified years from a trend analysis."""

    fig = go.Figure(
        go.Bar(
            x=["Current habit", "With change"],
            y=[result.original_years, result.modified_years],
            marker_color=["rgba(99, 110, 250, 1.0)", "rgba(0, 204, 150, 1.0)"],
            text=[f"{result.original_years:.1f}", f"{result.modified_years:.1f}"],
            textposition="outside",
        )
    )
    fig.update_layout(margin=dict(t=0, b=0, l=0, r=0), yaxis_title="Effective years")
    st.plotly_chart(fig, use_container_width=True, config={"displayModeBar": False})


def show_time_value_gauge(time_value: float) -> None:
    """Render the cost-benefit time value score on a -100..100 gauge."""

    fig = go.Figure(
        go.Indicator(
            mode="gauge+number",
            value=time_value,
            gauge={
                "axis": {"range": [-100, 100]},
                "bar": {"color": "rgba(253, 150, 68, 1.0)"},
                "steps": [
                    {"range": [-100, -50], "color": "rgba(255, 89, 94, 0.4)"},
                    {"range": [-50, -20], "color": "rgba(255, 202, 58, 0.4)"},
                    {"range": [-20, 20], "color": "rgba(200, 200, 200, 0.3)"},
                    {"range": [20, 50], "color": "rgba(138, 201, 38, 0.4)"},
                    {"range": [50, 100], "color": "rgba(25, 130, 196, 0.4)"},
                ],
            },
        )
    )
    fig.update_layout(margin=dict(t=0, b=0, l=0, r=0), height=220)
    st.plotly_chart(fig, use_container_width=True, config={"displayModeBar": False})


def compare_snapshots(snapshots: list[dict]) -> None:
    """Display saved activity mixes side by side.

    Args:
        snapshots: Sequence of mappings with ``label`` and ``activities``
            (a list of ``{name, hours}`` dicts).
    """

    st.subheader("Snapshot Comparison")

    if not snapshots:
        st.info("No snapshots to compare.")
        return

    rows = [
        {"Snapshot": snapshot.get("label", f"Snapshot {i + 1}"), "Activity": a["name"], "Hours/Day": a["hours"]}
        for i, snapshot in enumerate(snapshots)
        for a in snapshot.get("activities", [])
    ]
    if not rows:
        st.info("No snapshots to compare.")
        return

    df = pd.DataFrame(rows)
    st.dataframe(df.pivot_table(index="Activity", columns="Snapshot", values="Hours/Day", aggfunc="sum"))
    fig = px.bar(df, x="Activity", y="Hours/Day", color="Snapshot", barmode="group")
    st.plotly_chart(fig)
