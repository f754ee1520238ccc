"""Chart builders (Altair) for task status overviews."""

from __future__ import annotations

import altair as alt
import pandas as pd

STATUS_COLORS = {"open": "#1f77b4", "completed": "#2ca02c"}


def category_status_chart(breakdown: pd.DataFrame):
    """Stacked bar of open vs completed tasks per category.

    ``breakdown`` is the frame returned by ``category_breakdown``.
    """
    if breakdown.empty or breakdown["total"].sum() == 0:
        return None
    long_df = breakdown.melt(
        id_vars=["category", "label"],
        value_vars=["open", "completed"],
        var_name="status",
        value_name="count",
    )
    chart = (
        alt.Chart(long_df)
        .mark_bar()
        .encode(
            x=alt.X("label:N", title="Category", sort=list(breakdown["label"])),
            y=alt.Y("count:Q", title="Tasks"),
            color=alt.Color(
                "status:N",
                title="Status",
                scale=alt.Scale(domain=list(STATUS_COLORS), range=list(STATUS_COLORS.values())),
            ),
            tooltip=[
                alt.Tooltip("label:N", title="Category"),
                alt.Tooltip("status:N", title="Status"),
                alt.Tooltip("count:Q", title="Tasks"),
            ],
        )
        .properties(height=240)
    )
    return chart


def assignee_workload_chart(workload: pd.DataFrame):
    if workload.empty or "open_tasks" not in workload.columns:
        return None
    chart = (
        alt.Chart(workload)
        .mark_bar(color="#d62728")
        .encode(
            x=alt.X("open_tasks:Q", title="Open Tasks"),
            y=alt.Y("assignee:N", title="Assignee", sort="-x"),
            tooltip=[
                alt.Tooltip("assignee:N", title="Assignee"),
                alt.Tooltip("open_tasks:Q", title="Open"),
                alt.Tooltip("critical_open:Q", title="Critical Open"),
            ],
        )
        .properties(height=220)
    )
    return chart
