"""Assignee-based aggregations."""

from __future__ import annotations

import pandas as pd

from review_app.core.config import STATUS_COMPLETED


def aggregate_by_assignee(df: pd.DataFrame, limit: int = 200) -> pd.DataFrame:
    if df.empty:
        return df
    out = df.copy()
    out["is_open"] = (out["status"] != STATUS_COMPLETED).astype(int)
    out["is_critical"] = ((out["priority"] == "critical") & out["is_open"].astype(bool)).astype(int)
    agg = (
        out.groupby("assignee", dropna=False)
        .agg(
            tasks=("id", "count"),
            open_tasks=("is_open", "sum"),
            critical_open=("is_critical", "sum"),
        )
        .sort_values(by=["open_tasks", "critical_open"], ascending=False)
        .head(limit)
    )
    return agg.reset_index()
