"""Reusable table helpers for Streamlit rendering."""

from __future__ import annotations

import html

import pandas as pd
import streamlit as st

from review_app.analytics.metrics.aging import add_aging_metrics
from review_app.core.column_config import get_columns
from review_app.core.config import SETTINGS
from review_app.core.status import format_status
from review_app.visual.column_metadata import apply_column_metadata


def escape_text(value: object) -> str:
    """HTML-escape free text before it is placed in markdown."""
    return html.escape("" if value is None else str(value))


def preview(text: str, limit: int = SETTINGS.description_preview_chars) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def prepare_task_table(
    df: pd.DataFrame,
    *,
    column_set: str = "task_list",
    extra_columns: list[str] | None = None,
) -> tuple[pd.DataFrame, list[str], dict[str, object]]:
    if df.empty:
        return df, [], {}

    table = add_aging_metrics(df) if "created" in df.columns and "updated" in df.columns else df.copy()
    if "status" in table.columns:
        table["status"] = table["status"].apply(format_status)
    for col in ("priority", "urgency", "category"):
        if col in table.columns:
            table[col] = table[col].fillna("").astype(str).str.capitalize()

    canonical = get_columns(column_set) or []
    display_cols: list[str] = [col for col in canonical if col in table.columns]
    if extra_columns:
        for col in extra_columns:
            if col in table.columns and col not in display_cols:
                display_cols.append(col)
    if not display_cols:
        display_cols = [col for col in table.columns if col != "id"]

    return table, display_cols, apply_column_metadata(display_cols)


def render_task_table(df: pd.DataFrame, *, column_set: str = "task_list", key: str | None = None):
    """Render a task DataFrame (order preserved) and return the prepared table."""
    table, cols, cfg = prepare_task_table(df, column_set=column_set)
    if table.empty:
        return table
    st.dataframe(
        table[cols].head(SETTINGS.max_table_rows),
        hide_index=True,
        column_config=cfg,
        key=key,
    )
    return table
