"""Central column metadata and helpers for table rendering."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import streamlit as st

# Mapping of raw column keys to (label, help text, format key)
# format key: "int" -> integer, "float1" -> 1 decimal float, "datetime" -> timestamp, None -> text
COLUMN_METADATA: dict[str, tuple[str, str, str | None]] = {
    "title": ("Title", "Short task title.", None),
    "description": ("Description", "Full task description.", None),
    "category": ("Category", "Bug, controls, quest or review.", None),
    "status": ("Status", "Open or completed.", None),
    "priority": ("Priority", "How important the task is (critical > high > medium > low).", None),
    "urgency": ("Urgency", "How soon the task needs attention (critical > high > medium > low).", None),
    "assignee": ("Assignee", "Team member responsible for the task.", None),
    "completed_by": ("Completed By", "Who marked the task completed.", None),
    "comments_count": ("Comments", "Number of comments on the task.", "int"),
    "media_count": ("Media", "Number of attached media links.", "int"),
    "days_open": ("Days Open", "Days since the task was created.", "float1"),
    "days_since_update": ("Days Since Update", "Days since the task last changed.", "float1"),
    "created": ("Created", "When the task was filed.", "datetime"),
    "updated": ("Updated", "When the task last changed.", "datetime"),
    "deleted": ("Deleted", "When the task was moved to the deleted log.", "datetime"),
    "deleted_by": ("Deleted By", "Who deleted the task.", None),
    "delete_reason": ("Reason", "Why the task was deleted.", None),
    # Assignee workload
    "tasks": ("Tasks", "All tasks assigned.", "int"),
    "open_tasks": ("Open", "Tasks not yet completed.", "int"),
    "critical_open": ("Critical Open", "Open tasks with critical priority.", "int"),
}


def apply_column_metadata(
    columns: Iterable[str],
    existing: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Return a column_config dictionary with human labels and hover help."""

    config: dict[str, Any] = dict(existing or {})
    for col in columns:
        if col in config:
            continue
        meta = COLUMN_METADATA.get(col)
        if not meta:
            continue
        label, help_text, fmt = meta
        if fmt == "int":
            config[col] = st.column_config.NumberColumn(label, help=help_text, format="%d")
        elif fmt == "float1":
            config[col] = st.column_config.NumberColumn(label, help=help_text, format="%.1f")
        elif fmt == "datetime":
            config[col] = st.column_config.DatetimeColumn(label, help=help_text, format="YYYY-MM-DD HH:mm")
        else:
            config[col] = st.column_config.Column(label, help=help_text)
    return config
