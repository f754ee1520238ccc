"""Aging metrics and relative timestamps for task tables (pure functions)."""

from __future__ import annotations

from datetime import datetime

import pandas as pd
import pytz

from review_app.core.config import TIMEZONE


def add_aging_metrics(df: pd.DataFrame, now: datetime | None = None) -> pd.DataFrame:
    if df.empty:
        return df
    out = df.copy()
    tz = pytz.timezone(TIMEZONE)
    now = now or datetime.now(tz=tz)
    out["created_dt"] = pd.to_datetime(out["created"], utc=True, errors="coerce").dt.tz_convert(tz)
    out["updated_dt"] = pd.to_datetime(out["updated"], utc=True, errors="coerce").dt.tz_convert(tz)
    out["days_open"] = (now - out["created_dt"]).dt.total_seconds() / 86400.0
    out["days_since_update"] = (now - out["updated_dt"]).dt.total_seconds() / 86400.0
    return out


def format_relative(ts: datetime | None, now: datetime | None = None) -> str:
    """Short human age such as ``5 minutes ago``, ``Yesterday`` or a date.

    Parameters
    ----------
    ts : datetime or None
        Timezone-aware timestamp.
    now : datetime or None
        Reference time; defaults to the current time in TIMEZONE.

    Returns
    -------
    str
        Relative label for the last week, otherwise ``YYYY-MM-DD``; ``""``
        for a missing timestamp.
    """
    if ts is None or pd.isna(ts):
        return ""
    tz = pytz.timezone(TIMEZONE)
    now = now or datetime.now(tz=tz)
    delta = abs(now - ts)
    days = delta.days
    if days == 0:
        hours = delta.seconds // 3600
        if hours == 0:
            return f"{delta.seconds // 60} minutes ago"
        return f"{hours} hours ago"
    if days == 1:
        return "Yesterday"
    if days < 7:
        return f"{days} days ago"
    return ts.astimezone(tz).strftime("%Y-%m-%d")
