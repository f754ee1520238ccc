"""Task count statistics per game and per category."""

from __future__ import annotations

import pandas as pd

from review_app.core.config import CATEGORIES, CATEGORY_LABELS
from review_app.core.engine import ensure_categories, iter_tasks
from review_app.core.models import Game, TaskStatistics


def compute_statistics(game: Game) -> TaskStatistics:
    """Count live tasks across all four categories.

    Anything not ``completed`` counts as open, so newer workflow states are
    still reported as outstanding work. Deleted tasks are not counted.
    """
    stats = TaskStatistics()
    for task in iter_tasks(game):
        stats.total += 1
        if task.is_completed:
            stats.completed += 1
        else:
            stats.open += 1
    return stats


def category_breakdown(game: Game) -> pd.DataFrame:
    """One row per category with open / completed counts (always four rows)."""
    issues = ensure_categories(game)
    rows = []
    for category in CATEGORIES:
        tasks = issues[category]
        completed = sum(1 for t in tasks if t.is_completed)
        rows.append(
            {
                "category": category,
                "label": CATEGORY_LABELS[category],
                "open": len(tasks) - completed,
                "completed": completed,
                "total": len(tasks),
            }
        )
    return pd.DataFrame(rows)
