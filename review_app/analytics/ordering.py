"""Task list filtering and deterministic display ordering (pure functions)."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from functools import cmp_to_key

import pytz

from review_app.core.config import ALL, CATEGORIES
from review_app.core.engine import ensure_categories
from review_app.core.errors import ValidationError
from review_app.core.models import Game, Task
from review_app.core.status import severity_rank

_OLDEST = datetime.min.replace(tzinfo=pytz.UTC)


def filter_tasks(
    game: Game,
    category: str = ALL,
    *,
    status: str = ALL,
    priority: str = ALL,
    assignee: str = ALL,
) -> list[Task]:
    """Select a game's tasks by category and optional equality predicates.

    ``category == "all"`` concatenates bug, controls, quest and review in that
    order. A predicate left at ``"all"`` lets every task through. Always
    returns a new list; the category arrays are never touched.
    """
    issues = ensure_categories(game)
    if category == ALL:
        tasks = [t for cat in CATEGORIES for t in issues[cat]]
    elif category in CATEGORIES:
        tasks = list(issues[category])
    else:
        raise ValidationError(f"Unknown category {category!r}")

    if status != ALL:
        tasks = [t for t in tasks if t.status == status]
    if priority != ALL:
        tasks = [t for t in tasks if t.priority == priority]
    if assignee != ALL:
        tasks = [t for t in tasks if t.assignee == assignee]
    return tasks


def _compare_rank(a: int | None, b: int | None) -> int:
    # a missing level on either side leaves the pair to the next rule
    if a is None or b is None:
        return 0
    return b - a


def compare_tasks(a: Task, b: Task) -> int:
    """Display order: open first, reviews last, then priority, urgency, newest."""
    a_open = not a.is_completed
    b_open = not b.is_completed
    if a_open != b_open:
        return -1 if a_open else 1

    a_review = a.is_review
    b_review = b.is_review
    if a_review != b_review:
        return 1 if a_review else -1

    if not a_review:
        diff = _compare_rank(severity_rank(a.priority), severity_rank(b.priority))
        if diff:
            return diff

    diff = _compare_rank(severity_rank(a.urgency), severity_rank(b.urgency))
    if diff:
        return diff

    a_created = a.created or _OLDEST
    b_created = b.created or _OLDEST
    if a_created == b_created:
        return 0
    return -1 if a_created > b_created else 1


def sort_for_display(tasks: Iterable[Task]) -> list[Task]:
    return sorted(tasks, key=cmp_to_key(compare_tasks))
