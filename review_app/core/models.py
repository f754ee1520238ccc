"""Domain data models for games, tasks, comments, members, and the deletion audit log."""

from __future__ import annotations

import time
from collections.abc import Container
from dataclasses import dataclass, field
from datetime import datetime

import pytz

from .config import CATEGORIES, REVIEW_CATEGORY, STATUS_COMPLETED


def utc_now() -> datetime:
    return datetime.now(pytz.UTC)


def generate_id(taken: Container[str] = ()) -> str:
    """Time-based id (epoch milliseconds), bumped until it is not in ``taken``."""
    candidate = int(time.time() * 1000)
    while str(candidate) in taken:
        candidate += 1
    return str(candidate)


def empty_issues() -> dict[str, list[Task]]:
    return {category: [] for category in CATEGORIES}


@dataclass(slots=True)
class MediaLink:
    url: str
    kind: str = "generic"


@dataclass(slots=True)
class CommentModel:
    id: str
    text: str
    author: str
    created: datetime | None = None
    # open / resolved / closed; nothing transitions it yet
    status: str = "open"


@dataclass(slots=True)
class Task:
    id: str
    title: str
    category: str
    description: str = ""
    priority: str | None = None
    urgency: str | None = None
    assignee: str | None = None
    status: str = "open"
    created: datetime | None = None
    updated: datetime | None = None
    comments: list[CommentModel] = field(default_factory=list)
    completion_comment: str | None = None
    completed_by: str | None = None
    media_links: list[MediaLink] = field(default_factory=list)

    @property
    def is_review(self) -> bool:
        return self.category == REVIEW_CATEGORY

    @property
    def is_completed(self) -> bool:
        return self.status == STATUS_COMPLETED


@dataclass(slots=True)
class DeletedTask(Task):
    deleted_at: datetime | None = None
    deleted_by: str | None = None
    delete_reason: str = ""


@dataclass(slots=True)
class Game:
    id: str
    name: str
    description: str = ""
    genre: str = ""
    completed: bool = False
    created: datetime | None = None
    updated: datetime | None = None
    issues: dict[str, list[Task]] = field(default_factory=empty_issues)
    deleted_tasks: list[DeletedTask] = field(default_factory=list)


@dataclass(slots=True)
class Member:
    id: str
    name: str
    role: str = ""
    email: str = ""
    created: datetime | None = None


@dataclass(slots=True)
class TaskInput:
    """Raw task form values as submitted by the presentation layer."""

    title: str
    category: str
    description: str = ""
    priority: str | None = None
    urgency: str | None = None
    assignee: str | None = None
    media_links: str = ""


@dataclass(slots=True)
class TaskStatistics:
    total: int = 0
    open: int = 0
    completed: int = 0

    def as_dict(self) -> dict[str, int]:
        return {"total": self.total, "open": self.open, "completed": self.completed}
