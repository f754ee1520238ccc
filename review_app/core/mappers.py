"""Mapping stored JSON documents into domain models (and back), plus DataFrame views."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

import pandas as pd

from .config import CATEGORIES, COMMENT_STATUSES, REVIEW_CATEGORY, UNASSIGNED_LABEL, UNKNOWN_LABEL
from .media import classify_media_link
from .models import CommentModel, DeletedTask, Game, MediaLink, Member, Task, generate_id
from .status import is_known_severity, normalize_severity, normalize_task_status

logger = logging.getLogger(__name__)


def parse_dt(val: Any) -> datetime | None:
    if not val:
        return None
    ts = pd.to_datetime(val, utc=True, errors="coerce")
    if ts is None or pd.isna(ts):
        return None
    return ts.to_pydatetime()


def format_dt(val: datetime | None) -> str | None:
    if val is None:
        return None
    return val.isoformat()


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _optional_text(value: Any) -> str | None:
    text = _text(value)
    return text or None


def _severity(value: Any) -> str | None:
    level = normalize_severity(value)
    return level if is_known_severity(level) else None


# ------------------ Decoding ------------------
def map_media_link(raw: Any) -> MediaLink | None:
    if isinstance(raw, str):
        url = raw.strip()
        kind = None
    elif isinstance(raw, Mapping):
        url = _text(raw.get("url"))
        kind = raw.get("kind")
    else:
        return None
    if not url:
        return None
    return MediaLink(url=url, kind=kind or classify_media_link(url))


def map_comment(raw: Mapping[str, Any]) -> CommentModel:
    status = _text(raw.get("status")).lower()
    return CommentModel(
        id=_text(raw.get("id")),
        text=_text(raw.get("text")),
        author=_text(raw.get("author")),
        created=parse_dt(raw.get("createdAt")),
        status=status if status in COMMENT_STATUSES else "open",
    )


def _task_kwargs(raw: Mapping[str, Any], category: str) -> dict[str, Any]:
    media_raw = raw.get("mediaLinks") or []
    if isinstance(media_raw, str):
        media_raw = media_raw.splitlines()
    media = [link for link in (map_media_link(m) for m in media_raw) if link is not None]
    comments_raw = raw.get("comments") or []
    comments = [map_comment(c) for c in comments_raw if isinstance(c, Mapping)]
    is_review = category == REVIEW_CATEGORY
    assignee = raw.get("assignee", raw.get("assigneeId"))  # assigneeId: pre-JSON-store schema
    return {
        "id": _text(raw.get("id")),
        "title": _text(raw.get("title")),
        "category": category,
        "description": _text(raw.get("description")),
        "priority": None if is_review else _severity(raw.get("priority")),
        "urgency": None if is_review else _severity(raw.get("urgency")),
        "assignee": None if is_review else _optional_text(assignee),
        "status": normalize_task_status(raw.get("status")),
        "created": parse_dt(raw.get("createdAt")),
        "updated": parse_dt(raw.get("updatedAt")),
        "comments": comments,
        "completion_comment": _optional_text(raw.get("completionComment")),
        "completed_by": _optional_text(raw.get("completedBy")),
        "media_links": media,
    }


def map_task(raw: Mapping[str, Any], category: str) -> Task:
    return Task(**_task_kwargs(raw, category))


def map_deleted_task(raw: Mapping[str, Any]) -> DeletedTask:
    category = _text(raw.get("category")).lower()
    kwargs = _task_kwargs(raw, category)
    return DeletedTask(
        **kwargs,
        deleted_at=parse_dt(raw.get("deletedAt")),
        deleted_by=_optional_text(raw.get("deletedBy")),
        delete_reason=_text(raw.get("deleteReason")),
    )


def map_game(raw: Mapping[str, Any]) -> Game:
    """Decode one stored game, repairing its issue categories.

    Missing categories become empty lists, unknown category keys are dropped,
    tasks without a title are skipped and tasks without an id get a fresh one.
    """
    game_id = _text(raw.get("id"))
    issues_raw = raw.get("issues")
    if not isinstance(issues_raw, Mapping):
        issues_raw = {}
    for key in issues_raw:
        if key not in CATEGORIES:
            logger.warning("Dropping unknown category %r from game %s", key, game_id)

    issues: dict[str, list[Task]] = {category: [] for category in CATEGORIES}
    seen_ids: set[str] = set()
    for category in CATEGORIES:
        for item in issues_raw.get(category) or []:
            if not isinstance(item, Mapping):
                continue
            task = map_task(item, category)
            if not task.title:
                logger.warning("Skipping untitled task %r in game %s", task.id, game_id)
                continue
            if not task.id or task.id in seen_ids:
                task.id = generate_id(seen_ids)
            seen_ids.add(task.id)
            issues[category].append(task)

    deleted = [map_deleted_task(d) for d in raw.get("deletedTasks") or [] if isinstance(d, Mapping)]
    return Game(
        id=game_id,
        name=_text(raw.get("name")),
        description=_text(raw.get("description")),
        genre=_text(raw.get("genre") or raw.get("platform")),  # platform: pre-JSON-store schema
        completed=bool(raw.get("completed", False)),
        created=parse_dt(raw.get("createdAt")),
        updated=parse_dt(raw.get("updatedAt")),
        issues=issues,
        deleted_tasks=deleted,
    )


def map_member(raw: Mapping[str, Any]) -> Member:
    return Member(
        id=_text(raw.get("id")),
        name=_text(raw.get("name")),
        role=_text(raw.get("role")),
        email=_text(raw.get("email")),
        created=parse_dt(raw.get("createdAt")),
    )


def map_games(raw: Any) -> list[Game]:
    if not isinstance(raw, list):
        if raw is not None:
            logger.warning("Expected a list of games, got %s", type(raw).__name__)
        return []
    games: list[Game] = []
    seen: set[str] = set()
    for item in raw:
        if not isinstance(item, Mapping):
            continue
        game = map_game(item)
        if not game.id or game.id in seen:
            game.id = generate_id(seen)
        seen.add(game.id)
        games.append(game)
    return games


def map_members(raw: Any) -> list[Member]:
    if not isinstance(raw, list):
        return []
    members = [map_member(m) for m in raw if isinstance(m, Mapping)]
    return [m for m in members if m.id]


# ------------------ Encoding ------------------
def comment_to_dict(comment: CommentModel) -> dict[str, Any]:
    return {
        "id": comment.id,
        "text": comment.text,
        "author": comment.author,
        "createdAt": format_dt(comment.created),
        "status": comment.status,
    }


def task_to_dict(task: Task) -> dict[str, Any]:
    data = {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "category": task.category,
        "priority": task.priority,
        "urgency": task.urgency,
        "assignee": task.assignee,
        "status": task.status,
        "createdAt": format_dt(task.created),
        "updatedAt": format_dt(task.updated),
        "comments": [comment_to_dict(c) for c in task.comments],
        "completionComment": task.completion_comment,
        "completedBy": task.completed_by,
        "mediaLinks": [{"url": m.url, "kind": m.kind} for m in task.media_links],
    }
    if isinstance(task, DeletedTask):
        data["deletedAt"] = format_dt(task.deleted_at)
        data["deletedBy"] = task.deleted_by
        data["deleteReason"] = task.delete_reason
    return data


def game_to_dict(game: Game) -> dict[str, Any]:
    return {
        "id": game.id,
        "name": game.name,
        "description": game.description,
        "genre": game.genre,
        "completed": game.completed,
        "createdAt": format_dt(game.created),
        "updatedAt": format_dt(game.updated),
        "issues": {category: [task_to_dict(t) for t in game.issues.get(category, [])] for category in CATEGORIES},
        "deletedTasks": [task_to_dict(t) for t in game.deleted_tasks],
    }


def member_to_dict(member: Member) -> dict[str, Any]:
    return {
        "id": member.id,
        "name": member.name,
        "role": member.role,
        "email": member.email,
        "createdAt": format_dt(member.created),
    }


# ------------------ DataFrame views ------------------
def tasks_to_dataframe(tasks: Iterable[Task], members: Iterable[Member] = ()) -> pd.DataFrame:
    names = {m.id: m.name for m in members}
    rows = []
    for t in tasks:
        if t.assignee is None:
            assignee = UNASSIGNED_LABEL
        else:
            assignee = names.get(t.assignee, UNKNOWN_LABEL)
        row = {
            "id": t.id,
            "title": t.title,
            "description": t.description,
            "category": t.category,
            "priority": t.priority or "",
            "urgency": t.urgency or "",
            "status": t.status,
            "assignee": assignee,
            "assignee_id": t.assignee,
            "comments_count": len(t.comments),
            "media_count": len(t.media_links),
            "created": t.created,
            "updated": t.updated,
            "completed_by": names.get(t.completed_by, t.completed_by) if t.completed_by else "",
        }
        if isinstance(t, DeletedTask):
            row["deleted"] = t.deleted_at
            row["deleted_by"] = names.get(t.deleted_by, t.deleted_by) if t.deleted_by else UNKNOWN_LABEL
            row["delete_reason"] = t.delete_reason
        rows.append(row)
    df = pd.DataFrame(rows)
    for col in ("created", "updated", "deleted"):
        if col in df.columns:
            df[col] = pd.to_datetime(df[col], utc=True, errors="coerce")
    return df
