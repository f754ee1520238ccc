"""Task engine: lifecycle operations over games, tasks, comments and members.

Every function mutates the objects it is given in memory and returns the
affected record. Nothing here persists; callers flush the store afterwards
(see ``service.ReviewService``). Validation failures raise ValidationError
and unknown ids raise NotFoundError before anything is changed.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from copy import copy
from dataclasses import fields
from typing import Any

from .config import (
    CATEGORIES,
    REVIEW_CATEGORY,
    SEVERITY_LEVELS,
    STATUS_COMPLETED,
    STATUS_OPEN,
    TASK_STATUSES,
    UNASSIGNED_LABEL,
)
from .errors import NotFoundError, ValidationError
from .media import parse_media_links
from .models import (
    CommentModel,
    DeletedTask,
    Game,
    Member,
    Task,
    TaskInput,
    generate_id,
    utc_now,
)
from .status import normalize_severity
from .store import DomainStore

UPDATABLE_TASK_FIELDS: frozenset[str] = frozenset(
    {"title", "description", "priority", "urgency", "assignee", "media_links"}
)


# ------------------ Validation helpers ------------------
def _clean(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _require(value: Any, field_name: str) -> str:
    text = _clean(value)
    if not text:
        raise ValidationError(f"{field_name} is required")
    return text


def _validate_category(category: Any) -> str:
    text = _clean(category).lower()
    if text not in CATEGORIES:
        raise ValidationError(f"category must be one of {', '.join(CATEGORIES)}; got {category!r}")
    return text


def _validate_severity(value: Any, field_name: str) -> str | None:
    level = normalize_severity(value)
    if level is not None and level not in SEVERITY_LEVELS:
        raise ValidationError(f"{field_name} must be one of {', '.join(SEVERITY_LEVELS)}; got {value!r}")
    return level


# ------------------ Task lookup ------------------
def ensure_categories(game: Game) -> dict[str, list[Task]]:
    """Repair missing category arrays in place and return the issue map."""
    if game.issues is None:
        game.issues = {}
    for category in CATEGORIES:
        if game.issues.get(category) is None:
            game.issues[category] = []
    return game.issues


def iter_tasks(game: Game) -> Iterator[Task]:
    issues = ensure_categories(game)
    for category in CATEGORIES:
        yield from issues[category]


def _locate(game: Game, task_id: str) -> tuple[str, int]:
    issues = ensure_categories(game)
    for category in CATEGORIES:
        for index, task in enumerate(issues[category]):
            if task.id == task_id:
                return category, index
    raise NotFoundError(f"Task {task_id!r} not found in game {game.id!r}")


def find_task(game: Game, task_id: str) -> Task:
    category, index = _locate(game, task_id)
    return game.issues[category][index]


def _taken_task_ids(game: Game) -> set[str]:
    taken = {t.id for t in iter_tasks(game)}
    taken.update(t.id for t in game.deleted_tasks)
    return taken


# ------------------ Task lifecycle ------------------
def create_task(game: Game, data: TaskInput) -> Task:
    title = _require(data.title, "title")
    category = _validate_category(data.category)
    priority = _validate_severity(data.priority, "priority")
    urgency = _validate_severity(data.urgency, "urgency")
    assignee = _clean(data.assignee) or None
    if category == REVIEW_CATEGORY:
        # reviews are feedback records, not actionable work
        priority = urgency = assignee = None

    now = utc_now()
    task = Task(
        id=generate_id(_taken_task_ids(game)),
        title=title,
        category=category,
        description=_clean(data.description),
        priority=priority,
        urgency=urgency,
        assignee=assignee,
        status=STATUS_OPEN,
        created=now,
        updated=now,
        media_links=parse_media_links(data.media_links),
    )
    ensure_categories(game)[category].append(task)
    game.updated = now
    return task


def update_task(game: Game, task_id: str, changes: Mapping[str, Any]) -> Task:
    """Edit descriptive fields of a task in place.

    Only title, description, priority, urgency, assignee and media_links may
    change. Moving a task to another category is not supported.
    """
    task = find_task(game, task_id)
    pending: dict[str, Any] = {}
    for key, value in changes.items():
        if key == "category":
            if _clean(value).lower() != task.category:
                raise ValidationError("Moving a task to another category is not supported")
            continue
        if key not in UPDATABLE_TASK_FIELDS:
            raise ValidationError(f"Field {key!r} can not be edited")
        if key == "title":
            pending["title"] = _require(value, "title")
        elif key in ("priority", "urgency"):
            pending[key] = _validate_severity(value, key)
        elif key == "assignee":
            pending["assignee"] = _clean(value) or None
        elif key == "media_links":
            pending["media_links"] = parse_media_links(value) if isinstance(value, str) else list(value or [])
        else:
            pending[key] = _clean(value)

    if task.is_review:
        for key in ("priority", "urgency", "assignee"):
            pending.pop(key, None)
    for key, value in pending.items():
        setattr(task, key, value)
    task.updated = utc_now()
    game.updated = task.updated
    return task


def set_task_status(
    game: Game,
    task_id: str,
    status: str,
    *,
    completion_comment: str | None = None,
    completed_by: str | None = None,
) -> Task:
    """Complete or reopen a task.

    Completing records the optional completion comment and completer;
    reopening always clears both.
    """
    status = _clean(status).lower()
    if status not in TASK_STATUSES:
        raise ValidationError(f"status must be one of {', '.join(TASK_STATUSES)}; got {status!r}")
    task = find_task(game, task_id)
    task.status = status
    if status == STATUS_COMPLETED:
        task.completion_comment = _clean(completion_comment) or None
        task.completed_by = _clean(completed_by) or None
    else:
        task.completion_comment = None
        task.completed_by = None
    task.updated = utc_now()
    game.updated = task.updated
    return task


def add_comment(game: Game, task_id: str, text: str, author: str) -> CommentModel:
    body = _require(text, "comment text")
    who = _require(author, "author")
    task = find_task(game, task_id)
    now = utc_now()
    comment = CommentModel(
        id=generate_id({c.id for c in task.comments}),
        text=body,
        author=who,
        created=now,
        status="open",
    )
    task.comments.append(comment)
    task.updated = now
    return comment


def delete_task(game: Game, task_id: str, reason: str, deleted_by: str | None = None) -> DeletedTask:
    """Move a task out of its category into the game's deleted-task log."""
    why = _require(reason, "delete reason")
    category, index = _locate(game, task_id)
    task = game.issues[category][index]
    snapshot = {f.name: copy(getattr(task, f.name)) for f in fields(Task)}
    record = DeletedTask(
        **snapshot,
        deleted_at=utc_now(),
        deleted_by=_clean(deleted_by) or None,
        delete_reason=why,
    )
    del game.issues[category][index]
    game.deleted_tasks.append(record)
    game.updated = record.deleted_at
    return record


# ------------------ Games ------------------
def add_game(store: DomainStore, name: str, description: str = "", genre: str = "") -> Game:
    now = utc_now()
    game = Game(
        id=generate_id(store.game_ids()),
        name=_require(name, "game name"),
        description=_clean(description),
        genre=_clean(genre),
        completed=False,
        created=now,
        updated=now,
    )
    store.games.append(game)
    return game


def update_game(
    store: DomainStore,
    game_id: str,
    *,
    name: str | None = None,
    description: str | None = None,
    genre: str | None = None,
) -> Game:
    game = store.get_game(game_id)
    new_name = _require(name, "game name") if name is not None else game.name
    game.name = new_name
    if description is not None:
        game.description = _clean(description)
    if genre is not None:
        game.genre = _clean(genre)
    game.updated = utc_now()
    return game


def toggle_game_complete(store: DomainStore, game_id: str) -> Game:
    game = store.get_game(game_id)
    game.completed = not game.completed
    game.updated = utc_now()
    return game


def delete_game(store: DomainStore, game_id: str) -> Game:
    """Remove a game together with every task, comment and audit record it owns."""
    game = store.get_game(game_id)
    store.games = [g for g in store.games if g.id != game_id]
    return game


# ------------------ Members ------------------
def add_member(store: DomainStore, name: str, role: str = "", email: str = "") -> Member:
    display_name = _require(name, "member name")
    email_clean = _clean(email)
    if email_clean:
        lowered = email_clean.lower()
        if any(m.email and m.email.lower() == lowered for m in store.members):
            raise ValidationError(f"A member with email {email_clean!r} already exists")
    member = Member(
        id=generate_id(store.member_ids()),
        name=display_name,
        role=_clean(role),
        email=email_clean,
        created=utc_now(),
    )
    store.members.append(member)
    return member


def remove_member(store: DomainStore, member_id: str) -> Member:
    """Drop a member. Tasks that reference it keep the dangling id."""
    member = store.get_member(member_id)
    store.members = [m for m in store.members if m.id != member_id]
    return member


def member_name(store: DomainStore, member_id: str | None, placeholder: str = UNASSIGNED_LABEL) -> str:
    if not member_id:
        return placeholder
    try:
        return store.get_member(member_id).name
    except NotFoundError:
        return placeholder
