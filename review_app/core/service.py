"""ReviewService: runs engine operations against the store and flushes after each one."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from . import engine
from .errors import PersistenceError
from .gateway import PersistenceGateway
from .models import CommentModel, DeletedTask, Game, Member, Task, TaskInput
from .store import DomainStore

ProgressCallback = Callable[[str, int | None, int | None], None]
T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class MutationResult(Generic[T]):
    """Outcome of a mutating call.

    ``saved`` is False when the in-memory change succeeded but the flush did
    not; the change is kept and ``ReviewService.retry_flush`` can be used.
    """

    value: T
    saved: bool


class ReviewService:
    def __init__(self, gateway: PersistenceGateway | DomainStore):
        self.store = gateway if isinstance(gateway, DomainStore) else DomainStore(gateway)
        self.last_error: str | None = None

    # ------------------ Load / Flush ------------------
    def load(self, *, progress: ProgressCallback | None = None) -> bool:
        if progress:
            progress("Loading games and team members", None, None)
        try:
            self.store.load()
        except PersistenceError as exc:
            self.last_error = str(exc)
            logger.error("Failed to load %s: %s", exc.collection or "data", exc)
            return False
        self.last_error = None
        if progress:
            progress(f"Loaded {len(self.store.games)} game(s)", 1, 1)
        return True

    def retry_flush(self, *, progress: ProgressCallback | None = None) -> bool:
        """Write the current in-memory state again without repeating any mutation."""
        return self._flush(progress)

    def _flush(self, progress: ProgressCallback | None = None) -> bool:
        if progress:
            progress("Saving changes", None, None)
        saved = self.store.flush()
        self.last_error = None if saved else "Changes are kept in memory but could not be saved."
        return saved

    def _run(self, action: str, op: Callable[[], T]) -> MutationResult[T]:
        # engine errors propagate before anything is flushed
        with self.store.locked():
            value = op()
            saved = self._flush()
        if not saved:
            logger.warning("%s applied in memory but not persisted", action)
        return MutationResult(value=value, saved=saved)

    # ------------------ Games ------------------
    def add_game(self, name: str, description: str = "", genre: str = "") -> MutationResult[Game]:
        return self._run("add_game", lambda: engine.add_game(self.store, name, description, genre))

    def update_game(self, game_id: str, **changes: str | None) -> MutationResult[Game]:
        return self._run("update_game", lambda: engine.update_game(self.store, game_id, **changes))

    def toggle_game_complete(self, game_id: str) -> MutationResult[Game]:
        return self._run("toggle_game_complete", lambda: engine.toggle_game_complete(self.store, game_id))

    def delete_game(self, game_id: str) -> MutationResult[Game]:
        return self._run("delete_game", lambda: engine.delete_game(self.store, game_id))

    # ------------------ Tasks ------------------
    def create_task(self, game_id: str, data: TaskInput) -> MutationResult[Task]:
        return self._run("create_task", lambda: engine.create_task(self.store.get_game(game_id), data))

    def update_task(self, game_id: str, task_id: str, changes: Mapping[str, Any]) -> MutationResult[Task]:
        return self._run("update_task", lambda: engine.update_task(self.store.get_game(game_id), task_id, changes))

    def set_task_status(
        self,
        game_id: str,
        task_id: str,
        status: str,
        *,
        completion_comment: str | None = None,
        completed_by: str | None = None,
    ) -> MutationResult[Task]:
        return self._run(
            "set_task_status",
            lambda: engine.set_task_status(
                self.store.get_game(game_id),
                task_id,
                status,
                completion_comment=completion_comment,
                completed_by=completed_by,
            ),
        )

    def add_comment(self, game_id: str, task_id: str, text: str, author: str) -> MutationResult[CommentModel]:
        return self._run(
            "add_comment",
            lambda: engine.add_comment(self.store.get_game(game_id), task_id, text, author),
        )

    def delete_task(
        self, game_id: str, task_id: str, reason: str, deleted_by: str | None = None
    ) -> MutationResult[DeletedTask]:
        return self._run(
            "delete_task",
            lambda: engine.delete_task(self.store.get_game(game_id), task_id, reason, deleted_by),
        )

    # ------------------ Members ------------------
    def add_member(self, name: str, role: str = "", email: str = "") -> MutationResult[Member]:
        return self._run("add_member", lambda: engine.add_member(self.store, name, role, email))

    def remove_member(self, member_id: str) -> MutationResult[Member]:
        return self._run("remove_member", lambda: engine.remove_member(self.store, member_id))
