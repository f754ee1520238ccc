"""In-memory domain store: every game and member, loaded and flushed wholesale."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from .config import GAMES_COLLECTION, MEMBERS_COLLECTION
from .errors import NotFoundError
from .gateway import PersistenceGateway
from .mappers import game_to_dict, map_games, map_members, member_to_dict
from .models import Game, Member

logger = logging.getLogger(__name__)


class DomainStore:
    """Holds games and members for one gateway.

    The store is passed explicitly into every engine call. ``lock`` guards a
    mutation together with the flush that follows it, so a second action can
    not interleave with an outstanding save.
    """

    def __init__(self, gateway: PersistenceGateway):
        self.gateway = gateway
        self.games: list[Game] = []
        self.members: list[Member] = []
        self._lock = threading.RLock()

    @contextmanager
    def locked(self) -> Iterator[DomainStore]:
        with self._lock:
            yield self

    # ------------------ Lookups ------------------
    def get_game(self, game_id: str) -> Game:
        for game in self.games:
            if game.id == game_id:
                return game
        raise NotFoundError(f"Game {game_id!r} not found")

    def get_member(self, member_id: str) -> Member:
        for member in self.members:
            if member.id == member_id:
                return member
        raise NotFoundError(f"Member {member_id!r} not found")

    def game_ids(self) -> set[str]:
        return {g.id for g in self.games}

    def member_ids(self) -> set[str]:
        return {m.id for m in self.members}

    # ------------------ Persistence ------------------
    def load(self) -> None:
        """Replace in-memory state with both stored collections.

        Raises PersistenceError when a collection can not be read; a missing
        collection simply loads as empty.
        """
        with self._lock:
            games_raw = self.gateway.load(GAMES_COLLECTION)
            members_raw = self.gateway.load(MEMBERS_COLLECTION)
            self.games = map_games(games_raw)
            self.members = map_members(members_raw)
            logger.debug("Loaded %d games and %d members", len(self.games), len(self.members))

    def flush(self) -> bool:
        """Write both collections back. Returns False if either write failed."""
        with self._lock:
            games_ok = self.gateway.save(GAMES_COLLECTION, [game_to_dict(g) for g in self.games])
            members_ok = self.gateway.save(MEMBERS_COLLECTION, [member_to_dict(m) for m in self.members])
            if games_ok and members_ok:
                logger.debug("Flushed %d games and %d members", len(self.games), len(self.members))
                return True
            logger.warning(
                "Flush incomplete (games saved=%s, members saved=%s); in-memory state is ahead of storage",
                games_ok,
                members_ok,
            )
            return False
