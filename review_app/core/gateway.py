"""Persistence gateway contract and backend selection."""

from __future__ import annotations

from typing import Any, Protocol

from .config import StorageSettings


class PersistenceGateway(Protocol):
    """Opaque key -> JSON document store.

    ``load`` returns ``None`` for a collection that does not exist yet and
    raises PersistenceError on I/O failure. ``save`` reports success as a
    bool and never raises.
    """

    def load(self, collection: str) -> Any | None: ...

    def save(self, collection: str, value: Any) -> bool: ...


def build_gateway(settings: StorageSettings) -> PersistenceGateway:
    if settings.backend == "github":
        from .github_client import GitHubContentsAPI, GitHubGateway

        api = GitHubContentsAPI(
            owner=settings.github_owner,
            repo=settings.github_repo,
            token=settings.github_token,
            branch=settings.github_branch,
            timeout=settings.request_timeout,
        )
        return GitHubGateway(api, data_dir=settings.github_data_dir)

    from .local_store import SQLiteGateway

    return SQLiteGateway(settings.db_path)
