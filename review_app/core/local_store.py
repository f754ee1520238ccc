"""Embedded persistence gateway (SQLite, one row per record)."""

from __future__ import annotations

import json
import logging
import sqlite3
from contextlib import closing
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .errors import PersistenceError

logger = logging.getLogger(__name__)


def _connect(db_path: str) -> sqlite3.Connection:
    """Open a connection with FK enforcement and WAL mode."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    conn.execute("PRAGMA journal_mode = WAL")
    return conn


def _record_id(item: Any) -> str | None:
    record_id = item.get("id") if isinstance(item, dict) else None
    return None if record_id is None else str(record_id)


class SQLiteGateway:
    """Stores each collection as ordered rows, one per list element.

    A collection that was never saved has no row in ``collections`` and loads
    as ``None``. Non-list documents are kept as a single row.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._schema_ready = False

    def _init_schema(self) -> None:
        # the first load or save creates the file and tables
        if self._schema_ready:
            return
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        with closing(_connect(self.db_path)) as conn, conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS collections (
                    name TEXT PRIMARY KEY,
                    kind TEXT NOT NULL DEFAULT 'list',  -- 'list' or 'value'
                    updated_at TEXT NOT NULL
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS records (
                    collection TEXT NOT NULL,
                    position INTEGER NOT NULL,
                    record_id TEXT,
                    payload TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    PRIMARY KEY (collection, position),
                    FOREIGN KEY (collection) REFERENCES collections(name) ON DELETE CASCADE
                )
            """)
            conn.execute("CREATE INDEX IF NOT EXISTS idx_records_id ON records(collection, record_id)")
            conn.commit()
        self._schema_ready = True

    def load(self, collection: str) -> Any | None:
        try:
            self._init_schema()
            with closing(_connect(self.db_path)) as conn:
                head = conn.execute("SELECT kind FROM collections WHERE name = ?", (collection,)).fetchone()
                if head is None:
                    return None
                rows = conn.execute(
                    "SELECT payload FROM records WHERE collection = ? ORDER BY position",
                    (collection,),
                ).fetchall()
        except (OSError, sqlite3.Error) as exc:
            raise PersistenceError(f"Failed to read {collection}: {exc}", collection=collection) from exc
        try:
            values = [json.loads(r["payload"]) for r in rows]
        except json.JSONDecodeError as exc:
            raise PersistenceError(f"Corrupt record in {collection}: {exc}", collection=collection) from exc
        if head["kind"] == "value":
            return values[0] if values else None
        return values

    def save(self, collection: str, value: Any) -> bool:
        try:
            self._write(collection, value)
            return True
        except PersistenceError as exc:
            logger.error("Error saving %s: %s", collection, exc)
            return False

    def _write(self, collection: str, value: Any) -> None:
        now = datetime.now(timezone.utc).isoformat()
        if isinstance(value, list):
            kind, items = "list", value
        else:
            kind, items = "value", [value]
        try:
            rows = [
                (collection, position, _record_id(item), json.dumps(item), now) for position, item in enumerate(items)
            ]
            self._init_schema()
            with closing(_connect(self.db_path)) as conn, conn:
                conn.execute(
                    "INSERT OR REPLACE INTO collections (name, kind, updated_at) VALUES (?, ?, ?)",
                    (collection, kind, now),
                )
                conn.execute("DELETE FROM records WHERE collection = ?", (collection,))
                conn.executemany(
                    "INSERT INTO records (collection, position, record_id, payload, updated_at) VALUES (?, ?, ?, ?, ?)",
                    rows,
                )
                conn.commit()
        except (OSError, sqlite3.Error, TypeError, ValueError) as exc:
            raise PersistenceError(f"Failed to write {collection}: {exc}", collection=collection) from exc
