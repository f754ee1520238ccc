import sqlite3

import pytest

from review_app.core import engine, local_store
from review_app.core.config import StorageSettings
from review_app.core.errors import PersistenceError
from review_app.core.gateway import build_gateway
from review_app.core.local_store import SQLiteGateway
from review_app.core.models import TaskInput
from review_app.core.service import ReviewService
from review_app.core.store import DomainStore


def test_missing_collection_loads_as_none(tmp_path):
    gw = SQLiteGateway(str(tmp_path / "review.db"))
    assert gw.load("games") is None


def test_list_round_trip_preserves_order(tmp_path):
    gw = SQLiteGateway(str(tmp_path / "review.db"))
    docs = [{"id": "2", "name": "B"}, {"id": "1", "name": "A"}]
    assert gw.save("games", docs) is True
    assert gw.load("games") == docs

    assert gw.save("games", []) is True
    assert gw.load("games") == []


def test_single_value_round_trip(tmp_path):
    gw = SQLiteGateway(str(tmp_path / "nested" / "review.db"))
    assert gw.save("settings", {"theme": "dark"}) is True
    assert gw.load("settings") == {"theme": "dark"}


def test_unserializable_value_reports_failure(tmp_path):
    gw = SQLiteGateway(str(tmp_path / "review.db"))
    assert gw.save("games", [{"id": "1", "bad": object()}]) is False
    assert gw.load("games") is None


def test_store_survives_reopen(tmp_path):
    path = str(tmp_path / "review.db")
    store = DomainStore(SQLiteGateway(path))
    game = engine.add_game(store, "Star Drift", genre="Racing")
    task = engine.create_task(game, TaskInput(title="Clip", category="bug", priority="high"))
    engine.add_member(store, "Alice", "Designer")
    assert store.flush() is True

    reopened = DomainStore(SQLiteGateway(path))
    reopened.load()
    assert [g.name for g in reopened.games] == ["Star Drift"]
    loaded = reopened.get_game(game.id).issues["bug"][0]
    assert loaded.id == task.id
    assert loaded.priority == "high"
    assert loaded.created == task.created
    assert [m.name for m in reopened.members] == ["Alice"]


def test_unopenable_path_reports_persistence_error(tmp_path):
    # a directory can not be opened as a database file
    gw = SQLiteGateway(str(tmp_path))
    with pytest.raises(PersistenceError) as excinfo:
        gw.load("games")
    assert excinfo.value.collection == "games"
    assert gw.save("games", []) is False


def test_service_load_fails_cleanly_on_bad_db_path(tmp_path):
    settings = StorageSettings(backend="sqlite", db_path=str(tmp_path))
    svc = ReviewService(build_gateway(settings))
    assert svc.load() is False
    assert svc.last_error


def test_connections_are_closed_after_use(tmp_path, monkeypatch):
    opened = []
    real_connect = local_store._connect

    def tracking_connect(db_path):
        conn = real_connect(db_path)
        opened.append(conn)
        return conn

    monkeypatch.setattr(local_store, "_connect", tracking_connect)
    gw = SQLiteGateway(str(tmp_path / "review.db"))
    assert gw.save("games", [{"id": "1"}]) is True
    assert gw.load("games") == [{"id": "1"}]
    assert len(opened) == 3
    for conn in opened:
        with pytest.raises(sqlite3.ProgrammingError):
            conn.execute("SELECT 1")
