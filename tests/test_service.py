import threading

import pytest

from review_app.core.errors import NotFoundError, PersistenceError, ValidationError
from review_app.core.models import TaskInput
from review_app.core.service import ReviewService


class BrokenLoadGateway:
    def load(self, collection):
        raise PersistenceError("disk unreadable", collection=collection)

    def save(self, collection, value):
        return False


def test_mutations_are_flushed(gateway):
    svc = ReviewService(gateway)
    assert svc.load() is True
    game = svc.add_game("Star Drift").value
    result = svc.create_task(game.id, TaskInput(title="Clip", category="bug", priority="high"))
    assert result.saved is True
    stored = gateway.data["games"][0]
    assert stored["issues"]["bug"][0]["title"] == "Clip"
    assert gateway.data["members"] == []


def test_failed_save_keeps_mutation_and_retry_flushes(gateway):
    svc = ReviewService(gateway)
    svc.load()
    game = svc.add_game("Star Drift").value

    gateway.fail_saves = True
    result = svc.create_task(game.id, TaskInput(title="Clip", category="bug"))
    assert result.saved is False
    assert svc.last_error
    assert svc.store.get_game(game.id).issues["bug"] == [result.value]
    assert gateway.data["games"][0]["issues"]["bug"] == []

    gateway.fail_saves = False
    assert svc.retry_flush() is True
    assert svc.last_error is None
    assert len(gateway.data["games"][0]["issues"]["bug"]) == 1
    assert len(svc.store.get_game(game.id).issues["bug"]) == 1


def test_validation_errors_skip_the_flush(gateway):
    svc = ReviewService(gateway)
    svc.load()
    game = svc.add_game("Star Drift").value
    calls = gateway.save_calls
    with pytest.raises(ValidationError):
        svc.create_task(game.id, TaskInput(title="", category="bug"))
    with pytest.raises(NotFoundError):
        svc.add_comment(game.id, "missing", "hi", "m1")
    assert gateway.save_calls == calls


def test_load_failure_is_reported():
    svc = ReviewService(BrokenLoadGateway())
    progress = []
    assert svc.load(progress=lambda msg, cur, total: progress.append(msg)) is False
    assert "disk unreadable" in svc.last_error
    assert progress == ["Loading games and team members"]


def test_load_reads_existing_documents(gateway):
    gateway.data["games"] = [{"id": "1", "name": "Star Drift", "issues": {"bug": [{"id": "t", "title": "Clip"}]}}]
    gateway.data["members"] = [{"id": "m1", "name": "Alice"}]
    svc = ReviewService(gateway)
    assert svc.load() is True
    assert svc.store.get_game("1").issues["bug"][0].title == "Clip"
    assert svc.store.get_member("m1").name == "Alice"


def test_concurrent_mutations_are_all_persisted(gateway):
    svc = ReviewService(gateway)
    svc.load()
    game = svc.add_game("Star Drift").value

    def worker(n):
        for i in range(5):
            svc.create_task(game.id, TaskInput(title=f"T{n}-{i}", category="quest"))

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(svc.store.get_game(game.id).issues["quest"]) == 20
    assert len(gateway.data["games"][0]["issues"]["quest"]) == 20


def test_member_lifecycle_through_service(gateway):
    svc = ReviewService(gateway)
    svc.load()
    alice = svc.add_member("Alice", "Designer", "alice@example.com").value
    assert gateway.data["members"][0]["email"] == "alice@example.com"
    svc.remove_member(alice.id)
    assert gateway.data["members"] == []
