from review_app.core import engine
from review_app.core.models import TaskInput
from review_app.pages.review import assignee_choices


def test_assignee_choices_lists_members_after_unassigned():
    ids, labels = assignee_choices({"m1": "Alice (Designer)"}, "m1")
    assert ids == ["", "m1"]
    assert labels[""] == "Unassigned"
    assert labels["m1"] == "Alice (Designer)"


def test_removed_member_stays_selectable_as_unknown():
    ids, labels = assignee_choices({"m2": "Bob"}, "m1")
    assert ids == ["", "m2", "m1"]
    assert labels["m1"] == "Unknown"


def test_editing_title_keeps_dangling_assignee(store):
    alice = engine.add_member(store, "Alice")
    game = engine.add_game(store, "Star Drift")
    task = engine.create_task(game, TaskInput(title="Clip", category="bug", assignee=alice.id))
    engine.remove_member(store, alice.id)

    # the edit form submits whatever id the assignee picker still holds
    ids, _ = assignee_choices({}, task.assignee)
    selected = ids[ids.index(task.assignee)]
    engine.update_task(game, task.id, {"title": "Clip fixed?", "assignee": selected or None})
    assert task.title == "Clip fixed?"
    assert task.assignee == alice.id
