# tests/test_console.py

from __future__ import annotations

import json

from taskdeck.cli.bootstrap import create_initial_state
from taskdeck.connectors.console_connector import render, run_console_loop
from taskdeck.tasks.task_models import Priority, TaskFilter


def _scripted(lines: list[str]):
    it = iter(lines)

    def fake_input(prompt: str) -> str:
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    return fake_input


def test_plain_text_adds_task_and_renders(state) -> None:
    out: list[str] = []
    run_console_loop(
        state,
        input_fn=_scripted(["Buy milk !low", "", "/exit", "never read"]),
        output_fn=out.append,
    )

    [task] = state.store.tasks
    assert task.text == "Buy milk"
    assert task.priority is Priority.LOW
    assert any(o.startswith("Added #") for o in out)
    assert "1 of 1 tasks" in out[-1]
    assert "Buy milk" in out[-1]


def test_delete_needs_yes(state) -> None:
    task = state.store.add("Old task")
    out: list[str] = []
    run_console_loop(
        state,
        input_fn=_scripted([f"/rm {task.id}", "n", f"/rm {task.id}", "y"]),
        output_fn=out.append,
    )

    assert "Cancelled." in out
    assert state.store.tasks == []
    assert state.store.get_deleted(task.id) is not None


def test_confirmation_can_be_disabled(state) -> None:
    state.settings.confirm_destructive = False
    task = state.store.add("x")
    state.store.soft_delete(task.id)

    run_console_loop(state, input_fn=_scripted([f"/purge {task.id}"]), output_fn=lambda _: None)
    assert state.store.deleted_tasks == []


def test_render_trash_and_list(state, clock) -> None:
    a = state.store.add("gone")
    state.store.soft_delete(a.id)

    assert "(no tasks)" in render(state, clock())
    state.showing_deleted = True
    text = render(state, clock())
    assert text.startswith("Deleted tasks (1)")
    assert f"#{a.id}" in text


def test_bootstrap_loads_legacy_file(settings, clock) -> None:
    settings.tasks_path.write_text(
        json.dumps([{"id": 1, "text": "from v0", "completed": True}]), "utf-8"
    )
    settings.default_filter = "bogus"

    state = create_initial_state(settings=settings, clock=clock)
    assert [t.text for t in state.store.tasks] == ["from v0"]
    assert state.store.tasks[0].completed is True
    assert state.current_filter is TaskFilter.ALL

    # createdAt was backfilled and written back in the current shape
    doc = json.loads(settings.tasks_path.read_text("utf-8"))
    assert doc["deletedTasks"] == []
    assert doc["tasks"][0]["createdAt"]
