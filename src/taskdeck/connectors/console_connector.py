# src/taskdeck/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.ports import Confirm
from ..core.state import AppState
from ..core.views import (
    build_deleted_views,
    build_task_views,
    summary_line,
    trash_label,
)
from ..tasks.task_models import DueStatus, Priority, utcnow

logger = logging.getLogger(__name__)

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]

_DUE_MARKS = {
    DueStatus.OVERDUE: " (overdue)",
    DueStatus.DUE_TODAY: " (today)",
}
_PRIORITY_MARKS = {
    Priority.NONE: " ",
    Priority.LOW: "!",
    Priority.MEDIUM: "!!",
    Priority.HIGH: "!!!",
}


def render_tasks(state: AppState, now: datetime) -> str:
    store = state.store
    lines = [f"{summary_line(store)} | filter: {state.current_filter.value} | {trash_label(store)}"]

    views = build_task_views(store, state.current_filter, now)
    if not views:
        lines.append("  (no tasks)")
        return "\n".join(lines)

    for v in views:
        box = "[x]" if v.completed else "[ ]"
        prio = _PRIORITY_MARKS[v.priority]
        edit = "  <editing>" if v.editing else ""
        lines.append(f"  {box} #{v.id} {prio:<3} {v.text}{edit}")
        meta = f"created {v.created_label}" if v.created_label else ""
        if v.due_label:
            meta += f" | due {v.due_label}{_DUE_MARKS.get(v.due_status, '')}"
        if meta:
            lines.append(f"        {meta}")
    return "\n".join(lines)


def render_trash(state: AppState, now: datetime) -> str:
    views = build_deleted_views(state.store, now)
    lines = [f"Deleted tasks ({len(views)}) - /restore <id> | /purge <id> | /list to go back"]
    if not views:
        lines.append("  (trash is empty)")
        return "\n".join(lines)
    for v in views:
        lines.append(f"  #{v.id} [{v.priority_label}] {v.text}")
        lines.append(f"        created {v.created_label} | deleted {v.deleted_label}")
    return "\n".join(lines)


def render(state: AppState, now: datetime | None = None) -> str:
    now = now or utcnow()
    if state.showing_deleted:
        return render_trash(state, now)
    return render_tasks(state, now)


def _make_confirm(input_fn: InputFn) -> Confirm:
    def confirm(prompt: str) -> bool:
        try:
            answer = input_fn(f"{prompt} [y/N] ")
        except (EOFError, KeyboardInterrupt):
            return False
        return answer.strip().lower() in ("y", "yes")

    return confirm


def run_console_loop(
    state: AppState,
    *,
    input_fn: InputFn = input,
    output_fn: OutputFn = print,
) -> None:
    """REPL UI host: every input is dispatched, then the current view is re-rendered."""
    logger.info("Console connector started.")
    app_name = str(getattr(state.settings, "app_name", "taskdeck"))
    confirm: Confirm | None = None
    if getattr(state.settings, "confirm_destructive", True):
        confirm = _make_confirm(input_fn)

    output_fn(f"[{app_name}] Type a task to add it. Use /help for commands. Use /exit to quit.\n")
    output_fn(render(state))

    while True:
        try:
            user_input = input_fn("> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            output_fn("")
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        line = user_input if user_input.startswith("/") else f"/add {user_input}"
        try:
            reply = command_registry.handle(state, line, confirm=confirm)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply:
            output_fn(reply)
        if not state.store.last_save_ok:
            output_fn("[warning] Changes could not be saved to disk; see the log.")
        output_fn(render(state))

    logger.info("Console connector finished.")
