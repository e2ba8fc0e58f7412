# src/taskdeck/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any, cast

from ..core.ports import Confirm
from ..core.state import AppState
from ..tasks.errors import NotFoundError, ValidationError
from ..tasks.task_models import Priority, TaskFilter

CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], Confirm | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

DUE_PREFIX = "due:"


class CommandRegistry:
    """Slash-command registry: maps user intents (/add, /rm, ...) to store operations."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str, confirm: Confirm | None = None) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Validation and not-found errors become one-line notices; anything else
        propagates to the connector.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, confirm)
            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except ValidationError as e:
            return f"Invalid input: {e}"
        except NotFoundError as e:
            logger.debug("Command /%s targeted a missing task: %s", name, e)
            return f"No task #{e.task_id}."

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  /exit - Quit.")
        lines.append("Plain text (without /) adds a task.")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- argument parsing helpers ----


def parse_due(raw: str) -> datetime | None:
    """
    Parse 'YYYY-MM-DD' or 'YYYY-MM-DDTHH:MM' as local time.
    'none' / '' clears the due date.
    """
    s = raw.strip()
    if s.lower() in ("", "none", "-"):
        return None
    try:
        ts = datetime.fromisoformat(s)
    except ValueError:
        raise ValidationError(f"Bad due date {raw!r} (use YYYY-MM-DD or YYYY-MM-DDTHH:MM)") from None
    if ts.tzinfo is None:
        # date-only input means end of that day
        if len(s) == 10:
            ts = ts.replace(hour=23, minute=59)
        ts = ts.astimezone()
    return ts


def parse_task_fields(args: list[str]) -> dict[str, Any]:
    """
    Split free-form args into fields:
    - "!low" / "!medium" / "!high" / "!none" -> priority
    - "due:..." -> due_date
    - everything else -> text
    Only fields that were present are returned.
    """
    fields: dict[str, Any] = {}
    words: list[str] = []
    for tok in args:
        if tok.startswith("!") and len(tok) > 1:
            fields["priority"] = Priority.parse(tok[1:])
        elif tok.lower().startswith(DUE_PREFIX):
            fields["due_date"] = parse_due(tok[len(DUE_PREFIX) :])
        else:
            words.append(tok)
    if words:
        fields["text"] = " ".join(words)
    return fields


def _parse_id(args: list[str], usage: str) -> int:
    if not args:
        raise ValidationError(f"missing task id. Usage: {usage}")
    raw = args[0].lstrip("#")
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{args[0]!r} is not a task id. Usage: {usage}") from None


def _confirmed(confirm: Confirm | None, prompt: str) -> bool:
    if confirm is None:
        return True
    return bool(confirm(prompt))


# ---- handlers ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    if args:
        state.current_filter = TaskFilter.parse(args[0])
    state.showing_deleted = False
    return f"Filter: {state.current_filter.value}"


def cmd_add(state: AppState, args: list[str]) -> str:
    fields = parse_task_fields(args)
    task = state.store.add(
        fields.get("text", ""),
        priority=fields.get("priority"),
        due_date=fields.get("due_date"),
    )
    return f"Added #{task.id}: {task.text}"


def cmd_toggle(state: AppState, args: list[str]) -> str:
    task = state.store.toggle_complete(_parse_id(args, "/toggle <id>"))
    mark = "done" if task.completed else "not done"
    return f"#{task.id} marked {mark}."


def cmd_prio(state: AppState, args: list[str]) -> str:
    usage = "/prio <id> <none|low|medium|high>"
    task_id = _parse_id(args, usage)
    if len(args) < 2:
        raise ValidationError(f"missing priority. Usage: {usage}")
    task = state.store.set_priority(task_id, args[1])
    return f"#{task.id} priority: {task.priority.value}"


def cmd_edit(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args, "/edit <id>")
    state.store.start_edit(task_id)
    task = state.store.get(task_id)
    text = task.text if task is not None else ""
    return f"Editing #{task_id}: {text}\nUse /save [text] [!priority] [due:...] or /cancel."


def cmd_save(state: AppState, args: list[str]) -> str:
    task_id = state.store.editing_id
    if task_id is None:
        return "Not editing any task. Use /edit <id> first."
    fields = parse_task_fields(args)
    changed = state.store.commit_edit(task_id, **fields)
    return f"Saved #{task_id}." if changed else f"No changes for #{task_id}."


def cmd_cancel(state: AppState, args: list[str]) -> str:
    task_id = state.store.editing_id
    if task_id is None:
        return "Not editing any task."
    state.store.cancel_edit(task_id)
    return f"Edit of #{task_id} cancelled."


def cmd_rm(state: AppState, args: list[str], confirm: Confirm | None = None) -> str:
    task_id = _parse_id(args, "/rm <id>")
    if state.store.get(task_id) is None:
        raise NotFoundError(task_id, "tasks")
    if not _confirmed(confirm, "Delete this task?"):
        return "Cancelled."
    task = state.store.soft_delete(task_id)
    return f"Deleted #{task.id} (use /restore {task.id} to undo)."


def cmd_trash(state: AppState, args: list[str]) -> str:
    state.showing_deleted = True
    return f"Showing deleted tasks ({len(state.store.deleted_tasks)})."


def cmd_restore(state: AppState, args: list[str]) -> str:
    task = state.store.restore(_parse_id(args, "/restore <id>"))
    return f"Restored #{task.id}: {task.text}"


def cmd_purge(state: AppState, args: list[str], confirm: Confirm | None = None) -> str:
    task_id = _parse_id(args, "/purge <id>")
    if state.store.get_deleted(task_id) is None:
        raise NotFoundError(task_id, "deleted_tasks")
    if not _confirmed(confirm, "Permanently delete this task? This cannot be undone."):
        return "Cancelled."
    state.store.purge(task_id)
    return f"Permanently deleted #{task_id}."


def cmd_clear(state: AppState, args: list[str], confirm: Confirm | None = None) -> str:
    n = sum(1 for t in state.store.tasks if t.completed)
    if n == 0:
        return "No completed tasks to remove."
    if not _confirmed(confirm, f"Delete {n} completed task(s)?"):
        return "Cancelled."
    removed = state.store.clear_completed()
    return f"Moved {removed} completed task(s) to trash."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register(
    "list",
    cmd_list,
    help_text="Show tasks: /list [all|none|low|medium|high].",
    aliases=["ls", "filter"],
)
registry.register(
    "add", cmd_add, help_text="Add a task: /add <text> [!low|!medium|!high] [due:YYYY-MM-DD[THH:MM]]."
)
registry.register("toggle", cmd_toggle, help_text="Toggle completion: /toggle <id>.", aliases=["done", "x"])
registry.register("prio", cmd_prio, help_text="Change priority: /prio <id> <none|low|medium|high>.")
registry.register("edit", cmd_edit, help_text="Start editing a task: /edit <id>.")
registry.register("save", cmd_save, help_text="Save the edit: /save [text] [!priority] [due:...|due:none].")
registry.register("cancel", cmd_cancel, help_text="Cancel the edit.")
registry.register("rm", cmd_rm, help_text="Move a task to trash: /rm <id>.", aliases=["del"])
registry.register("trash", cmd_trash, help_text="Show deleted tasks.", aliases=["deleted"])
registry.register("restore", cmd_restore, help_text="Restore a deleted task: /restore <id>.")
registry.register("purge", cmd_purge, help_text="Permanently delete from trash: /purge <id>.")
registry.register("clear", cmd_clear, help_text="Move all completed tasks to trash.")
