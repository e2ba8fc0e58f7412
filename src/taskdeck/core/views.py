# src/taskdeck/core/views.py

"""
View models for the UI host.

Rendering is split in two steps: the store state is turned into plain view
records here, and the connector only prints them. Nothing in this module
mutates the store.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..tasks.task_models import DueStatus, Priority, Task, TaskFilter, classify_due
from ..tasks.task_store import TaskStore

PRIORITY_LABELS: dict[Priority, str] = {
    Priority.NONE: "No priority",
    Priority.LOW: "Low",
    Priority.MEDIUM: "Medium",
    Priority.HIGH: "High",
}


@dataclass(frozen=True, slots=True)
class TaskView:
    id: int
    text: str
    completed: bool
    priority: Priority
    priority_label: str
    created_label: str
    due_label: str
    due_status: DueStatus
    editing: bool


@dataclass(frozen=True, slots=True)
class DeletedTaskView:
    id: int
    text: str
    priority: Priority
    priority_label: str
    created_label: str
    deleted_label: str


def _hhmm(ts: datetime) -> str:
    return ts.strftime("%H:%M")


def format_created(ts: datetime | None, now: datetime) -> str:
    """Short label for a past timestamp (creation / deletion)."""
    if ts is None:
        return ""
    local = ts.astimezone()
    days = abs(now - ts).days
    if days == 0:
        return _hhmm(local)
    if days == 1:
        return f"Yesterday {_hhmm(local)}"
    if days < 7:
        return f"{local.strftime('%a')} {_hhmm(local)}"
    return local.strftime("%d %b %Y %H:%M")


def format_due(ts: datetime | None, now: datetime) -> str:
    """Short label for a due date, relative to now."""
    if ts is None:
        return ""
    local = ts.astimezone()
    delta = ts - now
    # floor division, so anything in the past is negative
    days = delta.days
    hours = int(delta.total_seconds() // 3600)

    if days < 0:
        if days == -1:
            return f"Yesterday {_hhmm(local)}"
        return local.strftime("%d %b %H:%M")
    if days == 0:
        if hours <= 0:
            return f"Today {_hhmm(local)}"
        return f"Today {_hhmm(local)} (in {hours}h)"
    if days == 1:
        return f"Tomorrow {_hhmm(local)}"
    if days < 7:
        return f"{local.strftime('%a')} {_hhmm(local)} (in {days}d)"
    return local.strftime("%d %b %H:%M")


def task_view(task: Task, *, now: datetime, editing: bool = False) -> TaskView:
    return TaskView(
        id=task.id,
        text=task.text,
        completed=task.completed,
        priority=task.priority,
        priority_label=PRIORITY_LABELS[task.priority],
        created_label=format_created(task.created_at, now),
        due_label=format_due(task.due_date, now),
        due_status=classify_due(task, now),
        editing=editing,
    )


def build_task_views(
    store: TaskStore, criterion: TaskFilter | str | None, now: datetime
) -> list[TaskView]:
    return [
        task_view(t, now=now, editing=store.is_editing(t.id)) for t in store.filter(criterion)
    ]


def build_deleted_views(store: TaskStore, now: datetime) -> list[DeletedTaskView]:
    return [
        DeletedTaskView(
            id=t.id,
            text=t.text,
            priority=t.priority,
            priority_label=PRIORITY_LABELS[t.priority],
            created_label=format_created(t.created_at, now),
            deleted_label=format_created(t.deleted_at, now),
        )
        for t in store.deleted_sorted()
    ]


def summary_line(store: TaskStore) -> str:
    active, total = store.counts()
    return f"{active} of {total} tasks"


def trash_label(store: TaskStore) -> str:
    n = len(store.deleted_tasks)
    return f"Trash ({n})" if n else "Trash"
