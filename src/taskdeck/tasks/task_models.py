# src/taskdeck/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from .errors import ValidationError


class Priority(StrEnum):
    """
    Task priority.

    NONE is stored as JSON null (not as a string) to stay compatible
    with files written by older versions.
    """

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, raw: Priority | str | None) -> Priority:
        """Strict parse for user input; unknown values raise ValidationError."""
        if raw is None:
            return cls.NONE
        if isinstance(raw, Priority):
            return raw
        if not isinstance(raw, str):
            raise ValidationError(f"Unknown priority: {raw!r}")
        s = raw.strip().lower()
        if s in ("", "none", "no-priority"):
            return cls.NONE
        try:
            return cls(s)
        except ValueError:
            raise ValidationError(f"Unknown priority: {raw!r}") from None

    @classmethod
    def from_db(cls, raw: Any) -> Priority:
        """Lenient parse for stored data; anything unknown becomes NONE."""
        if not raw or not isinstance(raw, str):
            return cls.NONE
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.NONE

    def to_db(self) -> str | None:
        return None if self is Priority.NONE else self.value


class TaskFilter(StrEnum):
    ALL = "all"
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, raw: TaskFilter | str | None) -> TaskFilter:
        if raw is None:
            return cls.ALL
        if isinstance(raw, TaskFilter):
            return raw
        if not isinstance(raw, str):
            raise ValidationError(f"Unknown filter: {raw!r}")
        s = raw.strip().lower()
        if s.startswith("priority="):
            s = s.split("=", 1)[1]
        if s in ("", "all"):
            return cls.ALL
        if s == "no-priority":
            return cls.NONE
        try:
            return cls(s)
        except ValueError:
            raise ValidationError(f"Unknown filter: {raw!r}") from None

    def matches(self, task: Task) -> bool:
        if self is TaskFilter.ALL:
            return True
        return task.priority.value == self.value


class DueStatus(StrEnum):
    NONE = "none"
    OVERDUE = "overdue"
    DUE_TODAY = "due_today"
    UPCOMING = "upcoming"


# ---- timestamp helpers (ISO-8601 UTC, millisecond precision, "Z" suffix) ----


# Stand-in for a missing deletion time: sorts after every real timestamp.
EPOCH = datetime.fromtimestamp(0, UTC)


def utcnow() -> datetime:
    return datetime.now(UTC)


def to_iso(ts: datetime) -> str:
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso(raw: Any) -> datetime | None:
    """Parse a stored timestamp; returns None for missing or unparseable values."""
    if not raw or not isinstance(raw, str):
        return None
    try:
        ts = datetime.fromisoformat(raw.strip())
    except ValueError:
        return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts


def as_aware(ts: datetime | None) -> datetime | None:
    """Naive datetimes from callers are taken as local time."""
    if ts is None or ts.tzinfo is not None:
        return ts
    return ts.astimezone()


def epoch_ms(ts: datetime) -> int:
    return int(ts.timestamp() * 1000)


@dataclass(slots=True)
class Task:
    id: int
    text: str
    created_at: datetime

    completed: bool = False
    priority: Priority = Priority.NONE
    due_date: datetime | None = None
    deleted_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "priority": self.priority.to_db(),
            "createdAt": to_iso(self.created_at),
            "dueDate": to_iso(self.due_date) if self.due_date is not None else None,
        }
        if self.deleted_at is not None:
            out["deletedAt"] = to_iso(self.deleted_at)
        return out


def classify_due(task: Task, now: datetime) -> DueStatus:
    """
    Display-only classification of a task's due date.

    - overdue: due before now and not completed
    - due today: due on the current local calendar day and not overdue
    """
    if task.due_date is None:
        return DueStatus.NONE
    if not task.completed and task.due_date < now:
        return DueStatus.OVERDUE
    if task.due_date.astimezone().date() == now.astimezone().date():
        return DueStatus.DUE_TODAY
    return DueStatus.UPCOMING
