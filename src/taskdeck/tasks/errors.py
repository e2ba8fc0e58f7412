# src/taskdeck/tasks/errors.py

from __future__ import annotations


class TaskdeckError(Exception):
    """Base class for task store / gateway errors."""


class ValidationError(TaskdeckError, ValueError):
    """Rejected input (empty text, unknown priority or filter)."""


class NotFoundError(TaskdeckError, LookupError):
    """Operation targeted an id that is not in the expected collection."""

    def __init__(self, task_id: int, where: str = "tasks") -> None:
        super().__init__(f"No task with id={task_id} in {where}")
        self.task_id = task_id
        self.where = where


class PersistenceError(TaskdeckError, OSError):
    """Read/parse/write failure of the backing file."""
