# src/taskdeck/tasks/task_store.py

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from ..core.ports import Clock, TaskGateway
from .errors import NotFoundError, ValidationError
from .task_gateway import StoreState
from .task_models import EPOCH, Priority, Task, TaskFilter, as_aware, epoch_ms, utcnow

logger = logging.getLogger(__name__)

_UNSET: Any = object()


class TaskStore:
    """
    In-memory task store with soft-delete / restore.

    Two ordered collections:
    - tasks: active tasks, insertion order = display order
    - deleted_tasks: soft-deleted tasks (deleted_at always set)

    Every mutation writes the full state through the gateway before returning,
    so writes happen in issuance order. A failed write is logged and leaves the
    in-memory state authoritative (see last_save_ok).

    Edit mode is transient UI state: it lives in `editing_id` and is never
    persisted.
    """

    def __init__(self, gateway: TaskGateway, *, clock: Clock | None = None) -> None:
        self._gateway = gateway
        self._clock = clock or utcnow
        self.tasks: list[Task] = []
        self.deleted_tasks: list[Task] = []
        self.editing_id: int | None = None
        self.last_save_ok: bool = True

    @classmethod
    def open(cls, gateway: TaskGateway, *, clock: Clock | None = None) -> TaskStore:
        """Load state through the gateway; persist immediately if load had to backfill."""
        store = cls(gateway, clock=clock)
        state = gateway.load()
        store.tasks = list(state.tasks)
        store.deleted_tasks = list(state.deleted_tasks)
        if state.needs_rewrite:
            logger.info("Task data backfilled on load; rewriting.")
            store._persist()
        logger.info(
            "TaskStore ready active=%d deleted=%d", len(store.tasks), len(store.deleted_tasks)
        )
        return store

    # ---- low-level helpers ----

    def _now(self) -> datetime:
        return self._clock()

    def _persist(self) -> bool:
        ok = self._gateway.save(self.snapshot())
        self.last_save_ok = ok
        if not ok:
            logger.warning("Task state not saved; continuing with in-memory state.")
        return ok

    def _next_id(self) -> int:
        candidate = epoch_ms(self._now())
        known = [t.id for t in self.tasks] + [t.id for t in self.deleted_tasks]
        if known:
            candidate = max(candidate, max(known) + 1)
        return candidate

    @staticmethod
    def _index(items: list[Task], task_id: int) -> int | None:
        for i, t in enumerate(items):
            if t.id == task_id:
                return i
        return None

    def _require_active(self, task_id: int) -> Task:
        task = self.get(task_id)
        if task is None:
            raise NotFoundError(task_id, "tasks")
        return task

    # ---- read API ----

    def snapshot(self) -> StoreState:
        return StoreState(tasks=list(self.tasks), deleted_tasks=list(self.deleted_tasks))

    def get(self, task_id: int) -> Task | None:
        i = self._index(self.tasks, task_id)
        return None if i is None else self.tasks[i]

    def get_deleted(self, task_id: int) -> Task | None:
        i = self._index(self.deleted_tasks, task_id)
        return None if i is None else self.deleted_tasks[i]

    def filter(self, criterion: TaskFilter | str | None = TaskFilter.ALL) -> list[Task]:
        flt = TaskFilter.parse(criterion)
        return [t for t in self.tasks if flt.matches(t)]

    def deleted_sorted(self) -> list[Task]:
        """Deleted tasks, most recently deleted first (missing deleted_at sorts last)."""
        return sorted(self.deleted_tasks, key=lambda t: t.deleted_at or EPOCH, reverse=True)

    def counts(self) -> tuple[int, int]:
        """(active_not_completed, total_active)."""
        return sum(1 for t in self.tasks if not t.completed), len(self.tasks)

    def is_editing(self, task_id: int) -> bool:
        return self.editing_id == task_id

    # ---- mutations ----

    def add(
        self,
        text: str,
        priority: Priority | str | None = None,
        due_date: datetime | None = None,
    ) -> Task:
        clean = (text or "").strip()
        if not clean:
            raise ValidationError("Task text is required")

        now = self._now()
        task = Task(
            id=self._next_id(),
            text=clean,
            created_at=now,
            priority=Priority.parse(priority),
            due_date=as_aware(due_date),
        )
        self.tasks.append(task)
        logger.debug("Task added id=%s priority=%s due=%s", task.id, task.priority, due_date)
        self._persist()
        return task

    def toggle_complete(self, task_id: int) -> Task:
        task = self._require_active(task_id)
        task.completed = not task.completed
        logger.debug("Task id=%s completed=%s", task_id, task.completed)
        self._persist()
        return task

    def set_priority(self, task_id: int, priority: Priority | str | None) -> Task:
        task = self._require_active(task_id)
        task.priority = Priority.parse(priority)
        self._persist()
        return task

    def update(
        self,
        task_id: int,
        *,
        text: str | None = _UNSET,
        priority: Priority | str | None = _UNSET,
        due_date: datetime | None = _UNSET,
    ) -> bool:
        """
        Apply only fields that differ from the current values.

        Empty text is ignored (the old text is kept). Returns True if anything
        changed; nothing is written otherwise.
        """
        task = self._require_active(task_id)
        changed: list[str] = []

        if text is not _UNSET and text is not None:
            new_text = text.strip()
            if new_text and new_text != task.text:
                task.text = new_text
                changed.append("text")

        if priority is not _UNSET:
            new_priority = Priority.parse(priority)
            if new_priority != task.priority:
                task.priority = new_priority
                changed.append("priority")

        if due_date is not _UNSET:
            due_date = as_aware(due_date)
        if due_date is not _UNSET and due_date != task.due_date:
            task.due_date = due_date
            changed.append("due_date")

        if not changed:
            return False

        logger.debug("Task id=%s updated fields=%s", task_id, ",".join(changed))
        self._persist()
        return True

    def soft_delete(self, task_id: int) -> Task:
        i = self._index(self.tasks, task_id)
        if i is None:
            raise NotFoundError(task_id, "tasks")
        task = self.tasks.pop(i)
        task.deleted_at = self._now()
        self.deleted_tasks.append(task)
        if self.editing_id == task_id:
            self.editing_id = None
        logger.debug("Task id=%s moved to deleted", task_id)
        self._persist()
        return task

    def restore(self, task_id: int) -> Task:
        i = self._index(self.deleted_tasks, task_id)
        if i is None:
            raise NotFoundError(task_id, "deleted_tasks")
        task = self.deleted_tasks.pop(i)
        task.deleted_at = None
        self.tasks.append(task)
        logger.debug("Task id=%s restored", task_id)
        self._persist()
        return task

    def purge(self, task_id: int) -> Task:
        i = self._index(self.deleted_tasks, task_id)
        if i is None:
            raise NotFoundError(task_id, "deleted_tasks")
        task = self.deleted_tasks.pop(i)
        logger.info("Task id=%s purged", task_id)
        self._persist()
        return task

    def clear_completed(self) -> int:
        done = [t for t in self.tasks if t.completed]
        if not done:
            return 0

        now = self._now()
        self.tasks = [t for t in self.tasks if not t.completed]
        for t in done:
            t.deleted_at = now
            self.deleted_tasks.append(t)
            if self.editing_id == t.id:
                self.editing_id = None
        logger.info("Cleared %d completed task(s)", len(done))
        self._persist()
        return len(done)

    # ---- edit mode (transient) ----

    def start_edit(self, task_id: int) -> None:
        self._require_active(task_id)
        self.editing_id = task_id

    def cancel_edit(self, task_id: int | None = None) -> None:
        if task_id is None or self.editing_id == task_id:
            self.editing_id = None

    def commit_edit(self, task_id: int, **fields: Any) -> bool:
        """Apply an edit (see update) and leave edit mode."""
        try:
            return self.update(task_id, **fields)
        finally:
            self.cancel_edit(task_id)
