# src/taskdeck/tasks/task_gateway.py

"""
JSON persistence gateway for the task store.

The whole store is one document:

    {"tasks": [...], "deletedTasks": [...]}

Older files hold a bare array of tasks (schema version 0). Loading goes through
an explicit pipeline: detect schema version -> migrate step by step -> decode.

Failure policy:
- load() never raises: errors are logged and an empty state is returned
- save() never raises: errors are logged and False is returned
- read() / write() are the strict variants (raise PersistenceError)
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from .errors import PersistenceError
from .task_models import EPOCH, Priority, Task, parse_iso, utcnow

logger = logging.getLogger(__name__)

CURRENT_SCHEMA_VERSION = 1

Document = dict[str, Any]


@dataclass(slots=True)
class StoreState:
    tasks: list[Task] = field(default_factory=list)
    deleted_tasks: list[Task] = field(default_factory=list)

    # Set when decoding had to repair data (missing timestamps, duplicate ids,
    # stray deletedAt); the owner should persist the corrected state right away.
    needs_rewrite: bool = False

    def to_document(self) -> Document:
        return {
            "tasks": [t.to_dict() for t in self.tasks],
            "deletedTasks": [t.to_dict() for t in self.deleted_tasks],
        }


# ---- schema detection / migrations ----


def detect_schema_version(doc: Any) -> int:
    if isinstance(doc, list):
        return 0
    if isinstance(doc, dict):
        return CURRENT_SCHEMA_VERSION
    raise PersistenceError(f"Unsupported task document type: {type(doc).__name__}")


def _migrate_v0_to_v1(doc: Any) -> Document:
    return {"tasks": list(doc), "deletedTasks": []}


_MIGRATIONS: dict[int, Callable[[Any], Any]] = {
    0: _migrate_v0_to_v1,
}


def migrate_document(doc: Any) -> Document:
    """Bring any supported document shape up to the current schema."""
    version = detect_schema_version(doc)
    while version < CURRENT_SCHEMA_VERSION:
        step = _MIGRATIONS.get(version)
        if step is None:
            raise PersistenceError(f"No migration from schema version {version}")
        doc = step(doc)
        logger.info("Task document migrated: v%d -> v%d", version, version + 1)
        version += 1

    for key in ("tasks", "deletedTasks"):
        value = doc.get(key)
        if value is None:
            doc[key] = []
        elif not isinstance(value, list):
            raise PersistenceError(f"'{key}' must be a list, got {type(value).__name__}")
    return doc


# ---- task decoding ----


def _decode_task(raw: Any, *, now: datetime, deleted: bool) -> tuple[Task | None, bool]:
    """
    Decode one stored task record.

    Returns (task_or_None, repaired). Records without an integer id or usable
    text are skipped. A deleted record without deletedAt gets the epoch, so it
    sorts after every task with a real deletion time.
    """
    if not isinstance(raw, Mapping):
        logger.warning("Skipping non-object task record: %r", raw)
        return None, False

    tid = raw.get("id")
    if isinstance(tid, bool) or not isinstance(tid, int):
        logger.warning("Skipping task record without integer id: %r", raw)
        return None, False

    text = raw.get("text")
    if not isinstance(text, str) or not text.strip():
        logger.warning("Skipping task id=%s without text", tid)
        return None, False

    backfilled = False
    created_at = parse_iso(raw.get("createdAt"))
    if created_at is None:
        created_at = now
        backfilled = True

    due_raw = raw.get("dueDate")
    due_date = parse_iso(due_raw)
    if due_raw and due_date is None:
        logger.warning("Dropping unparseable dueDate=%r on task id=%s", due_raw, tid)

    deleted_at = None
    if deleted:
        deleted_at = parse_iso(raw.get("deletedAt"))
        if deleted_at is None:
            deleted_at = EPOCH
            backfilled = True
    elif raw.get("deletedAt") is not None:
        logger.warning("Dropping deletedAt on active task id=%s", tid)
        backfilled = True

    task = Task(
        id=tid,
        text=text.strip(),
        created_at=created_at,
        completed=bool(raw.get("completed", False)),
        priority=Priority.from_db(raw.get("priority")),
        due_date=due_date,
        deleted_at=deleted_at,
    )
    return task, backfilled


def decode_state(doc: Any, *, now: datetime | None = None) -> StoreState:
    doc = migrate_document(doc)
    now = now or utcnow()
    state = StoreState()
    decoded: list[tuple[str, list[Task], Task]] = []

    for key, target, deleted in (
        ("tasks", state.tasks, False),
        ("deletedTasks", state.deleted_tasks, True),
    ):
        for raw in doc[key]:
            task, repaired = _decode_task(raw, now=now, deleted=deleted)
            if task is None:
                continue
            decoded.append((key, target, task))
            state.needs_rewrite = state.needs_rewrite or repaired

    # Duplicate ids keep the task but move it to a fresh id past every stored one.
    next_id = max((t.id for _, _, t in decoded), default=0) + 1
    seen: set[int] = set()
    for key, target, task in decoded:
        if task.id in seen:
            logger.warning(
                "Duplicate task id=%s in %s; reassigned to id=%s", task.id, key, next_id
            )
            task.id = next_id
            next_id += 1
            state.needs_rewrite = True
        seen.add(task.id)
        target.append(task)

    return state


def normalize_for_save(data: StoreState | Mapping[str, Any] | Sequence[Any]) -> Document:
    """Accept the current shape or the legacy bare sequence; return a current document."""
    if isinstance(data, StoreState):
        return data.to_document()

    if isinstance(data, Mapping):
        tasks = data.get("tasks") or []
        deleted = data.get("deletedTasks") or []
    elif isinstance(data, Sequence) and not isinstance(data, (str, bytes)):
        tasks, deleted = data, []
    else:
        raise PersistenceError(f"Cannot save object of type {type(data).__name__}")

    def enc(items: Sequence[Any]) -> list[Any]:
        return [t.to_dict() if isinstance(t, Task) else dict(t) for t in items]

    return {"tasks": enc(tasks), "deletedTasks": enc(deleted)}


class JsonTaskGateway:
    """Loads/saves the full store document at a single JSON path."""

    def __init__(self, path: str | Path, *, clock: Callable[[], datetime] | None = None) -> None:
        self._path = Path(path)
        self._clock = clock or utcnow

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> StoreState:
        if not self._path.exists():
            return StoreState()
        try:
            raw = json.loads(self._path.read_text("utf-8"))
        except (OSError, ValueError) as e:
            raise PersistenceError(f"Cannot read {self._path}: {e}") from e
        return decode_state(raw, now=self._clock())

    def load(self) -> StoreState:
        try:
            state = self.read()
        except Exception:
            logger.exception("Failed to load tasks from %s", self._path)
            return StoreState()
        logger.info(
            "Loaded tasks from %s: active=%d deleted=%d",
            self._path,
            len(state.tasks),
            len(state.deleted_tasks),
        )
        return state

    def write(self, data: StoreState | Mapping[str, Any] | Sequence[Any]) -> None:
        doc = normalize_for_save(data)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(doc, ensure_ascii=False, indent=2), "utf-8")
            os.replace(tmp, self._path)
        except (OSError, TypeError, ValueError) as e:
            tmp.unlink(missing_ok=True)
            raise PersistenceError(f"Cannot write {self._path}: {e}") from e

    def save(self, data: StoreState | Mapping[str, Any] | Sequence[Any]) -> bool:
        try:
            self.write(data)
        except Exception:
            logger.exception("Failed to save tasks to %s", self._path)
            return False
        logger.debug("Saved tasks to %s", self._path)
        return True
