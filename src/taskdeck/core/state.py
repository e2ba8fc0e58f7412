# src/taskdeck/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..tasks.task_models import TaskFilter
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    # Settings are kept on the state for easy access from commands/connectors.
    settings: object

    store: TaskStore

    # UI-only state (never persisted)
    current_filter: TaskFilter = TaskFilter.ALL
    showing_deleted: bool = False
