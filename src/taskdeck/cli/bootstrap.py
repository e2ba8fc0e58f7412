# src/taskdeck/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the JSON gateway and the task store into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import Clock
from ..core.state import AppState
from ..tasks.errors import ValidationError
from ..tasks.task_gateway import JsonTaskGateway
from ..tasks.task_models import TaskFilter
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_path.parent.mkdir(parents=True, exist_ok=True)


def _initial_filter(settings) -> TaskFilter:
    raw = getattr(settings, "default_filter", "all")
    try:
        return TaskFilter.parse(raw)
    except ValidationError:
        logger.warning("Unknown default filter %r; using 'all'.", raw)
        return TaskFilter.ALL


def create_initial_state(*, settings=None, clock: Clock | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    gateway = JsonTaskGateway(settings.tasks_path, clock=clock)
    store = TaskStore.open(gateway, clock=clock)

    return AppState(
        settings=settings,
        store=store,
        current_filter=_initial_filter(settings),
    )
