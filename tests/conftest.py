# tests/conftest.py

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from taskdeck.core.state import AppState
from taskdeck.tasks.task_gateway import JsonTaskGateway
from taskdeck.tasks.task_store import TaskStore

from .fakes import FakeClock, RecordingGateway


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and the console connector.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment and any local .env.
    """
    return SimpleNamespace(
        app_name="taskdeck-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        tasks_path=tmp_path / "tasks.json",
        confirm_destructive=True,
        default_filter="all",
    )


@pytest.fixture()
def clock() -> FakeClock:
    # Local noon, so "+/- a few hours" stays on the same local calendar day.
    return FakeClock(datetime(2026, 3, 10, 12, 0, 0).astimezone())


@pytest.fixture()
def gateway(settings: SimpleNamespace, clock: FakeClock) -> JsonTaskGateway:
    return JsonTaskGateway(settings.tasks_path, clock=clock)


@pytest.fixture()
def recording_gateway() -> RecordingGateway:
    return RecordingGateway()


@pytest.fixture()
def store(recording_gateway: RecordingGateway, clock: FakeClock) -> TaskStore:
    return TaskStore.open(recording_gateway, clock=clock)


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore) -> AppState:
    return AppState(settings=settings, store=store)
