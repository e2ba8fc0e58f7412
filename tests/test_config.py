# tests/test_config.py

from __future__ import annotations

import logging
from pathlib import Path

from taskdeck.config import Settings
from taskdeck.logging_setup import _ConsoleNoiseFilter, level_from_name, setup_logging


def test_settings_defaults(monkeypatch) -> None:
    for name in (
        "TASKDECK_APP_NAME",
        "TASKDECK_LOG_LEVEL",
        "TASKDECK_DATA_DIR",
        "TASKDECK_TASKS_PATH",
        "TASKDECK_CONFIRM_DESTRUCTIVE",
        "TASKDECK_DEFAULT_FILTER",
    ):
        monkeypatch.delenv(name, raising=False)

    s = Settings.from_env()
    assert s.app_name == "taskdeck"
    assert s.log_level == "INFO"
    assert s.data_dir == Path(".local/taskdeck")
    assert s.tasks_path == Path(".local/taskdeck") / "tasks.json"
    assert s.confirm_destructive is True
    assert s.default_filter == "all"


def test_settings_from_env(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TASKDECK_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("TASKDECK_TASKS_PATH", raising=False)
    monkeypatch.setenv("TASKDECK_LOG_LEVEL", "debug")
    monkeypatch.setenv("TASKDECK_CONFIRM_DESTRUCTIVE", "off")
    monkeypatch.setenv("TASKDECK_DEFAULT_FILTER", "HIGH")

    s = Settings.from_env()
    assert s.tasks_path == tmp_path / "tasks.json"
    assert s.log_level == "DEBUG"
    assert s.confirm_destructive is False
    assert s.default_filter == "high"


def test_console_filter_keeps_own_logs_only() -> None:
    f = _ConsoleNoiseFilter()

    def rec(name: str, level: int) -> logging.LogRecord:
        return logging.LogRecord(name, level, __file__, 1, "msg", None, None)

    assert f.filter(rec("taskdeck", logging.INFO))
    assert f.filter(rec("taskdeck.tasks.task_store", logging.INFO))
    assert not f.filter(rec("taskdeckish", logging.WARNING))
    assert not f.filter(rec("urllib3", logging.WARNING))
    assert f.filter(rec("urllib3", logging.ERROR))
    assert not f.filter(rec("py.warnings", logging.WARNING))


def test_level_from_name() -> None:
    assert level_from_name("debug") == logging.DEBUG
    assert level_from_name(" WARNING ") == logging.WARNING
    assert level_from_name("loud") == logging.INFO
    assert level_from_name(None, logging.ERROR) == logging.ERROR


def test_setup_logging_writes_file(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved = list(root.handlers), root.level
    try:
        log_file = setup_logging(log_dir=tmp_path / "logs", level="debug", app_name="taskdeck-test")
        assert log_file == tmp_path / "logs" / "taskdeck-test.log"

        console = next(h for h in root.handlers if not isinstance(h, logging.FileHandler))
        assert console.level == logging.WARNING

        logging.getLogger("taskdeck.test").debug("hello file")
        for h in root.handlers:
            h.flush()
        assert log_file.exists()
        assert "hello file" in log_file.read_text("utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved[0]:
            root.addHandler(h)
        root.setLevel(saved[1])
        logging.captureWarnings(False)
