# src/taskdeck/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

APP_LOGGER = "taskdeck"

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


class _ConsoleNoiseFilter(logging.Filter):
    """
    The console shares the terminal with the rendered task list, so only
    records from the app's own logger tree pass below ERROR. Captured
    warnings ('py.warnings') and third-party loggers need ERROR+.
    """

    def __init__(self, app_logger: str = APP_LOGGER) -> None:
        super().__init__()
        self._app = app_logger
        self._prefix = app_logger + "."

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name == self._app or name.startswith(self._prefix):
            return True
        return record.levelno >= logging.ERROR


def level_from_name(name: str | None, default: int = logging.INFO) -> int:
    """Map a TASKDECK_LOG_LEVEL value ("debug", "WARNING", ...) to a logging level."""
    level = logging.getLevelName(str(name or "").strip().upper())
    return level if isinstance(level, int) else default


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskdeck",
    level: str | int = logging.INFO,
    app_name: str = APP_LOGGER,
) -> Path:
    """
    Configure the root logger for one interactive session and return the log file path.

    The file handler records everything at `level`. The stderr handler never goes
    below WARNING. Call this once, before the first log line.
    """
    file_level = level if isinstance(level, int) else level_from_name(level)
    console_level = max(file_level, logging.WARNING)

    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"{app_name}.log"

    root = logging.getLogger()
    root.setLevel(file_level)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter(APP_LOGGER))
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    logging.captureWarnings(True)
    return log_file
