# src/taskdeck/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing is read at import time; a local .env is loaded on first from_env().
- Settings stay injectable: bootstrap accepts any object with the same attributes.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKDECK"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    tasks_path: Path

    # ---- UI behavior ----
    confirm_destructive: bool
    default_filter: str

    @staticmethod
    def from_env() -> Settings:
        load_dotenv(override=False)

        app_name = _env(_k("APP_NAME"), "taskdeck").strip() or "taskdeck"
        log_level = _env(_k("LOG_LEVEL"), "INFO").strip().upper() or "INFO"

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskdeck"))
        tasks_path = _env_path(_k("TASKS_PATH"), data_dir / "tasks.json")

        confirm_destructive = _env_bool(_k("CONFIRM_DESTRUCTIVE"), True)
        default_filter = _env(_k("DEFAULT_FILTER"), "all").strip().lower() or "all"

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            tasks_path=tasks_path,
            confirm_destructive=confirm_destructive,
            default_filter=default_filter,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
