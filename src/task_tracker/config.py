# src/task_tracker/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Only the CLI layer reads settings; the task core gets its paths injected.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKTRACKER"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


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
    log_dir: Path

    # ---- Storage ----
    storage_path: Path
    metadata_path: Path

    # ---- Queries ----
    priority_window_days: int

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "task-tracker")
        log_level = _env(_k("LOG_LEVEL"), "WARNING")
        log_dir = _env_path(_k("LOG_DIR"), Path(".local/task_tracker"))

        # Default: tasks.json in the working directory, metadata.json beside it.
        storage_path = _env_path(_k("STORAGE_PATH"), Path("tasks.json"))
        metadata_path = _env_path(_k("METADATA_PATH"), storage_path.with_name("metadata.json"))

        priority_window_days = max(0, _env_int(_k("PRIORITY_WINDOW_DAYS"), 3))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            log_dir=log_dir,
            storage_path=storage_path,
            metadata_path=metadata_path,
            priority_window_days=priority_window_days,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
