# src/task_tracker/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the storage directory exists,
- wires the concrete TaskRepository into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..tasks.task_store import TaskRepository

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.storage_path.parent.mkdir(parents=True, exist_ok=True)
    settings.metadata_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    repository = TaskRepository(settings.storage_path, settings.metadata_path)
    if not repository.initialize():
        logger.error("Task storage is not writable: %s", settings.storage_path)

    return AppState(settings=settings, repository=repository)
