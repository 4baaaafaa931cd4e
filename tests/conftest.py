# tests/conftest.py

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from task_tracker.core.state import AppState
from task_tracker.tasks.task_models import Task, new_task
from task_tracker.tasks.task_store import TaskRepository

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=UTC)


@pytest.fixture()
def now() -> datetime:
    """Fixed reference time so date predicates are deterministic."""
    return NOW


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI layer.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment and any local .env.
    """
    return SimpleNamespace(
        app_name="task-tracker-test",
        log_level="DEBUG",
        log_dir=tmp_path / "logs",
        storage_path=tmp_path / "tasks.json",
        metadata_path=tmp_path / "metadata.json",
        priority_window_days=3,
    )


@pytest.fixture()
def repo(settings: SimpleNamespace) -> TaskRepository:
    return TaskRepository(settings.storage_path, settings.metadata_path)


@pytest.fixture()
def state(settings: SimpleNamespace, repo: TaskRepository) -> AppState:
    return AppState(settings=settings, repository=repo)


@pytest.fixture()
def make_task(now: datetime) -> Callable[..., Task]:
    """Factory for tasks created at the fixed reference time."""

    def _make(title: str = "Task", **kwargs) -> Task:
        kwargs.setdefault("now", now)
        return new_task(title, **kwargs)

    return _make
