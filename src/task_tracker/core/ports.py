# src/task_tracker/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the lifecycle helpers and the CLI.

Callers depend on the Protocol instead of TaskRepository, so tests can swap
in an in-memory repository.
"""

from datetime import datetime
from typing import Iterable, Protocol

from ..tasks.task_models import Task


class TaskRepo(Protocol):
    """Durable task collection. Every call works on a fresh load of storage."""

    def load(self) -> list[Task]: ...
    def save(self, tasks: Iterable[Task]) -> bool: ...

    def add(self, task: Task) -> list[Task]: ...
    def update(self, task: Task) -> list[Task]: ...
    def remove(self, task_id: str, edit_time: datetime | None = None) -> list[Task]: ...

    def count_active(self, tasks: Iterable[Task] | None = None) -> int: ...
    def get_info(self) -> str: ...
