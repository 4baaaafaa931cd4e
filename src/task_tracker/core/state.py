# src/task_tracker/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field

from ..tasks.task_models import Task
from .ports import TaskRepo


@dataclass
class AppState:
    # Settings object (config.Settings or a test stand-in).
    settings: object

    repository: TaskRepo

    # Last listing shown to the user; /show 2, /edit 2 ... resolve indexes against it.
    last_listing: list[Task] = field(default_factory=list)
