# src/task_tracker/tasks/queries.py

"""
Pure filters over task collections.

None of these drop soft-deleted tasks on their own: which tasks are visible
is the caller's decision (see visible_tasks).
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime

from .task_models import PRIORITY_WINDOW_DAYS, Task, TaskDifficulty, TaskStatus, utc_now


def visible_tasks(tasks: Iterable[Task]) -> list[Task]:
    return [t for t in tasks if not t.deleted]


def sort_by_title(tasks: Iterable[Task]) -> list[Task]:
    return sorted(tasks, key=lambda t: t.title.casefold())


def filter_by_status(tasks: Iterable[Task], status: TaskStatus) -> list[Task]:
    return [t for t in tasks if t.status == status]


def filter_by_title_substring(tasks: Iterable[Task], term: str) -> list[Task]:
    needle = term.lower()
    return [t for t in tasks if needle in t.title.lower()]


def filter_priority(
    tasks: Iterable[Task],
    reference_time: datetime | None = None,
    window_days: int = PRIORITY_WINDOW_DAYS,
) -> list[Task]:
    """Tasks for which Task.is_priority holds (past-due tasks included)."""
    ref = reference_time or utc_now()
    return [t for t in tasks if t.is_priority(ref, window_days)]


def filter_overdue(tasks: Iterable[Task], reference_time: datetime | None = None) -> list[Task]:
    """Past-due tasks that are not completed. Cancelled tasks are still reported."""
    ref = reference_time or utc_now()
    return [
        t
        for t in tasks
        if t.due_date is not None and t.due_date < ref and t.status != TaskStatus.COMPLETED
    ]


def filter_related_by_category(base_task: Task, tasks: Iterable[Task]) -> list[Task]:
    return [t for t in tasks if t.category == base_task.category and t.id != base_task.id]


# Listing menu: 1 all, 2 pending, 3 in progress, 4 completed.
MENU_FILTERS: dict[int, Callable[[list[Task]], list[Task]]] = {
    1: lambda tasks: list(tasks),
    2: lambda tasks: filter_by_status(tasks, TaskStatus.PENDING),
    3: lambda tasks: filter_by_status(tasks, TaskStatus.IN_PROGRESS),
    4: lambda tasks: filter_by_status(tasks, TaskStatus.COMPLETED),
}


def filter_by_menu_option(tasks: Iterable[Task], option_code: int) -> list[Task]:
    handler = MENU_FILTERS.get(option_code)
    if handler is None:
        return []
    return handler(list(tasks))


@dataclass(frozen=True, slots=True)
class TaskStats:
    total: int
    deleted: int
    pending: int
    in_progress: int
    completed: int
    cancelled: int
    hard: int
    medium: int
    easy: int


def compute_stats(tasks: Iterable[Task]) -> TaskStats:
    """
    Collection summary.

    total/deleted count everything stored; the per-status and
    per-difficulty counters only look at tasks that are not deleted.
    """
    items = list(tasks)
    live = visible_tasks(items)

    def by_status(status: TaskStatus) -> int:
        return sum(1 for t in live if t.status == status)

    def by_difficulty(difficulty: TaskDifficulty) -> int:
        return sum(1 for t in live if t.difficulty == difficulty)

    return TaskStats(
        total=len(items),
        deleted=len(items) - len(live),
        pending=by_status(TaskStatus.PENDING),
        in_progress=by_status(TaskStatus.IN_PROGRESS),
        completed=by_status(TaskStatus.COMPLETED),
        cancelled=by_status(TaskStatus.CANCELLED),
        hard=by_difficulty(TaskDifficulty.HARD),
        medium=by_difficulty(TaskDifficulty.MEDIUM),
        easy=by_difficulty(TaskDifficulty.EASY),
    )
