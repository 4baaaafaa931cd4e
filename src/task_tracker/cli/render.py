# src/task_tracker/cli/render.py

"""Plain-text formatting of tasks for the console. No I/O here."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime
from enum import Enum

from ..tasks.queries import TaskStats
from ..tasks.task_models import (
    CATEGORY_OPTIONS,
    DIFFICULTY_OPTIONS,
    STATUS_OPTIONS,
    Task,
    TaskDifficulty,
)

DIFFICULTY_STARS: dict[TaskDifficulty, str] = {
    TaskDifficulty.EASY: "★☆☆",
    TaskDifficulty.MEDIUM: "★★☆",
    TaskDifficulty.HARD: "★★★",
}

SHORT_ID_LEN = 8


def _date(value: datetime | None, empty: str) -> str:
    if value is None:
        return empty
    return value.astimezone().strftime("%Y-%m-%d")


def short_id(task: Task) -> str:
    return task.id[:SHORT_ID_LEN]


def format_task_line(index: int, task: Task) -> str:
    due = f" (due {_date(task.due_date, '')})" if task.due_date else ""
    return f"[{index}] {task.title} - {task.status.value}{due}  #{short_id(task)}"


def format_task_list(tasks: Sequence[Task], heading: str | None = None) -> str:
    lines: list[str] = []
    if heading:
        lines.append(f"=== {heading} ({len(tasks)}) ===")
    if not tasks:
        lines.append("No tasks to show.")
    else:
        lines.extend(format_task_line(i, t) for i, t in enumerate(tasks, start=1))
    return "\n".join(lines)


def format_task_details(task: Task) -> str:
    return "\n".join(
        [
            f"ID: {task.id}",
            f"Title: {task.title}",
            f"Description: {task.description or 'No description'}",
            f"Status: {task.status.value}",
            f"Difficulty: {task.difficulty.value} {DIFFICULTY_STARS[task.difficulty]}",
            f"Category: {task.category.value}",
            f"Due: {_date(task.due_date, 'No due date')}",
            f"Created: {_date(task.created_at, 'Unknown')}",
            f"Last edited: {_date(task.last_edited_at, 'Never')}",
        ]
    )


def format_options(name: str, options: Mapping[Enum, int]) -> str:
    parts = [f"{code}={member.value}" for member, code in options.items()]
    return f"{name}: {', '.join(parts)}"


def format_all_options() -> str:
    return "\n".join(
        [
            format_options("status", STATUS_OPTIONS),
            format_options("difficulty", DIFFICULTY_OPTIONS),
            format_options("category", CATEGORY_OPTIONS),
        ]
    )


def format_stats(stats: TaskStats) -> str:
    return "\n".join(
        [
            f"Total tasks: {stats.total}",
            "-------------------------",
            f"Deleted: {stats.deleted}",
            f"Pending: {stats.pending}",
            f"In progress: {stats.in_progress}",
            f"Completed: {stats.completed}",
            f"Cancelled: {stats.cancelled}",
            "-------------------------",
            f"Hard: {stats.hard}",
            f"Medium: {stats.medium}",
            f"Easy: {stats.easy}",
        ]
    )
