# tests/fakes.py

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from task_tracker.tasks.task_models import Task


class FakeTaskRepo:
    """
    In-memory TaskRepo with the same add/update/remove semantics as TaskRepository.

    `fail_saves=True` makes every save() report failure, which lets tests
    exercise the "storage refused the write" paths without touching disk.
    """

    def __init__(self, tasks: Iterable[Task] = (), *, fail_saves: bool = False) -> None:
        self.tasks: list[Task] = list(tasks)
        self.fail_saves = fail_saves
        self.save_calls = 0

    def load(self) -> list[Task]:
        return list(self.tasks)

    def save(self, tasks: Iterable[Task]) -> bool:
        self.save_calls += 1
        if self.fail_saves:
            return False
        self.tasks = list(tasks)
        return True

    def add(self, task: Task) -> list[Task]:
        current = self.load()
        if any(t.id == task.id for t in current):
            return current
        updated = [*current, task]
        return updated if self.save(updated) else current

    def update(self, task: Task) -> list[Task]:
        current = self.load()
        if not any(t.id == task.id for t in current):
            return current
        updated = [task if t.id == task.id else t for t in current]
        return updated if self.save(updated) else current

    def remove(self, task_id: str, edit_time: datetime | None = None) -> list[Task]:
        current = self.load()
        target = next((t for t in current if t.id == task_id), None)
        if target is None:
            return current
        return self.update(target.mark_deleted(edit_time))

    def count_active(self, tasks: Iterable[Task] | None = None) -> int:
        items = self.tasks if tasks is None else tasks
        return sum(1 for t in items if not t.deleted)

    def get_info(self) -> str:
        return f"in-memory: {len(self.tasks)} task(s)"
