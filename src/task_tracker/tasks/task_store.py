# src/task_tracker/tasks/task_store.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from .task_models import Task, utc_now

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_FILENAME = "tasks.json"
DEFAULT_METADATA_FILENAME = "metadata.json"


class StorageError(Exception):
    """Raised internally when the storage document is unreadable or malformed."""


@dataclass(frozen=True, slots=True)
class StorageMetadata:
    path: str
    active_count: int
    deleted_count: int
    total: int
    last_updated: str

    @classmethod
    def from_tasks(cls, path: Path, tasks: Iterable[Task], last_updated: datetime) -> StorageMetadata:
        items = list(tasks)
        deleted = sum(1 for t in items if t.deleted)
        return cls(
            path=str(path),
            active_count=len(items) - deleted,
            deleted_count=deleted,
            total=len(items),
            last_updated=last_updated.isoformat(),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "activeCount": self.active_count,
            "deletedCount": self.deleted_count,
            "total": self.total,
            "lastUpdated": self.last_updated,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StorageMetadata:
        return cls(
            path=str(data["path"]),
            active_count=int(data["activeCount"]),
            deleted_count=int(data["deletedCount"]),
            total=int(data["total"]),
            last_updated=str(data["lastUpdated"]),
        )


class TaskRepository:
    """
    JSON file task store.

    Layout:
    - main document:  {"tasks": [...], "lastUpdated": "<iso>"}
    - metadata file:  counts derived from the main document, written right after it

    Writes are atomic: the payload goes to a sibling temp file which is then
    os.replace()d over the target, so the real file is only ever swapped for a
    complete write.

    Failures never escape: load() falls back to an empty list, save() returns
    False. Both log the cause. add/update/remove never write over a document
    they could not read.
    """

    def __init__(
        self,
        path: str | Path = DEFAULT_STORAGE_FILENAME,
        metadata_path: str | Path | None = None,
    ) -> None:
        self._path = Path(path)
        self._metadata_path = (
            Path(metadata_path)
            if metadata_path is not None
            else self._path.with_name(DEFAULT_METADATA_FILENAME)
        )

    @property
    def path(self) -> Path:
        return self._path

    @property
    def metadata_path(self) -> Path:
        return self._metadata_path

    # ---- low-level helpers ----

    @staticmethod
    def _write_json_atomic(path: Path, payload: dict[str, Any]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_name(path.name + ".tmp")
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, path)
        except BaseException:
            with contextlib.suppress(OSError):
                tmp.unlink()
            raise

    def _read_document(self) -> list[Task]:
        raw = self._path.read_text("utf-8")
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise StorageError(f"expected a JSON object in {self._path}")
        items = data.get("tasks", [])
        if not isinstance(items, list):
            raise StorageError(f"'tasks' must be a list in {self._path}")
        return [Task.from_storage(item) for item in items]

    def _write_collection(self, tasks: list[Task], now: datetime) -> None:
        self._write_json_atomic(
            self._path,
            {
                "tasks": [t.to_storage() for t in tasks],
                "lastUpdated": now.isoformat(),
            },
        )

    def _write_metadata(self, tasks: list[Task], now: datetime) -> None:
        meta = StorageMetadata.from_tasks(self._path, tasks, now)
        self._write_json_atomic(self._metadata_path, meta.to_dict())

    # ---- public API ----

    def initialize(self) -> bool:
        """Create an empty storage file (and its metadata) if none exists."""
        if self._path.exists():
            return True
        now = utc_now()
        try:
            self._write_collection([], now)
            self._write_metadata([], now)
        except OSError:
            logger.exception("Failed to initialize task storage at %s", self._path)
            return False
        logger.info("Task storage created at %s", self._path)
        return True

    def _load_checked(self) -> list[Task] | None:
        """Like load(), but None (instead of []) when the document is unreadable."""
        if not self.initialize():
            return None
        try:
            tasks = self._read_document()
        except (OSError, ValueError, KeyError, TypeError, StorageError):
            # ValueError covers JSONDecodeError, bad ISO dates and unknown enum labels.
            logger.exception("Failed to load tasks from %s", self._path)
            return None
        logger.debug("Loaded %d task(s) from %s", len(tasks), self._path)
        return tasks

    def load(self) -> list[Task]:
        tasks = self._load_checked()
        return [] if tasks is None else tasks

    def save(self, tasks: Iterable[Task]) -> bool:
        items = list(tasks)
        now = utc_now()
        try:
            self._write_collection(items, now)
        except (OSError, TypeError, ValueError):
            logger.exception("Failed to save tasks to %s", self._path)
            return False

        try:
            self._write_metadata(items, now)
        except (OSError, TypeError, ValueError):
            logger.exception("Failed to write storage metadata to %s", self._metadata_path)
            return False

        logger.debug("Saved %d task(s) to %s", len(items), self._path)
        return True

    def add(self, task: Task) -> list[Task]:
        current = self._load_checked()
        if current is None:
            logger.error("Not adding task id=%s: %s could not be read.", task.id, self._path)
            return []
        if any(t.id == task.id for t in current):
            logger.warning("Task id=%s already stored; not adding a duplicate.", task.id)
            return current

        updated = [*current, task]
        if self.save(updated):
            logger.info("Task added id=%s title=%r", task.id, task.title)
            return updated

        logger.error("Could not store new task id=%s", task.id)
        return current

    def update(self, task: Task) -> list[Task]:
        current = self._load_checked()
        if current is None:
            logger.error("Not updating task id=%s: %s could not be read.", task.id, self._path)
            return []
        if not any(t.id == task.id for t in current):
            logger.info("Update skipped: task id=%s not found.", task.id)
            return current

        updated = [task if t.id == task.id else t for t in current]
        if self.save(updated):
            logger.info("Task updated id=%s", task.id)
            return updated

        logger.error("Could not store update for task id=%s", task.id)
        return current

    def remove(self, task_id: str, edit_time: datetime | None = None) -> list[Task]:
        """Soft delete: flag the task as deleted; it stays in storage."""
        current = self._load_checked()
        if current is None:
            logger.error("Not removing task id=%s: %s could not be read.", task_id, self._path)
            return []
        target = next((t for t in current if t.id == task_id), None)
        if target is None:
            logger.warning("Remove skipped: task id=%s not found.", task_id)
            return current
        return self.update(target.mark_deleted(edit_time))

    def count_active(self, tasks: Iterable[Task] | None = None) -> int:
        """Non-deleted tasks in `tasks`, or in storage when none are given."""
        items = self.load() if tasks is None else tasks
        return sum(1 for t in items if not t.deleted)

    def read_metadata(self) -> StorageMetadata | None:
        if not self._metadata_path.exists():
            return None
        try:
            data = json.loads(self._metadata_path.read_text("utf-8"))
            return StorageMetadata.from_dict(data)
        except (OSError, ValueError, KeyError, TypeError):
            logger.exception("Failed to read storage metadata from %s", self._metadata_path)
            return None

    def get_info(self) -> str:
        tasks = self.load()
        total = len(tasks)
        active = self.count_active(tasks)
        return "\n".join(
            [
                "Task storage",
                f"  Path: {self._path}",
                f"  Active tasks: {active}",
                f"  Deleted tasks: {total - active}",
                f"  Total: {total}",
            ]
        )
