# src/task_tracker/tasks/task_models.py

from __future__ import annotations

import uuid
from dataclasses import dataclass, fields, replace
from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import Any

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500
PRIORITY_WINDOW_DAYS = 3


class TaskStatus(StrEnum):
    """Task lifecycle status. The value is the label written to storage."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TaskDifficulty(StrEnum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class TaskCategory(StrEnum):
    PROGRAMMING = "programming"
    STUDY = "study"
    WORK = "work"
    LEISURE = "leisure"
    OTHER = "other"


# Numeric menu codes. Insertion order is display order.
STATUS_OPTIONS: dict[TaskStatus, int] = {
    TaskStatus.PENDING: 1,
    TaskStatus.IN_PROGRESS: 2,
    TaskStatus.COMPLETED: 3,
    TaskStatus.CANCELLED: 4,
}

DIFFICULTY_OPTIONS: dict[TaskDifficulty, int] = {
    TaskDifficulty.EASY: 1,
    TaskDifficulty.MEDIUM: 2,
    TaskDifficulty.HARD: 3,
}

CATEGORY_OPTIONS: dict[TaskCategory, int] = {
    TaskCategory.PROGRAMMING: 1,
    TaskCategory.STUDY: 2,
    TaskCategory.WORK: 3,
    TaskCategory.LEISURE: 4,
    TaskCategory.OTHER: 5,
}

ACTIVE_STATUSES: frozenset[TaskStatus] = frozenset({TaskStatus.PENDING, TaskStatus.IN_PROGRESS})

# Fields that apply_edits refuses to touch.
IMMUTABLE_FIELDS: frozenset[str] = frozenset({"id", "created_at"})


def utc_now() -> datetime:
    return datetime.now(UTC)


def _to_iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _from_iso(raw: Any) -> datetime | None:
    """Parse an ISO-8601 string (a trailing 'Z' is accepted). Naive values are taken as UTC."""
    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        dt = raw
    else:
        text = str(raw).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt


@dataclass(frozen=True, slots=True)
class Task:
    """
    Immutable task record.

    Every instance goes through __post_init__, so an invalid task cannot be
    constructed: enum fields are coerced to their enum (unknown labels are
    rejected), title/description lengths are checked and created_at never
    comes after last_edited_at.

    "Mutations" return new instances (apply_edits, mark_deleted).
    """

    id: str
    title: str
    description: str
    status: TaskStatus
    created_at: datetime
    last_edited_at: datetime | None
    due_date: datetime | None
    difficulty: TaskDifficulty = TaskDifficulty.EASY
    category: TaskCategory = TaskCategory.OTHER
    deleted: bool = False

    def __post_init__(self) -> None:
        if not self.id or not str(self.id).strip():
            raise ValueError("id is required")

        # Frozen dataclass: coercion has to go through object.__setattr__.
        object.__setattr__(self, "status", TaskStatus(self.status))
        object.__setattr__(self, "difficulty", TaskDifficulty(self.difficulty))
        object.__setattr__(self, "category", TaskCategory(self.category))
        object.__setattr__(self, "deleted", bool(self.deleted))
        if self.description is None:
            object.__setattr__(self, "description", "")

        title = (self.title or "").strip()
        if not title:
            raise ValueError("title must not be empty")
        if len(title) > TITLE_MAX_LENGTH:
            raise ValueError(f"title must be at most {TITLE_MAX_LENGTH} characters")
        if len(self.description.strip()) > DESCRIPTION_MAX_LENGTH:
            raise ValueError(f"description must be at most {DESCRIPTION_MAX_LENGTH} characters")

        if self.last_edited_at is not None and self.last_edited_at < self.created_at:
            raise ValueError("last_edited_at must not be earlier than created_at")

    # ---- derived state ----

    def is_overdue(self, reference_time: datetime | None = None) -> bool:
        ref = reference_time or utc_now()
        return self.due_date is not None and self.due_date < ref

    def is_priority(
        self,
        reference_time: datetime | None = None,
        window_days: int = PRIORITY_WINDOW_DAYS,
    ) -> bool:
        """
        Active (pending / in-progress) with a due date inside the lookahead window.

        There is no lower bound: a task that is already past due still counts.
        """
        if self.due_date is None or self.status not in ACTIVE_STATUSES:
            return False
        ref = reference_time or utc_now()
        return self.due_date <= ref + timedelta(days=window_days)

    # ---- transitions ----

    def mark_deleted(self, edit_time: datetime | None = None) -> Task:
        return replace(self, deleted=True, last_edited_at=edit_time or utc_now())

    def apply_edits(self, edit_time: datetime | None = None, **changes: Any) -> Task:
        """
        Return a copy with the given fields overridden and last_edited_at refreshed.

        Only the passed keys change; due_date=None clears the due date.
        """
        blocked = IMMUTABLE_FIELDS.intersection(changes)
        if blocked:
            raise ValueError(f"immutable field(s): {', '.join(sorted(blocked))}")

        known = {f.name for f in fields(self)}
        unknown = set(changes) - known
        if unknown:
            raise ValueError(f"unknown field(s): {', '.join(sorted(unknown))}")

        for key in ("title", "description"):
            if key in changes and isinstance(changes[key], str):
                changes[key] = changes[key].strip()

        changes["last_edited_at"] = edit_time or utc_now()
        return replace(self, **changes)

    # ---- serialization ----

    def to_storage(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "createdAt": _to_iso(self.created_at),
            "lastEditedAt": _to_iso(self.last_edited_at),
            "dueDate": _to_iso(self.due_date),
            "difficulty": self.difficulty.value,
            "category": self.category.value,
            "deleted": self.deleted,
        }

    @classmethod
    def from_storage(cls, data: dict[str, Any]) -> Task:
        if not isinstance(data, dict):
            raise TypeError(f"stored task must be an object, got {type(data).__name__}")

        created_at = _from_iso(data.get("createdAt"))
        if created_at is None:
            raise ValueError(f"stored task {data.get('id')!r} has no createdAt")

        return cls(
            id=str(data["id"]),
            title=str(data["title"]),
            description=str(data.get("description") or ""),
            status=TaskStatus(data.get("status") or TaskStatus.PENDING),
            created_at=created_at,
            last_edited_at=_from_iso(data.get("lastEditedAt")),
            due_date=_from_iso(data.get("dueDate")),
            difficulty=TaskDifficulty(data.get("difficulty") or TaskDifficulty.EASY),
            category=TaskCategory(data.get("category") or TaskCategory.OTHER),
            deleted=bool(data.get("deleted", False)),
        )


def new_task(
    title: str,
    *,
    description: str = "",
    status: TaskStatus = TaskStatus.PENDING,
    due_date: datetime | None = None,
    difficulty: TaskDifficulty = TaskDifficulty.EASY,
    category: TaskCategory = TaskCategory.OTHER,
    now: datetime | None = None,
    task_id: str | None = None,
) -> Task:
    """Build a freshly created task: new id, created_at == last_edited_at."""
    now = now or utc_now()
    return Task(
        id=task_id or str(uuid.uuid4()),
        title=title.strip(),
        description=description.strip(),
        status=status,
        created_at=now,
        last_edited_at=now,
        due_date=due_date,
        difficulty=difficulty,
        category=category,
        deleted=False,
    )
