# src/task_tracker/tasks/task_api.py

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

from ..core.ports import TaskRepo
from .task_models import (
    CATEGORY_OPTIONS,
    DIFFICULTY_OPTIONS,
    STATUS_OPTIONS,
    Task,
    new_task,
    utc_now,
)
from .validation import (
    ValidationResult,
    validate_description,
    validate_due_date,
    validate_enum_choice,
    validate_title,
)

logger = logging.getLogger(__name__)

# User-facing field names -> Task attribute names.
FIELD_ALIASES: dict[str, str] = {
    "title": "title",
    "desc": "description",
    "description": "description",
    "status": "status",
    "difficulty": "difficulty",
    "category": "category",
    "due": "due_date",
}

_CLEAR_WORDS = {"none", "-", "clear"}


def _validate_field(attr: str, raw: Any) -> ValidationResult:
    if attr == "title":
        return validate_title(raw)
    if attr == "description":
        return validate_description(raw)
    if attr == "status":
        return validate_enum_choice(raw, STATUS_OPTIONS)
    if attr == "difficulty":
        return validate_enum_choice(raw, DIFFICULTY_OPTIONS)
    if attr == "category":
        return validate_enum_choice(raw, CATEGORY_OPTIONS)
    if attr == "due_date":
        if isinstance(raw, str) and raw.strip().lower() in _CLEAR_WORDS:
            return ValidationResult.ok(None)
        return validate_due_date(raw, allow_empty=True)
    return ValidationResult.fail(f"Unknown field: {attr}")


def parse_changes(raw_changes: Mapping[str, Any]) -> dict[str, Any]:
    """
    Validate raw user input ({"status": "2", "due": "2026/01/31", ...}).

    Returns Task keyword arguments. Raises ValueError listing every
    rejected field.
    """
    parsed: dict[str, Any] = {}
    errors: list[str] = []

    for key, raw in raw_changes.items():
        attr = FIELD_ALIASES.get(key.lower())
        if attr is None:
            errors.append(f"{key}: unknown field (use {', '.join(sorted(FIELD_ALIASES))})")
            continue
        result = _validate_field(attr, raw)
        if not result.valid:
            errors.append(f"{key}: {result.error}")
            continue
        parsed[attr] = result.value

    if errors:
        raise ValueError("; ".join(errors))
    return parsed


def create_task(
    repo: TaskRepo,
    title: str,
    options: Mapping[str, Any] | None = None,
    *,
    now: datetime | None = None,
) -> Task | None:
    """
    Validate input, build a new task and store it.

    Returns the stored task, or None when storage refused it.
    Raises ValueError on invalid input.
    """
    fields = parse_changes({"title": title, **(options or {})})
    task = new_task(fields.pop("title"), now=now, **fields)

    stored = repo.add(task)
    if not any(t.id == task.id for t in stored):
        logger.error("Created task id=%s was not persisted.", task.id)
        return None
    return task


def edit_task(
    repo: TaskRepo,
    task_id: str,
    raw_changes: Mapping[str, Any],
    *,
    now: datetime | None = None,
) -> Task | None:
    """
    Apply validated edits to a stored task.

    Returns the edited task, or None if the id is unknown or the save failed.
    Raises ValueError on invalid input.
    """
    changes = parse_changes(raw_changes)
    if not changes:
        raise ValueError("Nothing to change.")

    current = next((t for t in repo.load() if t.id == task_id), None)
    if current is None:
        logger.info("Edit skipped: task id=%s not found.", task_id)
        return None

    edited = current.apply_edits(edit_time=now or utc_now(), **changes)
    stored = repo.update(edited)
    if edited not in stored:
        return None
    return edited


def delete_task(repo: TaskRepo, task_id: str, *, now: datetime | None = None) -> Task | None:
    """Soft-delete a task. Returns the deleted version, or None if nothing changed."""
    stored = repo.remove(task_id, now or utc_now())
    deleted = next((t for t in stored if t.id == task_id), None)
    if deleted is None or not deleted.deleted:
        return None
    return deleted


def resolve_task(tasks: Sequence[Task], ref: str) -> Task | None:
    """
    Find a task by 1-based index into `tasks`, full id, or unique id prefix.

    Ambiguous prefixes resolve to nothing.
    """
    ref = ref.strip()
    if not ref:
        return None

    if ref.isdecimal() and len(ref) <= 4:
        idx = int(ref)
        if 1 <= idx <= len(tasks):
            return tasks[idx - 1]

    exact = next((t for t in tasks if t.id == ref), None)
    if exact is not None:
        return exact

    matches = [t for t in tasks if t.id.startswith(ref)]
    if len(matches) == 1:
        return matches[0]
    return None
