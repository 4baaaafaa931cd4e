# src/task_tracker/tasks/validation.py

"""
Field validators for user input.

Every validator returns a ValidationResult and never raises, whatever it is
handed. The interactive layer keeps asking until it gets a valid result.
On success `value` holds the normalized value (stripped text, enum member,
parsed datetime).
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any, TypeVar

from .task_models import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH

E = TypeVar("E")

_DATE_RE = re.compile(r"^(\d{4})[/-](\d{2})[/-](\d{2})$")


@dataclass(frozen=True, slots=True)
class ValidationResult:
    valid: bool
    error: str | None = None
    value: Any = None

    @staticmethod
    def ok(value: Any = None) -> ValidationResult:
        return ValidationResult(valid=True, value=value)

    @staticmethod
    def fail(error: str) -> ValidationResult:
        return ValidationResult(valid=False, error=error)


@dataclass(frozen=True, slots=True)
class TextRules:
    max_length: int
    allow_empty: bool


TITLE_RULES = TextRules(max_length=TITLE_MAX_LENGTH, allow_empty=False)
DESCRIPTION_RULES = TextRules(max_length=DESCRIPTION_MAX_LENGTH, allow_empty=True)


def _validate_text(value: Any, rules: TextRules, field_name: str) -> ValidationResult:
    if not isinstance(value, str):
        return ValidationResult.fail(f"{field_name} must be text.")
    text = value.strip()
    if not rules.allow_empty and not text:
        return ValidationResult.fail(f"{field_name} must not be empty.")
    if len(text) > rules.max_length:
        return ValidationResult.fail(
            f"{field_name} must be at most {rules.max_length} characters."
        )
    return ValidationResult.ok(text)


def validate_title(value: Any, rules: TextRules = TITLE_RULES) -> ValidationResult:
    return _validate_text(value, rules, "Title")


def validate_description(value: Any, rules: TextRules = DESCRIPTION_RULES) -> ValidationResult:
    return _validate_text(value, rules, "Description")


def _as_code(choice: Any) -> int | None:
    if isinstance(choice, bool):
        return None
    if isinstance(choice, int):
        return choice
    if isinstance(choice, str) and choice.strip().isdecimal():
        return int(choice.strip())
    return None


def validate_enum_choice(choice: Any, options: Mapping[E, int]) -> ValidationResult:
    """
    Check a numeric menu choice against an option map ({member: code}).

    The error message reports the configured code range (min-max).
    """
    codes = list(options.values())
    if not codes:
        return ValidationResult.fail("No options configured.")
    low, high = min(codes), max(codes)

    code = _as_code(choice)
    if code is None or code not in codes:
        return ValidationResult.fail(f"Choose a number between {low} and {high}.")
    return ValidationResult.ok(choice_to_member(code, options))


def choice_to_member(code: int, options: Mapping[E, int]) -> E | None:
    for member, value in options.items():
        if value == code:
            return member
    return None


def member_to_choice(member: E, options: Mapping[E, int]) -> int | None:
    return options.get(member)


def validate_due_date(raw: Any, allow_empty: bool = True) -> ValidationResult:
    """
    Parse YYYY/MM/DD (or YYYY-MM-DD) into a local-midnight aware datetime.

    Empty input gives value=None when allow_empty is set.
    """
    if raw is None:
        raw = ""
    if not isinstance(raw, str):
        return ValidationResult.fail("Date must be text in YYYY/MM/DD format.")

    text = raw.strip()
    if not text:
        if allow_empty:
            return ValidationResult.ok(None)
        return ValidationResult.fail("Date must not be empty.")

    m = _DATE_RE.match(text)
    if not m:
        return ValidationResult.fail("Invalid format. Use YYYY/MM/DD.")

    year, month, day = (int(g) for g in m.groups())
    try:
        dt = datetime(year, month, day).astimezone()
    except (ValueError, OverflowError, OSError):
        return ValidationResult.fail("Invalid date.")
    return ValidationResult.ok(dt)
