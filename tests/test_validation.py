# tests/test_validation.py

from __future__ import annotations

import pytest

from task_tracker.tasks.task_models import (
    CATEGORY_OPTIONS,
    DIFFICULTY_OPTIONS,
    STATUS_OPTIONS,
    TaskCategory,
    TaskDifficulty,
    TaskStatus,
)
from task_tracker.tasks.validation import (
    TextRules,
    choice_to_member,
    member_to_choice,
    validate_description,
    validate_due_date,
    validate_enum_choice,
    validate_title,
)


def test_title_boundaries() -> None:
    rules = TextRules(max_length=100, allow_empty=False)

    assert not validate_title("", rules).valid
    assert not validate_title("    ", rules).valid
    assert validate_title("a" * 100, rules).valid
    assert not validate_title("a" * 101, rules).valid


def test_title_is_trimmed_before_length_check() -> None:
    result = validate_title("  " + "a" * 100 + "  ")
    assert result.valid
    assert result.value == "a" * 100


def test_title_error_messages() -> None:
    assert "empty" in (validate_title("").error or "")
    assert "100" in (validate_title("a" * 101).error or "")


def test_title_can_allow_empty_through_rules() -> None:
    assert validate_title("", TextRules(max_length=10, allow_empty=True)).valid


def test_description_allows_empty_by_default() -> None:
    assert validate_description("").valid
    assert validate_description("x" * 500).valid
    assert not validate_description("x" * 501).valid


@pytest.mark.parametrize("value", [None, 42, ["a"], b"bytes"])
def test_text_validators_never_raise_on_odd_input(value) -> None:
    assert not validate_title(value).valid
    assert not validate_description(value).valid


def test_enum_choice_status_boundaries() -> None:
    assert not validate_enum_choice(0, STATUS_OPTIONS).valid
    assert validate_enum_choice(1, STATUS_OPTIONS).valid
    assert validate_enum_choice(4, STATUS_OPTIONS).valid
    assert not validate_enum_choice(5, STATUS_OPTIONS).valid


def test_enum_choice_error_reports_code_range() -> None:
    assert validate_enum_choice(0, STATUS_OPTIONS).error == "Choose a number between 1 and 4."
    assert validate_enum_choice(9, DIFFICULTY_OPTIONS).error == "Choose a number between 1 and 3."
    assert validate_enum_choice(6, CATEGORY_OPTIONS).error == "Choose a number between 1 and 5."


def test_enum_choice_returns_member() -> None:
    assert validate_enum_choice(2, STATUS_OPTIONS).value is TaskStatus.IN_PROGRESS
    assert validate_enum_choice("3", DIFFICULTY_OPTIONS).value is TaskDifficulty.HARD
    assert validate_enum_choice(" 4 ", CATEGORY_OPTIONS).value is TaskCategory.LEISURE


@pytest.mark.parametrize("choice", [None, True, "two", "", 2.0, "-1", "²"])
def test_enum_choice_rejects_non_codes(choice) -> None:
    assert not validate_enum_choice(choice, STATUS_OPTIONS).valid


def test_enum_choice_with_empty_map() -> None:
    assert not validate_enum_choice(1, {}).valid


def test_choice_lookups_are_inverse() -> None:
    for member, code in CATEGORY_OPTIONS.items():
        assert choice_to_member(code, CATEGORY_OPTIONS) is member
        assert member_to_choice(member, CATEGORY_OPTIONS) == code
    assert choice_to_member(99, CATEGORY_OPTIONS) is None


def test_due_date_formats() -> None:
    slash = validate_due_date("2026/02/28")
    dash = validate_due_date("2026-02-28")

    assert slash.valid and dash.valid
    assert slash.value == dash.value
    assert slash.value.tzinfo is not None
    assert (slash.value.year, slash.value.month, slash.value.day) == (2026, 2, 28)


@pytest.mark.parametrize("raw", ["2026/02/30", "2026/13/01", "28/02/2026", "tomorrow", "2026/2/8"])
def test_due_date_rejects_bad_input(raw) -> None:
    assert not validate_due_date(raw).valid


def test_due_date_empty_handling() -> None:
    result = validate_due_date("   ")
    assert result.valid and result.value is None
    assert not validate_due_date("", allow_empty=False).valid
    assert not validate_due_date(20260101).valid
