"""Input validation at the ingestion boundary.

The analytics assume well-formed logs (ISO dates, known statuses). Anything
written through the storage layer is checked here first.
"""

import re
from dataclasses import dataclass
from datetime import date

from amaraday.config import (
    MAX_PAST_DAYS, HABIT_NAME_MAX_CHARS, CATEGORY_MAX_CHARS, LOG_NOTES_MAX_CHARS,
)
from amaraday.dates import is_within_allowed_past_range, parse_iso_date, today as _today
from amaraday.models import LOG_STATUSES, HABIT_STATUSES

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    error: str | None = None


_OK = ValidationResult(True)


def _fail(message: str) -> ValidationResult:
    return ValidationResult(False, message)


def validate_habit_name(name: str, existing_names: list[str] | None = None) -> ValidationResult:
    """1-100 chars after trimming, unique (case-insensitive) among `existing_names`."""
    if not name or not name.strip():
        return _fail("Habit name cannot be empty")
    trimmed = name.strip()
    if len(trimmed) > HABIT_NAME_MAX_CHARS:
        return _fail(f"Habit name cannot exceed {HABIT_NAME_MAX_CHARS} characters")
    lowered = trimmed.lower()
    if any(n.strip().lower() == lowered for n in existing_names or []):
        return _fail("A habit with this name already exists")
    return _OK


def validate_category(category: str | None) -> ValidationResult:
    if category is None or category == "":
        return _OK
    trimmed = category.strip()
    if not trimmed:
        return _fail("Category cannot be empty if provided")
    if len(trimmed) > CATEGORY_MAX_CHARS:
        return _fail(f"Category cannot exceed {CATEGORY_MAX_CHARS} characters")
    return _OK


def validate_date(value: str, today: date | None = None,
                  check_edit_window: bool = True) -> ValidationResult:
    """ISO YYYY-MM-DD, not in the future, at most MAX_PAST_DAYS back."""
    if not isinstance(value, str) or not _ISO_DATE_RE.match(value):
        return _fail("Date must be in ISO 8601 format (YYYY-MM-DD)")
    try:
        d = parse_iso_date(value)
    except ValueError:
        return _fail("Invalid date")

    if not check_edit_window:
        return _OK

    ref = today or _today()
    if d > ref:
        return _fail("Date cannot be in the future")
    if not is_within_allowed_past_range(d, ref):
        return _fail(f"Date cannot be more than {MAX_PAST_DAYS} days in the past")
    return _OK


def validate_notes(notes: str | None) -> ValidationResult:
    if notes and len(notes) > LOG_NOTES_MAX_CHARS:
        return _fail(f"Notes cannot exceed {LOG_NOTES_MAX_CHARS} characters")
    return _OK


def validate_log_status(status: str) -> ValidationResult:
    if status not in LOG_STATUSES:
        return _fail("Status must be one of: " + ", ".join(LOG_STATUSES))
    return _OK


def validate_habit_status(status: str) -> ValidationResult:
    if status not in HABIT_STATUSES:
        return _fail("Status must be one of: " + ", ".join(HABIT_STATUSES))
    return _OK


def validate_log_entry(date_str: str, status: str, notes: str | None = None,
                       today: date | None = None,
                       check_edit_window: bool = True) -> ValidationResult:
    """First failing check wins: status, then date, then notes."""
    for result in (
        validate_log_status(status),
        validate_date(date_str, today=today, check_edit_window=check_edit_window),
        validate_notes(notes),
    ):
        if not result.is_valid:
            return result
    return _OK


def sanitize_habit_name(name: str) -> str:
    return name.strip()


def sanitize_category(category: str | None) -> str | None:
    if not category:
        return None
    trimmed = category.strip()
    return trimmed or None


def sanitize_notes(notes: str | None) -> str | None:
    if not notes:
        return None
    trimmed = notes.strip()
    return trimmed or None
