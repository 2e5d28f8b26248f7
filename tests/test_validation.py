"""Tests for ingestion validation and sanitizing."""

from datetime import date, timedelta

import pytest

from amaraday.dates import is_within_allowed_past_range
from amaraday.validation import (
    sanitize_category,
    sanitize_habit_name,
    sanitize_notes,
    validate_category,
    validate_date,
    validate_habit_name,
    validate_habit_status,
    validate_log_entry,
    validate_notes,
)

REF = date(2025, 10, 13)


class TestHabitName:
    def test_valid(self):
        assert validate_habit_name("Morning run").is_valid

    def test_empty(self):
        result = validate_habit_name("   ")
        assert not result.is_valid
        assert "empty" in result.error

    def test_too_long(self):
        assert not validate_habit_name("x" * 101).is_valid
        assert validate_habit_name("x" * 100).is_valid

    def test_duplicate_case_insensitive(self):
        result = validate_habit_name("  READ ", ["read", "Walk"])
        assert not result.is_valid
        assert "already exists" in result.error


class TestCategory:
    def test_optional(self):
        assert validate_category(None).is_valid
        assert validate_category("").is_valid

    def test_whitespace_only(self):
        assert not validate_category("   ").is_valid

    def test_too_long(self):
        assert not validate_category("c" * 51).is_valid


class TestDate:
    def test_today(self):
        assert validate_date("2025-10-13", today=REF).is_valid

    def test_bad_format(self):
        assert not validate_date("10/13/2025", today=REF).is_valid

    def test_impossible_date(self):
        result = validate_date("2025-02-30", today=REF)
        assert not result.is_valid
        assert result.error == "Invalid date"

    def test_future(self):
        result = validate_date("2025-10-14", today=REF)
        assert result.error == "Date cannot be in the future"

    def test_past_window(self):
        assert validate_date("2025-10-08", today=REF).is_valid
        assert not validate_date("2025-10-07", today=REF).is_valid

    @pytest.mark.parametrize("days_back", [-1, 0, 5, 6, 30])
    def test_matches_edit_window(self, days_back):
        d = REF - timedelta(days=days_back)
        assert validate_date(d.isoformat(), today=REF).is_valid == is_within_allowed_past_range(d, REF)

    def test_window_can_be_skipped(self):
        assert validate_date("2020-01-01", today=REF, check_edit_window=False).is_valid


class TestLogEntry:
    def test_valid(self):
        assert validate_log_entry("2025-10-13", "done", "felt good", today=REF).is_valid

    def test_status_checked_first(self):
        result = validate_log_entry("garbage", "finished", today=REF)
        assert result.error.startswith("Status must be one of")

    def test_notes_too_long(self):
        assert not validate_notes("n" * 5001).is_valid
        assert not validate_log_entry("2025-10-13", "done", "n" * 5001, today=REF).is_valid

    def test_habit_status(self):
        assert validate_habit_status("inactive").is_valid
        assert not validate_habit_status("archived").is_valid


class TestSanitize:
    def test_name_trimmed(self):
        assert sanitize_habit_name("  Read  ") == "Read"

    def test_blank_category_is_none(self):
        assert sanitize_category("   ") is None
        assert sanitize_category(" Health ") == "Health"

    def test_blank_notes_is_none(self):
        assert sanitize_notes("  ") is None
        assert sanitize_notes(" ok ") == "ok"
