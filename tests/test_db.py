"""Tests for the database layer."""

import pytest

from amaraday import dates
from amaraday.db import (
    init_db,
    create_habit,
    get_habits,
    get_habit,
    update_habit,
    deactivate_habit,
    save_log,
    get_logs,
    log_usage,
    get_usage_summary,
)


@pytest.fixture(autouse=True)
def fresh_db(tmp_path, monkeypatch):
    """Ensure a fresh database for each test."""
    db_path = tmp_path / "test.db"
    # Patch the DB_PATH used by db.py
    import amaraday.db as db_module
    monkeypatch.setattr(db_module, "DB_PATH", db_path)
    init_db()
    yield db_path


class TestHabits:
    def test_create_and_get(self):
        hid = create_habit("  Morning run ", "Health")
        habit = get_habit(hid)
        assert habit.name == "Morning run"
        assert habit.category == "Health"
        assert habit.is_active

    def test_whitespace_category_rejected(self):
        with pytest.raises(ValueError, match="Category cannot be empty"):
            create_habit("Read", "  ")

    def test_update_whitespace_category_rejected(self):
        hid = create_habit("Read", "Mind")
        with pytest.raises(ValueError, match="Category cannot be empty"):
            update_habit(hid, category="   ")
        assert get_habit(hid).category == "Mind"

    def test_empty_category_stored_as_none(self):
        hid = create_habit("Read", "")
        assert get_habit(hid).category is None

    def test_duplicate_name_rejected(self):
        create_habit("Read")
        with pytest.raises(ValueError, match="already exists"):
            create_habit("read")

    def test_invalid_name_rejected(self):
        with pytest.raises(ValueError):
            create_habit("")

    def test_active_only(self):
        keep = create_habit("Walk")
        gone = create_habit("Smoke-free")
        assert deactivate_habit(gone)
        assert [h.habit_id for h in get_habits(active_only=True)] == [keep]
        assert len(get_habits()) == 2

    def test_name_reusable_after_deactivate(self):
        old = create_habit("Meditate")
        deactivate_habit(old)
        assert create_habit("Meditate") != old

    def test_update(self):
        hid = create_habit("Stretch")
        assert update_habit(hid, name="Stretching", category="Body")
        habit = get_habit(hid)
        assert habit.name == "Stretching"
        assert habit.category == "Body"

    def test_update_missing(self):
        assert update_habit("nope", name="x") is False

    def test_update_invalid_status(self):
        hid = create_habit("Journal")
        with pytest.raises(ValueError):
            update_habit(hid, status="archived")


class TestLogs:
    def test_save_and_retrieve(self):
        hid = create_habit("Walk")
        today = dates.format_date_iso(dates.today())
        entry = save_log(hid, today, "done", "  nice walk  ")
        assert entry.notes == "nice walk"
        logs = get_logs(habit_id=hid)
        assert len(logs) == 1
        assert logs[0].status == "done"
        assert logs[0].notes == "nice walk"

    def test_same_day_overwrites(self):
        hid = create_habit("Walk")
        today = dates.format_date_iso(dates.today())
        first = save_log(hid, today, "done")
        second = save_log(hid, today, "not_done", "rain")
        logs = get_logs(habit_id=hid)
        assert len(logs) == 1
        assert logs[0].status == "not_done"
        assert second.log_id == first.log_id

    def test_filter_by_date(self):
        hid = create_habit("Walk")
        save_log(hid, "2024-01-01", "done", enforce_edit_window=False)
        save_log(hid, "2024-01-02", "not_done", enforce_edit_window=False)
        logs = get_logs(date="2024-01-02")
        assert [e.status for e in logs] == ["not_done"]

    def test_ordered_by_date(self):
        hid = create_habit("Walk")
        save_log(hid, "2024-01-03", "done", enforce_edit_window=False)
        save_log(hid, "2024-01-01", "done", enforce_edit_window=False)
        assert [e.date for e in get_logs()] == ["2024-01-01", "2024-01-03"]

    def test_edit_window_enforced(self):
        hid = create_habit("Walk")
        with pytest.raises(ValueError, match="days in the past"):
            save_log(hid, "2020-01-01", "done")

    def test_invalid_status(self):
        hid = create_habit("Walk")
        today = dates.format_date_iso(dates.today())
        with pytest.raises(ValueError):
            save_log(hid, today, "finished")

    def test_unknown_habit(self):
        today = dates.format_date_iso(dates.today())
        with pytest.raises(ValueError, match="Unknown habit"):
            save_log("missing", today, "done")


class TestUsage:
    def test_summary(self):
        log_usage(100, 50, 150, model="claude-test")
        log_usage(10, 5, 15, model="claude-test")
        summary = get_usage_summary()
        assert summary["today"]["total"] == 165
        assert summary["today"]["calls"] == 2
        assert summary["by_model"]["claude-test"]["calls"] == 2

    def test_empty(self):
        summary = get_usage_summary()
        assert summary["month"] == {"prompt": 0, "completion": 0, "total": 0, "calls": 0}
