"""Tests for the progress overview, against a real SQLite store."""

import asyncio
from datetime import timedelta

import pytest

from amaraday import dates
from amaraday.db import create_habit, deactivate_habit, init_db, save_log
from amaraday.progress import get_progress_overview


@pytest.fixture(autouse=True)
def fresh_db(tmp_path, monkeypatch):
    import amaraday.db as db_module
    monkeypatch.setattr(db_module, "DB_PATH", tmp_path / "test.db")
    init_db()


def _day(days_back: int) -> str:
    return dates.format_date_iso(dates.today() - timedelta(days=days_back))


class TestProgressOverview:
    def test_active_habits_only(self):
        create_habit("Walk")
        old = create_habit("Old habit")
        deactivate_habit(old)
        overview = asyncio.run(get_progress_overview())
        assert [p.name for p in overview] == ["Walk"]

    def test_empty(self):
        assert asyncio.run(get_progress_overview()) == []

    def test_streaks_and_completion(self):
        hid = create_habit("Walk", "Health")
        for days_back in range(3):
            save_log(hid, _day(days_back), "done", enforce_edit_window=False)
        save_log(hid, _day(3), "not_done", enforce_edit_window=False)
        save_log(hid, _day(4), "no_data", enforce_edit_window=False)

        (progress,) = asyncio.run(get_progress_overview())
        assert progress.category == "Health"
        assert progress.streaks.current == 3
        assert progress.streaks.longest == 3
        assert progress.completion.done_count == 3
        assert progress.completion_text == "3/4 days - 75%"
        assert progress.notes.has_enough_data is False

    def test_notes_analysis(self):
        hid = create_habit("Yoga")
        for days_back in range(7):
            save_log(hid, _day(days_back), "done", "felt calm and focused",
                     enforce_edit_window=False)
        (progress,) = asyncio.run(get_progress_overview())
        assert progress.notes.has_enough_data is True
        assert progress.notes.total_notes == 7
        assert "calm" in progress.notes.keywords

    def test_habits_do_not_share_logs(self):
        walk = create_habit("Walk")
        create_habit("Read")
        save_log(walk, _day(0), "done", enforce_edit_window=False)
        overview = {p.name: p for p in asyncio.run(get_progress_overview())}
        assert overview["Walk"].streaks.current == 1
        assert overview["Read"].streaks.current == 0
        assert overview["Read"].completion.total_logged_days == 0
