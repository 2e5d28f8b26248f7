"""Progress overview — per-habit streaks, completion and note patterns."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from amaraday import dates
from amaraday.completion import calculate_completion_percentage, format_completion_stats
from amaraday.models import CompletionStats, NotesAnalysis, StreakResult
from amaraday.notes_analyzer import analyze_notes
from amaraday.storage import SQLiteStorage, Storage
from amaraday.streaks import calculate_streaks

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class HabitProgress:
    habit_id: str
    name: str
    category: str | None
    streaks: StreakResult
    completion: CompletionStats
    notes: NotesAnalysis

    @property
    def completion_text(self) -> str:
        return format_completion_stats(self.completion)


async def get_progress_overview(
    storage: Storage | None = None,
    now: Callable[[], datetime] | None = None,
) -> list[HabitProgress]:
    """One HabitProgress per active habit, in storage order."""
    storage = storage or SQLiteStorage()
    today = (now or dates.now)().date()

    habits = await storage.get_habits(active_only=True)
    all_logs = await storage.get_logs()

    overview = []
    for habit in habits:
        habit_logs = [e for e in all_logs if e.habit_id == habit.habit_id]
        overview.append(HabitProgress(
            habit_id=habit.habit_id,
            name=habit.name,
            category=habit.category,
            streaks=calculate_streaks(habit_logs, today=today),
            completion=calculate_completion_percentage(habit_logs),
            notes=analyze_notes(habit_logs),
        ))

    log.info("Progress overview: %d active habits", len(overview))
    return overview
