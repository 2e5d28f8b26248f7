"""Reflection payload builder — aggregates streaks, completions and note
patterns into the snapshot the reflection model receives.

Flow:
1. Fetch all logs + habits from storage (a failure degrades to a minimal payload)
2. Per pending change: current streak, done counts over the last 7 / 30 days
3. Recent summary: distinct tracked dates over the last 7 / 30 days (all habits)
4. Up to MAX_OBSERVATIONS note-sentiment observations across all habits

The caller always gets a payload back; nothing here raises.
"""

import logging
from collections.abc import Mapping
from datetime import date, datetime
from typing import Callable

from amaraday import dates
from amaraday.config import (
    NOTE_MAX_CHARS, OBSERVATION_MIN_NOTES, MAX_OBSERVATIONS,
)
from amaraday.models import (
    DONE, Habit, LogEntry, PendingChange, RecentSummary,
    ReflectionHabit, ReflectionPayload,
)
from amaraday.notes_analyzer import analyze_notes
from amaraday.storage import SQLiteStorage, Storage
from amaraday.streaks import calculate_current_streak

log = logging.getLogger(__name__)


def truncate_note(text: str, limit: int = NOTE_MAX_CHARS) -> str:
    return (text or "").strip()[:limit]


def logs_from_last_days(logs: list[LogEntry], days: int, today: date) -> list[LogEntry]:
    """Entries dated within [today - days, today]."""
    return [e for e in logs if dates.within_last_days(e.date, days, today)]


def build_habit_data(change: PendingChange, all_logs: list[LogEntry],
                     today: date) -> ReflectionHabit:
    habit_logs = [e for e in all_logs if e.habit_id == change.habit_id]

    def _done_within(days: int) -> int:
        return sum(1 for e in logs_from_last_days(habit_logs, days, today) if e.status == DONE)

    return ReflectionHabit(
        name=change.habit_name,
        status=change.new_status,
        streak_days=calculate_current_streak(habit_logs, today=today),
        completed_last_7_days=_done_within(7),
        completed_last_30_days=_done_within(30),
        category=change.habit_category or None,
    )


def generate_notable_observations(habits: list[Habit], all_logs: list[LogEntry],
                                  today: date) -> list[str]:
    """Short sentiment observations for habits with enough recent notes."""
    observations: list[str] = []
    recent = logs_from_last_days(all_logs, 30, today)

    for habit in habits:
        if len(observations) >= MAX_OBSERVATIONS:
            break

        with_notes = [e for e in recent if e.habit_id == habit.habit_id and e.has_notes]
        if len(with_notes) < OBSERVATION_MIN_NOTES:
            continue

        try:
            analysis = analyze_notes(with_notes, min_notes=OBSERVATION_MIN_NOTES)
        except Exception as e:
            log.warning("Notes analysis failed for habit %s: %s", habit.name, e)
            continue

        score = analysis.sentiment_summary.average_score
        if score > 1:
            top = analysis.keywords[:2]
            if top:
                observations.append(
                    f"User often mentions feeling {' and '.join(top)} on days with {habit.name}."
                )
            else:
                observations.append(
                    f"User often mentions positive feelings on days with {habit.name}."
                )
        elif score < -1:
            observations.append(f"User mentions challenges with {habit.name}.")

    return observations


def _minimal_payload(current: datetime, note_text: str) -> ReflectionPayload:
    return ReflectionPayload(
        date=dates.format_date_iso(current.date()),
        time_of_day=dates.time_of_day_label(current.hour),
        note_text=truncate_note(note_text),
        habits=[],
        recent_summary=RecentSummary(),
    )


async def build_reflection_payload(
    pending_changes: Mapping[str, PendingChange],
    note_text: str,
    storage: Storage | None = None,
    now: Callable[[], datetime] | None = None,
) -> ReflectionPayload:
    """Build the reflection payload for the habits touched this session.

    pending_changes: habit_id -> PendingChange
    note_text: the user's free-text "I feel..." note (truncated to NOTE_MAX_CHARS)
    """
    current = (now or dates.now)()
    storage = storage or SQLiteStorage()

    try:
        all_logs = await storage.get_logs()
        all_habits = await storage.get_habits()

        today = current.date()
        habits = [build_habit_data(c, all_logs, today) for c in pending_changes.values()]

        summary = RecentSummary(
            days_tracked_last_7=len({e.date for e in logs_from_last_days(all_logs, 7, today)}),
            days_tracked_last_30=len({e.date for e in logs_from_last_days(all_logs, 30, today)}),
            notable_observations=generate_notable_observations(all_habits, all_logs, today),
        )

        payload = ReflectionPayload(
            date=dates.format_date_iso(today),
            time_of_day=dates.time_of_day_label(current.hour),
            note_text=truncate_note(note_text),
            habits=habits,
            recent_summary=summary,
        )
        log.info(
            "Reflection payload: %d habits, %d observations",
            len(habits), len(summary.notable_observations),
        )
        return payload

    except Exception as e:
        log.error("Failed to build reflection payload, using minimal: %s", e, exc_info=True)
        return _minimal_payload(current, note_text)
