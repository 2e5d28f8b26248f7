"""Streak calculation for a single habit's log history.

Current streak: consecutive "done" days counting back from today.
  - today must itself be "done", otherwise the streak is 0
  - a missing day, "not_done" or "no_data" ends the count

Longest streak: the longest run of calendar-consecutive "done" days anywhere
in the history. "no_data" is skipped without anchoring, so the day-distance
check treats it exactly like a missing day.
"""

from datetime import date, timedelta

from amaraday.dates import parse_iso_date, today as _today
from amaraday.models import DONE, NOT_DONE, LogEntry, StreakResult, dedupe_logs


def calculate_current_streak(logs: list[LogEntry], today: date | None = None) -> int:
    if not logs:
        return 0

    status_by_date = {entry.date: entry.status for entry in dedupe_logs(logs)}
    check = today or _today()

    streak = 0
    while status_by_date.get(check.isoformat()) == DONE:
        streak += 1
        check -= timedelta(days=1)
    return streak


def calculate_longest_streak(logs: list[LogEntry]) -> int:
    if not logs:
        return 0

    ordered = sorted(dedupe_logs(logs), key=lambda e: e.date)

    longest = 0
    run = 0
    previous: date | None = None

    for entry in ordered:
        if entry.status == DONE:
            day = parse_iso_date(entry.date)
            if previous is not None and (day - previous).days == 1:
                run += 1
            else:
                run = 1
            longest = max(longest, run)
            previous = day
        elif entry.status == NOT_DONE:
            run = 0
            previous = parse_iso_date(entry.date)
        # no_data: neither resets nor anchors

    return longest


def calculate_streaks(logs: list[LogEntry], today: date | None = None) -> StreakResult:
    return StreakResult(
        current=calculate_current_streak(logs, today=today),
        longest=calculate_longest_streak(logs),
    )
