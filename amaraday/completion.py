"""Completion percentage — done / logged days.

Only "done" and "not_done" count as logged; "no_data" is excluded from both
numerator and denominator.
"""

import math

from amaraday.models import DONE, NOT_DONE, CompletionStats, LogEntry, dedupe_logs


def _round_one_decimal(value: float) -> float:
    # Half-up, not banker's rounding: 85.75 -> 85.8
    return math.floor(value * 10 + 0.5) / 10


def _format_percentage(value: float) -> str:
    if value == int(value):
        return f"{int(value)}%"
    return f"{value:.1f}%"


def calculate_completion_percentage(logs: list[LogEntry]) -> CompletionStats:
    logged = [e for e in dedupe_logs(logs) if e.status in (DONE, NOT_DONE)]
    done_count = sum(1 for e in logged if e.status == DONE)
    total = len(logged)

    percentage = _round_one_decimal(done_count / total * 100) if total else 0.0

    return CompletionStats(
        done_count=done_count,
        total_logged_days=total,
        percentage=percentage,
        fraction_text=f"{done_count}/{total} days",
        percentage_text=_format_percentage(percentage),
    )


def format_completion_stats(stats: CompletionStats) -> str:
    """'17/20 days - 85%'"""
    return f"{stats.fraction_text} - {stats.percentage_text}"
