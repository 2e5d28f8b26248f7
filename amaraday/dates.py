"""Date helpers — the single place that reads the wall clock.

Analytics take an explicit `today` (or a `now` callable) and only fall back
to these helpers when the caller doesn't pin one.
"""

from datetime import date, datetime, timezone, timedelta

from amaraday.config import TIMEZONE_OFFSET_HOURS, MAX_PAST_DAYS

TZ = timezone(timedelta(hours=TIMEZONE_OFFSET_HOURS))


def now() -> datetime:
    """Current local time (respects TIMEZONE_OFFSET_HOURS)."""
    return datetime.now(TZ)


def today() -> date:
    return now().date()


def format_date_iso(d: date) -> str:
    return d.strftime("%Y-%m-%d")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD. Raises ValueError on anything else."""
    return date.fromisoformat(value)


def days_ago(n: int, ref: date | None = None) -> date:
    return (ref or today()) - timedelta(days=n)


def within_last_days(value: str, days: int, ref: date | None = None) -> bool:
    """Whether an ISO date falls in [ref - days, ref], both ends inclusive."""
    ref = ref or today()
    d = parse_iso_date(value)
    return days_ago(days, ref) <= d <= ref


def time_of_day_label(hour: int) -> str:
    """Map hour -> reflection time-of-day bucket."""
    if 5 <= hour < 12:
        return "morning"
    if 12 <= hour < 18:
        return "afternoon"
    return "evening"  # 18-23 and 0-4


def format_date_display(d: date, ref: date | None = None) -> str:
    """'Today, October 13', 'Yesterday, October 12' or 'October 11, 2025'."""
    ref = ref or today()
    month_day = f"{d.strftime('%B')} {d.day}"
    if d == ref:
        return f"Today, {month_day}"
    if d == ref - timedelta(days=1):
        return f"Yesterday, {month_day}"
    return f"{month_day}, {d.year}"


def is_within_allowed_past_range(d: date, ref: date | None = None) -> bool:
    """Logs may be edited for today and up to MAX_PAST_DAYS back."""
    ref = ref or today()
    delta = (ref - d).days
    return 0 <= delta <= MAX_PAST_DAYS
