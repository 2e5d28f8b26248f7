"""Value objects shared by storage, analytics and reflection.

Everything here is transient: computed from a snapshot of log entries on
each request and never mutated by the engines.
"""

from dataclasses import dataclass, field, asdict

DONE = "done"
NOT_DONE = "not_done"
NO_DATA = "no_data"

LOG_STATUSES = (DONE, NOT_DONE, NO_DATA)
HABIT_STATUSES = ("active", "inactive")


@dataclass(frozen=True)
class LogEntry:
    """One habit's status for one calendar day."""
    log_id: str
    habit_id: str
    date: str                   # YYYY-MM-DD
    status: str                 # done | not_done | no_data
    notes: str = ""
    timestamp: str = ""         # ISO datetime the entry was recorded
    user_id: str | None = None

    @property
    def has_notes(self) -> bool:
        return bool(self.notes and self.notes.strip())

    @classmethod
    def from_dict(cls, row: dict) -> "LogEntry":
        return cls(
            log_id=row["log_id"],
            habit_id=row["habit_id"],
            date=row["date"],
            status=row["status"],
            notes=row.get("notes") or "",
            timestamp=row.get("timestamp") or "",
            user_id=row.get("user_id"),
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class Habit:
    habit_id: str
    name: str
    category: str | None = None
    status: str = "active"      # active | inactive (never hard-deleted)
    created_date: str = ""
    modified_date: str = ""

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    @classmethod
    def from_dict(cls, row: dict) -> "Habit":
        return cls(
            habit_id=row["habit_id"],
            name=row["name"],
            category=row.get("category") or None,
            status=row.get("status") or "active",
            created_date=row.get("created_date") or "",
            modified_date=row.get("modified_date") or "",
        )


def dedupe_logs(logs: list[LogEntry]) -> list[LogEntry]:
    """Collapse entries sharing (habit_id, date) to the most recently recorded one.

    The greatest timestamp wins; on equal timestamps the later entry in the
    list wins. Order of first appearance is preserved. Returns a new list.
    """
    chosen: dict[tuple[str, str], LogEntry] = {}
    for entry in logs:
        key = (entry.habit_id, entry.date)
        current = chosen.get(key)
        if current is None or entry.timestamp >= current.timestamp:
            chosen[key] = entry
    return list(chosen.values())


# ═══════════════════════════════════════════════════════════════════════════
# Analytics results
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class StreakResult:
    current: int = 0
    longest: int = 0


@dataclass(frozen=True)
class CompletionStats:
    done_count: int
    total_logged_days: int
    percentage: float           # 0-100, one decimal
    fraction_text: str          # "17/20 days"
    percentage_text: str        # "85%"


@dataclass(frozen=True)
class SentimentSummary:
    positive: int = 0
    negative: int = 0
    neutral: int = 0
    average_score: float = 0.0


@dataclass(frozen=True)
class NotesAnalysis:
    has_enough_data: bool
    total_notes: int
    keywords: list[str] = field(default_factory=list)
    sentiment_summary: SentimentSummary = field(default_factory=SentimentSummary)
    correlation_text: str = ""


# ═══════════════════════════════════════════════════════════════════════════
# Reflection
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PendingChange:
    """A status change the user just made in the current session."""
    habit_id: str
    habit_name: str
    new_status: str             # done | not_done
    habit_category: str | None = None
    previous_status: str | None = None


@dataclass
class ReflectionHabit:
    name: str
    status: str
    streak_days: int
    completed_last_7_days: int = 0
    completed_last_30_days: int = 0
    category: str | None = None

    def to_dict(self) -> dict:
        data = asdict(self)
        if data["category"] is None:
            del data["category"]
        return data


@dataclass
class RecentSummary:
    days_tracked_last_7: int = 0
    days_tracked_last_30: int = 0
    notable_observations: list[str] = field(default_factory=list)


@dataclass
class ReflectionPayload:
    """Snapshot handed to the text-generation model."""
    date: str
    time_of_day: str            # morning | afternoon | evening
    note_text: str
    habits: list[ReflectionHabit] = field(default_factory=list)
    recent_summary: RecentSummary = field(default_factory=RecentSummary)

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "time_of_day": self.time_of_day,
            "note_text": self.note_text,
            "habits": [h.to_dict() for h in self.habits],
            "recent_summary": asdict(self.recent_summary),
        }


@dataclass
class ReflectionResult:
    reflection: str
    error: bool = False
    error_type: str | None = None
    usage: dict | None = None   # {"input_tokens": int, "output_tokens": int}
