"""SQLite database layer — persistent storage for habits, daily logs and LLM usage.

Lightweight schema. Tables are created automatically on first run.
One log per (habit, date): saving again for the same day overwrites it.
"""

import sqlite3
import logging
import uuid
from datetime import datetime, timezone, timedelta

from amaraday.config import DB_PATH, TIMEZONE_OFFSET_HOURS
from amaraday.models import Habit, LogEntry
from amaraday.validation import (
    validate_category,
    validate_habit_name,
    validate_habit_status,
    validate_log_entry,
    sanitize_category,
    sanitize_habit_name,
    sanitize_notes,
)

logger = logging.getLogger(__name__)

TZ = timezone(timedelta(hours=TIMEZONE_OFFSET_HOURS))


def _connect() -> sqlite3.Connection:
    """Return a connection with row_factory set."""
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(DB_PATH))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    return conn


def init_db() -> None:
    """Create tables if they don't exist."""
    conn = _connect()
    conn.executescript("""
        -- Habits (never hard-deleted, marked inactive instead)
        CREATE TABLE IF NOT EXISTS habits (
            habit_id      TEXT PRIMARY KEY,
            name          TEXT NOT NULL,
            category      TEXT,
            status        TEXT NOT NULL DEFAULT 'active',
            created_date  TEXT NOT NULL,
            modified_date TEXT NOT NULL
        );

        -- Daily log entries: one per habit per day
        CREATE TABLE IF NOT EXISTS logs (
            log_id    TEXT PRIMARY KEY,
            habit_id  TEXT NOT NULL REFERENCES habits(habit_id),
            date      TEXT NOT NULL,
            status    TEXT NOT NULL,
            notes     TEXT NOT NULL DEFAULT '',
            timestamp TEXT NOT NULL
        );
        CREATE UNIQUE INDEX IF NOT EXISTS idx_logs_habit_date
            ON logs(habit_id, date);

        -- LLM usage tracking
        CREATE TABLE IF NOT EXISTS usage_log (
            id                INTEGER PRIMARY KEY AUTOINCREMENT,
            prompt_tokens     INTEGER NOT NULL DEFAULT 0,
            completion_tokens INTEGER NOT NULL DEFAULT 0,
            total_tokens      INTEGER NOT NULL DEFAULT 0,
            model             TEXT    NOT NULL DEFAULT '',
            purpose           TEXT    NOT NULL DEFAULT 'reflection',
            created_at        TEXT    NOT NULL
        );
    """)
    conn.close()
    logger.info("Database initialized at %s", DB_PATH)


# ═══════════════════════════════════════════════════════════════════════════
# Habits
# ═══════════════════════════════════════════════════════════════════════════

def create_habit(name: str, category: str | None = None) -> str:
    """Create a new habit. Returns habit id.

    Raises ValueError if the name is invalid or already used by an active habit.
    """
    existing = [h.name for h in get_habits(active_only=True)]
    result = validate_habit_name(name, existing)
    if result.is_valid:
        result = validate_category(category)
    if not result.is_valid:
        raise ValueError(result.error)

    habit_id = str(uuid.uuid4())
    today = datetime.now(TZ).strftime("%Y-%m-%d")
    conn = _connect()
    conn.execute(
        """INSERT INTO habits (habit_id, name, category, status, created_date, modified_date)
           VALUES (?, ?, ?, 'active', ?, ?)""",
        (habit_id, sanitize_habit_name(name), sanitize_category(category), today, today),
    )
    conn.commit()
    conn.close()
    return habit_id


def get_habits(active_only: bool = False) -> list[Habit]:
    conn = _connect()
    sql = "SELECT * FROM habits"
    if active_only:
        sql += " WHERE status = 'active'"
    sql += " ORDER BY created_date, name"
    rows = conn.execute(sql).fetchall()
    conn.close()
    return [Habit.from_dict(dict(r)) for r in rows]


def get_habit(habit_id: str) -> Habit | None:
    conn = _connect()
    row = conn.execute("SELECT * FROM habits WHERE habit_id = ?", (habit_id,)).fetchone()
    conn.close()
    return Habit.from_dict(dict(row)) if row else None


def update_habit(habit_id: str, name: str | None = None,
                 category: str | None = None, status: str | None = None) -> bool:
    """Update the given fields. Returns False if the habit doesn't exist."""
    habit = get_habit(habit_id)
    if habit is None:
        return False

    if name is not None:
        existing = [h.name for h in get_habits(active_only=True) if h.habit_id != habit_id]
        result = validate_habit_name(name, existing)
        if not result.is_valid:
            raise ValueError(result.error)
    if category is not None:
        result = validate_category(category)
        if not result.is_valid:
            raise ValueError(result.error)
    if status is not None:
        result = validate_habit_status(status)
        if not result.is_valid:
            raise ValueError(result.error)

    today = datetime.now(TZ).strftime("%Y-%m-%d")
    conn = _connect()
    conn.execute(
        """UPDATE habits SET name = ?, category = ?, status = ?, modified_date = ?
           WHERE habit_id = ?""",
        (
            sanitize_habit_name(name) if name is not None else habit.name,
            sanitize_category(category) if category is not None else habit.category,
            status or habit.status,
            today,
            habit_id,
        ),
    )
    conn.commit()
    conn.close()
    return True


def deactivate_habit(habit_id: str) -> bool:
    return update_habit(habit_id, status="inactive")


# ═══════════════════════════════════════════════════════════════════════════
# Logs
# ═══════════════════════════════════════════════════════════════════════════

def save_log(habit_id: str, date: str, status: str, notes: str = "",
             enforce_edit_window: bool = True) -> LogEntry:
    """Insert or replace the log for (habit_id, date). Returns the stored entry.

    Raises ValueError on invalid status/date/notes or unknown habit.
    """
    result = validate_log_entry(date, status, notes, check_edit_window=enforce_edit_window)
    if not result.is_valid:
        raise ValueError(result.error)
    if get_habit(habit_id) is None:
        raise ValueError(f"Unknown habit: {habit_id}")

    timestamp = datetime.now(TZ).isoformat()
    clean_notes = sanitize_notes(notes) or ""
    conn = _connect()
    row = conn.execute(
        "SELECT log_id FROM logs WHERE habit_id = ? AND date = ?", (habit_id, date),
    ).fetchone()
    log_id = row["log_id"] if row else str(uuid.uuid4())
    conn.execute(
        """INSERT INTO logs (log_id, habit_id, date, status, notes, timestamp)
           VALUES (?, ?, ?, ?, ?, ?)
           ON CONFLICT(habit_id, date) DO UPDATE SET
               status = excluded.status,
               notes = excluded.notes,
               timestamp = excluded.timestamp""",
        (log_id, habit_id, date, status, clean_notes, timestamp),
    )
    conn.commit()
    conn.close()
    return LogEntry(
        log_id=log_id, habit_id=habit_id, date=date, status=status,
        notes=clean_notes, timestamp=timestamp,
    )


def get_logs(habit_id: str | None = None, date: str | None = None) -> list[LogEntry]:
    conn = _connect()
    sql = "SELECT log_id, habit_id, date, status, notes, timestamp FROM logs WHERE 1 = 1"
    params: list = []
    if habit_id:
        sql += " AND habit_id = ?"
        params.append(habit_id)
    if date:
        sql += " AND date = ?"
        params.append(date)
    sql += " ORDER BY date, timestamp"
    rows = conn.execute(sql, params).fetchall()
    conn.close()
    return [LogEntry.from_dict(dict(r)) for r in rows]


# ═══════════════════════════════════════════════════════════════════════════
# Usage Logging
# ═══════════════════════════════════════════════════════════════════════════

def log_usage(prompt_tokens: int, completion_tokens: int, total_tokens: int,
              model: str = "", purpose: str = "reflection") -> None:
    now = datetime.now(TZ).isoformat()
    conn = _connect()
    conn.execute(
        """INSERT INTO usage_log (prompt_tokens, completion_tokens, total_tokens,
           model, purpose, created_at) VALUES (?, ?, ?, ?, ?, ?)""",
        (prompt_tokens, completion_tokens, total_tokens, model, purpose, now),
    )
    conn.commit()
    conn.close()


def get_usage_summary() -> dict:
    """Return token usage for today and this month.

    Returns:
        {
            "today": {"prompt": int, "completion": int, "total": int, "calls": int},
            "month": {"prompt": int, "completion": int, "total": int, "calls": int},
            "by_model": {"claude-3-5-sonnet-20241022": {"total": int, "calls": int}, ...},
        }
    """
    now = datetime.now(TZ)
    today_start = now.replace(hour=0, minute=0, second=0, microsecond=0).isoformat()
    month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0).isoformat()

    conn = _connect()

    def _totals(since: str) -> dict:
        row = conn.execute(
            """SELECT COALESCE(SUM(prompt_tokens), 0) as p,
                      COALESCE(SUM(completion_tokens), 0) as c,
                      COALESCE(SUM(total_tokens), 0) as t,
                      COUNT(*) as n
               FROM usage_log WHERE created_at >= ?""",
            (since,),
        ).fetchone()
        return {"prompt": row["p"], "completion": row["c"], "total": row["t"], "calls": row["n"]}

    today = _totals(today_start)
    month = _totals(month_start)

    by_model = {}
    for r in conn.execute(
        """SELECT model, COALESCE(SUM(total_tokens), 0) as t, COUNT(*) as n
           FROM usage_log WHERE created_at >= ? GROUP BY model""",
        (month_start,),
    ).fetchall():
        by_model[r["model"] or "unknown"] = {"total": r["t"], "calls": r["n"]}

    conn.close()
    return {"today": today, "month": month, "by_model": by_model}
