"""Storage boundary — the async read interface the reflection and progress code await.

Implementations hand back a snapshot; callers never subscribe to changes.
"""

from abc import ABC, abstractmethod

from amaraday import db
from amaraday.models import Habit, LogEntry


class Storage(ABC):
    """Read-only view over habits and their logs."""

    @abstractmethod
    async def get_logs(self, habit_id: str | None = None,
                       date: str | None = None) -> list[LogEntry]:
        """All log entries, optionally filtered by habit and/or date."""
        ...

    @abstractmethod
    async def get_habits(self, active_only: bool = False) -> list[Habit]:
        ...


class SQLiteStorage(Storage):
    """Local SQLite store (amaraday.db)."""

    async def get_logs(self, habit_id: str | None = None,
                       date: str | None = None) -> list[LogEntry]:
        return db.get_logs(habit_id=habit_id, date=date)

    async def get_habits(self, active_only: bool = False) -> list[Habit]:
        return db.get_habits(active_only=active_only)
