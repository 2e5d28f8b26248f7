"""Amara Day — command-line entry point.

1. Database initialization
2. Progress overview for active habits
3. Today's logged habits become the session's pending changes
4. Reflection payload -> reflection text

Usage:
    python -m amaraday.main --note "Felt calm after my walk"
"""

import argparse
import asyncio
import logging

from amaraday import dates
from amaraday.db import init_db
from amaraday.models import DONE, NOT_DONE, PendingChange
from amaraday.progress import get_progress_overview
from amaraday.reflection_builder import build_reflection_payload
from amaraday.reflection_service import ReflectionGenerator
from amaraday.storage import SQLiteStorage

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-5s %(name)s — %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger("amaraday")


async def todays_changes(storage: SQLiteStorage) -> dict[str, PendingChange]:
    """habit_id -> PendingChange for every active habit logged done/not_done today."""
    today = dates.format_date_iso(dates.today())
    habits = {h.habit_id: h for h in await storage.get_habits(active_only=True)}
    changes = {}
    for entry in await storage.get_logs(date=today):
        habit = habits.get(entry.habit_id)
        if habit is None or entry.status not in (DONE, NOT_DONE):
            continue
        changes[habit.habit_id] = PendingChange(
            habit_id=habit.habit_id,
            habit_name=habit.name,
            new_status=entry.status,
            habit_category=habit.category,
        )
    return changes


async def main(note: str = ""):
    init_db()
    storage = SQLiteStorage()

    print(dates.format_date_display(dates.today()))
    for progress in await get_progress_overview(storage):
        print(
            f"{progress.name}: streak {progress.streaks.current} "
            f"(best {progress.streaks.longest}), {progress.completion_text}"
        )
        if progress.notes.has_enough_data:
            print(f"  {progress.notes.correlation_text}")

    changes = await todays_changes(storage)
    if not changes:
        log.info("No habits logged today, nothing to reflect on")
        return

    payload = await build_reflection_payload(changes, note, storage)
    result = await ReflectionGenerator().generate(payload)
    if result.error:
        log.warning("Reflection fell back (%s)", result.error_type)
    print()
    print(result.reflection)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Amara Day habit reflection")
    parser.add_argument("--note", default="", help="how you feel today")
    args = parser.parse_args()
    asyncio.run(main(args.note))
