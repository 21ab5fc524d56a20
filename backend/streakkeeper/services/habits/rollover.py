"""
Day roll-over - closes out a finished day for build habits
Any build habit with no status for the day is recorded as missed
(auto_processed=True) and its streak broken. Habits that already have a status
are left alone, so running it twice for the same day is harmless.
"""
from datetime import date
from typing import Any, Dict
import logging

from streakkeeper.core.constants import HABIT_KIND_BUILD
from .service import HabitService, record_daily_outcome

logger = logging.getLogger(__name__)


def close_day(service: HabitService, day: date) -> Dict[str, Any]:
    """
    Mark unconfirmed build habits as missed for `day`

    Args:
        service: Habit service whose repository and locks to use
        day: The day that just ended

    Returns:
        Dict with the day, processed habit ids and failed habit ids
    """
    repository = service.repository
    processed = []
    failed = []

    for habit in repository.list_habits():
        if habit.kind != HABIT_KIND_BUILD or habit.created_date > day:
            continue

        try:
            with service.locks.hold(habit.id):
                # Re-read under the lock; the user may have just confirmed
                current = repository.get_habit(habit.id)
                if current is None or repository.get_daily_status(current.id, day) is not None:
                    continue
                record_daily_outcome(repository, current, day, completed=False, auto_processed=True)
            processed.append(habit.id)
            logger.info(f"[ROLLOVER] Marked '{habit.name}' (ID: {habit.id}) missed for {day}")
        except Exception as e:
            failed.append(habit.id)
            logger.error(f"[ROLLOVER] Failed to close {day} for habit_id={habit.id}: {e}")

    return {
        "date": str(day),
        "processed": processed,
        "failed": failed
    }
