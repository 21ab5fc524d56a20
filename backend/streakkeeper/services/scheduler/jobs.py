"""
Scheduler Job Definitions
Contains the scheduled job functions for the daily roll-over
"""
import logging

from streakkeeper.services.habits.rollover import close_day
from streakkeeper.utils.dates import yesterday_of

logger = logging.getLogger(__name__)


def run_day_rollover():
    """
    Close out yesterday for every build habit
    Called once daily shortly after local midnight
    """
    # Import here to avoid circular dependency
    from streakkeeper.core.dependencies import get_habit_service

    try:
        service = get_habit_service()
        day = yesterday_of(service.today())

        logger.info(f"[SCHEDULER] Running day roll-over for {day}...")
        result = close_day(service, day)

        if result["processed"]:
            logger.info(f"[SCHEDULER] Marked {len(result['processed'])} habit(s) missed for {day}")
        else:
            logger.info(f"[SCHEDULER] No unconfirmed build habits for {day}")
        if result["failed"]:
            logger.warning(f"[SCHEDULER] Roll-over failed for habit ids {result['failed']}")

    except Exception as e:
        logger.error(f"[SCHEDULER] Error in run_day_rollover: {e}", exc_info=True)
