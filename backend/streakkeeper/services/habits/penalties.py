"""
Penalty calculation for build habits
Every missed day since the last completion raises the penalty level by one,
and the required task amount grows with the level.
"""
from datetime import date
from typing import Iterable, Optional
import logging

from streakkeeper.core.config import settings
from streakkeeper.core.constants import (
    PENALTY_STACKING_ADDITIVE,
    PENALTY_STACKING_DOUBLING,
    PENALTY_STACKING_MODES,
)
from streakkeeper.core.exceptions import InvalidHabitDataError
from streakkeeper.models.habit import DailyStatus
from streakkeeper.utils.dates import days_between

logger = logging.getLogger(__name__)


def last_completed_before(statuses: Iterable[DailyStatus], day: date) -> Optional[date]:
    """
    Find the most recent completed day strictly before `day`

    Args:
        statuses: Daily status records of one habit, in any order
        day: The target day

    Returns:
        The latest completed date before `day`, or None
    """
    completed = [s.date for s in statuses if s.completed and s.date < day]
    return max(completed) if completed else None


def calculate_penalty_level(created_date: date, day: date, last_completed: Optional[date]) -> int:
    """
    Count the consecutive missed days leading up to `day`

    Args:
        created_date: Day the habit was created
        day: The target day (usually today)
        last_completed: Most recent completed day before `day`, if any

    Returns:
        Penalty level, never negative
    """
    # Grace period on the creation day
    if day == created_date:
        return 0

    if last_completed is not None:
        return max(0, days_between(last_completed, day) - 1)

    return max(0, days_between(created_date, day))


def required_task_value(base_task_value: int, penalty_level: int,
                        stacking: Optional[str] = None) -> int:
    """
    Amount the user must do today

    Args:
        base_task_value: Base daily amount
        penalty_level: Current penalty level
        stacking: 'additive' (default) or 'doubling'; defaults to PENALTY_STACKING

    Returns:
        The required amount

    Raises:
        InvalidHabitDataError: If the stacking mode is unknown
    """
    mode = stacking or settings.PENALTY_STACKING

    if mode == PENALTY_STACKING_ADDITIVE:
        return base_task_value + base_task_value * penalty_level
    if mode == PENALTY_STACKING_DOUBLING:
        return base_task_value * 2 ** penalty_level

    raise InvalidHabitDataError(
        f"Unknown penalty stacking mode '{mode}'. Use one of {', '.join(PENALTY_STACKING_MODES)}"
    )


def penalty_for_day(created_date: date, day: date, statuses: Iterable[DailyStatus]) -> int:
    """Penalty level on `day` given a habit's full status history"""
    return calculate_penalty_level(created_date, day, last_completed_before(statuses, day))
