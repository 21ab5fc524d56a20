"""
Debt ledger for avoid habits
Violations add debt and break the streak; confirmed clean days pay debt off,
at most once per day.
"""
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional
import logging

from streakkeeper.core.constants import DEBT_PER_CLEAN_DAY, DEBT_PER_VIOLATION
from streakkeeper.models.habit import AvoidHabit, DebtLedgerEntry, HabitEvent
from streakkeeper.utils.timezone import to_local_date
from . import streaks

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViolationOutcome:
    """Everything a violation changes"""
    event: HabitEvent
    ledger: DebtLedgerEntry
    habit: AvoidHabit


@dataclass(frozen=True)
class CleanDayOutcome:
    """Everything a clean-day confirmation changes"""
    ledger: DebtLedgerEntry
    habit: AvoidHabit
    already_confirmed: bool


def record_violation(habit: AvoidHabit, ledger: DebtLedgerEntry, timestamp: datetime,
                     notes: Optional[str] = None) -> ViolationOutcome:
    """
    Log a violation: new event, debt + 1, streak broken

    Args:
        habit: The avoid habit
        ledger: Its current debt ledger entry
        timestamp: When the violation happened
        notes: Optional free-text note

    Returns:
        ViolationOutcome with the new (not yet stored) event, ledger and habit
    """
    event = HabitEvent(habit_id=habit.id, timestamp=timestamp, notes=notes)
    new_ledger = ledger.model_copy(update={"debt_count": ledger.debt_count + DEBT_PER_VIOLATION})
    new_habit = habit.model_copy(update={"streak": streaks.record_failure(habit.streak)})
    return ViolationOutcome(event=event, ledger=new_ledger, habit=new_habit)


def count_events_on_day(events: Iterable[HabitEvent], day: date) -> int:
    """
    Count events whose timestamp falls on `day` in the application timezone

    Args:
        events: Events of one habit
        day: The calendar day

    Returns:
        Number of events logged that day
    """
    return sum(1 for e in events if to_local_date(e.timestamp) == day)


def is_clean_day(events: Iterable[HabitEvent], day: date) -> bool:
    return count_events_on_day(events, day) == 0


def is_already_credited(ledger: DebtLedgerEntry, day: date) -> bool:
    """True when `day` is on or before the last credited clean day"""
    return ledger.last_clean_date is not None and day <= ledger.last_clean_date


def confirm_clean_day(habit: AvoidHabit, ledger: DebtLedgerEntry, day: date) -> CleanDayOutcome:
    """
    Credit a clean day: debt - 1 (floored at 0) and a streak success.
    Days are credited in calendar order, so any day on or before the last
    credited one is returned unchanged.

    Args:
        habit: The avoid habit
        ledger: Its current debt ledger entry
        day: The day being confirmed clean

    Returns:
        CleanDayOutcome; already_confirmed is True for a day already processed
    """
    if is_already_credited(ledger, day):
        logger.info(f"Clean day {day} already processed for habit_id={habit.id} "
                    f"(last credited {ledger.last_clean_date})")
        return CleanDayOutcome(ledger=ledger, habit=habit, already_confirmed=True)

    new_ledger = ledger.model_copy(update={
        "debt_count": max(0, ledger.debt_count - DEBT_PER_CLEAN_DAY),
        "last_clean_date": day,
    })
    new_habit = habit.model_copy(update={"streak": streaks.record_success(habit.streak, day)})
    return CleanDayOutcome(ledger=new_ledger, habit=new_habit, already_confirmed=False)
