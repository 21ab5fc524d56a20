"""
Habits Service - the actions users take on habits
Loads stored facts through the repository, checks ownership and kind, runs the
scoring engine and writes the results back. Every mutation of a habit runs
under that habit's lock.
"""
from datetime import date, datetime
from typing import Callable, List, Optional, Union
import logging

from streakkeeper.core.constants import HABIT_KIND_AVOID, HABIT_KIND_BUILD, HABIT_KINDS
from streakkeeper.core.exceptions import (
    HabitNotFoundError,
    InvalidHabitDataError,
    InvalidKindOperationError,
    UncleanDayError,
)
from streakkeeper.models.habit import (
    AvoidHabit,
    BuildHabit,
    CleanDayResult,
    DailyStatus,
    DebtLedgerEntry,
    Habit,
    HabitEvent,
    HabitWithStatus,
    WindowState,
)
from streakkeeper.utils.dates import as_day, parse_day
from streakkeeper.utils.locks import KeyedLocks
from streakkeeper.utils.timezone import get_local_now, to_local
from . import debt, penalties, status, streaks, window
from .repository import HabitRepository

logger = logging.getLogger(__name__)

# Process-wide per-habit locks
habit_locks = KeyedLocks()


def _as_day(value: Union[date, str]) -> date:
    if isinstance(value, date):
        return as_day(value)
    return parse_day(value)


class HabitService:
    """
    Habit actions for one repository

    Args:
        repository: Storage collaborator
        locks: Per-habit lock registry (defaults to the process-wide one)
        clock: Returns the current local datetime
    """

    def __init__(self, repository: HabitRepository, locks: Optional[KeyedLocks] = None,
                 clock: Callable[[], datetime] = get_local_now):
        self.repository = repository
        self.locks = locks if locks is not None else habit_locks
        self.clock = clock

    def today(self) -> date:
        return to_local(self.clock()).date()

    # ========================================================================
    # LOOKUPS
    # ========================================================================

    def _get_owned_habit(self, owner_id: str, habit_id: int) -> Habit:
        """
        Raises:
            HabitNotFoundError: If the habit is missing or owned by someone else
        """
        habit = self.repository.get_habit(habit_id)
        if habit is None or habit.owner_id != owner_id:
            raise HabitNotFoundError(f"Habit {habit_id} not found")
        return habit

    def _get_build_habit(self, owner_id: str, habit_id: int) -> BuildHabit:
        habit = self._get_owned_habit(owner_id, habit_id)
        if habit.kind != HABIT_KIND_BUILD:
            raise InvalidKindOperationError(f"Habit '{habit.name}' is not a build habit")
        return habit

    def _get_avoid_habit(self, owner_id: str, habit_id: int) -> AvoidHabit:
        habit = self._get_owned_habit(owner_id, habit_id)
        if habit.kind != HABIT_KIND_AVOID:
            raise InvalidKindOperationError(f"Habit '{habit.name}' is not an avoid habit")
        return habit

    def _get_ledger(self, habit: AvoidHabit) -> DebtLedgerEntry:
        ledger = self.repository.get_ledger(habit.id)
        if ledger is None:
            # Only possible for rows written outside this service
            logger.warning(f"Debt ledger missing for habit_id={habit.id}, starting from zero")
            ledger = DebtLedgerEntry(habit_id=habit.id)
        return ledger

    def _check_day(self, habit: Habit, day: date) -> None:
        if day > self.today():
            raise InvalidHabitDataError(f"Cannot confirm {day}: it is in the future")
        if day < habit.created_date:
            raise InvalidHabitDataError(f"Cannot confirm {day}: habit was created on {habit.created_date}")

    # ========================================================================
    # READ MODEL
    # ========================================================================

    def habit_status(self, habit: Habit, today: Optional[date] = None) -> HabitWithStatus:
        """Merge a habit's stored facts with its derived figures for `today`"""
        today = today or self.today()
        if habit.kind == HABIT_KIND_BUILD:
            return status.build_habit_status(habit, self.repository.get_daily_statuses(habit.id), today)
        return status.avoid_habit_status(
            habit,
            self.repository.get_ledger(habit.id),
            self.repository.get_events_for_day(habit.id, today),
            today
        )

    def list_habits(self, owner_id: str) -> List[HabitWithStatus]:
        """All of an owner's habits with today's status"""
        today = self.today()
        return [self.habit_status(h, today) for h in self.repository.list_habits(owner_id)]

    def get_habit(self, owner_id: str, habit_id: int) -> HabitWithStatus:
        return self.habit_status(self._get_owned_habit(owner_id, habit_id))

    def window_state(self) -> WindowState:
        return window.window_state(self.clock())

    # ========================================================================
    # ACTIONS
    # ========================================================================

    def create_habit(self, owner_id: str, name: str, kind: str,
                     base_task_value: Optional[int] = None, unit: Optional[str] = None) -> Habit:
        """
        Create a habit with an empty streak (and a zero-debt ledger for avoid habits)

        Raises:
            InvalidHabitDataError: If the kind is unknown or the build fields are wrong
        """
        if kind not in HABIT_KINDS:
            raise InvalidHabitDataError(f"Unknown habit kind '{kind}'. Use one of {', '.join(HABIT_KINDS)}")
        if kind == HABIT_KIND_BUILD and (base_task_value is None or not unit):
            raise InvalidHabitDataError("Build habits require base_task_value and unit")
        if kind == HABIT_KIND_AVOID and (base_task_value is not None or unit is not None):
            raise InvalidHabitDataError("Avoid habits do not take base_task_value or unit")

        habit = self.repository.create_habit(
            owner_id=owner_id,
            name=name,
            kind=kind,
            created_at=self.clock(),
            base_task_value=base_task_value,
            unit=unit
        )
        logger.info(f"Created {kind} habit '{name}' (ID: {habit.id}) for {owner_id}")
        return habit

    def delete_habit(self, owner_id: str, habit_id: int) -> None:
        """Delete a habit and everything that depends on it"""
        with self.locks.hold(habit_id):
            habit = self._get_owned_habit(owner_id, habit_id)
            self.repository.delete_habit(habit.id)
        self.locks.discard(habit_id)
        logger.info(f"Deleted habit '{habit.name}' (ID: {habit_id})")

    def log_violation(self, owner_id: str, habit_id: int, notes: Optional[str] = None) -> HabitEvent:
        """
        Log a violation of an avoid habit: debt + 1 and the streak breaks.
        Allowed at any time, any number of times per day.

        Returns:
            The stored event
        """
        with self.locks.hold(habit_id):
            habit = self._get_avoid_habit(owner_id, habit_id)
            outcome = debt.record_violation(habit, self._get_ledger(habit), self.clock(), notes)

            event = self.repository.add_event(outcome.event)
            self.repository.save_ledger(outcome.ledger)
            self.repository.save_habit(outcome.habit)

        logger.info(f"Violation logged for habit_id={habit_id}, debt now {outcome.ledger.debt_count}")
        return event

    def confirm_clean_day(self, owner_id: str, habit_id: int, day: Union[date, str]) -> CleanDayResult:
        """
        Confirm that `day` had no violations: debt - 1 (never below 0) and a streak success.
        Confirming a day on or before the last credited one changes nothing.

        Raises:
            UncleanDayError: If violations were logged on that day
            ConfirmationWindowClosedError: If the window is enforced and closed
        """
        day = _as_day(day)
        with self.locks.hold(habit_id):
            habit = self._get_avoid_habit(owner_id, habit_id)
            ledger = self._get_ledger(habit)
            if debt.is_already_credited(ledger, day):
                return CleanDayResult(debt=ledger.debt_count, already_confirmed=True)

            self._check_day(habit, day)
            window.ensure_open(self.clock())

            event_count = debt.count_events_on_day(self.repository.get_events_for_day(habit.id, day), day)
            if event_count:
                raise UncleanDayError(f"{event_count} violation(s) logged on {day}; it cannot be confirmed clean")

            outcome = debt.confirm_clean_day(habit, ledger, day)
            self.repository.save_ledger(outcome.ledger)
            self.repository.save_habit(outcome.habit)

        logger.info(f"Clean day {day} confirmed for habit_id={habit_id}, debt now {outcome.ledger.debt_count}")
        return CleanDayResult(debt=outcome.ledger.debt_count, already_confirmed=outcome.already_confirmed)

    def complete_daily_task(self, owner_id: str, habit_id: int, day: Union[date, str],
                            completed: bool) -> DailyStatus:
        """
        Record a build habit's outcome for `day` (upsert) and update its streak.
        Re-sending the same outcome for a day does not touch the streak again.

        Raises:
            ConfirmationWindowClosedError: If the window is enforced and closed
        """
        day = _as_day(day)
        with self.locks.hold(habit_id):
            habit = self._get_build_habit(owner_id, habit_id)
            self._check_day(habit, day)
            window.ensure_open(self.clock())

            daily = record_daily_outcome(self.repository, habit, day, completed)

        logger.info(f"Daily task for habit_id={habit_id} on {day}: completed={completed}")
        return daily


def record_daily_outcome(repository: HabitRepository, habit: BuildHabit, day: date,
                         completed: bool, auto_processed: bool = False) -> DailyStatus:
    """
    Upsert a build habit's status for `day` and apply the streak transition once.
    Callers hold the habit's lock.
    """
    level = penalties.calculate_penalty_level(
        habit.created_date, day, repository.get_last_completed_before(habit.id, day)
    )
    existing = repository.get_daily_status(habit.id, day)
    daily = repository.upsert_daily_status(DailyStatus(
        habit_id=habit.id,
        date=day,
        completed=completed,
        penalty_level=level,
        auto_processed=auto_processed
    ))

    if existing is None or existing.completed != completed:
        repository.save_habit(habit.model_copy(update={
            "streak": streaks.apply_outcome(habit.streak, day, completed)
        }))
    return daily
