"""
Habits Repository - storage interface for habits and their facts
Habits, daily statuses, violation events and debt ledger entries.
InMemoryHabitRepository is the default store; see supabase_repository for the
database-backed one.
"""
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple
import logging
import threading

from streakkeeper.core.constants import HABIT_KIND_AVOID, HABIT_KIND_BUILD
from streakkeeper.core.exceptions import HabitNotFoundError, InvalidHabitDataError
from streakkeeper.models.habit import (
    AvoidHabit,
    BuildHabit,
    DailyStatus,
    DebtLedgerEntry,
    Habit,
    HabitEvent,
)
from streakkeeper.utils.timezone import to_local_date

logger = logging.getLogger(__name__)


class HabitRepository:
    """Operations the habit service needs from storage"""

    # HABITS
    def get_habit(self, habit_id: int) -> Optional[Habit]:
        raise NotImplementedError

    def list_habits(self, owner_id: Optional[str] = None) -> List[Habit]:
        """All habits of an owner, or of everyone when owner_id is None"""
        raise NotImplementedError

    def create_habit(self, owner_id: str, name: str, kind: str, created_at: datetime,
                     base_task_value: Optional[int] = None, unit: Optional[str] = None) -> Habit:
        """Insert a habit; avoid habits get a zero-debt ledger entry in the same step"""
        raise NotImplementedError

    def save_habit(self, habit: Habit) -> Habit:
        """Persist a habit's streak state"""
        raise NotImplementedError

    def delete_habit(self, habit_id: int) -> None:
        """Delete a habit after all of its statuses, events and ledger entry"""
        raise NotImplementedError

    # DAILY STATUS
    def get_daily_status(self, habit_id: int, day: date) -> Optional[DailyStatus]:
        raise NotImplementedError

    def get_daily_statuses(self, habit_id: int) -> List[DailyStatus]:
        raise NotImplementedError

    def get_last_completed_before(self, habit_id: int, day: date) -> Optional[date]:
        raise NotImplementedError

    def upsert_daily_status(self, status: DailyStatus) -> DailyStatus:
        raise NotImplementedError

    # EVENTS
    def add_event(self, event: HabitEvent) -> HabitEvent:
        """Append a violation event and return it with its id"""
        raise NotImplementedError

    def get_events_for_day(self, habit_id: int, day: date) -> List[HabitEvent]:
        raise NotImplementedError

    # DEBT LEDGER
    def get_ledger(self, habit_id: int) -> Optional[DebtLedgerEntry]:
        raise NotImplementedError

    def save_ledger(self, ledger: DebtLedgerEntry) -> DebtLedgerEntry:
        raise NotImplementedError


def build_habit_model(data: dict) -> Habit:
    """
    Turn a flat row into the matching habit model

    Raises:
        InvalidHabitDataError: If the kind is unknown or kind-specific fields are wrong
    """
    kind = data.get("kind")
    try:
        if kind == HABIT_KIND_BUILD:
            return BuildHabit(**data)
        if kind == HABIT_KIND_AVOID:
            return AvoidHabit(**{k: v for k, v in data.items()
                                 if k not in ("base_task_value", "unit") or v is not None})
    except ValueError as e:
        raise InvalidHabitDataError(f"Invalid habit data: {e}")
    raise InvalidHabitDataError(f"Unknown habit kind: {kind}")


class InMemoryHabitRepository(HabitRepository):
    """Dict-backed store; state lives for the lifetime of the process"""

    def __init__(self):
        self._lock = threading.RLock()
        self._habits: Dict[int, Habit] = {}
        self._statuses: Dict[Tuple[int, date], DailyStatus] = {}
        self._events: Dict[int, List[HabitEvent]] = {}
        self._ledgers: Dict[int, DebtLedgerEntry] = {}
        self._next_habit_id = 1
        self._next_event_id = 1

    # ========================================================================
    # HABITS
    # ========================================================================

    def get_habit(self, habit_id: int) -> Optional[Habit]:
        with self._lock:
            return self._habits.get(habit_id)

    def list_habits(self, owner_id: Optional[str] = None) -> List[Habit]:
        with self._lock:
            habits = sorted(self._habits.values(), key=lambda h: h.id)
        if owner_id is None:
            return habits
        return [h for h in habits if h.owner_id == owner_id]

    def create_habit(self, owner_id: str, name: str, kind: str, created_at: datetime,
                     base_task_value: Optional[int] = None, unit: Optional[str] = None) -> Habit:
        with self._lock:
            habit = build_habit_model({
                "id": self._next_habit_id,
                "owner_id": owner_id,
                "name": name,
                "kind": kind,
                "created_at": created_at,
                "base_task_value": base_task_value,
                "unit": unit,
            })
            self._next_habit_id += 1
            self._habits[habit.id] = habit
            if habit.kind == HABIT_KIND_AVOID:
                self._ledgers[habit.id] = DebtLedgerEntry(habit_id=habit.id)
            logger.debug(f"Created {habit.kind} habit {habit.id} for owner {owner_id}")
            return habit

    def save_habit(self, habit: Habit) -> Habit:
        with self._lock:
            if habit.id not in self._habits:
                raise HabitNotFoundError(f"Habit {habit.id} not found")
            self._habits[habit.id] = habit
            return habit

    def delete_habit(self, habit_id: int) -> None:
        with self._lock:
            for key in [k for k in self._statuses if k[0] == habit_id]:
                del self._statuses[key]
            self._events.pop(habit_id, None)
            self._ledgers.pop(habit_id, None)
            self._habits.pop(habit_id, None)

    # ========================================================================
    # DAILY STATUS
    # ========================================================================

    def get_daily_status(self, habit_id: int, day: date) -> Optional[DailyStatus]:
        with self._lock:
            return self._statuses.get((habit_id, day))

    def get_daily_statuses(self, habit_id: int) -> List[DailyStatus]:
        with self._lock:
            statuses = [s for (hid, _), s in self._statuses.items() if hid == habit_id]
        return sorted(statuses, key=lambda s: s.date)

    def get_last_completed_before(self, habit_id: int, day: date) -> Optional[date]:
        completed = [s.date for s in self.get_daily_statuses(habit_id) if s.completed and s.date < day]
        return max(completed) if completed else None

    def upsert_daily_status(self, status: DailyStatus) -> DailyStatus:
        with self._lock:
            self._statuses[(status.habit_id, status.date)] = status
            return status

    # ========================================================================
    # EVENTS
    # ========================================================================

    def add_event(self, event: HabitEvent) -> HabitEvent:
        with self._lock:
            stored = event.model_copy(update={"id": self._next_event_id})
            self._next_event_id += 1
            self._events.setdefault(event.habit_id, []).append(stored)
            return stored

    def get_events_for_day(self, habit_id: int, day: date) -> List[HabitEvent]:
        with self._lock:
            events = list(self._events.get(habit_id, []))
        return [e for e in events if to_local_date(e.timestamp) == day]

    # ========================================================================
    # DEBT LEDGER
    # ========================================================================

    def get_ledger(self, habit_id: int) -> Optional[DebtLedgerEntry]:
        with self._lock:
            return self._ledgers.get(habit_id)

    def save_ledger(self, ledger: DebtLedgerEntry) -> DebtLedgerEntry:
        with self._lock:
            self._ledgers[ledger.habit_id] = ledger
            return ledger
