"""
Supabase-backed habits repository
Tables: habits, daily_habit_status, habit_events, habit_debts
"""
from datetime import date, datetime
from typing import Any, Dict, List, Optional
import logging

from streakkeeper.core.constants import HABIT_KIND_AVOID
from streakkeeper.core.exceptions import DatabaseError, HabitNotFoundError
from streakkeeper.models.habit import (
    DailyStatus,
    DebtLedgerEntry,
    Habit,
    HabitEvent,
    StreakState,
)
from streakkeeper.utils.timezone import day_bounds
from .repository import HabitRepository, build_habit_model

logger = logging.getLogger(__name__)

# Streak columns on the habits table, keyed by StreakState field
STREAK_COLUMNS = {
    "current_length": "current_streak",
    "current_start_date": "current_streak_start",
    "longest_length": "longest_streak",
    "longest_start_date": "longest_streak_start",
    "longest_end_date": "longest_streak_end",
    "last_streak_date": "last_streak_date",
}


def _day_or_none(value: Optional[date]) -> Optional[str]:
    return str(value) if value is not None else None


def habit_from_row(row: Dict[str, Any]) -> Habit:
    """Convert a flat habits row into a habit model"""
    streak = StreakState(**{field: row.get(column) or (0 if field.endswith("length") else None)
                            for field, column in STREAK_COLUMNS.items()})
    return build_habit_model({
        "id": row["id"],
        "owner_id": row["user_id"],
        "name": row["name"],
        "kind": row["kind"],
        "created_at": row["created_at"],
        "base_task_value": row.get("base_task_value"),
        "unit": row.get("unit"),
        "streak": streak,
    })


def streak_to_row(streak: StreakState) -> Dict[str, Any]:
    """Flatten a streak state into habits columns"""
    data = streak.model_dump()
    return {
        column: _day_or_none(data[field]) if field.endswith("date") else data[field]
        for field, column in STREAK_COLUMNS.items()
    }


def status_from_row(row: Dict[str, Any]) -> DailyStatus:
    return DailyStatus(
        habit_id=row["habit_id"],
        date=row["date"],
        completed=row["completed"],
        penalty_level=row.get("penalty_level", 0),
        auto_processed=row.get("auto_processed", False),
    )


def ledger_from_row(row: Dict[str, Any]) -> DebtLedgerEntry:
    return DebtLedgerEntry(
        habit_id=row["habit_id"],
        debt_count=row.get("debt_count", 0),
        last_clean_date=row.get("last_clean_date"),
    )


class SupabaseHabitRepository(HabitRepository):
    """Repository backed by a Supabase client"""

    def __init__(self, client):
        self.client = client

    # ========================================================================
    # HABITS TABLE
    # ========================================================================

    def get_habit(self, habit_id: int) -> Optional[Habit]:
        try:
            result = self.client.table("habits").select("*").eq("id", habit_id).execute()
        except Exception as e:
            logger.error(f"Database error fetching habit {habit_id}: {e}")
            raise DatabaseError(f"Failed to fetch habit: {e}")
        return habit_from_row(result.data[0]) if result.data else None

    def list_habits(self, owner_id: Optional[str] = None) -> List[Habit]:
        try:
            query = self.client.table("habits").select("*")
            if owner_id is not None:
                query = query.eq("user_id", owner_id)
            result = query.order("id").execute()
        except Exception as e:
            logger.error(f"Database error fetching habits: {e}")
            raise DatabaseError(f"Failed to fetch habits: {e}")
        return [habit_from_row(row) for row in result.data]

    def create_habit(self, owner_id: str, name: str, kind: str, created_at: datetime,
                     base_task_value: Optional[int] = None, unit: Optional[str] = None) -> Habit:
        habit_data = {
            "user_id": owner_id,
            "name": name,
            "kind": kind,
            "created_at": created_at.isoformat(),
            **streak_to_row(StreakState()),
        }
        if base_task_value is not None:
            habit_data["base_task_value"] = base_task_value
        if unit is not None:
            habit_data["unit"] = unit

        try:
            result = self.client.table("habits").insert(habit_data).execute()
            row = result.data[0]
        except Exception as e:
            logger.error(f"Database error creating habit: {e}")
            raise DatabaseError(f"Failed to create habit: {e}")

        if kind == HABIT_KIND_AVOID:
            try:
                self.client.table("habit_debts").insert({"habit_id": row["id"], "debt_count": 0}).execute()
            except Exception as e:
                logger.error(f"Database error creating debt ledger for habit {row['id']}: {e}")
                self._remove_habit_row(row["id"])
                raise DatabaseError(f"Failed to create habit: {e}")
        return habit_from_row(row)

    def _remove_habit_row(self, habit_id: int) -> None:
        """Undo a habit insert whose ledger entry could not be created"""
        try:
            self.client.table("habits").delete().eq("id", habit_id).execute()
        except Exception as e:
            logger.error(f"Could not remove habit {habit_id} after failed ledger insert: {e}")

    def save_habit(self, habit: Habit) -> Habit:
        try:
            result = self.client.table("habits")\
                .update(streak_to_row(habit.streak))\
                .eq("id", habit.id)\
                .execute()
        except Exception as e:
            logger.error(f"Database error updating habit {habit.id}: {e}")
            raise DatabaseError(f"Failed to update habit: {e}")
        if not result.data:
            raise HabitNotFoundError(f"Habit {habit.id} not found")
        return habit_from_row(result.data[0])

    def delete_habit(self, habit_id: int) -> None:
        try:
            for table in ("habit_events", "daily_habit_status", "habit_debts"):
                self.client.table(table).delete().eq("habit_id", habit_id).execute()
            self.client.table("habits").delete().eq("id", habit_id).execute()
        except Exception as e:
            logger.error(f"Database error deleting habit {habit_id}: {e}")
            raise DatabaseError(f"Failed to delete habit: {e}")

    # ========================================================================
    # DAILY_HABIT_STATUS TABLE
    # ========================================================================

    def get_daily_status(self, habit_id: int, day: date) -> Optional[DailyStatus]:
        try:
            result = self.client.table("daily_habit_status")\
                .select("*")\
                .eq("habit_id", habit_id)\
                .eq("date", str(day))\
                .execute()
        except Exception as e:
            logger.error(f"Database error fetching status for habit {habit_id} on {day}: {e}")
            raise DatabaseError(f"Failed to fetch daily status: {e}")
        return status_from_row(result.data[0]) if result.data else None

    def get_daily_statuses(self, habit_id: int) -> List[DailyStatus]:
        try:
            result = self.client.table("daily_habit_status")\
                .select("*")\
                .eq("habit_id", habit_id)\
                .order("date")\
                .execute()
        except Exception as e:
            logger.error(f"Database error fetching statuses for habit {habit_id}: {e}")
            raise DatabaseError(f"Failed to fetch daily statuses: {e}")
        return [status_from_row(row) for row in result.data]

    def get_last_completed_before(self, habit_id: int, day: date) -> Optional[date]:
        try:
            result = self.client.table("daily_habit_status")\
                .select("date")\
                .eq("habit_id", habit_id)\
                .eq("completed", True)\
                .lt("date", str(day))\
                .order("date", desc=True)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Database error fetching last completion for habit {habit_id}: {e}")
            raise DatabaseError(f"Failed to fetch last completion: {e}")
        return date.fromisoformat(result.data[0]["date"]) if result.data else None

    def upsert_daily_status(self, status: DailyStatus) -> DailyStatus:
        row = status.model_dump()
        row["date"] = str(status.date)
        try:
            result = self.client.table("daily_habit_status")\
                .upsert(row, on_conflict="habit_id,date")\
                .execute()
        except Exception as e:
            logger.error(f"Database error upserting status for habit {status.habit_id}: {e}")
            raise DatabaseError(f"Failed to save daily status: {e}")
        return status_from_row(result.data[0]) if result.data else status

    # ========================================================================
    # HABIT_EVENTS TABLE
    # ========================================================================

    def add_event(self, event: HabitEvent) -> HabitEvent:
        event_data = {"habit_id": event.habit_id, "timestamp": event.timestamp.isoformat()}
        if event.notes:
            event_data["notes"] = event.notes
        try:
            result = self.client.table("habit_events").insert(event_data).execute()
        except Exception as e:
            logger.error(f"Database error creating event for habit {event.habit_id}: {e}")
            raise DatabaseError(f"Failed to create event: {e}")
        return HabitEvent(**result.data[0]) if result.data else event

    def get_events_for_day(self, habit_id: int, day: date) -> List[HabitEvent]:
        start, end = day_bounds(day)
        try:
            result = self.client.table("habit_events")\
                .select("*")\
                .eq("habit_id", habit_id)\
                .gte("timestamp", start.isoformat())\
                .lt("timestamp", end.isoformat())\
                .execute()
        except Exception as e:
            logger.error(f"Database error fetching events for habit {habit_id} on {day}: {e}")
            raise DatabaseError(f"Failed to fetch events: {e}")
        return [HabitEvent(**row) for row in result.data]

    # ========================================================================
    # HABIT_DEBTS TABLE
    # ========================================================================

    def get_ledger(self, habit_id: int) -> Optional[DebtLedgerEntry]:
        try:
            result = self.client.table("habit_debts").select("*").eq("habit_id", habit_id).execute()
        except Exception as e:
            logger.error(f"Database error fetching debt for habit {habit_id}: {e}")
            raise DatabaseError(f"Failed to fetch debt: {e}")
        return ledger_from_row(result.data[0]) if result.data else None

    def save_ledger(self, ledger: DebtLedgerEntry) -> DebtLedgerEntry:
        try:
            result = self.client.table("habit_debts")\
                .upsert({
                    "habit_id": ledger.habit_id,
                    "debt_count": ledger.debt_count,
                    "last_clean_date": _day_or_none(ledger.last_clean_date)
                }, on_conflict="habit_id")\
                .execute()
        except Exception as e:
            logger.error(f"Database error updating debt for habit {ledger.habit_id}: {e}")
            raise DatabaseError(f"Failed to update debt: {e}")
        if not result.data:
            logger.error(f"Debt upsert for habit {ledger.habit_id} returned no row")
            raise DatabaseError(f"Failed to update debt for habit {ledger.habit_id}")
        return ledger_from_row(result.data[0])
