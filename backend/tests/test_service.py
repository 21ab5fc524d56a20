"""
Tests for habit actions
"""
from datetime import date
import threading

import pytest

from streakkeeper.core.config import settings
from streakkeeper.core.exceptions import (
    ConfirmationWindowClosedError,
    HabitNotFoundError,
    InvalidHabitDataError,
    InvalidKindOperationError,
    UncleanDayError,
)
from streakkeeper.models.habit import AvoidHabitStatus, BuildHabitStatus

OWNER = "user-1"


@pytest.fixture()
def build_habit(service):
    return service.create_habit(OWNER, "Pushups", "build", base_task_value=10, unit="reps")


@pytest.fixture()
def avoid_habit(service):
    return service.create_habit(OWNER, "No sugar", "avoid")


class TestCreateHabit:

    def test_build_habit(self, build_habit, repository):
        assert build_habit.kind == "build"
        assert build_habit.base_task_value == 10
        assert build_habit.streak.current_length == 0
        assert build_habit.created_date == date(2024, 1, 1)
        assert repository.get_ledger(build_habit.id) is None

    def test_avoid_habit_gets_zero_debt_ledger(self, avoid_habit, repository):
        ledger = repository.get_ledger(avoid_habit.id)
        assert ledger.debt_count == 0
        assert ledger.last_clean_date is None

    @pytest.mark.parametrize("kwargs", [
        {"kind": "build"},
        {"kind": "build", "base_task_value": 10},
        {"kind": "build", "unit": "reps"},
        {"kind": "avoid", "unit": "reps"},
        {"kind": "avoid", "base_task_value": 3},
        {"kind": "sometimes"},
    ])
    def test_invalid_fields_rejected(self, service, repository, kwargs):
        with pytest.raises(InvalidHabitDataError):
            service.create_habit(OWNER, "Bad", **kwargs)
        assert repository.list_habits() == []

    def test_non_positive_base_rejected(self, service):
        with pytest.raises(InvalidHabitDataError):
            service.create_habit(OWNER, "Bad", "build", base_task_value=0, unit="reps")


class TestLookups:

    def test_other_owner_cannot_see_habit(self, service, build_habit):
        with pytest.raises(HabitNotFoundError):
            service.get_habit("someone-else", build_habit.id)

    def test_unknown_habit(self, service):
        with pytest.raises(HabitNotFoundError):
            service.get_habit(OWNER, 999)

    def test_list_only_returns_owned_habits(self, service, build_habit, avoid_habit):
        service.create_habit("someone-else", "Read", "build", base_task_value=5, unit="pages")

        habits = service.list_habits(OWNER)

        assert [h.id for h in habits] == [build_habit.id, avoid_habit.id]
        assert isinstance(habits[0], BuildHabitStatus)
        assert isinstance(habits[1], AvoidHabitStatus)


class TestBuildHabit:

    def test_penalty_grows_while_nothing_is_done(self, service, clock, build_habit):
        first = service.get_habit(OWNER, build_habit.id)
        assert (first.penalty_level, first.required_task_value) == (0, 10)

        clock.set(date(2024, 1, 3))
        later = service.get_habit(OWNER, build_habit.id)
        assert (later.penalty_level, later.required_task_value) == (2, 30)

    def test_complete_complete_miss(self, service, clock):
        clock.set(date(2024, 1, 5))
        habit = service.create_habit(OWNER, "Run", "build", base_task_value=2, unit="km")

        service.complete_daily_task(OWNER, habit.id, "2024-01-05", True)
        streak = service.get_habit(OWNER, habit.id).streak
        assert (streak.current_length, streak.current_start_date) == (1, date(2024, 1, 5))

        clock.set(date(2024, 1, 6))
        service.complete_daily_task(OWNER, habit.id, "2024-01-06", True)
        streak = service.get_habit(OWNER, habit.id).streak
        assert (streak.current_length, streak.current_start_date) == (2, date(2024, 1, 5))

        clock.set(date(2024, 1, 7))
        missed = service.complete_daily_task(OWNER, habit.id, "2024-01-07", False)
        assert missed.completed is False
        assert missed.penalty_level == 0

        status = service.get_habit(OWNER, habit.id)
        assert status.streak.current_length == 0
        assert status.streak.longest_length == 2
        assert status.streak.longest_end_date == date(2024, 1, 6)
        assert status.today_missed is True

        clock.set(date(2024, 1, 8))
        assert service.get_habit(OWNER, habit.id).penalty_level == 1

    def test_completion_records_penalty_in_force(self, service, clock, build_habit):
        clock.set(date(2024, 1, 4))
        daily = service.complete_daily_task(OWNER, build_habit.id, date(2024, 1, 4), True)
        assert daily.penalty_level == 3

        clock.set(date(2024, 1, 5))
        assert service.get_habit(OWNER, build_habit.id).penalty_level == 0

    def test_resubmitting_same_outcome_does_not_double_count(self, service, build_habit, repository):
        service.complete_daily_task(OWNER, build_habit.id, "2024-01-01", True)
        service.complete_daily_task(OWNER, build_habit.id, "2024-01-01", True)

        assert service.get_habit(OWNER, build_habit.id).streak.current_length == 1
        assert len(repository.get_daily_statuses(build_habit.id)) == 1

    def test_changing_outcome_upserts(self, service, build_habit, repository):
        service.complete_daily_task(OWNER, build_habit.id, "2024-01-01", True)
        service.complete_daily_task(OWNER, build_habit.id, "2024-01-01", False)

        statuses = repository.get_daily_statuses(build_habit.id)
        assert len(statuses) == 1
        assert statuses[0].completed is False
        assert service.get_habit(OWNER, build_habit.id).streak.current_length == 0

    def test_violation_on_build_habit_rejected(self, service, build_habit, repository):
        with pytest.raises(InvalidKindOperationError):
            service.log_violation(OWNER, build_habit.id)
        assert repository.get_events_for_day(build_habit.id, date(2024, 1, 1)) == []

    @pytest.mark.parametrize("day", ["2024-01-02", "2023-12-31"])
    def test_future_and_pre_creation_days_rejected(self, service, build_habit, day):
        with pytest.raises(InvalidHabitDataError):
            service.complete_daily_task(OWNER, build_habit.id, day, True)

    def test_malformed_day_rejected(self, service, build_habit):
        with pytest.raises(InvalidHabitDataError):
            service.complete_daily_task(OWNER, build_habit.id, "2024-13-01", True)


class TestAvoidHabit:

    def test_violation_then_clean_day(self, service, clock, avoid_habit):
        clock.set(date(2024, 1, 3))
        event = service.log_violation(OWNER, avoid_habit.id, notes="cake")
        assert event.id is not None
        assert event.notes == "cake"

        status = service.get_habit(OWNER, avoid_habit.id)
        assert status.debt == 1
        assert status.today_event_count == 1

        result = service.confirm_clean_day(OWNER, avoid_habit.id, "2024-01-02")
        assert result.debt == 0
        assert result.already_confirmed is False
        assert service.get_habit(OWNER, avoid_habit.id).streak.current_length == 1

        again = service.confirm_clean_day(OWNER, avoid_habit.id, "2024-01-02")
        assert again.debt == 0
        assert again.already_confirmed is True
        assert service.get_habit(OWNER, avoid_habit.id).streak.current_length == 1

    def test_earlier_day_after_later_credit_is_not_credited(self, service, clock, avoid_habit, repository):
        for _ in range(5):
            service.log_violation(OWNER, avoid_habit.id)
        clock.set(date(2024, 1, 4))

        first = service.confirm_clean_day(OWNER, avoid_habit.id, "2024-01-03")
        earlier = service.confirm_clean_day(OWNER, avoid_habit.id, "2024-01-02")
        repeated = service.confirm_clean_day(OWNER, avoid_habit.id, "2024-01-03")

        assert (first.debt, first.already_confirmed) == (4, False)
        assert (earlier.debt, earlier.already_confirmed) == (4, True)
        assert (repeated.debt, repeated.already_confirmed) == (4, True)

        ledger = repository.get_ledger(avoid_habit.id)
        assert ledger.debt_count == 4
        assert ledger.last_clean_date == date(2024, 1, 3)
        streak = service.get_habit(OWNER, avoid_habit.id).streak
        assert (streak.current_length, streak.current_start_date) == (1, date(2024, 1, 3))

    def test_consecutive_days_in_order_each_credit_once(self, service, clock, avoid_habit, repository):
        for _ in range(3):
            service.log_violation(OWNER, avoid_habit.id)
        clock.set(date(2024, 1, 5))

        debts = [service.confirm_clean_day(OWNER, avoid_habit.id, f"2024-01-0{day}").debt for day in (2, 3, 4)]
        again = [service.confirm_clean_day(OWNER, avoid_habit.id, f"2024-01-0{day}") for day in (2, 3, 4)]

        assert debts == [2, 1, 0]
        assert all(result.already_confirmed for result in again)
        assert repository.get_ledger(avoid_habit.id).debt_count == 0
        assert service.get_habit(OWNER, avoid_habit.id).streak.current_length == 3

    def test_day_with_violations_cannot_be_clean(self, service, avoid_habit, repository):
        service.log_violation(OWNER, avoid_habit.id)

        with pytest.raises(UncleanDayError):
            service.confirm_clean_day(OWNER, avoid_habit.id, "2024-01-01")
        assert repository.get_ledger(avoid_habit.id).debt_count == 1

    def test_creation_day_clean_keeps_debt_at_zero(self, service, avoid_habit):
        result = service.confirm_clean_day(OWNER, avoid_habit.id, date(2024, 1, 1))

        assert result.debt == 0
        status = service.get_habit(OWNER, avoid_habit.id)
        assert status.streak.current_length == 1
        assert status.today_confirmed is True

    def test_violation_breaks_streak(self, service, clock, avoid_habit):
        service.confirm_clean_day(OWNER, avoid_habit.id, "2024-01-01")
        clock.set(date(2024, 1, 2))
        service.confirm_clean_day(OWNER, avoid_habit.id, "2024-01-02")
        clock.set(date(2024, 1, 3))

        service.log_violation(OWNER, avoid_habit.id)

        streak = service.get_habit(OWNER, avoid_habit.id).streak
        assert streak.current_length == 0
        assert streak.longest_length == 2
        assert streak.longest_end_date == date(2024, 1, 2)

    def test_complete_on_avoid_habit_rejected(self, service, avoid_habit):
        with pytest.raises(InvalidKindOperationError):
            service.complete_daily_task(OWNER, avoid_habit.id, "2024-01-01", True)

    def test_other_owner_cannot_log(self, service, avoid_habit, repository):
        with pytest.raises(HabitNotFoundError):
            service.log_violation("someone-else", avoid_habit.id)
        assert repository.get_ledger(avoid_habit.id).debt_count == 0

    def test_concurrent_violations_are_all_counted(self, service, avoid_habit, repository):
        def log_many():
            for _ in range(25):
                service.log_violation(OWNER, avoid_habit.id)

        threads = [threading.Thread(target=log_many) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert repository.get_ledger(avoid_habit.id).debt_count == 200
        assert len(repository.get_events_for_day(avoid_habit.id, date(2024, 1, 1))) == 200


class TestConfirmationWindow:

    def test_enforced_window_blocks_confirmations(self, service, monkeypatch, build_habit, avoid_habit):
        monkeypatch.setattr(settings, "ENFORCE_CONFIRMATION_WINDOW", True)

        with pytest.raises(ConfirmationWindowClosedError):
            service.confirm_clean_day(OWNER, avoid_habit.id, "2024-01-01")
        with pytest.raises(ConfirmationWindowClosedError):
            service.complete_daily_task(OWNER, build_habit.id, "2024-01-01", True)

        # Violations are never gated
        service.log_violation(OWNER, avoid_habit.id)

    def test_enforced_window_allows_last_hour(self, service, clock, monkeypatch, avoid_habit):
        monkeypatch.setattr(settings, "ENFORCE_CONFIRMATION_WINDOW", True)
        clock.set(date(2024, 1, 1), hour=23, minute=30)

        assert service.confirm_clean_day(OWNER, avoid_habit.id, "2024-01-01").debt == 0

        # Repeating after the window closed is still a harmless no-op
        clock.set(date(2024, 1, 2), hour=9)
        assert service.confirm_clean_day(OWNER, avoid_habit.id, "2024-01-01").already_confirmed is True

    def test_window_state(self, service, clock):
        assert service.window_state().is_open is False
        clock.set(date(2024, 1, 1), hour=23)
        assert service.window_state().is_open is True


class TestDeleteHabit:

    def test_delete_cascades(self, service, clock, build_habit, avoid_habit, repository):
        service.complete_daily_task(OWNER, build_habit.id, "2024-01-01", True)
        service.log_violation(OWNER, avoid_habit.id)

        service.delete_habit(OWNER, build_habit.id)
        service.delete_habit(OWNER, avoid_habit.id)

        assert repository.list_habits() == []
        assert repository.get_daily_statuses(build_habit.id) == []
        assert repository.get_events_for_day(avoid_habit.id, date(2024, 1, 1)) == []
        assert repository.get_ledger(avoid_habit.id) is None
        with pytest.raises(HabitNotFoundError):
            service.get_habit(OWNER, build_habit.id)

    def test_other_owner_cannot_delete(self, service, build_habit, repository):
        with pytest.raises(HabitNotFoundError):
            service.delete_habit("someone-else", build_habit.id)
        assert repository.get_habit(build_habit.id) is not None
