"""
Tests for the streak state machine
"""
from datetime import date

import pytest
from pydantic import ValidationError

from streakkeeper.models.habit import StreakState
from streakkeeper.services.habits import streaks


def d(day):
    return date(2024, 1, day)


def run(outcomes, start=None):
    """Apply (day, success) pairs in order, returning every intermediate state"""
    state = start or StreakState()
    states = []
    for day, success in outcomes:
        state = streaks.apply_outcome(state, d(day), success)
        states.append(state)
    return states


def test_first_success_starts_streak():
    state = streaks.apply_outcome(StreakState(), d(5), True)

    assert state.current_length == 1
    assert state.current_start_date == d(5)
    assert state.longest_length == 1
    assert state.longest_start_date == d(5)
    assert state.longest_end_date is None
    assert state.last_streak_date == d(5)


def test_completed_twice_then_missed():
    first, second, missed = run([(5, True), (6, True), (7, False)])

    assert (first.current_length, first.current_start_date) == (1, d(5))
    assert (second.current_length, second.current_start_date) == (2, d(5))
    assert missed.current_length == 0
    assert missed.current_start_date is None
    assert missed.longest_length == 2
    assert missed.longest_start_date == d(5)
    assert missed.longest_end_date == d(6)
    # The miss does not move the last streak day
    assert missed.last_streak_date == d(6)


def test_gap_restarts_streak():
    *_, state = run([(5, True), (7, True)])

    assert state.current_length == 1
    assert state.current_start_date == d(7)
    assert state.longest_length == 1
    assert state.longest_start_date == d(5)


def test_success_after_failure_and_gap_is_not_contiguous():
    *_, state = run([(5, True), (6, False), (7, True)])

    assert state.current_length == 1
    assert state.current_start_date == d(7)


def test_breaking_shorter_streak_keeps_record_end():
    *_, state = run([(1, True), (2, True), (3, True), (4, False), (5, True), (6, True), (7, False)])

    assert state.longest_length == 3
    assert state.longest_start_date == d(1)
    assert state.longest_end_date == d(3)
    assert state.current_length == 0


def test_new_record_reopens_longest():
    states = run([(1, True), (2, True), (3, True), (4, False),
                  (5, True), (6, True), (7, True), (8, True)])

    tied = states[6]
    assert tied.current_length == 3
    assert tied.longest_start_date == d(1)
    assert tied.longest_end_date == d(3)

    record = states[7]
    assert record.current_length == 4
    assert record.longest_length == 4
    assert record.longest_start_date == d(5)
    assert record.longest_end_date is None


def test_failure_without_streak_is_harmless():
    state = streaks.apply_outcome(StreakState(), d(3), False)
    assert state == StreakState()


@pytest.mark.parametrize("pattern", [
    [True] * 6,
    [True, True, False, True, True, True, False, True],
    [False, True, False, False, True, True, True, True, True, False],
])
def test_invariants_hold_over_any_sequence(pattern):
    previous = StreakState()
    for offset, success in enumerate(pattern, start=1):
        state = streaks.apply_outcome(previous, d(offset), success)

        if success:
            assert state.current_length == previous.current_length + 1
        else:
            assert state.current_length == 0
        assert state.longest_length >= previous.longest_length
        assert state.longest_length >= state.current_length
        previous = state


def test_input_state_is_not_modified():
    before = StreakState()
    streaks.apply_outcome(before, d(1), True)
    assert before.current_length == 0


def test_inconsistent_state_rejected():
    with pytest.raises(ValidationError):
        StreakState(current_length=2, current_start_date=d(1), longest_length=1)
    with pytest.raises(ValidationError):
        StreakState(current_length=1, longest_length=1)
    with pytest.raises(ValidationError):
        StreakState(longest_length=2, longest_start_date=d(5), longest_end_date=d(4))
