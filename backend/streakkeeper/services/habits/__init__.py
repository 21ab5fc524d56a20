"""
Habits module - scoring engine and habit actions
"""
from . import penalties
from . import debt
from . import streaks
from . import window
from . import status
from . import repository
from . import service
from . import rollover

# Export commonly used names for convenience
from .penalties import calculate_penalty_level, required_task_value
from .debt import record_violation, count_events_on_day, confirm_clean_day
from .streaks import apply_outcome
from .window import ConfirmationWindow, confirmation_window
from .repository import HabitRepository, InMemoryHabitRepository
from .service import HabitService
from .rollover import close_day

__all__ = [
    # Modules
    'penalties',
    'debt',
    'streaks',
    'window',
    'status',
    'repository',
    'service',
    'rollover',

    # Engine functions
    'calculate_penalty_level',
    'required_task_value',
    'record_violation',
    'count_events_on_day',
    'confirm_clean_day',
    'apply_outcome',
    'ConfirmationWindow',
    'confirmation_window',

    # Storage and actions
    'HabitRepository',
    'InMemoryHabitRepository',
    'HabitService',
    'close_day'
]
