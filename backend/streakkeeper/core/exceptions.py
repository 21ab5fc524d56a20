"""
Custom Exceptions - Application-specific error types
"""


class StreakKeeperException(Exception):
    """Base exception for all streak keeper errors"""
    pass


class HabitNotFoundError(StreakKeeperException):
    """Raised when a habit cannot be found or belongs to another owner"""
    pass


class InvalidHabitDataError(StreakKeeperException):
    """Raised when habit data or a day key fails validation"""
    pass


class InvalidKindOperationError(StreakKeeperException):
    """Raised when an action is not valid for the habit's kind"""
    pass


class UncleanDayError(StreakKeeperException):
    """Raised when a clean day is confirmed for a day with logged violations"""
    pass


class ConfirmationWindowClosedError(StreakKeeperException):
    """Raised when a confirmation arrives outside the enforced window"""
    pass


class DatabaseError(StreakKeeperException):
    """Raised when database operations fail"""
    pass
