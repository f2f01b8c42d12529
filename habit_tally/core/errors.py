"""
Error taxonomy for Habit Tally.

Every error here is user-recoverable; none of them should end the process.
"""

from typing import Optional


class HabitTallyError(Exception):
    """Base class for all Habit Tally errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


class ValidationError(HabitTallyError):
    """Raised when a quantity is negative or not a number."""


class PersistenceError(HabitTallyError):
    """Raised when the record file cannot be read or written."""


class NotFoundError(HabitTallyError):
    """Raised when a record id is not in the current collection."""
