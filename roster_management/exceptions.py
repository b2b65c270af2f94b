"""
Errors raised by roster generation and publishing.
"""

from datetime import date
from typing import Optional


class RosterError(ValueError):
    """Base class for roster errors."""


class InvalidConfiguration(RosterError):
    """Roster configuration is malformed or empty."""

    def __init__(self, field: str, message: Optional[str] = None):
        self.field = field
        self.message = message or f"Invalid value for '{field}'"
        super().__init__(self.message)


class ScheduleConflict(RosterError):
    """Every staff member is already booked when a task still needs cover."""

    def __init__(self, date: date, task: str):
        self.date = date
        self.task = task
        super().__init__(
            f"No unbooked staff left for task '{task}' on {date.isoformat()}"
        )


class RosterNotFound(RosterError):
    """No roster has been published yet."""

    def __init__(self, message: str = "No roster has been generated yet"):
        super().__init__(message)
