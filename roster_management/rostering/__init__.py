"""
Roster generation module for rotation rosters.
"""

from .models import RosterConfig, RosterTable, RotationCursor, ShiftAssignment, StaffMember, TaskLine
from .generator import RosterGenerator, generate, next_available
from .export import (
    CalendarEvent,
    CalendarEvents,
    Row,
    parse_csv,
    rows_to_dataframe,
    to_calendar_events,
    to_csv,
    to_ics,
    to_rows,
)
from .manager import RosterManager

__all__ = [
    "RosterConfig",
    "RosterTable",
    "RotationCursor",
    "ShiftAssignment",
    "StaffMember",
    "TaskLine",
    "RosterGenerator",
    "generate",
    "next_available",
    "CalendarEvent",
    "CalendarEvents",
    "Row",
    "parse_csv",
    "rows_to_dataframe",
    "to_calendar_events",
    "to_csv",
    "to_ics",
    "to_rows",
    "RosterManager"
]
