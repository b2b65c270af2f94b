"""
Team Roster Management

Rotation roster generation with calendar/spreadsheet exports, plus the
team's wellbeing check-in log.
"""

__version__ = "0.1.0"

from .exceptions import InvalidConfiguration, RosterError, RosterNotFound, ScheduleConflict
from .rostering import RosterConfig, RosterGenerator, RosterManager, RosterTable, generate
from .storage import InMemoryDocumentStore, JsonFileDocumentStore, RosterRepository

__all__ = [
    "InvalidConfiguration",
    "RosterError",
    "RosterNotFound",
    "ScheduleConflict",
    "RosterConfig",
    "RosterGenerator",
    "RosterManager",
    "RosterTable",
    "generate",
    "InMemoryDocumentStore",
    "JsonFileDocumentStore",
    "RosterRepository"
]
