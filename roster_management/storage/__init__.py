"""
Document storage for published rosters and wellbeing check-ins.
"""

from .store import DocumentStore, InMemoryDocumentStore, JsonFileDocumentStore
from .repositories import CheckInRepository, RosterRepository

__all__ = [
    "DocumentStore",
    "InMemoryDocumentStore",
    "JsonFileDocumentStore",
    "RosterRepository",
    "CheckInRepository"
]
