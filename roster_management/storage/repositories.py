"""
Typed access to the documents the dashboard keeps in the store.
"""

import logging
from typing import Dict, List, Optional

from ..rostering.models import RosterTable
from ..wellbeing.models import CheckIn
from .store import DocumentStore


logger = logging.getLogger(__name__)

ROSTER_KEY = "system_data/roster"
WELLBEING_PREFIX = "wellbeing_history/"


class RosterRepository:
    """Reads and replaces the single published roster snapshot."""

    def __init__(self, store: DocumentStore, key: str = ROSTER_KEY):
        self.store = store
        self.key = key

    def read_roster_table(self) -> Optional[RosterTable]:
        document = self.store.read(self.key)
        if document is None:
            return None
        return RosterTable.from_dict(document)

    def write_roster_table(self, table: RosterTable) -> None:
        self.store.write(self.key, table.to_dict())
        logger.info("Stored roster snapshot (%d assignments)", len(table))


class CheckInRepository:
    """Per-staff wellbeing check-in history, stored as ``{"logs": [...]}``."""

    def __init__(self, store: DocumentStore):
        self.store = store

    def _key(self, staff_id: str) -> str:
        return f"{WELLBEING_PREFIX}{staff_id}"

    def append(self, checkin: CheckIn) -> None:
        key = self._key(checkin.staff_id)
        document = self.store.read(key) or {"logs": []}
        document.setdefault("logs", []).append(checkin.to_dict())
        self.store.write(key, document)

    def history(self, staff_id: str) -> List[CheckIn]:
        document = self.store.read(self._key(staff_id)) or {}
        return [CheckIn.from_dict(staff_id, entry) for entry in document.get("logs", [])]

    def all_histories(self) -> Dict[str, List[CheckIn]]:
        histories = {}
        for key in self.store.keys(WELLBEING_PREFIX):
            staff_id = key[len(WELLBEING_PREFIX):]
            histories[staff_id] = self.history(staff_id)
        return histories
