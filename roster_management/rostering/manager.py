"""
Roster manager: generate, review and publish rosters.

Publishing is all-or-nothing. The roster is generated completely in memory
first and only then written as one document; a failed generation leaves the
stored roster untouched. Concurrent publishes are last-write-wins.
"""

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Optional, Union

from ..exceptions import RosterNotFound
from ..storage.repositories import RosterRepository
from .export import to_calendar_events, to_csv, to_ics, to_rows
from .generator import RosterGenerator
from .models import RosterConfig, RosterTable


logger = logging.getLogger(__name__)


class RosterManager:
    """
    Coordinates the generator with the roster repository.

    The manager keeps no roster state of its own; the repository's stored
    snapshot is the only copy that persists between calls.
    """

    def __init__(self,
                 repository: RosterRepository,
                 generator: Optional[RosterGenerator] = None):
        """
        Initialize manager.

        Args:
            repository: Where the published roster is read from and written to
            generator: Roster generator (default: Monday-Friday working week)
        """
        self.repository = repository
        self.generator = generator or RosterGenerator()

    def preview(self, config: Union[RosterConfig, Mapping]) -> RosterTable:
        """Generate a roster for review without storing it."""
        return self.generator.generate(config)

    def publish(self, config: Union[RosterConfig, Mapping]) -> RosterTable:
        """
        Generate a roster and replace the stored one with it.

        Raises:
            InvalidConfiguration: if the config is malformed (nothing written)
            ScheduleConflict: if the roster cannot be built (nothing written)
        """
        table = self.generator.generate(config)
        self.repository.write_roster_table(table)
        logger.info("Published roster with %d assignments", len(table))
        return table

    def current(self) -> Optional[RosterTable]:
        return self.repository.read_roster_table()

    def _require_current(self) -> RosterTable:
        table = self.current()
        if table is None:
            raise RosterNotFound()
        return table

    def export_ics(self, stamp: Optional[datetime] = None) -> str:
        return to_ics(to_calendar_events(self._require_current()), stamp=stamp)

    def export_csv(self) -> str:
        return to_csv(to_rows(self._require_current()))
