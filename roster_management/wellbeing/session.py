"""
Check-in conversation state machine.

SELECT_PHASE --select_phase--> SET_ENERGY --submit--> LOGGED

``set_energy`` may be called any number of times while in SET_ENERGY.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from .models import ANONYMOUS_STAFF_ID, CheckIn, Phase, clamp_energy, parse_phase


logger = logging.getLogger(__name__)

GREETING = "Hello! Where are you on the continuum today?"
DEFAULT_ENERGY = 50


class CheckInStateError(RuntimeError):
    """A check-in step was attempted out of order."""


class SessionState(str, Enum):
    SELECT_PHASE = "SELECT_PHASE"
    SET_ENERGY = "SET_ENERGY"
    LOGGED = "LOGGED"


@dataclass(frozen=True)
class Message:
    role: str  # "bot" or "user"
    text: str


class CheckInSession:
    """One run through the check-in dialogue for a staff member."""

    def __init__(self, staff_id: Optional[str] = None):
        self.staff_id = staff_id or ANONYMOUS_STAFF_ID
        self.state = SessionState.SELECT_PHASE
        self.phase: Optional[Phase] = None
        self.energy = DEFAULT_ENERGY
        self.note = ""
        self.transcript: List[Message] = [Message("bot", GREETING)]

    def _require(self, state: SessionState, action: str) -> None:
        if self.state != state:
            raise CheckInStateError(
                f"Cannot {action} while check-in is in state {self.state.value}"
            )

    def select_phase(self, phase) -> None:
        self._require(SessionState.SELECT_PHASE, "select a phase")
        self.phase = parse_phase(phase)
        self.transcript.append(Message("user", self.phase.value))
        self.transcript.append(Message("bot", "How full is your social battery right now (0-100)?"))
        self.state = SessionState.SET_ENERGY

    def set_energy(self, value) -> None:
        self._require(SessionState.SET_ENERGY, "set energy")
        self.energy = clamp_energy(value)

    def add_note(self, note: str) -> None:
        self._require(SessionState.SET_ENERGY, "add a note")
        self.note = (note or "").strip()

    def submit(self, timestamp: Optional[datetime] = None) -> CheckIn:
        """
        Finish the dialogue and return the check-in to be logged.

        Raises:
            CheckInStateError: if no phase has been selected yet or the
                session was already submitted
        """
        self._require(SessionState.SET_ENERGY, "submit")
        checkin = CheckIn(
            staff_id=self.staff_id,
            timestamp=timestamp or datetime.now(timezone.utc),
            phase=self.phase,
            energy=self.energy,
            note=self.note
        )
        self.transcript.append(
            Message("bot", f"Logged: {checkin.phase.value} at {checkin.energy}%. Take care!")
        )
        self.state = SessionState.LOGGED
        logger.info("Check-in logged for %s: %s at %d%%", self.staff_id, checkin.phase.value, checkin.energy)
        return checkin
