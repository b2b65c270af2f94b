"""
Wellbeing check-in models.

Phases follow the mental health continuum used by the team's check-in bot:
HEALTHY (80-100), REACTING (50-79), INJURED (20-49), ILL (0-19), scored on a
0-100 "social battery" energy scale.
"""

import json
import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


ANONYMOUS_STAFF_ID = "_anonymous"

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)


class AssessmentError(ValueError):
    """The assistant's reply could not be turned into an Assessment."""


class Phase(str, Enum):
    HEALTHY = "HEALTHY"
    REACTING = "REACTING"
    INJURED = "INJURED"
    ILL = "ILL"

    @property
    def description(self) -> str:
        return PHASE_DESCRIPTIONS[self]

    @property
    def rank(self) -> int:
        """4 for HEALTHY down to 1 for ILL, for plotting phases on an axis."""
        return PHASE_RANKS[self]


PHASE_DESCRIPTIONS = {
    Phase.HEALTHY: "Normal functioning",
    Phase.REACTING: "Irritable / Nervous",
    Phase.INJURED: "Anxiety / Fatigue",
    Phase.ILL: "Distress / Illness",
}

PHASE_RANKS = {Phase.HEALTHY: 4, Phase.REACTING: 3, Phase.INJURED: 2, Phase.ILL: 1}


def clamp_energy(value: Any) -> int:
    """Coerce to an int in 0..100."""
    try:
        energy = int(round(float(value)))
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Energy must be a number, got {value!r}") from exc
    return max(0, min(100, energy))


def phase_for_energy(energy: int) -> Phase:
    """Map an energy score to its band on the continuum."""
    energy = clamp_energy(energy)
    if energy >= 80:
        return Phase.HEALTHY
    if energy >= 50:
        return Phase.REACTING
    if energy >= 20:
        return Phase.INJURED
    return Phase.ILL


def parse_phase(value: Any) -> Phase:
    if isinstance(value, Phase):
        return value
    try:
        return Phase(str(value).strip().upper())
    except ValueError as exc:
        raise ValueError(f"Unknown phase {value!r}") from exc


@dataclass(frozen=True)
class Assessment:
    """Structured reply from the generative assistant."""

    reply: str
    phase: Phase
    energy: int
    action: str

    def to_dict(self) -> Dict:
        return {
            'reply': self.reply,
            'phase': self.phase.value,
            'energy': self.energy,
            'action': self.action
        }


FALLBACK_ASSESSMENT = Assessment(
    reply=(
        "I'm having trouble connecting right now. "
        "Please take a deep breath and try again in a moment."
    ),
    phase=Phase.REACTING,
    energy=50,
    action="Pause and retry connection."
)


def parse_assessment(raw_text: Optional[str]) -> Assessment:
    """
    Parse the assistant's JSON reply.

    Markdown code fences around the JSON are tolerated. Energy is clamped to
    0..100.

    Raises:
        AssessmentError: on empty text, invalid JSON, or missing/invalid fields
    """
    if not raw_text or not raw_text.strip():
        raise AssessmentError("Empty response from assistant")

    cleaned = _FENCE_RE.sub("", raw_text).strip()
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise AssessmentError(f"Assistant reply is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise AssessmentError("Assistant reply must be a JSON object")

    missing = [key for key in ('reply', 'phase', 'energy', 'action') if key not in data]
    if missing:
        raise AssessmentError(f"Assistant reply is missing fields: {missing}")

    try:
        phase = parse_phase(data['phase'])
        energy = clamp_energy(data['energy'])
    except ValueError as exc:
        raise AssessmentError(str(exc)) from exc

    return Assessment(
        reply=str(data['reply']).strip(),
        phase=phase,
        energy=energy,
        action=str(data['action']).strip()
    )


@dataclass(frozen=True)
class CheckIn:
    """One logged check-in."""

    staff_id: str
    timestamp: datetime
    phase: Phase
    energy: int
    note: str = ""

    @property
    def pulse_score(self) -> int:
        """Energy on the 0-10 scale shown on the team pulse board."""
        return self.energy // 10

    def to_dict(self) -> Dict:
        return {
            'timestamp': self.timestamp.isoformat(),
            'phase': self.phase.value,
            'energy': self.energy,
            'note': self.note
        }

    @classmethod
    def from_dict(cls, staff_id: str, data: Dict) -> 'CheckIn':
        return cls(
            staff_id=staff_id,
            timestamp=datetime.fromisoformat(data['timestamp']),
            phase=parse_phase(data['phase']),
            energy=clamp_energy(data['energy']),
            note=data.get('note') or ""
        )
