"""
Wellbeing check-ins: continuum phases, the check-in dialogue and trend views.
"""

from .assistant import AssistantClient, analyze_wellbeing
from .models import (
    FALLBACK_ASSESSMENT,
    Assessment,
    AssessmentError,
    CheckIn,
    Phase,
    parse_assessment,
    phase_for_energy,
)
from .session import CheckInSession, CheckInStateError, SessionState
from .trends import burnout_grid, recent_trend, risk_level, team_pulse

__all__ = [
    "AssistantClient",
    "Assessment",
    "AssessmentError",
    "CheckIn",
    "CheckInSession",
    "CheckInStateError",
    "FALLBACK_ASSESSMENT",
    "Phase",
    "SessionState",
    "analyze_wellbeing",
    "burnout_grid",
    "parse_assessment",
    "phase_for_energy",
    "recent_trend",
    "risk_level",
    "team_pulse"
]
