"""
Free-text wellbeing analysis through a generative assistant.

The assistant is any object with a ``generate(prompt) -> str`` method, so the
model provider stays outside this package and tests can pass a stub.
"""

import logging
from typing import Protocol

from .models import FALLBACK_ASSESSMENT, Assessment, parse_assessment


logger = logging.getLogger(__name__)


SYSTEM_PROMPT = """\
ROLE: You are a senior peer clinician supporting allied health colleagues
through a short wellbeing check-in.

Respond using motivational interviewing (open questions, affirmations,
reflections, a brief summary) and close with one concrete next step
(ask, advise, agree, assist, arrange).

MENTAL HEALTH CONTINUUM:
- HEALTHY (80-100): thriving, high energy. Affirm it.
- REACTING (50-79): irritable or tired. Advise tactical rest.
- INJURED (20-49): anxious or low. Agree on support or time off.
- ILL (0-19): crisis or burnout. Urge immediate professional help.

OUTPUT FORMAT (strict JSON only):
{
  "reply": "empathetic response under 60 words",
  "phase": "HEALTHY" | "REACTING" | "INJURED" | "ILL",
  "energy": <integer 0 to 100>,
  "action": "one short sentence of advice"
}
"""


class AssistantClient(Protocol):
    def generate(self, prompt: str) -> str:
        ...


def build_prompt(text: str) -> str:
    return f'{SYSTEM_PROMPT}\nUSER SAYS: "{text.strip()}"'


def analyze_wellbeing(text: str, client: AssistantClient) -> Assessment:
    """
    Ask the assistant to assess a staff member's message.

    Args:
        text: What the staff member wrote
        client: Assistant used to generate the reply

    Returns:
        The parsed Assessment, or FALLBACK_ASSESSMENT when the client fails
        or its reply cannot be parsed
    """
    try:
        raw = client.generate(build_prompt(text))
        return parse_assessment(raw)
    except Exception:
        logger.exception("Wellbeing analysis failed, returning fallback assessment")
        return FALLBACK_ASSESSMENT
