"""
Prompt construction for the sprint coach.

The prompts are here, not in config, because they're core business logic.
Changing them changes what the product does. They should be version
controlled and reviewed like code.
"""

import json
from typing import Any, Mapping, Sequence, Union

from .models import SessionRecord
from .recommendation import DISTANCE_RANGES, READINESS_LEVELS, SESSION_TYPES


# Only the most recent sessions are sent. Keeps token cost bounded and the
# coach focused on current load.
MAX_PROMPT_SESSIONS = 4


COACH_PROMPT_TEMPLATE = """You are an experienced elite sprint coach (60m/100m/200m specialist).
You follow modern sprint training principles (short-to-long, polarized approach, Pfaff/Francis/Tony Holler influence).
You analyze an athlete's recent sprint training sessions and provide a readiness assessment and a recommended next workout plan.
You consider factors like volume, intensity, frequency, notes on fatigue/injury, and progression over time.
You understand how isometrics and plyometrics fit into sprint training.
You tailor recommendations to the athlete's training history and current condition.
You suggest conservative volume/intensity increases to avoid injury.
You prioritize athlete health and long-term development over short-term performance gains.
You communicate clearly and concisely, avoiding jargon.

Analyze ONLY the following recent sprint sessions (most recent first):

{sessions_json}

Base your assessment on these sessions only. Do not assume any training that is not listed.

Return ONLY valid JSON with NO markdown formatting, NO code fences, NO backticks. Just pure JSON in this exact structure:

{{
  "Readiness": {readiness_options},
  "Readiness Reason": "short 1-sentence explanation",
  "Recommended Session Type": "{session_type_options}",
  "Workout": [
    "4 × 30m from blocks @ 98% (full recovery 6-8 min)",
    "3 × flying 20m @ max (from 30m build-up)"
  ],
  "Coach Notes": [
    "Focus on...",
    "Watch for...",
    "If calves feel tight again → reduce volume 20%"
  ],
  "Next Suggested Distance Range": "{distance_range_options}",
  "Warning": null | "string with serious concern if any (injury pattern, huge volume jump, etc.)"
}}

CRITICAL: Return ONLY the JSON object. Do not wrap it in markdown code fences or backticks."""


SessionLike = Union[SessionRecord, Mapping[str, Any]]


def _prompt_view(session: SessionLike) -> Any:
    if isinstance(session, SessionRecord):
        return session.to_prompt_dict()
    return session


def select_recent_sessions(sessions: Sequence[SessionLike]) -> list[SessionLike]:
    """The window of sessions the coach gets to see, order preserved."""
    return list(sessions[:MAX_PROMPT_SESSIONS])


def build_coach_prompt(sessions: Sequence[SessionLike]) -> str:
    """
    Render the coach prompt for the given sessions (most recent first).

    Pure function: identical input gives a byte-identical prompt.
    Callers reject an empty list before getting here.
    """
    window = [_prompt_view(s) for s in select_recent_sessions(sessions)]
    sessions_json = json.dumps(window, indent=2, ensure_ascii=False)

    return COACH_PROMPT_TEMPLATE.format(
        sessions_json=sessions_json,
        readiness_options=" | ".join(f'"{level}"' for level in READINESS_LEVELS),
        session_type_options=" | ".join(SESSION_TYPES),
        distance_range_options=" | ".join(DISTANCE_RANGES),
    ).strip()
