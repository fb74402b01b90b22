"""
Sprint coaching logic.

Contains the coaching service, domain models, the recommendation schema,
prompt construction, and model-response normalization.
"""

from .coach import (
    LanguageModelClient,
    ModelReply,
    SprintCoach,
    validate_sessions_payload,
)
from .errors import (
    CoachError,
    ConfigurationError,
    EmptyModelResponseError,
    SessionValidationError,
)
from .models import CoachAnalysis, RequestState, SessionRecord
from .prompts import MAX_PROMPT_SESSIONS, build_coach_prompt
from .recommendation import CoachRecommendation

__all__ = [
    "CoachAnalysis",
    "CoachError",
    "CoachRecommendation",
    "ConfigurationError",
    "EmptyModelResponseError",
    "LanguageModelClient",
    "MAX_PROMPT_SESSIONS",
    "ModelReply",
    "RequestState",
    "SessionRecord",
    "SessionValidationError",
    "SprintCoach",
    "build_coach_prompt",
    "validate_sessions_payload",
]
