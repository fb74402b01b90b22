"""
The recommendation schema the coach is asked to return.

The model is instructed, not constrained, so by default whatever JSON it
produces is forwarded as-is. This model exists for the strict path, where
the parsed object is checked against the documented schema before it
reaches the client, and as the single source of the field names and
enumerations the prompt documents.
"""

from typing import Literal, Optional, get_args

from pydantic import BaseModel, ConfigDict, Field


Readiness = Literal["low", "medium", "high"]

SessionType = Literal[
    "acceleration",
    "maxVelocity",
    "shortSpeedEndurance",
    "speedEndurance",
    "specialEndurance",
    "tempo",
    "recovery",
    "off",
]

DistanceRange = Literal[
    "20-40m",
    "30-60m",
    "60-120m",
    "100-200m",
    "150-300m",
    "200-400m",
    "N/A",
]

NOT_APPLICABLE = "N/A"

READINESS_LEVELS: tuple[str, ...] = get_args(Readiness)
SESSION_TYPES: tuple[str, ...] = get_args(SessionType)
DISTANCE_RANGES: tuple[str, ...] = get_args(DistanceRange)

# JSON keys, in the order the schema documents them
READINESS_KEY = "Readiness"
READINESS_REASON_KEY = "Readiness Reason"
SESSION_TYPE_KEY = "Recommended Session Type"
WORKOUT_KEY = "Workout"
COACH_NOTES_KEY = "Coach Notes"
DISTANCE_RANGE_KEY = "Next Suggested Distance Range"
WARNING_KEY = "Warning"


class CoachRecommendation(BaseModel):
    """
    Readiness assessment plus the next workout.

    Field aliases are the exact JSON keys the model is told to use.
    """
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    readiness: Readiness = Field(alias=READINESS_KEY)
    readiness_reason: str = Field(alias=READINESS_REASON_KEY)
    recommended_session_type: SessionType = Field(alias=SESSION_TYPE_KEY)
    workout: list[str] = Field(alias=WORKOUT_KEY)
    coach_notes: list[str] = Field(alias=COACH_NOTES_KEY)
    next_suggested_distance_range: DistanceRange = Field(alias=DISTANCE_RANGE_KEY)
    warning: Optional[str] = Field(default=None, alias=WARNING_KEY)
