"""
Domain models for sprint training sessions.

A session record is what the athlete logs after a workout. These models
have no dependencies on HTTP, storage, or the model provider. The same
record shape travels from the local store, through the request body, into
the prompt.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional
from uuid import uuid4


# Fields the model sees. The stable id stays on the client.
PROMPT_FIELDS = ("date", "sets", "reps", "distance", "intensity", "notes")


def _display_date(moment: Optional[datetime] = None) -> str:
    """Locale-style short date, e.g. 10/17/2026."""
    moment = moment or datetime.now()
    return f"{moment.month}/{moment.day}/{moment.year}"


def canonical_distance(value: str) -> str:
    """Append the metre marker unless the athlete already typed it."""
    value = value.strip()
    if value and not value.endswith("m"):
        return value + "m"
    return value


def canonical_intensity(value: str) -> str:
    """Append the percent marker unless the athlete already typed it."""
    value = value.strip()
    if value and not value.endswith("%"):
        return value + "%"
    return value


def _whole_number(value: Any, name: str) -> int:
    """Persisted sets/reps: an int, an integral float, or a digit string."""
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a whole number, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    raise ValueError(f"{name} must be a whole number, got {value!r}")


@dataclass(frozen=True)
class SessionRecord:
    """
    One logged unit of sprint training.

    Frozen because a logged session is never edited, only deleted.
    The id is generated at creation so deletion does not depend on where
    the record happens to sit in a rendered list.
    """
    date: str
    distance: str
    intensity: str
    sets: int = 1
    reps: int = 1
    notes: str = ""
    id: str = field(default_factory=lambda: str(uuid4()))

    def __post_init__(self) -> None:
        if self.sets < 1:
            raise ValueError("sets must be at least 1")
        if self.reps < 1:
            raise ValueError("reps must be at least 1")

    @classmethod
    def create(
        cls,
        distance: str,
        intensity: str,
        sets: int = 1,
        reps: int = 1,
        notes: str = "",
        now: Optional[datetime] = None,
    ) -> "SessionRecord":
        """Build a record the way the log form does: dated now, units appended."""
        return cls(
            date=_display_date(now),
            distance=canonical_distance(distance),
            intensity=canonical_intensity(intensity),
            sets=sets,
            reps=reps,
            notes=notes,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SessionRecord":
        """
        Rebuild a record from its persisted form.

        Records written before ids existed get a fresh one.
        """
        kwargs = {
            "date": str(data.get("date", "")),
            "distance": str(data.get("distance", "")),
            "intensity": str(data.get("intensity", "")),
            "sets": _whole_number(data.get("sets", 1), "sets"),
            "reps": _whole_number(data.get("reps", 1), "reps"),
            "notes": str(data.get("notes") or ""),
        }
        if data.get("id"):
            kwargs["id"] = str(data["id"])
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Full persisted form, including the id."""
        return asdict(self)

    def to_prompt_dict(self) -> dict[str, Any]:
        """The fields the coach is allowed to see, in a fixed order."""
        return {name: getattr(self, name) for name in PROMPT_FIELDS}

    @property
    def summary(self) -> str:
        """Compact volume line: '3 × 4 × 30m', or just '60m' for a single set."""
        if self.sets > 1:
            return f"{self.sets} × {self.reps} × {self.distance}"
        return self.distance


class RequestState(Enum):
    """
    Lifecycle of one coach request.

    Every state after CALLING_MODEL is terminal. There is no retry edge.
    """
    RECEIVED = "received"
    VALIDATING = "validating"
    REJECTED = "rejected"
    CALLING_MODEL = "calling_model"
    MODEL_ERROR = "model_error"
    EMPTY_RESPONSE = "empty_response"
    PARSED_JSON = "parsed_json"
    PARSE_FAILED = "parse_failed"


@dataclass
class CoachAnalysis:
    """
    Outcome of one successful model round trip.

    `payload` is the parsed JSON when state is PARSED_JSON. For
    PARSE_FAILED it is None and `raw_text` holds the cleaned text so the
    caller can still show it.
    """
    state: RequestState
    raw_text: str
    payload: Any = None
    message: str = ""
    session_count: int = 0

    @property
    def is_parsed(self) -> bool:
        return self.state == RequestState.PARSED_JSON
