"""
Turning the model's free text into JSON.

The model is told not to wrap its answer in markdown fences. It sometimes
does anyway, so fences are stripped before parsing. Whatever still fails to
parse is handed back as text rather than raised.
"""

import json
import re
from typing import Any

from pydantic import ValidationError

from .recommendation import CoachRecommendation


_LEADING_JSON_FENCE = re.compile(r"^```json\s*", re.IGNORECASE)
_LEADING_FENCE = re.compile(r"^```\s*")
_TRAILING_FENCE = re.compile(r"```\s*$")


class ResponseNotJSON(ValueError):
    """The cleaned model text is not a JSON document."""
    pass


class ResponseSchemaMismatch(ValueError):
    """Parsed JSON does not match the recommendation schema."""
    pass


def strip_code_fences(text: str) -> str:
    """
    Remove a leading ```json / ``` marker and a trailing ``` marker.

    Only fences at the very start and end are touched; anything inside the
    body is left alone.
    """
    text = text.strip()
    text = _LEADING_JSON_FENCE.sub("", text, count=1)
    text = _LEADING_FENCE.sub("", text, count=1)
    text = _TRAILING_FENCE.sub("", text, count=1)
    return text.strip()


def _reject_constant(name: str) -> Any:
    raise ResponseNotJSON(f"Non-standard JSON constant: {name}")


def parse_model_json(text: str) -> Any:
    """
    Parse cleaned model text as strict JSON.

    NaN and Infinity are rejected: they are not JSON and could not be sent
    back to the client anyway.
    """
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise ResponseNotJSON(str(e)) from e


def validate_recommendation(payload: Any) -> CoachRecommendation:
    """Check parsed JSON against the documented schema."""
    try:
        return CoachRecommendation.model_validate(payload)
    except ValidationError as e:
        raise ResponseSchemaMismatch(str(e)) from e
