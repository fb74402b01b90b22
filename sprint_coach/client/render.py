"""
Plain-text rendering for the terminal.

The recommendation comes straight from the model, so nothing about its
shape is guaranteed. Each field is drawn only if it is present and has the
expected type; a missing or odd field never stops the others.
"""

from typing import Any, Iterable, Sequence

from ..core.coaching.models import SessionRecord
from ..core.coaching.recommendation import (
    COACH_NOTES_KEY,
    DISTANCE_RANGE_KEY,
    NOT_APPLICABLE,
    READINESS_KEY,
    READINESS_REASON_KEY,
    SESSION_TYPE_KEY,
    WARNING_KEY,
    WORKOUT_KEY,
)


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _items(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if str(item).strip()]


def _bullets(lines: Iterable[str]) -> list[str]:
    return [f"  • {line}" for line in lines]


def render_error(body: dict) -> str:
    """Error banner, plus the raw model text when the server sent it."""
    lines = ["⚠️  Error", f"  {body.get('error')}"]

    message = _text(body.get("message"))
    if message:
        lines.append(f"  {message}")

    raw = _text(body.get("raw"))
    if raw:
        lines.append("")
        lines.append("Raw coach output:")
        lines.extend(f"  {line}" for line in raw.splitlines())

    return "\n".join(lines)


def render_recommendation(body: Any) -> str:
    """Render a coach response body, error or recommendation."""
    if not isinstance(body, dict):
        return render_error({"error": "Unexpected coach response", "raw": str(body)})
    if body.get("error"):
        return render_error(body)

    sections: list[str] = []

    readiness = _text(body.get(READINESS_KEY))
    if readiness:
        sections.append(f"Readiness: {readiness.upper()}")

    reason = _text(body.get(READINESS_REASON_KEY))
    if reason:
        sections.append(f"  {reason}")

    session_type = _text(body.get(SESSION_TYPE_KEY))
    if session_type:
        sections.append(f"📋 Session Type: {session_type}")

    workout = _items(body.get(WORKOUT_KEY))
    if workout:
        sections.append("\n".join(["💪 Workout Plan"] + _bullets(workout)))

    notes = _items(body.get(COACH_NOTES_KEY))
    if notes:
        sections.append("\n".join(["📝 Coach Notes"] + _bullets(notes)))

    distance_range = _text(body.get(DISTANCE_RANGE_KEY))
    if distance_range and distance_range != NOT_APPLICABLE:
        sections.append(f"📏 Suggested Distance Range: {distance_range}")

    warning = _text(body.get(WARNING_KEY))
    if warning:
        sections.append(f"⚠️  Warning: {warning}")

    if not sections:
        return "The coach returned no recommendation fields."

    return "\n".join(sections)


def render_session(index: int, record: SessionRecord) -> str:
    lines = [
        f"[{index}] {record.date}  {record.summary}  @ {record.intensity}",
        f"    id: {record.id}",
    ]
    if record.notes:
        lines.append(f'    "{record.notes}"')
    return "\n".join(lines)


def render_history(records: Sequence[SessionRecord]) -> str:
    """Numbered session list, newest first. Positions match `delete --index`."""
    if not records:
        return "No sessions logged yet. Start by logging your first sprint session."
    return "\n".join(render_session(i, record) for i, record in enumerate(records))
