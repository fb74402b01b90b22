"""
Sprint coaching service.

This module contains the "coaching brain": it takes the athlete's recent
sessions, asks the language model for a readiness assessment, and turns
the answer into JSON the client can render. It's framework-agnostic and
doesn't know about HTTP or where sessions are stored.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Protocol

from .errors import (
    ConfigurationError,
    EmptyModelResponseError,
    SessionValidationError,
)
from .models import CoachAnalysis, RequestState
from .parsing import (
    ResponseNotJSON,
    ResponseSchemaMismatch,
    parse_model_json,
    strip_code_fences,
    validate_recommendation,
)
from .prompts import build_coach_prompt


logger = logging.getLogger(__name__)

NOT_JSON_MESSAGE = "AI did not return valid JSON"
SCHEMA_MISMATCH_MESSAGE = "AI response did not match the recommendation schema"


# ---------------------------------------------------------------------------
# Protocols (interfaces)
# ---------------------------------------------------------------------------

@dataclass
class ModelReply:
    """Text the model produced plus the top-level keys of the raw result."""
    text: str
    result_keys: list[str] = field(default_factory=list)


class LanguageModelClient(Protocol):
    """
    Interface for text-generation clients.

    The coach doesn't care whether this is Claude or a fake for testing.
    It sends one prompt and gets one reply.
    """

    async def generate(self, prompt: str) -> ModelReply:
        """Run a single completion for the prompt."""
        ...


ModelClientFactory = Callable[[str], LanguageModelClient]


# ---------------------------------------------------------------------------
# Request validation
# ---------------------------------------------------------------------------

def validate_sessions_payload(payload: Any) -> list[dict[str, Any]]:
    """
    Pull the session list out of a request body.

    The body must be an object whose `sessions` is a non-empty array of
    objects. A body that could not be read at all arrives here as None.
    """
    sessions = payload.get("sessions") if isinstance(payload, dict) else None

    if not isinstance(sessions, list) or not sessions:
        raise SessionValidationError()
    if not all(isinstance(s, dict) for s in sessions):
        raise SessionValidationError()

    return sessions


# ---------------------------------------------------------------------------
# Coach Service
# ---------------------------------------------------------------------------

class SprintCoach:
    """
    Runs one coach request from validation to parsed JSON.

    A new instance per request. The model client is only built once the
    input and the credential have both checked out, so a rejected request
    never touches the network.
    """

    def __init__(
        self,
        api_key: str,
        client_factory: ModelClientFactory,
        strict_schema: bool = False,
    ) -> None:
        self._api_key = api_key
        self._client_factory = client_factory
        self._strict_schema = strict_schema
        self.state = RequestState.RECEIVED

    def _transition(self, state: RequestState) -> None:
        logger.debug(
            "Coach request state change",
            extra={"from": self.state.value, "to": state.value},
        )
        self.state = state

    async def recommend(self, payload: Any) -> CoachAnalysis:
        """
        Validate the payload, call the model once, normalize the reply.

        Raises SessionValidationError, ConfigurationError or
        EmptyModelResponseError for the classified failures. Anything the
        model client raises propagates after the state is set to MODEL_ERROR.
        """
        self._transition(RequestState.VALIDATING)
        try:
            sessions = validate_sessions_payload(payload)
        except SessionValidationError:
            self._transition(RequestState.REJECTED)
            raise

        if not self._api_key:
            self._transition(RequestState.REJECTED)
            raise ConfigurationError()

        logger.info(
            "Requesting coach recommendation",
            extra={
                "session_count": len(sessions),
                "session_keys": sorted(sessions[0].keys()),
            },
        )

        prompt = build_coach_prompt(sessions)

        self._transition(RequestState.CALLING_MODEL)
        try:
            client = self._client_factory(self._api_key)
            reply = await client.generate(prompt)
        except Exception:
            self._transition(RequestState.MODEL_ERROR)
            raise

        text = (reply.text or "").strip()
        logger.info("AI raw text received", extra={"length": len(text)})

        if not text:
            self._transition(RequestState.EMPTY_RESPONSE)
            raise EmptyModelResponseError(result_keys=reply.result_keys)

        return self._normalize(text, session_count=len(sessions))

    def _normalize(self, text: str, session_count: int) -> CoachAnalysis:
        cleaned = strip_code_fences(text)
        logger.debug("Cleaned text preview", extra={"preview": cleaned[:200]})

        try:
            payload = parse_model_json(cleaned)
        except ResponseNotJSON as e:
            logger.error("JSON parse error", extra={"error": str(e)})
            self._transition(RequestState.PARSE_FAILED)
            return CoachAnalysis(
                state=RequestState.PARSE_FAILED,
                raw_text=cleaned,
                message=NOT_JSON_MESSAGE,
                session_count=session_count,
            )

        if self._strict_schema:
            try:
                validate_recommendation(payload)
            except ResponseSchemaMismatch as e:
                logger.warning("Recommendation schema mismatch", extra={"error": str(e)})
                self._transition(RequestState.PARSE_FAILED)
                return CoachAnalysis(
                    state=RequestState.PARSE_FAILED,
                    raw_text=cleaned,
                    message=SCHEMA_MISMATCH_MESSAGE,
                    session_count=session_count,
                )

        self._transition(RequestState.PARSED_JSON)
        return CoachAnalysis(
            state=RequestState.PARSED_JSON,
            raw_text=cleaned,
            payload=payload,
            session_count=session_count,
        )
