"""
Failure modes of a coach request.

Each exception maps to one error payload at the HTTP boundary. A model
answer that is not JSON is not an exception: it comes back as a
PARSE_FAILED analysis so the raw text can still be shown.
"""

from typing import Optional


INVALID_SESSIONS_MESSAGE = "Invalid request: sessions must be a non-empty array"
MISSING_CREDENTIAL_MESSAGE = "ENV NOT LOADED: ANTHROPIC_API_KEY missing"
EMPTY_RESPONSE_MESSAGE = "Empty AI response"


class CoachError(Exception):
    """Base class for classified coach request failures."""
    pass


class SessionValidationError(CoachError):
    """The request body has no usable sessions. The user must fix the input."""

    def __init__(self, message: str = INVALID_SESSIONS_MESSAGE) -> None:
        super().__init__(message)


class ConfigurationError(CoachError):
    """The model credential is not configured. An operator must fix the deployment."""

    def __init__(self, message: str = MISSING_CREDENTIAL_MESSAGE) -> None:
        super().__init__(message)


class EmptyModelResponseError(CoachError):
    """The model returned no text. Usually transient; the user can retry by hand."""

    def __init__(
        self,
        result_keys: Optional[list[str]] = None,
        message: str = EMPTY_RESPONSE_MESSAGE,
    ) -> None:
        super().__init__(message)
        self.result_keys = result_keys or []
