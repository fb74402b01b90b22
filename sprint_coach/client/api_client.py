"""
HTTP client for the coach endpoint.

Each request gets a number from a monotonic counter. When a response
comes back after a newer request was issued, it is dropped instead of
replacing what the athlete is looking at.
"""

import itertools
import logging
import threading
from dataclasses import dataclass
from typing import Any, Optional, Sequence

import httpx

from ..core.coaching.models import SessionRecord
from ..core.coaching.prompts import MAX_PROMPT_SESSIONS

logger = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = "Network error"
INVALID_BODY_MESSAGE = "Coach returned a non-JSON response"


@dataclass
class CoachResult:
    """
    What the coach endpoint answered for one request.

    status_code is 0 when the request never got an HTTP response.
    """
    request_id: int
    status_code: int
    body: Any

    @property
    def error(self) -> Optional[str]:
        if isinstance(self.body, dict) and self.body.get("error"):
            return str(self.body["error"])
        return None

    @property
    def is_error(self) -> bool:
        return self.error is not None


class CoachClient:
    """
    Posts session snapshots to the coach endpoint.

    `latest_result` is the last response that was still current when it
    arrived. Superseded responses never overwrite it.
    """

    def __init__(
        self,
        url: str,
        timeout_seconds: float = 90.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._url = url
        self._http = httpx.Client(timeout=timeout_seconds, transport=transport)
        self._counter = itertools.count(1)
        self._lock = threading.Lock()
        self._latest_request_id = 0
        self.latest_result: Optional[CoachResult] = None

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "CoachClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _begin_request(self) -> int:
        with self._lock:
            self._latest_request_id = next(self._counter)
            return self._latest_request_id

    def _is_current(self, request_id: int) -> bool:
        with self._lock:
            return request_id == self._latest_request_id

    def request_recommendation(
        self,
        sessions: Sequence[SessionRecord],
    ) -> Optional[CoachResult]:
        """
        Ask the coach about the most recent sessions.

        Returns None when a newer request was started while this one was
        in flight.
        """
        request_id = self._begin_request()
        payload = {
            "sessions": [s.to_prompt_dict() for s in sessions[:MAX_PROMPT_SESSIONS]],
        }

        logger.info(
            "Requesting recommendation",
            extra={"request_id": request_id, "session_count": len(payload["sessions"])},
        )

        result = self._post(request_id, payload)

        if not self._is_current(request_id):
            logger.info("Discarding superseded coach response", extra={"request_id": request_id})
            return None

        self.latest_result = result
        return result

    def _post(self, request_id: int, payload: dict) -> CoachResult:
        try:
            response = self._http.post(self._url, json=payload)
        except httpx.HTTPError as e:
            logger.error("Coach request failed", extra={"request_id": request_id, "error": str(e)})
            return CoachResult(
                request_id=request_id,
                status_code=0,
                body={"error": NETWORK_ERROR_MESSAGE, "message": str(e)},
            )

        try:
            body = response.json()
        except ValueError:
            body = {"error": INVALID_BODY_MESSAGE, "raw": response.text}

        return CoachResult(
            request_id=request_id,
            status_code=response.status_code,
            body=body,
        )
