"""
Coach API endpoint.

The client posts its most recent sessions and gets back either the
recommendation JSON the model produced or a structured error.

Every failure is turned into a JSON body here. Note that a model answer
that is not JSON comes back with status 200: the client shows the raw
text instead of a recommendation.
"""

import json
import logging
from typing import Any

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from ...core.coaching.errors import (
    ConfigurationError,
    EmptyModelResponseError,
    SessionValidationError,
)
from ..dependencies import SprintCoachDep

logger = logging.getLogger(__name__)

router = APIRouter()


async def _read_json_body(request: Request) -> Any:
    """Request body as JSON, or None when it is missing or unreadable."""
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError):
        return None


def _error(status_code: int, **content: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=content)


@router.get(
    "",
    summary="Coach liveness",
    description="Static liveness payload. Use POST to request a recommendation.",
)
async def coach_liveness() -> dict:
    return {"ok": True, "hint": "Use POST to run AI"}


@router.post(
    "",
    summary="Get next workout",
    description="Analyze the most recent sessions and return a readiness assessment and next workout",
    responses={
        400: {"description": "sessions missing or empty"},
        500: {"description": "Missing credential, empty model response, or server error"},
    },
)
async def recommend_next_workout(
    request: Request,
    coach: SprintCoachDep,
) -> JSONResponse:
    """
    Run one coach request.

    The model is called at most once. There is no retry: an empty
    response or an upstream failure is reported and the user can try
    again by hand.
    """
    logger.info("POST /api/coach hit")

    try:
        body = await _read_json_body(request)
        logger.info(
            "Request body received",
            extra={"body_keys": sorted(body.keys()) if isinstance(body, dict) else None},
        )

        analysis = await coach.recommend(body)

    except SessionValidationError as e:
        logger.warning("Rejected coach request", extra={"error": str(e)})
        return _error(status.HTTP_400_BAD_REQUEST, error=str(e))

    except ConfigurationError as e:
        logger.error("Coach request without credential", extra={"error": str(e)})
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, error=str(e))

    except EmptyModelResponseError as e:
        logger.error("Empty model response", extra={"result_keys": e.result_keys})
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            error=str(e),
            debugResultKeys=e.result_keys,
        )

    except Exception as e:
        logger.error(
            "Coach route error",
            extra={"error": str(e), "error_type": type(e).__name__},
            exc_info=e,
        )
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            error="Server error",
            name=type(e).__name__,
            message=str(e),
        )

    if not analysis.is_parsed:
        return _error(status.HTTP_200_OK, error=analysis.message, raw=analysis.raw_text)

    logger.info(
        "Coach recommendation ready",
        extra={"session_count": analysis.session_count},
    )
    return JSONResponse(status_code=status.HTTP_200_OK, content=analysis.payload)
