"""
FastAPI dependency injection.

Dependencies provide instances of services and configuration to route
handlers. Using dependency injection means:
- Routes don't instantiate their own dependencies (easier to test)
- Dependencies can be overridden in tests with fakes
- Configuration is centralized

Each dependency is a function that FastAPI calls when needed.
"""

import logging
from typing import Annotated

from fastapi import Depends

from ..config.settings import Settings, get_settings
from ..core.coaching.coach import LanguageModelClient, ModelClientFactory, SprintCoach
from ..infrastructure.anthropic.client import create_anthropic_client

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Service Dependencies
# ---------------------------------------------------------------------------

def get_model_client_factory(
    settings: Annotated[Settings, Depends(get_settings)],
) -> ModelClientFactory:
    """
    Provide a factory that builds the Anthropic client for a given key.

    The coach calls it only after validation and the credential check
    pass, so nothing is constructed for a request that gets rejected.
    """
    def factory(api_key: str) -> LanguageModelClient:
        return create_anthropic_client(
            api_key=api_key,
            model=settings.anthropic_model,
            max_tokens=settings.anthropic_max_tokens,
            temperature=settings.anthropic_temperature,
            timeout_seconds=settings.anthropic_timeout_seconds,
        )

    return factory


def get_sprint_coach(
    settings: Annotated[Settings, Depends(get_settings)],
    client_factory: Annotated[ModelClientFactory, Depends(get_model_client_factory)],
) -> SprintCoach:
    """
    Provide a SprintCoach for this request.

    The coach holds per-request state, so a new instance is created each time.
    """
    coach = SprintCoach(
        api_key=settings.anthropic_api_key.strip(),
        client_factory=client_factory,
        strict_schema=settings.strict_recommendation_schema,
    )

    logger.debug("Created SprintCoach instance")

    return coach


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

SprintCoachDep = Annotated[SprintCoach, Depends(get_sprint_coach)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
