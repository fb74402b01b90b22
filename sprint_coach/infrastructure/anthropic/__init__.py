"""
Anthropic Claude API client wrapper.

Implements the LanguageModelClient protocol from core.coaching.coach.
"""

from .client import (
    AnthropicConfig,
    AnthropicTextClient,
    ModelClientError,
    ModelTimeout,
    RateLimitExceeded,
    create_anthropic_client,
)

__all__ = [
    "AnthropicConfig",
    "AnthropicTextClient",
    "ModelClientError",
    "ModelTimeout",
    "RateLimitExceeded",
    "create_anthropic_client",
]
