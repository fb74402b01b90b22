"""
Anthropic Claude API client wrapper.

This module provides a thin wrapper around the Anthropic SDK that:
1. Implements our LanguageModelClient protocol
2. Handles API-specific details (message format, text block extraction)
3. Provides consistent error handling
4. Enables easy mocking for tests

The wrapper is intentionally thin. One prompt in, one reply out. The SDK's
own retries are turned off: a coach request calls the model exactly once.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import anthropic
from anthropic import APIError, APITimeoutError, RateLimitError

from sprint_coach.core.coaching.coach import LanguageModelClient, ModelReply


logger = logging.getLogger(__name__)


class ModelClientError(Exception):
    """Raised when API calls fail."""
    pass


class RateLimitExceeded(ModelClientError):
    """Raised when we hit rate limits."""
    pass


class ModelTimeout(ModelClientError):
    """Raised when the model does not answer within the configured timeout."""
    pass


@dataclass
class AnthropicConfig:
    """
    Configuration for the Anthropic client.

    Validated at construction so a bad deployment fails on the first
    request rather than somewhere inside the SDK.
    """
    api_key: str
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 1024
    temperature: float = 0.7
    timeout_seconds: float = 60.0

    def __post_init__(self) -> None:
        if not self.api_key:
            raise ValueError("API key is required")
        if self.max_tokens < 1:
            raise ValueError("max_tokens must be positive")
        if not 0 <= self.temperature <= 1:
            raise ValueError("temperature must be between 0 and 1")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")


class AnthropicTextClient(LanguageModelClient):
    """
    Implementation of LanguageModelClient using Claude.

    This class knows about Anthropic's API format but doesn't know
    about sprinting or coaching. It just sends text and gets text back.
    """

    def __init__(self, config: AnthropicConfig) -> None:
        self._config = config
        self._client = anthropic.AsyncAnthropic(
            api_key=config.api_key,
            timeout=config.timeout_seconds,
            max_retries=0,
        )

    async def generate(self, prompt: str) -> ModelReply:
        """Send a single user message and return the text of the reply."""
        if not prompt:
            raise ValueError("Prompt is required")

        try:
            response = await self._client.messages.create(
                model=self._config.model,
                max_tokens=self._config.max_tokens,
                temperature=self._config.temperature,
                messages=[
                    {"role": "user", "content": prompt}
                ],
            )
        except RateLimitError as e:
            logger.warning("Rate limit hit", extra={"error": str(e)})
            raise RateLimitExceeded("API rate limit exceeded. Please try again later.")
        except APITimeoutError as e:
            logger.error("Model request timed out", extra={"error": str(e)})
            raise ModelTimeout(
                f"Model did not respond within {self._config.timeout_seconds:g}s"
            )
        except APIError as e:
            logger.error(
                "API error",
                extra={"error": str(e), "status": getattr(e, "status_code", None)},
            )
            raise ModelClientError(f"API error: {e.message}")

        return ModelReply(
            text=self._extract_text_response(response),
            result_keys=self._result_keys(response),
        )

    def _extract_text_response(self, response: Any) -> str:
        """Extract text content from API response."""
        if not response.content:
            return ""

        # Response content is a list of blocks
        text_blocks = [
            block.text
            for block in response.content
            if hasattr(block, "text")
        ]

        return "\n".join(text_blocks)

    def _result_keys(self, response: Any) -> list[str]:
        """Top-level field names of the raw result, for empty-reply diagnostics."""
        if hasattr(response, "model_dump"):
            return list(response.model_dump().keys())
        return sorted(vars(response).keys())


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_anthropic_client(
    api_key: str,
    model: str = "claude-sonnet-4-20250514",
    max_tokens: int = 1024,
    temperature: float = 0.7,
    timeout_seconds: float = 60.0,
) -> AnthropicTextClient:
    """
    Factory function to create a configured client.

    The coach calls this only after it has confirmed a key is present.
    """
    config = AnthropicConfig(
        api_key=api_key,
        model=model,
        max_tokens=max_tokens,
        temperature=temperature,
        timeout_seconds=timeout_seconds,
    )
    return AnthropicTextClient(config)
