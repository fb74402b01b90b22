"""
Application configuration using Pydantic settings.

Configuration is loaded from environment variables with sensible defaults.
Using Pydantic's BaseSettings means we get:
- Type validation at startup (fail fast if config is wrong)
- Documentation of what's required vs optional
- Easy testing with different configurations

The only value the service cannot run without is the Anthropic API key.
Its absence is reported per request, not at startup.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_STORAGE_PATH = Path("~/.sprint_coach/storage.json")


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Shared by the API server and the command-line client.
    """

    # API Configuration
    api_title: str = "Sprint Coach API"
    api_version: str = "v1"

    # Anthropic Configuration
    anthropic_api_key: str = Field(
        default="",
        description="Claude API key. Every coach request fails with a configuration error without it."
    )
    anthropic_model: str = Field(
        default="claude-sonnet-4-20250514",
        description="Claude model used for every recommendation."
    )
    anthropic_max_tokens: int = Field(
        default=1024,
        description="Max tokens for Claude responses. The recommendation JSON is short."
    )
    anthropic_temperature: float = Field(
        default=0.7,
        description="Temperature for Claude. 0.7 allows some variety in workouts."
    )
    anthropic_timeout_seconds: float = Field(
        default=60.0,
        description="Upper bound on a single model call."
    )

    # Coaching Behavior
    strict_recommendation_schema: bool = Field(
        default=False,
        description="Validate model JSON against the recommendation schema and treat mismatches as parse failures."
    )

    # Client Configuration
    storage_path: Path = Field(
        default=DEFAULT_STORAGE_PATH,
        description="JSON file holding the local session log."
    )
    coach_api_url: str = Field(
        default="http://localhost:8000/api/coach",
        description="Coach endpoint the command-line client posts to."
    )
    client_timeout_seconds: float = Field(
        default=90.0,
        description="How long the client waits for the coach endpoint. Longer than the model timeout."
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of allowed CORS origins. Use * for development only."
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def has_model_credential(self) -> bool:
        return bool(self.anthropic_api_key.strip())

    def validate_required_fields(self) -> list[str]:
        """
        Validate that required fields are set.

        Returns list of missing required fields.
        """
        missing = []

        if not self.has_model_credential:
            missing.append("ANTHROPIC_API_KEY")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache means we only load settings once per process.
    For tests, you can call get_settings.cache_clear() to reset.
    """
    return Settings()
