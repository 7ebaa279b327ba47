"""
Shared configuration management for the Sutra MCP server.

Settings come from ``MAHAKALP_*`` environment variables or a local ``.env``.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_API_URL = "https://yantra.mahakalp.dev"
DEFAULT_TIMEOUT = 10.0
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_DELAY = 1.0
LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class RequestConfig(BaseModel):
    """Per-process request settings shared by every outbound call.

    Frozen after construction; concurrent tool calls read it without locking.
    """

    model_config = ConfigDict(frozen=True)

    base_url: str = DEFAULT_API_URL
    api_key: Optional[str] = None
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, ge=0)
    retry_delay: float = Field(default=DEFAULT_RETRY_DELAY, ge=0)

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slashes(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("api_key")
    @classmethod
    def _blank_key_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value


class SutraConfig(BaseSettings):
    """Process configuration read from the environment."""

    model_config = SettingsConfigDict(
        env_prefix="MAHAKALP_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    env: str = "local"
    log_level: str = "info"

    # Yantra API
    api_url: Optional[str] = None
    api_key: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    retry_delay: float = DEFAULT_RETRY_DELAY

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        if value.upper() not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(sorted(LOG_LEVELS))}")
        return value.lower()

    @property
    def effective_api_url(self) -> str:
        return self.api_url or DEFAULT_API_URL

    def request_config(self) -> RequestConfig:
        """Build the immutable request configuration."""
        return RequestConfig(
            base_url=self.effective_api_url,
            api_key=self.api_key,
            timeout=self.timeout,
            max_retries=self.max_retries,
            retry_delay=self.retry_delay,
        )


def get_config(**overrides) -> SutraConfig:
    """Get process configuration, with optional explicit overrides."""
    return SutraConfig(**overrides)
