"""Configuration management with pydantic-settings for the Bobuild API client.

- Automatic .env file loading with proper precedence
- BOBUILD_ environment variable prefix
- SecretStr for the API key
- Frozen config (thread-safe, immutable after load)
"""

import logging
from functools import lru_cache

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_TIMEOUT_SECONDS",
    "BobuildConfig",
    "get_config",
    "reset_config",
]

DEFAULT_TIMEOUT_SECONDS = 10.0


class BobuildConfig(BaseSettings):
    """Connection settings for a Bobuild API client.

    Loads from (in order of precedence):
    1. Environment variables (highest priority)
    2. .env file in the working directory
    3. Default values (lowest priority)

    Attributes:
        host: API host name (e.g. app.example.com), or a base URL with scheme
        api_key: Bearer token sent with every request
        use_tls: Build https:// URLs when True, http:// otherwise
        timeout_seconds: Per-request timeout
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log format (json for production, text for development)
    """

    model_config = SettingsConfigDict(
        env_prefix="BOBUILD_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,  # Use defaults instead of empty strings
        case_sensitive=False,
        validate_default=True,
        frozen=True,  # Immutable after creation (thread-safe)
        extra="ignore",
    )

    host: str = Field(
        default="localhost",
        min_length=1,
        description="API host (domain without scheme, or base URL with scheme)",
    )

    api_key: SecretStr = Field(
        default=SecretStr(""),
        description="Opaque bearer token for the Authorization header",
    )

    use_tls: bool = Field(
        default=True,
        description="Use https:// for URLs built from host",
    )

    timeout_seconds: float = Field(
        default=DEFAULT_TIMEOUT_SECONDS,
        gt=0,
        le=300,
        description="Timeout for a single request (seconds)",
    )

    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )

    log_format: str = Field(
        default="json",
        pattern="^(json|text)$",
        description="Log format: json (production), text (development)",
    )

    @field_validator("host", mode="before")
    @classmethod
    def strip_host(cls, v):
        """Strip whitespace and trailing slashes from the host."""
        if isinstance(v, str):
            return v.strip().rstrip("/")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    @field_validator("log_format", mode="before")
    @classmethod
    def lower_log_format(cls, v):
        return v.lower() if isinstance(v, str) else v


@lru_cache(maxsize=1)
def get_config() -> BobuildConfig:
    """Get global configuration singleton.

    First call loads from environment + .env file, subsequent calls return
    the cached instance.

    Returns:
        BobuildConfig singleton instance.

    Raises:
        ValidationError: If configuration values are invalid.
    """
    return BobuildConfig()


def reset_config() -> None:
    """Reset configuration singleton for testing.

    Warning:
        Only use in test code. Production code should not reset config.
    """
    get_config.cache_clear()
