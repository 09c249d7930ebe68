"""Backend connection settings for the ITSM MCP server."""

import os

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_TIMEOUT = 30.0


class ConfigurationError(ValueError):
    """Raised when a required setting is missing or invalid."""


class ItsmConfig(BaseModel):
    """Immutable connection settings for the ITSM backend.

    Attributes:
        base_url: Root URL of the backend REST API (no trailing slash)
        bearer_token: Static token sent as ``Authorization: Bearer <token>``
        timeout: Per-request timeout in seconds
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    base_url: str = Field(min_length=1, description="Backend base URL")
    bearer_token: str = Field(min_length=1, repr=False, description="Bearer token for the backend")
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0, description="Request timeout in seconds")

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the base URL so paths can be appended directly."""
        return v.rstrip("/")

    @classmethod
    def from_env(cls) -> "ItsmConfig":
        """Build the configuration from ITSM_* environment variables.

        Raises:
            ConfigurationError: If ITSM_BASE_URL or ITSM_BEARER_TOKEN is unset,
                or ITSM_TIMEOUT is not a positive number.
        """
        base_url = os.getenv("ITSM_BASE_URL", "").strip()
        if not base_url:
            raise ConfigurationError("ITSM_BASE_URL environment variable is required")

        token = os.getenv("ITSM_BEARER_TOKEN", "").strip()
        if not token:
            raise ConfigurationError("ITSM_BEARER_TOKEN environment variable is required")

        raw_timeout = os.getenv("ITSM_TIMEOUT")
        timeout = DEFAULT_TIMEOUT
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError as e:
                raise ConfigurationError(f"ITSM_TIMEOUT must be a number, got {raw_timeout!r}") from e
            if timeout <= 0:
                raise ConfigurationError(f"ITSM_TIMEOUT must be positive, got {raw_timeout!r}")

        return cls(base_url=base_url, bearer_token=token, timeout=timeout)
