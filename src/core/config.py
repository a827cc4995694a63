"""Core configuration module for ollama-emulator.

Loads settings from EMULATOR_* prefixed environment variables using Pydantic Settings.

Patterns applied:
- pydantic-settings BaseSettings (Pydantic v2 split)
- env_prefix = "EMULATOR_" for namespace isolation
- @field_validator + @classmethod (Pydantic v2 pattern)
- @lru_cache for singleton pattern
- PEP 604 union syntax (X | None)
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


DEFAULT_UPSTREAM_URL = "https://api.example.com/v1/complete"


class Settings(BaseSettings):
    """Application settings loaded from EMULATOR_* environment variables.

    All environment variables must be prefixed with EMULATOR_.
    Example: EMULATOR_PORT=11434, EMULATOR_UPSTREAM_URL=http://localhost:9000/complete

    Attributes:
        service_name: Service identifier for logging and error responses.
        port: HTTP port (1-65535). Default: 11434.
        host: Bind address. Default: 127.0.0.1.
        environment: Deployment environment. Default: development.
        log_level: Logging verbosity. Default: INFO.
        upstream_url: Completion service that /v1/completions forwards to.
        upstream_timeout_seconds: Upper bound for one upstream round trip.
        legacy_upstream_errors: Answer every upstream failure with 404.
    """

    # =========================================================================
    # Core Settings
    # =========================================================================
    service_name: str = Field(
        default="ollama-emulator",
        description="Service name for identification",
    )
    port: int = Field(
        default=11434,
        ge=1,
        le=65535,
        description="HTTP server port",
    )
    host: str = Field(
        default="127.0.0.1",
        description="HTTP server bind address",
    )
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment environment",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # =========================================================================
    # Upstream Completion Service
    # =========================================================================
    upstream_url: str = Field(
        default=DEFAULT_UPSTREAM_URL,
        description="Endpoint that receives translated completion requests",
    )
    upstream_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout for a single upstream request, in seconds",
    )
    legacy_upstream_errors: bool = Field(
        default=False,
        description="Report upstream failures as 404 (earlier emulator behavior)",
    )

    # =========================================================================
    # Pydantic v2 Model Configuration
    # =========================================================================
    model_config = {
        "env_prefix": "EMULATOR_",
        "case_sensitive": False,
        "extra": "ignore",
    }

    # =========================================================================
    # Validators (Pydantic v2 pattern: @field_validator + @classmethod)
    # =========================================================================
    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level to uppercase.

        Args:
            v: Input log level string.

        Returns:
            Normalized uppercase log level.

        Raises:
            ValueError: If log level is not valid.
        """
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        normalized = v.upper()
        if normalized not in valid_levels:
            msg = f"log_level must be one of {valid_levels}, got '{v}'"
            raise ValueError(msg)
        return normalized

    @field_validator("upstream_url")
    @classmethod
    def validate_upstream_url(cls, v: str) -> str:
        """Require an absolute http(s) URL for the upstream endpoint."""
        stripped = v.strip()
        if not stripped.startswith(("http://", "https://")):
            msg = f"upstream_url must start with http:// or https://, got '{v}'"
            raise ValueError(msg)
        return stripped


@lru_cache
def get_settings() -> Settings:
    """Get singleton Settings instance.

    Returns:
        Cached Settings instance.
    """
    return Settings()
