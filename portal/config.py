"""
Portal Configuration Module

Centralized configuration management with Pydantic validation.
All environment variables are validated at startup to catch misconfigurations early.
"""

import logging
import os
from functools import lru_cache
from typing import List

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "https://localhost:7057/api"


class PortalSettings(BaseSettings):
    """
    Portal configuration with validation.

    All settings can be overridden via environment variables.
    """

    # === Backend API ===
    api_base_url: str = Field(
        default=DEFAULT_API_BASE_URL,
        description="Base URL of the ATS REST backend, including the /api prefix"
    )
    api_verify_ssl: bool = Field(
        default=True,
        description="Verify the backend TLS certificate (disable for the local dev cert)"
    )
    request_timeout: int = Field(
        default=30,
        ge=1,
        le=300,
        description="Timeout in seconds applied to every backend call (1-300)"
    )

    # === Security ===
    flask_secret_key: str = Field(
        default="",
        description="Secret used to sign the session cookie"
    )
    environment: str = Field(
        default="development",
        description="Environment: development, staging, production"
    )

    # === Session ===
    session_lifetime_days: int = Field(
        default=7,
        ge=1,
        le=90,
        description="Lifetime of the permanent session cookie in days"
    )
    session_cookie_max_bytes: int = Field(
        default=4093,
        ge=512,
        description="Largest session cookie browsers accept; writes beyond it fail"
    )

    # === Logging ===
    log_level: str = Field(default="INFO", description="DEBUG, INFO, WARNING, ERROR")
    log_format: str = Field(default="simple", description="simple or json")

    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment is a known value."""
        allowed = {"development", "staging", "production"}
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"environment must be one of: {', '.join(sorted(allowed))}")
        return v_lower

    @field_validator("api_base_url")
    @classmethod
    def validate_url_format(cls, v: str) -> str:
        """Basic URL format validation; trailing slashes are dropped."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Invalid URL format: {v}")
        return v.rstrip("/")

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v_lower = v.lower()
        if v_lower not in {"simple", "json"}:
            raise ValueError("log_format must be 'simple' or 'json'")
        return v_lower

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"

    def validate_production_config(self) -> List[str]:
        """
        Validate configuration is suitable for production.

        Returns list of warning/error messages.
        """
        issues = []

        if self.is_production:
            if not self.flask_secret_key:
                issues.append("CRITICAL: FLASK_SECRET_KEY required in production")
            if "localhost" in self.api_base_url:
                issues.append("WARNING: Using a localhost API_BASE_URL in production")
            if not self.api_verify_ssl:
                issues.append("WARNING: API_VERIFY_SSL is disabled in production")

        return issues

    def resolve_secret_key(self) -> str:
        """Return the configured secret, or a throwaway one outside production."""
        if self.flask_secret_key:
            return self.flask_secret_key
        if self.is_production:
            raise RuntimeError(
                "CRITICAL: FLASK_SECRET_KEY not set. "
                "Sessions would be invalidated on every restart."
            )
        logger.warning(
            "FLASK_SECRET_KEY not set. Generating random key "
            "(sessions will not persist between restarts)"
        )
        return os.urandom(24).hex()


@lru_cache()
def get_settings() -> PortalSettings:
    """
    Get cached settings instance.

    Settings are loaded once and cached for performance.
    """
    return PortalSettings()


def validate_config_on_startup(settings: PortalSettings) -> None:
    """
    Validate configuration at application startup.

    Raises ValueError with details if config is invalid.
    Logs warnings for non-critical issues.
    """
    for issue in settings.validate_production_config():
        if issue.startswith("CRITICAL"):
            raise ValueError(issue)
        logger.warning(issue)

    logger.info(f"Configuration loaded: environment={settings.environment}")
    logger.info(f"  api_base_url={settings.api_base_url}")
    logger.info(f"  request_timeout={settings.request_timeout}s")
    logger.info(f"  api_verify_ssl={settings.api_verify_ssl}")
