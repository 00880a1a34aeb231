# =============================================================================
# app/config.py - Failure Handling Settings
# =============================================================================
# Reads the failure policy of a host from its environment with
# pydantic-settings. Values come from real environment variables first,
# then from a .env file in the working directory.
#
# Usage:
#   from app.config import get_settings
#   config = get_settings().interceptor_config()
#
# The failure pipeline never reads settings by itself: hosts convert them
# into an InterceptorConfig and hand that to a FailureInterceptor.
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.models import InterceptorConfig, Severity, parse_error_reporting


class Settings(BaseSettings):
    """
    Failure policy of the host process.

    Every field has a safe default: no log file (host logging is used),
    failure detail hidden from callers, all recoverable severities handled.
    """

    # -------------------------------------------------------------------------
    # Failure Policy
    # -------------------------------------------------------------------------

    FAILURE_LOG_FILE: str | None = Field(
        default=None,
        description="File to append failures to (unset = host logging / stderr)"
    )

    EXPOSE_FAILURES: bool = Field(
        default=False,
        description="Show failure detail to callers (debug/trusted contexts only)"
    )

    VERBOSE_FAILURES: bool = Field(
        default=False,
        description="Verbose failure rendering flag"
    )

    # Same syntax as parse_error_reporting(), e.g. "all,-notice"
    ERROR_REPORTING: str = Field(
        default="all",
        description="Severities of recoverable errors to handle (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Host
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment the host runs in"
    )

    DEBUG: bool = Field(
        default=False,
        description="Log at DEBUG level (hook registration, request failures)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        # FAILURE_LOG_FILE= in .env means "no log file"
        env_ignore_empty=True,
        case_sensitive=True,
        # The .env file is shared with the host's own settings
        extra="ignore",
    )

    @field_validator("ERROR_REPORTING")
    @classmethod
    def validate_error_reporting(cls, value: str) -> str:
        """Reject unknown severity names at startup."""
        parse_error_reporting(value)
        return value

    @property
    def error_reporting_set(self) -> frozenset[Severity]:
        """
        ERROR_REPORTING as a set of severities.

        Example: "all,-notice" -> every severity except Severity.NOTICE
        """
        return parse_error_reporting(self.ERROR_REPORTING)

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    def interceptor_config(self) -> InterceptorConfig:
        """Build the interceptor configuration from these settings."""
        return InterceptorConfig(
            filename=self.FAILURE_LOG_FILE,
            expose_failures=self.EXPOSE_FAILURES,
            verbose_failures=self.VERBOSE_FAILURES,
            error_reporting=self.error_reporting_set,
        )


@lru_cache
def get_settings() -> Settings:
    """Settings from the environment, parsed once per process."""
    return Settings()
