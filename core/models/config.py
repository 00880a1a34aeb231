# =============================================================================
# core/models/config.py - Interceptor Configuration
# =============================================================================
# The policy owned by a FailureInterceptor instance:
# - filename: where failures are logged (None = host logging)
# - expose_failures: show failure detail to the caller
# - verbose_failures: verbose rendering flag (see response_body)
# - error_reporting: which recoverable severities are actionable
#
# The value is immutable; toggles produce a new copy via model_copy().
# =============================================================================

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .failure import ALL_SEVERITIES, FailureRecord, Severity, parse_error_reporting

# Caller-facing body when failure exposure is disabled
GENERIC_FAILURE_MESSAGE = "An error has occurred"


class InterceptorConfig(BaseModel):
    """
    Configuration for the failure handling pipeline.

    Both toggles default to disabled, so callers only ever see the generic
    message unless detail is explicitly opted in.

    Example:
        {
            "filename": "/var/log/app/failures.log",
            "expose_failures": false,
            "verbose_failures": false,
            "error_reporting": "all,-notice"
        }
    """

    model_config = ConfigDict(frozen=True)

    filename: str | None = Field(
        default=None,
        description="Log file (append mode); None logs through the host's logging"
    )

    expose_failures: bool = Field(
        default=False,
        description="Show the rendered failure to the caller"
    )

    verbose_failures: bool = Field(
        default=False,
        description="Verbose rendering flag"
    )

    error_reporting: frozenset[Severity] = Field(
        default=ALL_SEVERITIES,
        description="Severities of recoverable errors that get handled"
    )

    @field_validator("error_reporting", mode="before")
    @classmethod
    def parse_filter(cls, value):
        """Accept filter strings such as 'all,-notice'."""
        return parse_error_reporting(value)

    def reports(self, severity: Severity) -> bool:
        """Check whether a recoverable error of this severity is actionable."""
        return severity in self.error_reporting

    def response_body(self, record: FailureRecord) -> str:
        """
        Decide what the caller sees.

        Once exposure is enabled the full rendered form is returned whatever
        the verbose flag says.
        """
        if not self.expose_failures:
            return GENERIC_FAILURE_MESSAGE
        return record.rendered
