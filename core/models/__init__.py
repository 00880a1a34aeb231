# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for the failure pipeline:
# - failure.py: FailureRecord (canonical failure), Severity, SourceLocation
# - config.py: InterceptorConfig (exposure policy and severity filter)
# =============================================================================

# -----------------------------------------------------------------------------
# Failure Models - Canonical failure representation
# -----------------------------------------------------------------------------
from .failure import (
    ALL_SEVERITIES,
    FailureRecord,
    Severity,
    SourceLocation,
    UnknownSeverityError,
    parse_error_reporting,
)

# -----------------------------------------------------------------------------
# Config Models - Interceptor policy
# -----------------------------------------------------------------------------
from .config import (
    GENERIC_FAILURE_MESSAGE,
    InterceptorConfig,
)

# -----------------------------------------------------------------------------
# __all__ - Explicit public API
# -----------------------------------------------------------------------------
__all__ = [
    # Failure
    "ALL_SEVERITIES",
    "FailureRecord",
    "Severity",
    "SourceLocation",
    "UnknownSeverityError",
    "parse_error_reporting",
    # Config
    "GENERIC_FAILURE_MESSAGE",
    "InterceptorConfig",
]
