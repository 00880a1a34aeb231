# =============================================================================
# core/ - Failure Handling Pipeline
# =============================================================================
# This package contains the framework-agnostic failure pipeline:
# - models/: Pydantic schemas (FailureRecord, InterceptorConfig)
# - services/: Log sink and console response channel
# - interceptor.py: FailureInterceptor (hook registration + handle funnel)
#
# Code in this package should NOT import from FastAPI.
# This keeps the pipeline testable without a web server.
# =============================================================================

from core.interceptor import FailureInterceptor, last_unhandled_exception
from core.models import FailureRecord, InterceptorConfig, Severity

__all__ = [
    "FailureInterceptor",
    "FailureRecord",
    "InterceptorConfig",
    "Severity",
    "last_unhandled_exception",
]
