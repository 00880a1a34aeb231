# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .log_service import FailureLog, probe_writable
from .response_service import ConsoleChannel, ResponseChannel

__all__ = [
    "FailureLog",
    "probe_writable",
    "ConsoleChannel",
    "ResponseChannel",
]
