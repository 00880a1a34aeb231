# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - utils.py: Shared utilities (error base class, terminal detection,
#   process termination)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.utils import (
    EXIT_FAILURE,
    ApplicationError,
    exit_process,
    flush_standard_streams,
    is_interactive_terminal,
)

__all__ = [
    "EXIT_FAILURE",
    "ApplicationError",
    "exit_process",
    "flush_standard_streams",
    "is_interactive_terminal",
]
