# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application:
# - ApplicationError: base class for actionable library errors
# - Terminal detection for the console response channel
# - Process termination used as the final step of failure handling
# =============================================================================

import os
import sys
from typing import Any, TextIO

# Exit status used for every handled failure
EXIT_FAILURE = 1


# =============================================================================
# Base Error Class
# =============================================================================

class ApplicationError(Exception):
    """
    Raised when lastline itself is misused (bad configuration, unknown names).

    Failures of the host program are never wrapped in this class; they are
    normalized into FailureRecords instead.

    Attributes:
        code: Stable identifier, e.g. "UNKNOWN_SEVERITY"
        message: What went wrong
        suggestion: How to fix it, if known
        details: Offending values
    """

    def __init__(
        self,
        message: str,
        code: str = "LASTLINE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        if not self.suggestion:
            return f"{self.message} ({self.code})"
        return f"{self.message} ({self.code}). {self.suggestion}"


# =============================================================================
# Terminal Utilities
# =============================================================================

def is_interactive_terminal(stream: TextIO | None) -> bool:
    """
    Check whether a stream is attached to an interactive terminal.

    Both conditions must hold:
    - TERM is set in the environment (a terminal emulator is declared)
    - the stream reports itself as a tty

    Args:
        stream: The output stream to inspect (None is never interactive)

    Returns:
        True if highlighted output is appropriate for this stream
    """
    if stream is None or not os.environ.get("TERM"):
        return False

    try:
        return stream.isatty()
    except (AttributeError, ValueError):
        # Closed or non-file streams
        return False


# =============================================================================
# Process Utilities
# =============================================================================

def flush_standard_streams() -> None:
    """Flush stdout/stderr (both the current and the original objects)."""
    for stream in (sys.stdout, sys.stderr, sys.__stdout__, sys.__stderr__):
        if stream is None:
            continue
        try:
            stream.flush()
        except (OSError, ValueError):
            pass


def exit_process(status: int = EXIT_FAILURE) -> None:
    """
    Terminate the process immediately with the given status.

    os._exit is used instead of sys.exit: a SystemExit raised inside
    sys.excepthook, an atexit callback or warnings.showwarning would be
    reported or caught by the caller instead of ending the process.

    Args:
        status: Process exit status
    """
    flush_standard_streams()
    os._exit(status)
