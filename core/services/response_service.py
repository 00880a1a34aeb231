# =============================================================================
# core/services/response_service.py - Caller-Facing Response Channels
# =============================================================================
# A response channel delivers the failure body to whoever is on the other
# end of the process:
# - ConsoleChannel: the process's standard output (command-line hosts)
# - FailureMiddleware (app/middleware.py): the HTTP response of a request
#
# Channels only decide presentation. What the body says is decided by
# InterceptorConfig.response_body().
# =============================================================================

import io
import sys
from typing import Protocol, TextIO

from lib.utils import is_interactive_terminal

# Red background, bold bright-white text
ANSI_FAILURE_START = "\033[41;1;97m "
ANSI_RESET = " \033[0m\n"


class ResponseChannel(Protocol):
    """Interface the interceptor expects from an output channel."""

    def discard_pending(self) -> None:
        """Drop output that was buffered but not yet delivered."""
        ...

    def send(self, body: str) -> None:
        """Deliver the failure body."""
        ...


class ConsoleChannel:
    """
    Writes the failure body to standard output.

    By default the body goes to the process's original stdout
    (sys.__stdout__), so it still reaches the terminal when the host has
    redirected sys.stdout into a buffer. Highlighting is applied only when an
    interactive terminal is attached, unless `colorize` forces it on or off.
    """

    def __init__(self, stream: TextIO | None = None, colorize: bool | None = None):
        self._stream = stream
        self.colorize = colorize

    @property
    def stream(self) -> TextIO | None:
        return self._stream if self._stream is not None else sys.__stdout__

    def format(self, body: str) -> str:
        colorize = self.colorize
        if colorize is None:
            colorize = is_interactive_terminal(self.stream)

        if colorize:
            return f"{ANSI_FAILURE_START}{body}{ANSI_RESET}"
        return body

    def discard_pending(self) -> None:
        """
        Empty an in-memory buffer installed over sys.stdout.

        Hosts buffer output with contextlib.redirect_stdout(io.StringIO());
        whatever accumulated there must not precede the failure response.
        """
        buffer = sys.stdout
        if isinstance(buffer, io.StringIO):
            buffer.seek(0)
            buffer.truncate(0)

    def send(self, body: str) -> None:
        stream = self.stream
        if stream is None:
            # No console attached (e.g. pythonw)
            return

        stream.write(self.format(body))
        stream.flush()
