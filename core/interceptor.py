# =============================================================================
# core/interceptor.py - Process-Wide Failure Interceptor
# =============================================================================
# The last line of defense against unhandled failures. Three hooks feed one
# funnel:
#
#   warnings.showwarning  -> on_error()     \
#   sys.excepthook        -> on_exception()  >-> FailureRecord -> handle()
#   atexit                -> on_shutdown()  /
#
# Worker threads are covered too: threading.excepthook also feeds
# on_exception().
#
# handle() always runs the same three steps, in order:
#   1. write the rendered failure to the log sink
#   2. write the response body to the channel
#   3. terminate the process with status 1
#
# Usage:
#   interceptor = FailureInterceptor("/var/log/app/failures.log")
#   interceptor.catch_all()
# =============================================================================

import atexit
import logging
import sys
import threading
import traceback
import warnings
from collections.abc import Callable, Iterable
from types import TracebackType

from core.models.config import InterceptorConfig
from core.models.failure import FailureRecord, Severity, parse_error_reporting
from core.services.log_service import FailureLog, probe_writable
from core.services.response_service import ConsoleChannel, ResponseChannel
from lib.utils import EXIT_FAILURE, exit_process

logger = logging.getLogger(__name__)

# Called with the exit status as the final step of handle()
Terminator = Callable[[int], None]


def last_unhandled_exception() -> BaseException | None:
    """
    Return the exception that ended the main program, if any.

    The interpreter records an unhandled exception in sys.last_exc
    (sys.last_value before 3.12) when it prints the traceback. Interactive
    sessions record every REPL error there, so they never count.
    """
    if hasattr(sys, "ps1"):
        return None

    exc = getattr(sys, "last_exc", None)
    if exc is None:
        exc = getattr(sys, "last_value", None)

    if exc is None or isinstance(exc, KeyboardInterrupt):
        return None
    return exc


class FailureInterceptor:
    """
    Routes every uncaught failure of the process through one pipeline.

    Args:
        filename: Log file to append failures to. If it can't be opened the
            probe failure itself is handled (and the filename discarded).
        config: Initial configuration (toggles, severity filter)
        channel: Where the caller-facing response goes (stdout by default)
        terminate: Final action of handle(), called with the exit status
    """

    def __init__(
        self,
        filename: str | None = None,
        *,
        config: InterceptorConfig | None = None,
        channel: ResponseChannel | None = None,
        terminate: Terminator | None = None,
    ):
        config = config or InterceptorConfig()
        filename = filename or config.filename

        # The filename is only recorded once the probe succeeds
        self.config = config.model_copy(update={"filename": None})
        self.channel = channel or ConsoleChannel()
        self.terminate = terminate or exit_process
        self.log = FailureLog()

        self._handling = False
        self._previous_showwarning = None
        self._previous_excepthook = None
        self._previous_threading_excepthook = None
        self._shutdown_registered = False

        if filename:
            try:
                probe_writable(filename)
            except OSError as exc:
                self.handle(FailureRecord.from_exception(exc))
                return

            self.log = FailureLog(filename)
            self.config = self.config.model_copy(update={"filename": filename})

    @property
    def filename(self) -> str | None:
        return self.config.filename

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    def expose_errors(self) -> None:
        """Show the rendered failure to the caller instead of a generic message."""
        self.config = self.config.model_copy(update={"expose_failures": True})

    def verbose_errors(self) -> None:
        """Enable the verbose flag."""
        self.config = self.config.model_copy(update={"verbose_failures": True})

    def set_error_reporting(self, severities: str | Iterable[Severity | str]) -> None:
        """
        Replace the severity filter for recoverable errors.

        Example:
            interceptor.set_error_reporting("all,-notice")
        """
        self.config = self.config.model_copy(
            update={"error_reporting": parse_error_reporting(severities)}
        )

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def catch_all(self) -> None:
        """Register all three hooks."""
        self.catch_errors()
        self.catch_shutdown()
        self.catch_exceptions()

    def catch_errors(self) -> None:
        """Route warnings (recoverable runtime errors) to on_error()."""
        if self._previous_showwarning is None:
            self._previous_showwarning = warnings.showwarning
        warnings.showwarning = self._on_warning
        logger.debug("Intercepting warnings")

    def catch_shutdown(self) -> None:
        """Inspect the interpreter for an unhandled failure at exit."""
        if not self._shutdown_registered:
            atexit.register(self.on_shutdown)
            self._shutdown_registered = True
        logger.debug("Intercepting fatal shutdown conditions")

    def catch_exceptions(self) -> None:
        """Route uncaught exceptions (main thread and worker threads) to on_exception()."""
        if self._previous_excepthook is None:
            self._previous_excepthook = sys.excepthook
        sys.excepthook = self._on_exception

        if self._previous_threading_excepthook is None:
            self._previous_threading_excepthook = threading.excepthook
        threading.excepthook = self._on_thread_exception

        logger.debug("Intercepting uncaught exceptions")

    def release(self) -> None:
        """Restore the hooks that were active before registration."""
        if self._previous_showwarning is not None:
            if warnings.showwarning == self._on_warning:
                warnings.showwarning = self._previous_showwarning
            self._previous_showwarning = None

        if self._previous_excepthook is not None:
            if sys.excepthook == self._on_exception:
                sys.excepthook = self._previous_excepthook
            self._previous_excepthook = None

        if self._previous_threading_excepthook is not None:
            if threading.excepthook == self._on_thread_exception:
                threading.excepthook = self._previous_threading_excepthook
            self._previous_threading_excepthook = None

        if self._shutdown_registered:
            atexit.unregister(self.on_shutdown)
            self._shutdown_registered = False

        logger.debug("Released failure hooks")

    # -------------------------------------------------------------------------
    # Hooks
    # -------------------------------------------------------------------------

    def on_error(
        self,
        severity: Severity,
        message: Warning | str,
        filename: str,
        lineno: int,
        category: type[Warning] | None = None,
        line: str | None = None,
    ) -> None:
        """
        Handle a recoverable runtime error.

        Severities excluded by the error-reporting filter are ignored
        without any output.
        """
        if not self.config.reports(severity):
            return

        self.handle(
            FailureRecord.from_warning(
                severity, message, filename, lineno, category=category, line=line
            )
        )

    def on_exception(self, exc: BaseException) -> None:
        """Handle an uncaught exception."""
        self.handle(FailureRecord.from_exception(exc))

    def on_shutdown(self) -> None:
        """
        Handle a fatal condition at process exit.

        Runs on every exit; a normal exit leaves no output. Some failures
        never reach sys.excepthook (e.g. when another library replaced it),
        so this is the backstop.
        """
        exc = last_unhandled_exception()
        if exc is None:
            return

        self.channel.discard_pending()
        self.handle(FailureRecord.from_exception(exc, severity=Severity.FATAL))

    def _on_warning(self, message, category, filename, lineno, file=None, line=None):
        # Signature of warnings.showwarning
        self.on_error(
            Severity.from_category(category),
            message,
            filename,
            lineno,
            category=category,
            line=line,
        )

    def _on_exception(
        self,
        exc_type: type[BaseException],
        exc: BaseException,
        tb: TracebackType | None,
    ) -> None:
        # Signature of sys.excepthook
        if issubclass(exc_type, KeyboardInterrupt):
            previous = self._previous_excepthook or sys.__excepthook__
            previous(exc_type, exc, tb)
            return

        if exc.__traceback__ is None and tb is not None:
            exc = exc.with_traceback(tb)
        self.on_exception(exc)

    def _on_thread_exception(self, args: threading.ExceptHookArgs) -> None:
        # Signature of threading.excepthook; SystemExit ends only the thread
        if issubclass(args.exc_type, SystemExit):
            return

        exc = args.exc_value if args.exc_value is not None else args.exc_type()
        if exc.__traceback__ is None and args.exc_traceback is not None:
            exc = exc.with_traceback(args.exc_traceback)
        self.on_exception(exc)

    # -------------------------------------------------------------------------
    # Pipeline
    # -------------------------------------------------------------------------

    def response_body(self, record: FailureRecord) -> str:
        """The caller-facing body for a record under the current config."""
        return self.config.response_body(record)

    def write_log(self, record: FailureRecord) -> None:
        self.log.write(record)

    def handle(self, record: FailureRecord) -> None:
        """
        Log the failure, respond to the caller, then terminate.

        The log and response writes are independent: either one failing is
        reported on the original stderr and the pipeline carries on. Nothing
        is raised to the caller.

        Failures raised while a record is already being handled (e.g. a
        warning emitted by the log write) are dropped.
        """
        if self._handling:
            return

        self._handling = True
        try:
            try:
                self.write_log(record)
            except Exception:
                _report_pipeline_error("Failure log write failed")

            try:
                self.channel.send(self.response_body(record))
            except Exception:
                _report_pipeline_error("Failure response write failed")
        finally:
            self._handling = False
            self.terminate(EXIT_FAILURE)


def _report_pipeline_error(what: str) -> None:
    """Last resort for errors inside handle(): the raw traceback on stderr."""
    stream = sys.__stderr__
    if stream is None:
        return

    try:
        stream.write(f"{what}:\n{traceback.format_exc()}")
        stream.flush()
    except (OSError, ValueError):
        # stderr is gone too
        pass
