# =============================================================================
# core/services/log_service.py - Failure Log Sink
# =============================================================================
# Writes the rendered form of each failure to one of two sinks:
# - a log file: one "[dd-Mon-YYYY HH:MM:SS TZ] <rendered>" entry per failure,
#   appended and newline-terminated
# - no file: the "core.failures" logger, which propagates to whatever the
#   host configured (stderr via logging's last-resort handler by default)
# =============================================================================

import logging

from core.models.failure import FailureRecord

logger = logging.getLogger(__name__)

# Logger used when no log file is configured
FAILURE_LOGGER_NAME = "core.failures"

# Entry layout for log files
LOG_ENTRY_FORMAT = "[%(asctime)s] %(message)s"
LOG_TIMESTAMP_FORMAT = "%d-%b-%Y %H:%M:%S %Z"


def probe_writable(filename: str) -> None:
    """
    Check that a log file can be opened for appending.

    Creates the file if it doesn't exist yet.

    Raises:
        OSError: If the file can't be opened in append mode
    """
    with open(filename, "a", encoding="utf-8"):
        pass


class FailureLog:
    """
    Log sink for failure records.

    Writes are best-effort: logging handlers report their own I/O errors
    through logging's error handling and never raise into the pipeline.
    """

    def __init__(self, filename: str | None = None):
        self.filename = filename

        if filename:
            # Standalone logger: not registered globally, no propagation
            self._logger = logging.Logger(FAILURE_LOGGER_NAME, logging.ERROR)
            self._logger.propagate = False

            handler = logging.FileHandler(filename, mode="a", encoding="utf-8", delay=True)
            handler.setFormatter(
                logging.Formatter(LOG_ENTRY_FORMAT, datefmt=LOG_TIMESTAMP_FORMAT)
            )
            self._logger.addHandler(handler)
            logger.debug(f"Failure log file: {filename}")
        else:
            self._logger = logging.getLogger(FAILURE_LOGGER_NAME)

    def write(self, record: FailureRecord) -> None:
        """Write one entry holding the record's rendered form."""
        self._logger.error(record.rendered)

        for handler in self._logger.handlers:
            try:
                handler.flush()
            except OSError:
                pass

    def close(self) -> None:
        """Close file handlers owned by this sink."""
        if not self.filename:
            return

        for handler in list(self._logger.handlers):
            self._logger.removeHandler(handler)
            handler.close()
