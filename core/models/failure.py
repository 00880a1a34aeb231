# =============================================================================
# core/models/failure.py - Canonical Failure Record
# =============================================================================
# Every failure source is normalized into a FailureRecord before any output:
# - Recoverable runtime errors (warnings): FailureRecord.from_warning
# - Uncaught exceptions: FailureRecord.from_exception
# - Fatal shutdown conditions: FailureRecord.from_exception(severity=FATAL)
#
# A record is created when a hook fires, consumed once by the handling
# pipeline and never mutated (frozen model).
# =============================================================================

import traceback
import warnings
from collections.abc import Iterable
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from lib.utils import ApplicationError


class UnknownSeverityError(ApplicationError, ValueError):
    """Raised when a severity filter names a severity that doesn't exist."""

    def __init__(self, name: str):
        super().__init__(
            message=f"Unknown severity: {name!r}",
            code="UNKNOWN_SEVERITY",
            suggestion=(
                "Use 'all', 'none' or a comma-separated list of: "
                + ", ".join(s.value for s in Severity)
                + " (prefix a name with '-' to exclude it)"
            ),
            details={"severity": name},
        )


class Severity(str, Enum):
    """
    Classification of a failure.

    Only the recoverable severities are subject to the error-reporting
    filter; ERROR and FATAL records are always handled.

    - notice: informational runtime conditions (ImportWarning, ResourceWarning)
    - warning: generic runtime warnings (RuntimeWarning, SyntaxWarning, ...)
    - deprecated: deprecation notices (DeprecationWarning, FutureWarning, ...)
    - user_warning: warnings raised by application code (UserWarning)
    - error: an uncaught exception
    - fatal: a failure only observable at process shutdown
    """
    NOTICE = "notice"
    WARNING = "warning"
    DEPRECATED = "deprecated"
    USER_WARNING = "user_warning"
    ERROR = "error"
    FATAL = "fatal"

    @property
    def label(self) -> str:
        """Display form, e.g. 'User Warning'."""
        return self.value.replace("_", " ").title()

    @classmethod
    def from_name(cls, name: str) -> "Severity":
        """
        Look up a severity by its value (case-insensitive).

        Raises:
            UnknownSeverityError: If no severity has that name
        """
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise UnknownSeverityError(name) from None

    @classmethod
    def from_category(cls, category: type[Warning] | None) -> "Severity":
        """Map a warning category to its severity."""
        if category is None:
            return cls.WARNING
        for base, severity in _CATEGORY_SEVERITIES:
            if issubclass(category, base):
                return severity
        return cls.WARNING


# Checked in order; anything not listed is a plain WARNING
_CATEGORY_SEVERITIES: tuple[tuple[type[Warning], Severity], ...] = (
    (DeprecationWarning, Severity.DEPRECATED),
    (PendingDeprecationWarning, Severity.DEPRECATED),
    (FutureWarning, Severity.DEPRECATED),
    (ImportWarning, Severity.NOTICE),
    (ResourceWarning, Severity.NOTICE),
    (UserWarning, Severity.USER_WARNING),
)

ALL_SEVERITIES: frozenset[Severity] = frozenset(Severity)


def parse_error_reporting(
    value: str | Iterable[Severity | str] | None,
) -> frozenset[Severity]:
    """
    Parse a severity filter.

    Accepts a comma-separated string or an iterable of names/severities.
    Tokens are applied left to right:
    - "all" selects every severity, "none" clears the selection
    - "name" adds a severity, "-name" removes it
    A filter that starts with an exclusion starts from "all".

    Example:
        parse_error_reporting("all,-notice")   # everything except notices
        parse_error_reporting("-deprecated")   # same as "all,-deprecated"
        parse_error_reporting([Severity.WARNING])

    Raises:
        UnknownSeverityError: If a token names an unknown severity
    """
    if value is None:
        return ALL_SEVERITIES

    if isinstance(value, str):
        tokens: list[Severity | str] = [t for t in value.split(",") if t.strip()]
    else:
        tokens = list(value)

    selected: set[Severity] = set()
    for index, token in enumerate(tokens):
        if isinstance(token, Severity):
            selected.add(token)
            continue

        name = str(token).strip().lower()
        if name == "all":
            selected.update(ALL_SEVERITIES)
        elif name == "none":
            selected.clear()
        elif name.startswith("-"):
            if index == 0:
                selected.update(ALL_SEVERITIES)
            selected.discard(Severity.from_name(name[1:]))
        else:
            selected.add(Severity.from_name(name))

    return frozenset(selected)


class SourceLocation(BaseModel):
    """Where a failure originated."""

    model_config = ConfigDict(frozen=True)

    file: str = Field(..., description="Source file path")
    line: int = Field(..., ge=0, description="Line number (0 when unknown)")

    def __str__(self) -> str:
        return f"{self.file}:{self.line}"


class FailureRecord(BaseModel):
    """
    The one representation of a failure inside the handling pipeline.

    `rendered` is the full human-readable form (including the traceback when
    one exists). It is what gets logged, and what the caller sees when
    failure exposure is enabled.

    Example:
        {
            "message": "bad input",
            "severity": "user_warning",
            "source_location": {"file": "app.py", "line": 10},
            "rendered": "app.py:10: UserWarning: bad input"
        }
    """

    model_config = ConfigDict(frozen=True)

    message: str = Field(
        ...,
        description="Human-readable description of the failure"
    )

    severity: Severity = Field(
        ...,
        description="Classification, used by the error-reporting filter"
    )

    # May be absent for shutdown failures with incomplete context
    source_location: SourceLocation | None = Field(
        default=None,
        description="File and line where the failure originated"
    )

    rendered: str = Field(
        ...,
        min_length=1,
        description="Full rendering including any available traceback"
    )

    def __str__(self) -> str:
        return self.rendered

    # -------------------------------------------------------------------------
    # Normalization
    # -------------------------------------------------------------------------

    @classmethod
    def from_warning(
        cls,
        severity: Severity,
        message: Warning | str,
        filename: str,
        lineno: int,
        category: type[Warning] | None = None,
        line: str | None = None,
    ) -> "FailureRecord":
        """
        Build a record from a recoverable runtime error.

        With a warning category the rendering is the standard Python warning
        format (including the source line when it can be read); without one,
        the severity label takes the category's place.

        Args:
            severity: Severity of the failure
            message: Warning instance or message text
            filename: Source file of the failure
            lineno: Line number of the failure
            category: Warning class, if the failure came from `warnings`
            line: Source line text, if already known
        """
        text = str(message)

        if category is not None:
            rendered = warnings.formatwarning(text, category, filename, lineno, line)
        else:
            rendered = f"{filename}:{lineno}: {severity.label}: {text}"

        return cls(
            message=text,
            severity=severity,
            source_location=SourceLocation(file=filename, line=max(lineno, 0)),
            rendered=rendered.rstrip("\n") or text,
        )

    @classmethod
    def from_exception(
        cls,
        exc: BaseException,
        severity: Severity = Severity.ERROR,
    ) -> "FailureRecord":
        """
        Build a record from an exception object.

        The source location is the innermost traceback frame. Syntax errors
        raised before any frame ran carry their own file/line instead.
        """
        tb = exc.__traceback__
        frames = traceback.extract_tb(tb) if tb is not None else []

        location = None
        if frames:
            last = frames[-1]
            location = SourceLocation(file=last.filename, line=last.lineno or 0)
        elif isinstance(exc, SyntaxError) and exc.filename:
            location = SourceLocation(file=exc.filename, line=exc.lineno or 0)

        rendered = "".join(traceback.format_exception(type(exc), exc, tb))

        return cls(
            message=str(exc) or type(exc).__name__,
            severity=severity,
            source_location=location,
            rendered=rendered.rstrip("\n") or type(exc).__name__,
        )
