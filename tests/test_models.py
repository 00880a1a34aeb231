# =============================================================================
# tests/test_models.py - Pydantic Model Tests
# =============================================================================
# Unit tests for the failure models to ensure:
# - Every failure source normalizes into the same FailureRecord shape
# - Severity mapping and filter parsing behave as documented
# - Records and configs are immutable
# - The response body policy follows the exposure flag only
#
# Run with: pytest tests/test_models.py -v
# =============================================================================

import pytest
from pydantic import ValidationError

from core.models import (
    ALL_SEVERITIES,
    GENERIC_FAILURE_MESSAGE,
    FailureRecord,
    InterceptorConfig,
    Severity,
    SourceLocation,
    UnknownSeverityError,
    parse_error_reporting,
)
from lib.utils import ApplicationError
from tests.conftest import raised


# =============================================================================
# Severity Tests
# =============================================================================

class TestSeverity:
    """Tests for Severity enum."""

    @pytest.mark.parametrize(
        "category, expected",
        [
            (DeprecationWarning, Severity.DEPRECATED),
            (PendingDeprecationWarning, Severity.DEPRECATED),
            (FutureWarning, Severity.DEPRECATED),
            (ImportWarning, Severity.NOTICE),
            (ResourceWarning, Severity.NOTICE),
            (UserWarning, Severity.USER_WARNING),
            (RuntimeWarning, Severity.WARNING),
            (SyntaxWarning, Severity.WARNING),
        ],
    )
    def test_from_category(self, category, expected):
        """Test warning categories map to severities."""
        assert Severity.from_category(category) == expected

    def test_from_category_subclass(self):
        """Test custom warning classes inherit their base's severity."""

        class MyDeprecation(DeprecationWarning):
            pass

        assert Severity.from_category(MyDeprecation) == Severity.DEPRECATED

    def test_from_name_is_case_insensitive(self):
        """Test lookup by name."""
        assert Severity.from_name(" Notice ") == Severity.NOTICE

    def test_from_name_unknown(self):
        """Test unknown names raise an actionable error."""
        with pytest.raises(UnknownSeverityError) as exc_info:
            Severity.from_name("catastrophe")

        error = exc_info.value
        assert isinstance(error, ApplicationError)
        assert isinstance(error, ValueError)
        assert error.code == "UNKNOWN_SEVERITY"
        assert "notice" in error.suggestion

    def test_label(self):
        """Test display labels."""
        assert Severity.USER_WARNING.label == "User Warning"
        assert Severity.FATAL.label == "Fatal"


# =============================================================================
# Filter Parsing Tests
# =============================================================================

class TestParseErrorReporting:
    """Tests for parse_error_reporting."""

    def test_none_means_all(self):
        assert parse_error_reporting(None) == ALL_SEVERITIES

    def test_all(self):
        assert parse_error_reporting("all") == ALL_SEVERITIES

    def test_exclusion(self):
        """Test 'all,-notice' keeps everything but notices."""
        result = parse_error_reporting("all,-notice")

        assert Severity.NOTICE not in result
        assert result == ALL_SEVERITIES - {Severity.NOTICE}

    def test_leading_exclusion_starts_from_all(self):
        assert parse_error_reporting("-deprecated") == ALL_SEVERITIES - {Severity.DEPRECATED}

    def test_explicit_list(self):
        result = parse_error_reporting("warning, user_warning")
        assert result == {Severity.WARNING, Severity.USER_WARNING}

    def test_none_token_clears(self):
        assert parse_error_reporting("none") == frozenset()
        assert parse_error_reporting("all,none,fatal") == {Severity.FATAL}

    def test_iterable_of_severities(self):
        result = parse_error_reporting([Severity.NOTICE, "warning"])
        assert result == {Severity.NOTICE, Severity.WARNING}

    def test_unknown_token(self):
        with pytest.raises(UnknownSeverityError):
            parse_error_reporting("all,-bogus")


# =============================================================================
# FailureRecord Tests
# =============================================================================

class TestFailureRecordFromWarning:
    """Tests for normalizing recoverable runtime errors."""

    def test_with_category(self):
        """Test the standard warning rendering is used."""
        record = FailureRecord.from_warning(
            Severity.USER_WARNING, "bad input", "x.py", 10, category=UserWarning
        )

        assert record.message == "bad input"
        assert record.severity == Severity.USER_WARNING
        assert record.source_location == SourceLocation(file="x.py", line=10)
        assert record.rendered == "x.py:10: UserWarning: bad input"

    def test_without_category(self):
        """Test the severity label replaces the category name."""
        record = FailureRecord.from_warning(Severity.WARNING, "bad input", "x.py", 10)

        assert record.rendered == "x.py:10: Warning: bad input"

    def test_warning_instance_message(self):
        """Test warning objects are converted to their text."""
        record = FailureRecord.from_warning(
            Severity.DEPRECATED,
            DeprecationWarning("old api"),
            "lib.py",
            3,
            category=DeprecationWarning,
        )

        assert record.message == "old api"
        assert record.rendered == "lib.py:3: DeprecationWarning: old api"

    def test_source_line_included(self):
        """Test a known source line is part of the rendering."""
        record = FailureRecord.from_warning(
            Severity.WARNING, "odd", "job.py", 7, category=RuntimeWarning, line="x = 1 / y"
        )

        assert record.rendered.splitlines() == [
            "job.py:7: RuntimeWarning: odd",
            "  x = 1 / y",
        ]


class TestFailureRecordFromException:
    """Tests for normalizing exceptions."""

    def test_uncaught_exception(self):
        """Test message, location and traceback rendering."""
        exc = raised(ValueError("boom"))

        record = FailureRecord.from_exception(exc)

        assert record.message == "boom"
        assert record.severity == Severity.ERROR
        assert record.source_location is not None
        assert record.source_location.file.endswith("conftest.py")
        assert record.source_location.line > 0
        assert record.rendered.startswith("Traceback (most recent call last):")
        assert record.rendered.endswith("ValueError: boom")

    def test_without_traceback(self):
        """Test exceptions that were never raised have no location."""
        record = FailureRecord.from_exception(PermissionError(13, "Permission denied"))

        assert record.source_location is None
        assert record.rendered == "PermissionError: [Errno 13] Permission denied"

    def test_empty_message_falls_back_to_type(self):
        record = FailureRecord.from_exception(RuntimeError())

        assert record.message == "RuntimeError"
        assert record.rendered == "RuntimeError"

    def test_syntax_error_location(self):
        """Test syntax errors report the offending file and line."""
        exc = SyntaxError("invalid syntax", ("broken.py", 4, 1, "def (:\n"))

        record = FailureRecord.from_exception(exc, severity=Severity.FATAL)

        assert record.severity == Severity.FATAL
        assert record.source_location == SourceLocation(file="broken.py", line=4)

    def test_record_is_frozen(self):
        """Test records can't be changed after construction."""
        record = FailureRecord.from_exception(RuntimeError("x"))

        with pytest.raises(ValidationError):
            record.message = "changed"

    def test_str_is_rendered_form(self):
        record = FailureRecord.from_exception(KeyError("k"))
        assert str(record) == record.rendered

    def test_rendered_required(self):
        with pytest.raises(ValidationError):
            FailureRecord(message="m", severity=Severity.ERROR, rendered="")


# =============================================================================
# InterceptorConfig Tests
# =============================================================================

class TestInterceptorConfig:
    """Tests for InterceptorConfig model."""

    def test_defaults(self):
        """Test safe defaults: nothing exposed, every severity reported."""
        config = InterceptorConfig()

        assert config.filename is None
        assert config.expose_failures is False
        assert config.verbose_failures is False
        assert config.error_reporting == ALL_SEVERITIES

    def test_filter_string_is_parsed(self):
        config = InterceptorConfig(error_reporting="all,-notice")

        assert not config.reports(Severity.NOTICE)
        assert config.reports(Severity.WARNING)

    def test_invalid_filter(self):
        with pytest.raises(ValidationError):
            InterceptorConfig(error_reporting="loud")

    def test_body_generic_when_not_exposed(self):
        record = FailureRecord.from_exception(ValueError("secret path /etc/app"))

        assert InterceptorConfig().response_body(record) == GENERIC_FAILURE_MESSAGE
        assert GENERIC_FAILURE_MESSAGE == "An error has occurred"

    @pytest.mark.parametrize("verbose", [False, True])
    def test_body_rendered_when_exposed(self, verbose):
        """Test the verbose flag doesn't change the exposed body."""
        record = FailureRecord.from_exception(raised(ValueError("boom")))
        config = InterceptorConfig(expose_failures=True, verbose_failures=verbose)

        assert config.response_body(record) == record.rendered

    def test_verbose_alone_does_not_expose(self):
        record = FailureRecord.from_exception(ValueError("boom"))
        config = InterceptorConfig(verbose_failures=True)

        assert config.response_body(record) == GENERIC_FAILURE_MESSAGE
