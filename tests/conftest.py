# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Clears failure-handling environment variables before any imports
# - Injects a recording terminator so handle() never ends the test process
# - Routes console responses into an in-memory stream
# =============================================================================

import io
import os
import sys

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# app.main builds an interceptor from the environment at import time

for _name in ("FAILURE_LOG_FILE", "EXPOSE_FAILURES", "VERBOSE_FAILURES", "ERROR_REPORTING"):
    os.environ.pop(_name, None)
os.environ.setdefault("ENVIRONMENT", "development")

import pytest

from app.config import get_settings
from core.interceptor import FailureInterceptor
from core.services.response_service import ConsoleChannel


class RecordingTerminator:
    """Stands in for process termination; remembers the exit statuses."""

    def __init__(self):
        self.calls: list[int] = []

    def __call__(self, status: int) -> None:
        self.calls.append(status)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached per process; each test reads the environment fresh."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def terminator():
    return RecordingTerminator()


@pytest.fixture
def output():
    """Stream the console channel writes to."""
    return io.StringIO()


@pytest.fixture
def channel(output):
    return ConsoleChannel(stream=output, colorize=False)


@pytest.fixture
def make_interceptor(channel, terminator):
    """
    Factory for interceptors wired to the test channel and terminator.

    Every interceptor created here has its hooks released afterwards.
    """
    created: list[FailureInterceptor] = []

    def factory(filename: str | None = None, **kwargs) -> FailureInterceptor:
        kwargs.setdefault("channel", channel)
        kwargs.setdefault("terminate", terminator)
        interceptor = FailureInterceptor(filename, **kwargs)
        created.append(interceptor)
        return interceptor

    yield factory

    for interceptor in created:
        interceptor.release()
        interceptor.log.close()


@pytest.fixture
def interceptor(make_interceptor):
    return make_interceptor()


@pytest.fixture
def no_last_exception(monkeypatch):
    """Pytest records failed tests in sys.last_*; start from a clean state."""
    for name in ("last_exc", "last_value", "last_type", "last_traceback", "ps1"):
        monkeypatch.delattr(sys, name, raising=False)


def raised(exc: BaseException) -> BaseException:
    """Raise and catch an exception so it carries a traceback."""
    try:
        raise exc
    except BaseException as caught:
        return caught
