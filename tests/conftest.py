"""Pytest configuration and shared fixtures for raisecheck tests."""

import logfire
import pytest

from raisecheck import ExpectsException, TestMethod, TestResult

logfire.configure(send_to_logfire=False, console=False)


# ============================================================================
# Sample Fixture Classes
# ============================================================================


class PlainFixture:
    """Fixture without any exception handler."""

    def test_something(self):
        pass


class RecordingFixture(ExpectsException):
    """Fixture that records every exception passed to its handlers."""

    def __init__(self):
        self.handled = []
        self.checked = []

    def handle_exception(self, exception: Exception) -> None:
        self.handled.append(exception)

    def check_error(self, exception):
        self.checked.append(exception)

    def test_something(self):
        pass


class NamedHandlerFixture:
    """Fixture with a named handler but no capability marker."""

    def __init__(self):
        self.checked = []

    def handle_exception(self, exception: Exception) -> None:
        raise AssertionError("default handler must not be used without the marker")

    def verify(self, exception: BaseException) -> None:
        self.checked.append(exception)

    def explode(self, exception):
        raise RuntimeError(f"handler failed on {exception}")


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def result() -> TestResult:
    """Fresh result sink."""
    return TestResult(name="test_something")


@pytest.fixture
def plain_method() -> TestMethod:
    return TestMethod("test_something", PlainFixture)


@pytest.fixture
def recording_method() -> TestMethod:
    return TestMethod("test_something", RecordingFixture)


@pytest.fixture
def named_handler_method() -> TestMethod:
    return TestMethod("test_something", NamedHandlerFixture)


@pytest.fixture
def expectations_yaml() -> str:
    """YAML document with several expectation definitions."""
    return """
test_parse:
  raises: ValueError
  message: bad value
  match: contains
  user_message: parser should reject garbage
test_lookup:
  expected_exception: KeyError
  handler: check_key
test_anything: {}
test_pattern:
  raises: json.decoder.JSONDecodeError
  message: "^Expecting value"
  match: regex
"""
