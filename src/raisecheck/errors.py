"""Custom exception types for the raisecheck verification engine."""


class TestControlException(Exception):
    """Base class for exceptions that steer a test's verdict.

    Collaborating code raises one of the subclasses to end a test early with a
    specific outcome. The classifier recognizes them even when they do not match
    the exception a test expects.
    """

    __test__ = False


class AssertionFailedError(TestControlException, AssertionError):
    """Raised to fail a test with an explicit message."""


class IgnoreException(TestControlException):
    """Raised to mark a test as ignored."""


class InconclusiveException(TestControlException):
    """Raised when a test can neither pass nor fail."""


class SuccessException(TestControlException):
    """Raised to end a test early as passed."""


class FrameworkError(Exception):
    """Wrapper raised by the test engine around an exception from user code.

    The wrapped exception is available as ``inner``. Verification always looks
    through the wrapper at ``inner``.

    Examples:
        * Wrapping:
            - raise FrameworkError("invocation failed", inner=exc) from exc
    """

    def __init__(self, message: str = "", *, inner: BaseException | None = None):
        super().__init__(message)
        self.inner = inner


class ResultAlreadyRecordedError(RuntimeError):
    """Raised when a second verdict is written to the same TestResult."""


def fail(message: str = "") -> None:
    raise AssertionFailedError(message)


def ignore(reason: str = "") -> None:
    raise IgnoreException(reason)


def inconclusive(reason: str = "") -> None:
    raise InconclusiveException(reason)


def succeed(message: str = "") -> None:
    raise SuccessException(message)
