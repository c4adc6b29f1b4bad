"""Classification of exceptions that signal a specific test verdict."""

import unittest
from typing import Iterable, Optional, Protocol, Tuple

from .errors import (
    AssertionFailedError,
    IgnoreException,
    InconclusiveException,
    SuccessException,
)
from .results import ResultState

BUILTIN_CLASSIFICATIONS: Tuple[Tuple[type, ResultState], ...] = (
    (SuccessException, ResultState.SUCCESS),
    (IgnoreException, ResultState.IGNORED),
    (InconclusiveException, ResultState.INCONCLUSIVE),
    (AssertionFailedError, ResultState.FAILURE),
    (unittest.SkipTest, ResultState.IGNORED),
    (AssertionError, ResultState.FAILURE),
)


class ResultClassifier(Protocol):
    def classify(self, exception: BaseException) -> Optional[ResultState]:
        """Return the verdict an exception signals, or None for an ordinary exception."""
        ...


class DefaultClassifier:
    """
    Classifier for the test-control exceptions known to raisecheck.

    Extra ``(exception_type, state)`` pairs take priority over the builtin ones,
    which lets a host runner register its own skip or xfail exceptions.

    Example:
        classifier = DefaultClassifier([(pytest.skip.Exception, ResultState.IGNORED)])
    """

    def __init__(self, extra: Optional[Iterable[Tuple[type, ResultState]]] = None):
        self._classifications = (*tuple(extra or ()), *BUILTIN_CLASSIFICATIONS)

    def classify(self, exception: BaseException) -> Optional[ResultState]:
        for exception_type, state in self._classifications:
            if isinstance(exception, exception_type):
                return state
        return None
