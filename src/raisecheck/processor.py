"""Verification of a test's outcome against its expected-exception criteria."""

import re
import traceback
from typing import Optional

import logfire

from .classification import DefaultClassifier, ResultClassifier
from .criteria import ExpectationCriteria, MessageMatch, get_expectation, qualified_name
from .errors import FrameworkError
from .handlers import ExceptionHandler, find_default_handler, find_handler
from .method import TestMethod
from .results import ResultState, TestResult

NO_STACK_TRACE = "No stack trace available"


def unwrap(exception: BaseException) -> BaseException:
    """Return the exception a FrameworkError wrapper (or chain of them) carries."""
    while isinstance(exception, FrameworkError) and exception.inner is not None:
        exception = exception.inner
    return exception


def get_message(exception: BaseException) -> str:
    try:
        return str(exception)
    except Exception:
        return f"<unprintable {qualified_name(type(exception))}>"


def get_stack_trace(exception: BaseException) -> str:
    try:
        return "".join(traceback.format_exception(exception))
    except Exception:
        return NO_STACK_TRACE


class ExpectedExceptionProcessor:
    """
    Decides whether a test's outcome satisfies its expected-exception criteria.

    One processor is created per test method and lives for that test's execution.
    The handler is resolved once, at construction. A handler name that cannot be
    resolved marks the test method as not runnable instead of raising.

    An exception raised by the handler itself is not caught here; it propagates to
    the caller, which decides how to classify it.

    Examples:
        processor = ExpectedExceptionProcessor(method, ExpectationCriteria(raises=KeyError))
        processor.process_exception(exc, result)
        processor.process_no_exception(result)
    """

    def __init__(
        self,
        test_method: TestMethod,
        criteria: ExpectationCriteria,
        *,
        classifier: Optional[ResultClassifier] = None,
        use_handler_name: bool = True,
        use_user_message: bool = True,
    ):
        self.test_method = test_method
        self.criteria = criteria
        self.classifier: ResultClassifier = classifier or DefaultClassifier()
        self.user_message = criteria.user_message if use_user_message else None
        self.exception_handler: Optional[ExceptionHandler] = None

        handler_name = criteria.handler if use_handler_name else None
        if handler_name is None:
            self.exception_handler = find_default_handler(test_method.fixture_type)
        else:
            handler = find_handler(test_method.fixture_type, handler_name)
            if handler is not None:
                self.exception_handler = handler
            else:
                reason = f"The specified exception handler {handler_name} was not found"
                test_method.mark_not_runnable(reason)
                logfire.warn(
                    "Expected exception handler not found",
                    test=test_method.name,
                    handler=handler_name,
                )

    @classmethod
    def from_case(
        cls,
        test_method: TestMethod,
        criteria: ExpectationCriteria,
        *,
        classifier: Optional[ResultClassifier] = None,
    ) -> "ExpectedExceptionProcessor":
        """
        Create a processor for criteria coming from a parameterized test case.

        Only the fixture's default handler is consulted; the criteria's handler name
        and user message are not used on this path.
        """
        return cls(
            test_method,
            criteria,
            classifier=classifier,
            use_handler_name=False,
            use_user_message=False,
        )

    @classmethod
    def for_test(
        cls,
        test_method: TestMethod,
        *,
        classifier: Optional[ResultClassifier] = None,
    ) -> "ExpectedExceptionProcessor":
        """Create a processor from the criteria declared with ``@expected_exception``."""
        criteria = get_expectation(test_method.func) if test_method.func else None
        if criteria is None:
            raise ValueError(f"Test '{test_method.name}' does not declare an expected exception")
        return cls(test_method, criteria, classifier=classifier)

    @property
    def is_runnable(self) -> bool:
        return self.test_method.is_runnable

    def process_no_exception(self, result: TestResult) -> None:
        logfire.debug("Expected exception was not raised", test=self.test_method.name)
        result.failure(self._no_exception_message(), None)

    def process_exception(self, exception: BaseException, result: TestResult) -> None:
        exception = unwrap(exception)
        actual_type = qualified_name(type(exception))

        with logfire.span(
            "Verifying expected exception",
            test=self.test_method.name,
            expected=self.criteria.expected_type_name,
            actual=actual_type,
        ):
            if self._is_expected_type(exception):
                if self._is_expected_message(exception):
                    if self.exception_handler is not None:
                        self.exception_handler(self.test_method.fixture, exception)
                    result.success()
                else:
                    result.failure(self._wrong_text_message(exception), get_stack_trace(exception))
                return

            state = self.classifier.classify(exception)
            if state is ResultState.FAILURE:
                result.failure(get_message(exception), get_stack_trace(exception))
            elif state is ResultState.IGNORED:
                result.ignore(get_message(exception))
            elif state is ResultState.INCONCLUSIVE:
                result.set_result(ResultState.INCONCLUSIVE, get_message(exception))
            elif state is ResultState.SUCCESS:
                result.success(get_message(exception))
            else:
                result.failure(self._wrong_type_message(exception), get_stack_trace(exception))

            logfire.debug(
                "Unexpected exception type",
                test=self.test_method.name,
                classified_as=state.value if state else None,
            )

    def _is_expected_type(self, exception: BaseException) -> bool:
        expected = self.criteria.expected_type_name
        return expected is None or expected == qualified_name(type(exception))

    def _is_expected_message(self, exception: BaseException) -> bool:
        expected = self.criteria.expected_message
        if expected is None:
            return True

        actual = get_message(exception)
        match_type = self.criteria.match_type
        if match_type is MessageMatch.CONTAINS:
            return expected in actual
        if match_type is MessageMatch.REGEX:
            return re.search(expected, actual) is not None
        if match_type is MessageMatch.STARTS_WITH:
            return actual.startswith(expected)
        return actual == expected

    def _no_exception_message(self) -> str:
        return self._combine_with_user_message(
            f"{self.criteria.expected_type_label} was expected"
        )

    def _wrong_type_message(self, exception: BaseException) -> str:
        return self._combine_with_user_message(
            "An unexpected exception type was thrown\n"
            f"Expected: {self.criteria.expected_type_name}\n"
            f" but was: {qualified_name(type(exception))} : {get_message(exception)}"
        )

    def _wrong_text_message(self, exception: BaseException) -> str:
        return self._combine_with_user_message(
            "The exception message text was incorrect\n"
            f"{self.criteria.match_type.label}{self.criteria.expected_message}\n"
            f" but was: {get_message(exception)}"
        )

    def _combine_with_user_message(self, message: str) -> str:
        if self.user_message is None:
            return message
        return f"{self.user_message}\n{message}"
