"""
raisecheck - Verification of expected exceptions for unit-test runners.
"""
import importlib.metadata

__version__ = importlib.metadata.version("raisecheck")

from .classification import DefaultClassifier, ResultClassifier
from .criteria import (
    ExpectationCriteria,
    MessageMatch,
    expected_exception,
    get_expectation,
    load_criteria,
    load_criteria_file,
    load_criteria_from_dict,
    load_criteria_from_yaml_string,
    qualified_name,
)
from .errors import (
    AssertionFailedError,
    FrameworkError,
    IgnoreException,
    InconclusiveException,
    ResultAlreadyRecordedError,
    SuccessException,
    TestControlException,
    fail,
    ignore,
    inconclusive,
    succeed,
)
from .handlers import (
    DEFAULT_HANDLER_NAME,
    ExceptionHandler,
    ExpectsException,
    find_default_handler,
    find_handler,
)
from .method import RunState, TestMethod
from .processor import ExpectedExceptionProcessor
from .results import ResultState, TestResult

__all__ = [
    "ExpectedExceptionProcessor",
    "ExpectationCriteria",
    "MessageMatch",
    "expected_exception",
    "get_expectation",
    "qualified_name",
    "load_criteria",
    "load_criteria_file",
    "load_criteria_from_dict",
    "load_criteria_from_yaml_string",
    "ResultClassifier",
    "DefaultClassifier",
    "ExpectsException",
    "ExceptionHandler",
    "DEFAULT_HANDLER_NAME",
    "find_handler",
    "find_default_handler",
    "TestMethod",
    "RunState",
    "TestResult",
    "ResultState",
    "TestControlException",
    "AssertionFailedError",
    "IgnoreException",
    "InconclusiveException",
    "SuccessException",
    "FrameworkError",
    "ResultAlreadyRecordedError",
    "fail",
    "ignore",
    "inconclusive",
    "succeed",
]
