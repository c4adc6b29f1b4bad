"""Result sink receiving the single verdict of a test execution."""

from enum import Enum
from typing import ClassVar, Optional, Union

from pydantic import BaseModel, Field

from .errors import ResultAlreadyRecordedError


class ResultState(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    IGNORED = "ignored"
    INCONCLUSIVE = "inconclusive"


class TestResult(BaseModel):
    """
    Mutable verdict holder for one test execution.

    Exactly one terminal call (success, failure, ignore, set_result) is accepted;
    a second one raises ResultAlreadyRecordedError.

    Example:
        result = TestResult(name="test_parse")
        result.failure("ValueError was expected")
        assert result.state is ResultState.FAILURE
    """

    __test__: ClassVar[bool] = False

    name: str = Field(default="", description="Name of the test this result belongs to.")
    state: Optional[ResultState] = None
    message: Optional[str] = None
    stack_trace: Optional[str] = None

    @property
    def is_set(self) -> bool:
        return self.state is not None

    @property
    def passed(self) -> bool:
        return self.state is ResultState.SUCCESS

    def success(self, message: Optional[str] = None) -> None:
        self._record(ResultState.SUCCESS, message)

    def failure(self, message: str, stack_trace: Optional[str] = None) -> None:
        self._record(ResultState.FAILURE, message, stack_trace)

    def ignore(self, reason: Union[str, BaseException]) -> None:
        self.set_result(ResultState.IGNORED, reason)

    def set_result(self, state: ResultState, source: Union[str, BaseException, None]) -> None:
        """
        Record a verdict whose message comes from a reason string or an exception.

        Args:
            state: Verdict to record
            source: Reason text, or the exception whose message becomes the reason
        """
        if isinstance(source, BaseException):
            self._record(state, str(source))
        else:
            self._record(state, source)

    def _record(
        self,
        state: ResultState,
        message: Optional[str],
        stack_trace: Optional[str] = None,
    ) -> None:
        if self.state is not None:
            raise ResultAlreadyRecordedError(
                f"Result for '{self.name}' already recorded as {self.state.value}, "
                f"cannot record {state.value}"
            )
        self.state = state
        self.message = message
        self.stack_trace = stack_trace
