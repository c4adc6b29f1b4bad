"""Descriptor of the test method an expectation is attached to."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, ClassVar, Optional


class RunState(str, Enum):
    RUNNABLE = "runnable"
    NOT_RUNNABLE = "not_runnable"


@dataclass
class TestMethod:
    """
    A test method together with the fixture class that declares it.

    The fixture instance is created from ``fixture_type`` on first access unless
    one is passed as ``instance``.
    """

    __test__: ClassVar[bool] = False

    name: str
    fixture_type: type
    func: Optional[Callable[..., Any]] = None
    instance: Any = field(default=None, repr=False)
    run_state: RunState = RunState.RUNNABLE
    ignore_reason: Optional[str] = None

    @classmethod
    def from_function(cls, func: Callable[..., Any], fixture_type: type, **kwargs) -> "TestMethod":
        return cls(func.__name__, fixture_type, func=func, **kwargs)

    @property
    def fixture(self) -> Any:
        if self.instance is None:
            self.instance = self.fixture_type()
        return self.instance

    @property
    def is_runnable(self) -> bool:
        return self.run_state is RunState.RUNNABLE

    def mark_not_runnable(self, reason: str) -> None:
        self.run_state = RunState.NOT_RUNNABLE
        self.ignore_reason = reason
