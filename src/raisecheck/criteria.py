"""Expectation criteria describing the exception a test must raise.

Criteria come from two sources:
1. The ``expected_exception`` decorator placed on a test function
2. Structured data (YAML files, dicts) keyed by test id

Usage:
    from raisecheck.criteria import expected_exception, MessageMatch

    @expected_exception(ValueError, message="bad value", match=MessageMatch.CONTAINS)
    def test_parse(self): ...
"""

import inspect
import os
import re
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

import yaml
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    field_validator,
    model_validator,
)

EXPECTATION_ATTRIBUTE = "__expected_exception__"


class MessageMatch(str, Enum):
    """How an expected message is compared with the actual exception message."""

    EXACT = "exact"
    CONTAINS = "contains"
    REGEX = "regex"
    STARTS_WITH = "starts_with"

    @classmethod
    def _missing_(cls, value: object) -> Optional["MessageMatch"]:
        # Accept "StartsWith", "starts-with", "Contains", ...
        if isinstance(value, str):
            normalized = re.sub(r"(?<=[a-z])(?=[A-Z])", "_", value.strip())
            normalized = normalized.lower().replace("-", "_")
            if normalized == "startswith":
                normalized = "starts_with"
            for member in cls:
                if member.value == normalized:
                    return member
        return None

    @property
    def label(self) -> str:
        """Lead-in used when reporting a message mismatch."""
        return _MATCH_LABELS[self]


_MATCH_LABELS = {
    MessageMatch.EXACT: "Expected: ",
    MessageMatch.CONTAINS: "Expected message containing: ",
    MessageMatch.REGEX: "Expected message matching: ",
    MessageMatch.STARTS_WITH: "Expected message starting: ",
}


def qualified_name(exception_type: type) -> str:
    """Return the fully-qualified name used to compare exception types.

    Builtin exceptions keep their bare name (``ValueError``), everything else is
    ``module.QualName``.
    """
    module = exception_type.__module__
    if module == "builtins":
        return exception_type.__qualname__
    return f"{module}.{exception_type.__qualname__}"


class ExpectationCriteria(BaseModel):
    """Immutable description of the exception a test is expected to raise."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    expected_type_name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("expected_type_name", "expected_exception", "raises"),
        description="Fully-qualified name of the expected exception type. None accepts any type.",
        examples=["ValueError", "json.decoder.JSONDecodeError"],
    )
    expected_message: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("expected_message", "message"),
        description="Text compared with the exception message. None skips the check.",
    )
    match_type: MessageMatch = Field(
        default=MessageMatch.EXACT,
        validation_alias=AliasChoices("match_type", "match"),
        description="Strategy used to compare expected_message.",
    )
    user_message: Optional[str] = Field(
        default=None, description="Text placed before every generated failure message."
    )
    handler: Optional[str] = Field(
        default=None,
        description="Name of a fixture method called with the exception once it matches.",
    )

    @field_validator("expected_type_name", mode="before")
    @classmethod
    def _coerce_type_name(cls, value: Any) -> Any:
        if isinstance(value, type):
            if not issubclass(value, BaseException):
                raise ValueError(f"{value.__qualname__} is not an exception type")
            return qualified_name(value)
        if isinstance(value, str):
            return value.strip() or None
        return value

    @field_validator("match_type", mode="before")
    @classmethod
    def _default_match_type(cls, value: Any) -> Any:
        if value is None:
            return MessageMatch.EXACT
        if isinstance(value, str):
            return MessageMatch(value)
        return value

    @field_validator("handler")
    @classmethod
    def _check_handler_name(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.isidentifier():
            raise ValueError(f"Handler name {value!r} is not a valid identifier")
        return value

    @model_validator(mode="after")
    def _check_pattern(self) -> "ExpectationCriteria":
        if self.match_type is MessageMatch.REGEX and self.expected_message is not None:
            try:
                re.compile(self.expected_message)
            except re.error as e:
                raise ValueError(
                    f"Invalid regular expression {self.expected_message!r}: {e}"
                ) from e
        return self

    @property
    def expected_type_label(self) -> str:
        return self.expected_type_name or "An Exception"


def expected_exception(
    exception: Union[type, str, Callable, None] = None,
    *,
    message: Optional[str] = None,
    match: Union[MessageMatch, str] = MessageMatch.EXACT,
    user_message: Optional[str] = None,
    handler: Optional[str] = None,
) -> Callable:
    """
    Declare that a test function must raise an exception.

    Can be used bare (``@expected_exception``) to accept any exception.

    Args:
        exception: Exception class or fully-qualified type name
        message: Expected exception message
        match: Strategy used to compare ``message``
        user_message: Text prepended to failure messages
        handler: Name of a fixture method to call with the matched exception

    Returns:
        Decorator attaching ExpectationCriteria to the function

    Example:
        @expected_exception(KeyError, handler="check_key")
        def test_lookup(self): ...
    """
    if inspect.isfunction(exception):
        return expected_exception()(exception)

    criteria = ExpectationCriteria(
        expected_type_name=exception,
        expected_message=message,
        match_type=match,
        user_message=user_message,
        handler=handler,
    )

    def decorator(func: Callable) -> Callable:
        setattr(func, EXPECTATION_ATTRIBUTE, criteria)
        return func

    return decorator


def get_expectation(func: Callable) -> Optional[ExpectationCriteria]:
    return getattr(func, EXPECTATION_ATTRIBUTE, None)


_criteria_adapter = TypeAdapter(Dict[str, ExpectationCriteria])


def load_criteria_from_dict(data: dict) -> Dict[str, ExpectationCriteria]:
    return _criteria_adapter.validate_python(data)


def load_criteria_from_yaml_string(yaml_content: str) -> Dict[str, ExpectationCriteria]:
    loaded = yaml.safe_load(yaml_content)
    return load_criteria_from_dict(loaded or {})


def load_criteria_file(yaml_path: Union[str, Path]) -> Dict[str, ExpectationCriteria]:
    with open(yaml_path) as f:
        loaded = yaml.safe_load(f)

    return load_criteria_from_dict(loaded or {})


def load_criteria(source: Union[str, Path, dict]) -> Dict[str, ExpectationCriteria]:
    if isinstance(source, dict):
        return load_criteria_from_dict(source)
    elif isinstance(source, Path):
        return load_criteria_file(source)
    elif isinstance(source, str):
        if "\n" not in source and os.path.isfile(source):
            return load_criteria_file(source)
        if "\n" in source or source.strip().startswith("{") or ":" in source:
            return load_criteria_from_yaml_string(source)
        else:
            return load_criteria_file(source)
    else:
        raise TypeError(
            f"source must be a file path (str/Path), YAML string (str) or dict, got {type(source)}"
        )
