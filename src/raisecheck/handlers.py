"""Lookup of the optional exception handler declared on a test fixture.

A handler is a fixture method taking exactly one argument that can receive any
``Exception``. It is looked up either by an explicit name, or by the default name
``handle_exception`` when the fixture subclasses ``ExpectsException``.
"""

import inspect
import types
import typing
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Optional

DEFAULT_HANDLER_NAME = "handle_exception"

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
_EXCEPTION_ANNOTATION_NAMES = frozenset({"Exception", "BaseException", "object", "Any"})


class ExpectsException(ABC):
    """Marker for fixtures that handle every expected exception their tests raise."""

    @abstractmethod
    def handle_exception(self, exception: Exception) -> None: ...


@dataclass(frozen=True)
class ExceptionHandler:
    """A resolved handler, invoked as ``handler(fixture, exception)``."""

    name: str
    func: Callable[..., Any]
    binds_instance: bool = True

    def __call__(self, fixture: Any, exception: BaseException) -> Any:
        if self.binds_instance:
            return self.func(fixture, exception)
        return self.func(exception)


def _accepts_exception_annotation(annotation: Any) -> bool:
    if annotation is inspect.Parameter.empty or annotation is typing.Any:
        return True
    if isinstance(annotation, str):
        return annotation in _EXCEPTION_ANNOTATION_NAMES
    if typing.get_origin(annotation) in (typing.Union, types.UnionType):
        return any(_accepts_exception_annotation(arg) for arg in typing.get_args(annotation))
    if isinstance(annotation, type):
        return issubclass(Exception, annotation)
    return False


def _signature(func: Callable[..., Any]) -> Optional[inspect.Signature]:
    try:
        return inspect.signature(func, eval_str=True)
    except Exception:
        pass
    # Unresolvable string annotations are compared by name.
    try:
        return inspect.signature(func)
    except (TypeError, ValueError):
        return None


def _accepts_single_exception(func: Callable[..., Any], *, skip_self: bool) -> bool:
    signature = _signature(func)
    if signature is None:
        return False

    params = list(signature.parameters.values())
    if skip_self:
        if not params or params[0].kind not in _POSITIONAL:
            return False
        params = params[1:]

    if len(params) != 1 or params[0].kind not in _POSITIONAL:
        return False
    return _accepts_exception_annotation(params[0].annotation)


def find_handler(fixture_type: type, name: str) -> Optional[ExceptionHandler]:
    """
    Find a handler method by name on a fixture class.

    Args:
        fixture_type: Class declaring the test
        name: Method name to look up

    Returns:
        The resolved handler, or None when no method with a matching signature exists
    """
    try:
        declared = inspect.getattr_static(fixture_type, name)
    except AttributeError:
        return None

    if isinstance(declared, (staticmethod, classmethod)):
        func = getattr(fixture_type, name)
        binds_instance = False
    elif inspect.isfunction(declared):
        func = declared
        binds_instance = True
    else:
        return None

    if not _accepts_single_exception(func, skip_self=binds_instance):
        return None
    return ExceptionHandler(name=name, func=func, binds_instance=binds_instance)


def find_default_handler(fixture_type: type) -> Optional[ExceptionHandler]:
    if isinstance(fixture_type, type) and issubclass(fixture_type, ExpectsException):
        return find_handler(fixture_type, DEFAULT_HANDLER_NAME)
    return None
