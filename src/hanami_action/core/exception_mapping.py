"""Mapping of raised exceptions to HTTP outcomes.

An entry is either a ``StatusMapping`` (respond with a status code and
its reason phrase) or a ``HandlerMapping`` (call a handler that shapes
the response). Lookup walks the exception's method resolution order so
a mapping for a base class also covers its subclasses, while a more
specific mapping takes precedence.

Examples:
    >>> mappings = coerce_mappings({LookupError: 404, KeyError: 422})
    >>> resolve_exception_mapping(mappings, KeyError("id"))
    StatusMapping(status=422)
    >>> resolve_exception_mapping(mappings, IndexError(0))
    StatusMapping(status=404)
"""

from collections.abc import Callable, Mapping
from typing import Any, Union

from pydantic import BaseModel, Field

DEFAULT_ERROR_STATUS = 500


class StatusMapping(BaseModel):
    """Respond with a fixed status code."""

    status: int = Field(..., ge=100, le=599, description="HTTP status code")

    model_config = {"frozen": True}

    def __repr__(self) -> str:
        return f"StatusMapping(status={self.status})"


class HandlerMapping(BaseModel):
    """Delegate to a callable.

    The handler receives the trailing arguments it accepts of
    ``(action, request, response, exception)``. Returning an int halts
    with that status.
    """

    handler: Callable[..., Any]

    model_config = {"frozen": True}

    def __repr__(self) -> str:
        name = getattr(self.handler, "__qualname__", repr(self.handler))
        return f"HandlerMapping(handler={name})"


ExceptionMapping = Union[StatusMapping, HandlerMapping]


def coerce_mapping(value: Any) -> ExceptionMapping:
    """Turn a status code or callable into an exception mapping entry.

    Raises:
        ValueError: If the value is neither an int nor a callable.
    """
    if isinstance(value, (StatusMapping, HandlerMapping)):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return StatusMapping(status=value)
    if callable(value):
        return HandlerMapping(handler=value)
    raise ValueError(
        f"Exception mappings must be a status code or a callable, got {value!r}"
    )


def coerce_mappings(
    mappings: Mapping[Any, Any],
) -> dict[type[BaseException], ExceptionMapping]:
    """Validate a mapping of exception classes to status codes or handlers.

    Raises:
        ValueError: If a key is not an exception class or a value is invalid.
    """
    result: dict[type[BaseException], ExceptionMapping] = {}
    for kind, value in mappings.items():
        if not (isinstance(kind, type) and issubclass(kind, BaseException)):
            raise ValueError(f"Exception mapping keys must be exception classes, got {kind!r}")
        result[kind] = coerce_mapping(value)
    return result


def resolve_exception_mapping(
    mappings: Mapping[type[BaseException], ExceptionMapping],
    exception: BaseException,
) -> ExceptionMapping | None:
    """Most specific mapping for an exception, or None."""
    for kind in type(exception).__mro__:
        mapping = mappings.get(kind)
        if mapping is not None:
            return mapping
    return None


def is_handled_exception(
    mappings: Mapping[type[BaseException], ExceptionMapping],
    exception: BaseException,
) -> bool:
    return resolve_exception_mapping(mappings, exception) is not None
