"""Invoke user callables with as many trailing arguments as they accept."""

import inspect
from collections.abc import Callable
from typing import Any


def positional_arity(fn: Callable[..., Any]) -> int | None:
    """Number of positional parameters ``fn`` accepts.

    Returns None when the callable takes ``*args`` or its signature
    cannot be inspected.
    """
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        return None

    count = 0
    for parameter in signature.parameters.values():
        if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
            return None
        if parameter.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            count += 1
    return count


def call_with_trailing(fn: Callable[..., Any], *args: Any) -> Any:
    """Call ``fn`` with the trailing arguments of ``args`` that it accepts.

    A callback that takes two parameters receives the last two arguments,
    one that takes none receives nothing.

    Example:
        >>> call_with_trailing(lambda exc: exc, "action", "request", "response", "boom")
        'boom'
    """
    arity = positional_arity(fn)
    if arity is None or arity >= len(args):
        return fn(*args)
    if arity == 0:
        return fn()
    return fn(*args[-arity:])
