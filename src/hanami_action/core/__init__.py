"""Core action logic.

This package contains:
- Exception mapping: exception classes to statuses or handlers
- Lifecycle: the state machine that runs one action call
- Action: the base class endpoints subclass

Import ``Action`` and ``Lifecycle`` from their modules (or from
``hanami_action``); this package only re-exports the exception mapping
so the configuration module can depend on it.
"""

from hanami_action.core.exception_mapping import (
    DEFAULT_ERROR_STATUS,
    ExceptionMapping,
    HandlerMapping,
    StatusMapping,
    resolve_exception_mapping,
)

__all__ = [
    "DEFAULT_ERROR_STATUS",
    "ExceptionMapping",
    "HandlerMapping",
    "StatusMapping",
    "resolve_exception_mapping",
]
