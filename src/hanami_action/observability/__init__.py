"""Observability utilities for actions.

- Prometheus metrics for responses, handler time and exceptions
- Structured logging with contextual information
"""

from hanami_action.observability.logging import configure_logging, get_logger
from hanami_action.observability.metrics import (
    record_exception,
    record_handler_time,
    record_request,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "record_request",
    "record_handler_time",
    "record_exception",
]
