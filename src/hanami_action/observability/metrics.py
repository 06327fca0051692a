"""Prometheus metrics for actions.

Metrics include:

- Responses by action and status code
- Handler execution time
- Exceptions raised by handlers, and whether they were handled

Examples:
    >>> record_request("Books.Show", 200)
    >>> record_handler_time("Books.Show", 0.012)
    >>> record_exception("Books.Show", "RecordNotFound", handled=True)
"""

from prometheus_client import Counter, Histogram

# Labels: action, status
requests_total = Counter(
    "hanami_action_requests_total",
    "Total number of responses produced by actions",
    ["action", "status"],
)

handler_duration_seconds = Histogram(
    "hanami_action_handler_duration_seconds",
    "Time spent running before callbacks, the handler and after callbacks",
    ["action"],
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

# Labels: action, exception, handled (true/false)
exceptions_total = Counter(
    "hanami_action_exceptions_total",
    "Total number of exceptions raised while running actions",
    ["action", "exception", "handled"],
)


def record_request(action: str, status: int) -> None:
    """Record a finished action call.

    Args:
        action: Action name, usually the qualified class name
        status: Final HTTP status code
    """
    requests_total.labels(action=action, status=str(status)).inc()


def record_handler_time(action: str, seconds: float) -> None:
    """Record how long the callbacks and handler took."""
    handler_duration_seconds.labels(action=action).observe(seconds)


def record_exception(action: str, exception: str, handled: bool) -> None:
    """Record an exception raised by a handler.

    Args:
        action: Action name
        exception: Exception class name
        handled: Whether it was turned into a response
    """
    exceptions_total.labels(
        action=action, exception=exception, handled="true" if handled else "false"
    ).inc()
