"""Custom exceptions for the action layer.

This module defines the exception hierarchy used throughout the package
to signal configuration mistakes and missing capabilities, plus the
``Halt`` control-flow signal used to stop an action early.

Configuration errors and missing-capability errors always propagate to
the caller: they are never converted into an HTTP status, even when the
action handles exceptions.

Examples:
    Handling an unknown format::

        from hanami_action.exceptions import UnknownFormatError

        try:
            response.format = "pdf"
        except UnknownFormatError as e:
            logger.warning("format.unknown", error=str(e))

    Stopping an action with a status::

        from hanami_action.exceptions import Halt

        raise Halt(404)
"""

from typing import Any


class ActionError(Exception):
    """Base exception for all action-layer errors.

    Attributes:
        message: Human-readable error description.

    Examples:
        Catching all action errors::

            try:
                result = action(environ)
            except ActionError as e:
                logger.error("action.error", error=str(e))
    """

    def __init__(self, message: str) -> None:
        """Initialize the exception with a message.

        Args:
            message: Human-readable error description.
        """
        self.message = message
        super().__init__(message)


class ConfigurationError(ActionError):
    """An action or registry was configured with invalid values.

    Raised immediately at configuration time. Never mapped to a status
    code by exception handling.
    """


class UnknownFormatError(ConfigurationError):
    """No MIME type is registered for the requested format.

    Attributes:
        message: Human-readable error description.
        format: The format name that could not be resolved.

    Examples:
        >>> error = UnknownFormatError("pdf")
        >>> error.format
        'pdf'
    """

    def __init__(self, format: Any) -> None:
        """Initialize the error for a format.

        Args:
            format: The unresolvable format name.
        """
        if format is None or str(format) == "":
            message = "Cannot find a corresponding MIME type for an empty format."
        else:
            message = (
                f"Cannot find a corresponding MIME type for format {format!r}. "
                f'Register one via `registry.register("{format}", "MIME_TYPE_HERE")`.'
            )
        super().__init__(message)
        self.format = format


class FormatCoercionError(ConfigurationError):
    """A format name or MIME type could not be coerced to a string.

    Attributes:
        message: Human-readable error description.
        value: The offending value.
    """

    def __init__(self, message: str, value: Any) -> None:
        super().__init__(message)
        self.value = value


class IllegalExposureError(ConfigurationError):
    """An action attempted to expose a reserved name.

    Attributes:
        message: Human-readable error description.
        name: The reserved name.
    """

    def __init__(self, name: str) -> None:
        super().__init__(f"{name} is a reserved word. It cannot be exposed")
        self.name = name


class MissingSessionError(ActionError):
    """Session-backed state was used without enabling sessions.

    Always propagates, regardless of whether the action handles
    exceptions.

    Attributes:
        message: Human-readable error description.
        capability: The attribute or method that required sessions.

    Examples:
        >>> error = MissingSessionError("Response.flash")
        >>> error.capability
        'Response.flash'
    """

    def __init__(self, capability: str) -> None:
        """Initialize the error for a capability.

        Args:
            capability: Name of the attribute that needs sessions.
        """
        super().__init__(
            f"To use `{capability}`, enable sessions for the action, e.g.\n\n"
            "    class Show(Action, sessions_enabled=True):\n"
            "        ...\n"
        )
        self.capability = capability


class Halt(Exception):
    """Stop the running action and respond with the given status.

    This is a control-flow signal, not an error: the action lifecycle
    catches it and finalizes the response with ``status`` and ``body``.
    When ``body`` is ``None`` the standard reason phrase is used.

    Attributes:
        status: HTTP status code to respond with.
        body: Optional response body.
    """

    def __init__(self, status: int, body: Any = None) -> None:
        super().__init__(status)
        self.status = status
        self.body = body


# Errors that exception handling never intercepts
UNHANDLED_ERRORS = (ConfigurationError, MissingSessionError)
