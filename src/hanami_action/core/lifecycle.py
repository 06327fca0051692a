"""Action lifecycle: from an environ to a finalized response.

This module drives a single action call through its states:

    INITIALIZED -> FORMAT_RESOLVED -> HANDLER_EXECUTED -> FINALIZED

The lifecycle handles:
- Format negotiation against the action's format registry
- Before callbacks, the handler and after callbacks
- Mapping handler exceptions to statuses or handlers
- Finalization: cache headers, security headers, flash, cookies,
  exposures and bodiless responses

Errors that are not converted into a response propagate and abort the
call; no partial response is produced.

Examples:
    Running an action directly::

        from hanami_action.core.lifecycle import Lifecycle

        response = Lifecycle(action, environ).run()
        status, headers, body = response.to_result()
"""

import time
import traceback
from enum import Enum
from typing import TYPE_CHECKING, Any

from hanami_action.cache.cache_control import CACHE_CONTROL, EXPIRES
from hanami_action.core.exception_mapping import (
    DEFAULT_ERROR_STATUS,
    HandlerMapping,
    resolve_exception_mapping,
)
from hanami_action.exceptions import UNHANDLED_ERRORS, Halt
from hanami_action.flash import FLASH_KEY
from hanami_action.formats import content_type_with_charset, negotiate
from hanami_action.observability.logging import get_logger
from hanami_action.observability.metrics import (
    record_exception,
    record_handler_time,
    record_request,
)
from hanami_action.params import Params
from hanami_action.request import Request
from hanami_action.response import CONTENT_TYPE, Response
from hanami_action.utils.arity import call_with_trailing
from hanami_action.utils.headers import filter_entity_headers, has_header
from hanami_action.utils.status import message_for, requires_no_body

if TYPE_CHECKING:
    from hanami_action.core.action import Action

logger = get_logger(__name__)

EXCEPTION_KEY = "hanami.action.exception"
SET_COOKIE = "Set-Cookie"


class LifecycleState(str, Enum):
    """Where an action call currently is.

    Attributes:
        INITIALIZED: Request and response have been built.
        FORMAT_RESOLVED: The response format and Content-Type are set.
        HANDLER_EXECUTED: Callbacks and the handler have run, or a halt or
            handled exception cut them short.
        FINALIZED: Headers and body are complete.
    """

    INITIALIZED = "INITIALIZED"
    FORMAT_RESOLVED = "FORMAT_RESOLVED"
    HANDLER_EXECUTED = "HANDLER_EXECUTED"
    FINALIZED = "FINALIZED"


class Lifecycle:
    """One call of an action.

    Attributes:
        action: The action instance being called
        environ: Request environ
        state: Current lifecycle state
        request: Request built from the environ
        response: Response handed to the handler
    """

    def __init__(self, action: "Action", environ: dict[str, Any]) -> None:
        self.action = action
        self.config = action.config
        self.environ = environ
        self.name = action.name

        params = Params.from_environ(environ, action.params_model)
        self.request = Request(environ, params, sessions_enabled=self.config.sessions_enabled)
        self.response = Response(self.request, self.config, self.config.default_headers)
        self.state = LifecycleState.INITIALIZED

    def run(self) -> Response:
        """Run the action to completion.

        Returns:
            The finalized response.

        Raises:
            ConfigurationError: On configuration mistakes, such as a
                default format without a MIME type.
            MissingSessionError: If session-backed state is used while
                sessions are disabled.
            Exception: Any handler exception when exception handling is
                disabled.
        """
        try:
            self._resolve_format()
            self._execute()
        except Halt as halt:
            self._apply_halt(halt)
            self._transition(LifecycleState.HANDLER_EXECUTED)

        self._finalize()
        return self.response

    def _transition(self, state: LifecycleState) -> None:
        logger.debug(
            "action.state_changed",
            action=self.name,
            from_state=self.state.value,
            to_state=state.value,
        )
        self.state = state

    def _resolve_format(self) -> None:
        format, mime_type = negotiate(self.config.formats, self.request.accept)
        self.response.set_format(format)
        self.response.headers[CONTENT_TYPE] = content_type_with_charset(
            mime_type, self.response.charset
        )
        self._transition(LifecycleState.FORMAT_RESOLVED)

    def _execute(self) -> None:
        started = time.perf_counter()
        try:
            for callback in self.config.before_callbacks:
                self._run_callback(callback)
            self.action.handle(self.request, self.response)
            for callback in self.config.after_callbacks:
                self._run_callback(callback)
        except (Halt, *UNHANDLED_ERRORS):
            raise
        except Exception as exc:
            if not self.config.handle_exceptions:
                record_exception(self.name, type(exc).__name__, handled=False)
                raise
            self._handle_exception(exc)
        finally:
            record_handler_time(self.name, time.perf_counter() - started)

        self._transition(LifecycleState.HANDLER_EXECUTED)

    def _run_callback(self, callback: Any) -> None:
        if isinstance(callback, str):
            getattr(self.action, callback)(self.request, self.response)
        else:
            call_with_trailing(callback, self.action, self.request, self.response)

    def _handle_exception(self, exc: Exception) -> None:
        """Turn a handler exception into a response.

        Raises:
            Halt: With the mapped status, or 500 for unmapped exceptions.
        """
        mapping = resolve_exception_mapping(self.config.handled_exceptions, exc)
        record_exception(self.name, type(exc).__name__, handled=mapping is not None)

        if mapping is None:
            logger.error(
                "action.exception",
                action=self.name,
                exception=type(exc).__name__,
                error=str(exc),
                exc_info=exc,
            )
            self._write_error(exc)
            raise Halt(DEFAULT_ERROR_STATUS)

        logger.warning(
            "action.exception_handled",
            action=self.name,
            exception=type(exc).__name__,
            mapping=repr(mapping),
        )

        if isinstance(mapping, HandlerMapping):
            result = call_with_trailing(
                mapping.handler, self.action, self.request, self.response, exc
            )
            if isinstance(result, int) and not isinstance(result, bool):
                raise Halt(result)
            return

        raise Halt(mapping.status)

    def _write_error(self, exc: Exception) -> None:
        self.environ[EXCEPTION_KEY] = exc
        stream = self.environ.get("wsgi.errors")
        if stream is None:
            return
        stream.write("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))

    def _apply_halt(self, halt: Halt) -> None:
        self.response.status = halt.status
        self.response.body = halt.body if halt.body is not None else message_for(halt.status)

    def _finalize(self) -> None:
        response = self.response
        action_class = type(self.action)

        expires = action_class.expires_builder()
        if expires is not None and not has_header(response.headers, EXPIRES):
            for name, value in expires.headers().items():
                if not has_header(response.headers, name):
                    response.headers[name] = value

        cache_control = action_class.cache_control_builder()
        if cache_control is not None and not has_header(response.headers, CACHE_CONTROL):
            response.headers.update(cache_control.headers())

        if self.config.security is not None:
            for name, value in self.config.security.to_headers().items():
                if not has_header(response.headers, name):
                    response.headers[name] = value

        if self.config.sessions_enabled:
            self._persist_flash()

        if response.cookies_loaded and response.cookies.changed:
            cookies = response.cookies.set_cookie_headers()
            existing = response.headers.get(SET_COOKIE)
            response.headers[SET_COOKIE] = "\n".join([existing, *cookies] if existing else cookies)

        response.exposures.setdefault("params", self.request.params)
        response.exposures.setdefault("format", response.format)
        for name in action_class.exposures:
            response.exposures.setdefault(name, None)

        if requires_no_body(response.status):
            response.body = None
            response.headers = filter_entity_headers(response.headers)
        elif self.request.is_head:
            response.body = None

        self._transition(LifecycleState.FINALIZED)
        record_request(self.name, response.status)
        logger.debug("action.finished", action=self.name, status=response.status)

    def _persist_flash(self) -> None:
        session = self.response.session
        if not (self.response.flash_loaded or FLASH_KEY in session):
            return
        next_messages = self.response.flash.next
        if next_messages:
            session[FLASH_KEY] = dict(next_messages)
        else:
            session.pop(FLASH_KEY, None)
