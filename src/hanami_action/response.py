"""Response object built up by an action and its handler.

The handler receives a Response to mutate: status, headers, body,
format, exposures, session-backed state and cookies. The action
lifecycle turns it into an ``ActionResult`` once the handler is done.

Examples:
    Inside a handler::

        def handle(self, request, response):
            response.format = "json"
            response.body = '{"id": 23}'
            response.cache_control("public", max_age=600)

    Conditional GET::

        def handle(self, request, response):
            response.fresh(etag=book.cache_key)  # halts with 304 when fresh
            response.body = render(book)
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Any, NamedTuple

from hanami_action.cache.cache_control import CacheControl, Expires
from hanami_action.cache.conditional_get import ConditionalGet
from hanami_action.config import ActionConfig
from hanami_action.cookies import CookieJar
from hanami_action.exceptions import Halt, MissingSessionError, UnknownFormatError
from hanami_action.flash import FLASH_KEY, Flash
from hanami_action.formats import content_type_with_charset, detect_format
from hanami_action.request import SESSION_KEY, Request
from hanami_action.utils.headers import get_header_value, merge_headers

CONTENT_TYPE = "Content-Type"
LOCATION = "Location"


class ActionResult(NamedTuple):
    """The three-part outcome of an action call.

    Attributes:
        status: HTTP status code
        headers: Header name to value; multiple ``Set-Cookie`` values are
            joined with newlines
        body: Body chunks
    """

    status: int
    headers: dict[str, str]
    body: list[str | bytes]

    def body_bytes(self, encoding: str = "utf-8") -> bytes:
        return b"".join(
            chunk if isinstance(chunk, bytes) else str(chunk).encode(encoding)
            for chunk in self.body
        )


class Response:
    """Mutable response for one request.

    Attributes:
        request: The request being answered
        config: Configuration of the action class
        status: HTTP status code, 200 until changed
        headers: Response headers, starting from the default headers
        exposures: Values exposed to callers of the action
    """

    def __init__(
        self,
        request: Request,
        config: ActionConfig,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.request = request
        self.config = config
        self.status = 200
        self.headers: dict[str, str] = dict(headers or {})
        self.exposures: dict[str, Any] = {}
        self.charset = config.default_charset
        self._format: str | None = None
        self._body: list[str | bytes] = []
        self._flash: Flash | None = None
        self._cookies: CookieJar | None = None

    # Body

    @property
    def body(self) -> list[str | bytes]:
        return self._body

    @body.setter
    def body(self, value: Any) -> None:
        if value is None:
            self._body = []
        elif isinstance(value, (str, bytes)):
            self._body = [value] if value else []
        elif isinstance(value, bytearray):
            self._body = [bytes(value)]
        elif isinstance(value, Iterable):
            self._body = [chunk if isinstance(chunk, bytes) else str(chunk) for chunk in value]
        else:
            self._body = [str(value)]

    def write(self, chunk: str | bytes) -> None:
        self._body.append(chunk)

    # Format

    @property
    def format(self) -> str | None:
        return self._format

    @format.setter
    def format(self, value: str) -> None:
        """Set the format by name (``"json"``) or MIME type (``"application/json"``).

        Raises:
            UnknownFormatError: If a format name has no registered MIME type.
        """
        if not isinstance(value, str) or not value:
            raise UnknownFormatError(value)

        registry = self.config.formats
        if "/" in value:
            mime_type = value
            format = detect_format(value, registry)
        else:
            format = value
            mime_type = registry.mime_type_for(value)
            if mime_type is None:
                raise UnknownFormatError(value)

        self._format = format
        self.headers[CONTENT_TYPE] = content_type_with_charset(mime_type, self.charset)

    def set_format(self, format: str | None) -> None:
        """Record the format without touching the Content-Type header."""
        self._format = format

    @property
    def content_type(self) -> str | None:
        return get_header_value(self.headers, CONTENT_TYPE)

    # Exposures

    def __getitem__(self, key: str) -> Any:
        return self.exposures[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self.exposures[key] = value

    # Session-backed state

    @property
    def session(self) -> dict[str, Any]:
        """Session data for this request.

        Raises:
            MissingSessionError: If sessions are not enabled.
        """
        if not self.config.sessions_enabled:
            raise MissingSessionError("Response.session")
        return self.request.environ.setdefault(SESSION_KEY, {})

    @property
    def flash(self) -> Flash:
        """Flash messages for this and the next request.

        Raises:
            MissingSessionError: If sessions are not enabled.
        """
        if not self.config.sessions_enabled:
            raise MissingSessionError("Response.flash")
        if self._flash is None:
            self._flash = Flash(self.session.get(FLASH_KEY))
        return self._flash

    @property
    def flash_loaded(self) -> bool:
        return self._flash is not None

    @property
    def cookies(self) -> CookieJar:
        if self._cookies is None:
            self._cookies = CookieJar(self.request.environ, self.config.cookies)
        return self._cookies

    @property
    def cookies_loaded(self) -> bool:
        return self._cookies is not None

    # Flow control

    def halt(self, status: int, body: Any = None) -> None:
        """Stop the action and respond with ``status``."""
        raise Halt(status, body)

    def redirect_to(self, url: str, status: int = 302) -> None:
        """Set ``Location`` and halt with a redirect status."""
        self.headers[LOCATION] = str(url)
        raise Halt(status)

    # Caching

    def cache_control(self, *values: Any, **value_directives: Any) -> None:
        self.headers = merge_headers(
            self.headers, CacheControl(*values, **value_directives).headers()
        )

    def expires(self, amount: int, *values: Any, **value_directives: Any) -> None:
        self.headers = merge_headers(
            self.headers, Expires(amount, *values, **value_directives).headers()
        )

    def fresh(
        self,
        etag: str | None = None,
        last_modified: datetime | float | None = None,
    ) -> None:
        """Send validators and halt with 304 when the client copy is current."""
        conditional_get = ConditionalGet(
            self.request.environ, etag=etag, last_modified=last_modified
        )
        self.headers = merge_headers(self.headers, conditional_get.headers())
        if conditional_get.fresh():
            raise Halt(304)

    @property
    def is_head(self) -> bool:
        return self.request.is_head

    def to_result(self) -> ActionResult:
        return ActionResult(int(self.status), dict(self.headers), list(self._body))

    def __repr__(self) -> str:
        return f"Response(status={self.status}, format={self._format!r})"
