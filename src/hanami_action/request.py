"""Request object wrapping a WSGI-style environ.

The environ is a mapping of CGI-style keys (``REQUEST_METHOD``,
``PATH_INFO``, ``QUERY_STRING``) and ``HTTP_*`` header keys, as defined
by PEP 3333. Adapters build it from their framework's request.
"""

import uuid
from typing import Any

from hanami_action.cookies import parse_cookie_header
from hanami_action.exceptions import MissingSessionError
from hanami_action.params import Params
from hanami_action.utils.headers import environ_key

SESSION_KEY = "hanami.session"
REQUEST_ID_KEY = "hanami.request_id"


class Request:
    """Per-request view of the environ.

    Attributes:
        environ: The underlying environ mapping
        params: Parameters from the query string, body and router
        sessions_enabled: Whether ``session`` may be used
    """

    def __init__(
        self,
        environ: dict[str, Any],
        params: Params,
        sessions_enabled: bool = False,
    ) -> None:
        self.environ = environ
        self.params = params
        self.sessions_enabled = sessions_enabled
        self._cookies: dict[str, str] | None = None

    @property
    def method(self) -> str:
        return str(self.environ.get("REQUEST_METHOD", "GET")).upper()

    @property
    def path(self) -> str:
        return self.environ.get("PATH_INFO") or "/"

    @property
    def query_string(self) -> str:
        return self.environ.get("QUERY_STRING", "")

    @property
    def is_head(self) -> bool:
        return self.method == "HEAD"

    @property
    def accept(self) -> str | None:
        return self.environ.get("HTTP_ACCEPT")

    @property
    def accept_header(self) -> bool:
        """Whether the client sent a meaningful ``Accept`` header."""
        accept = self.accept
        return bool(accept) and accept.strip() != "*/*"

    @property
    def content_type(self) -> str | None:
        return self.environ.get("CONTENT_TYPE") or None

    def get_header(self, name: str, default: str | None = None) -> str | None:
        """Look up a request header by its HTTP name.

        Example:
            >>> Request({"HTTP_X_API_KEY": "abc"}, Params({})).get_header("X-Api-Key")
            'abc'
        """
        return self.environ.get(environ_key(name), default)

    @property
    def cookies(self) -> dict[str, str]:
        if self._cookies is None:
            self._cookies = parse_cookie_header(self.environ.get("HTTP_COOKIE"))
        return self._cookies

    @property
    def session(self) -> dict[str, Any]:
        """Session data shared with the response.

        Raises:
            MissingSessionError: If sessions are not enabled.
        """
        if not self.sessions_enabled:
            raise MissingSessionError("Request.session")
        return self.environ.setdefault(SESSION_KEY, {})

    @property
    def id(self) -> str:
        """Identifier for this request, generated on first access."""
        return self.environ.setdefault(REQUEST_ID_KEY, uuid.uuid4().hex)

    def __repr__(self) -> str:
        return f"Request({self.method} {self.path})"
