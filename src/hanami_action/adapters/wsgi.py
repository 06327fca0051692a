"""WSGI adapter.

Wraps an action as a PEP 3333 application, so it can be served by any
WSGI server or mounted into a WSGI framework.

Examples:
    Serving an action::

        from wsgiref.simple_server import make_server
        from hanami_action.adapters.wsgi import WSGIAction

        app = WSGIAction(Show())
        make_server("", 8000, app).serve_forever()
"""

from collections.abc import Callable, Iterable
from typing import Any

from hanami_action.core.action import Action
from hanami_action.utils.headers import header_items
from hanami_action.utils.status import status_line


class WSGIAction:
    """WSGI application calling an action.

    Attributes:
        action: The action instance called for every request
        encoding: Encoding used for ``str`` body chunks
    """

    def __init__(self, action: Action | type[Action], encoding: str = "utf-8") -> None:
        self.action = action() if isinstance(action, type) else action
        self.encoding = encoding

    def __call__(
        self,
        environ: dict[str, Any],
        start_response: Callable[..., Any],
    ) -> Iterable[bytes]:
        status, headers, body = self.action(environ)
        start_response(status_line(status), header_items(headers))
        return [
            chunk if isinstance(chunk, bytes) else str(chunk).encode(self.encoding)
            for chunk in body
        ]

    def __repr__(self) -> str:
        return f"WSGIAction({self.action!r})"
