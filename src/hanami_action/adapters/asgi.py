"""ASGI adapter for FastAPI and Starlette applications.

The adapter:
1. Converts the ASGI request into a WSGI-style environ
2. Runs the action in a worker thread
3. Converts the action result into a Starlette response

When Starlette's ``SessionMiddleware`` is installed, the action shares
``scope["session"]`` so session and flash changes are persisted by the
middleware.

Examples:
    FastAPI integration::

        from fastapi import FastAPI
        from starlette.middleware.sessions import SessionMiddleware
        from hanami_action.adapters.asgi import ASGIAction

        app = FastAPI()
        app.add_middleware(SessionMiddleware, secret_key="secret")
        app.add_route("/books/{id}", ASGIAction(Show()), methods=["GET", "HEAD"])

    Starlette integration::

        from starlette.applications import Starlette
        from starlette.routing import Route

        app = Starlette(routes=[Route("/books/{id}", ASGIAction(Show()))])
"""

import io
import sys
from typing import Any

from starlette.concurrency import run_in_threadpool
from starlette.requests import Request as StarletteRequest
from starlette.responses import Response
from starlette.types import Receive, Scope, Send

from hanami_action.core.action import Action
from hanami_action.params import ROUTER_PARAMS
from hanami_action.request import SESSION_KEY
from hanami_action.response import ActionResult
from hanami_action.utils.headers import header_items


class ASGIAction:
    """ASGI application calling an action.

    Attributes:
        action: The action instance called for every request
    """

    def __init__(self, action: Action | type[Action]) -> None:
        """Initialize the adapter.

        Args:
            action: An action instance, or a class to instantiate once
        """
        self.action = action() if isinstance(action, type) else action

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Handle one ASGI HTTP request.

        Args:
            scope: The ASGI connection scope
            receive: ASGI receive channel
            send: ASGI send channel
        """
        request = StarletteRequest(scope, receive)
        environ = await self._build_environ(request)
        result = await run_in_threadpool(self.action, environ)
        response = self._convert_response(result)
        await response(scope, receive, send)

    async def _build_environ(self, request: StarletteRequest) -> dict[str, Any]:
        """Convert a Starlette request to a WSGI-style environ.

        Args:
            request: Starlette request object

        Returns:
            Environ with CGI keys, ``HTTP_*`` headers, the body stream,
            router params and, when available, the session
        """
        body = await request.body()
        server = request.scope.get("server") or ("localhost", 80)

        environ: dict[str, Any] = {
            "REQUEST_METHOD": request.method,
            "SCRIPT_NAME": request.scope.get("root_path", ""),
            "PATH_INFO": request.url.path,
            "QUERY_STRING": request.url.query or "",
            "SERVER_NAME": str(server[0]),
            "SERVER_PORT": str(server[1]),
            "SERVER_PROTOCOL": f"HTTP/{request.scope.get('http_version', '1.1')}",
            "wsgi.url_scheme": request.url.scheme,
            "wsgi.input": io.BytesIO(body),
            "wsgi.errors": sys.stderr,
            ROUTER_PARAMS: dict(request.path_params),
        }

        for key, value in request.headers.items():
            name = key.upper().replace("-", "_")
            if name in ("CONTENT_TYPE", "CONTENT_LENGTH"):
                environ[name] = value
                continue
            name = f"HTTP_{name}"
            environ[name] = f"{environ[name]},{value}" if name in environ else value

        if "session" in request.scope:
            environ[SESSION_KEY] = request.scope["session"]

        return environ

    def _convert_response(self, result: ActionResult) -> Response:
        """Convert an action result to a Starlette Response.

        Args:
            result: The action result

        Returns:
            Starlette Response object
        """
        headers = header_items(result.headers)
        plain = {name: value for name, value in headers if name.lower() != "set-cookie"}

        response = Response(
            content=result.body_bytes(),
            status_code=result.status,
            headers=plain,
        )
        for name, value in headers:
            if name.lower() == "set-cookie":
                response.headers.append("set-cookie", value)
        return response

    def __repr__(self) -> str:
        return f"ASGIAction({self.action!r})"
