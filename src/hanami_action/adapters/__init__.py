"""Framework adapters for actions.

- asgi.py: ASGI application for FastAPI, Starlette, etc.
- wsgi.py: WSGI application for any PEP 3333 server

The adapters convert between framework requests and the environ an
action is called with, and between action results and framework
responses.
"""

from hanami_action.adapters.asgi import ASGIAction
from hanami_action.adapters.wsgi import WSGIAction

__all__ = ["ASGIAction", "WSGIAction"]
