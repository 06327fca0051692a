"""Demo FastAPI application serving actions.

This application demonstrates format negotiation, exception mapping,
caching, conditional GET and flash messages.
Run with: python demo_app.py
"""

import json
from datetime import UTC, datetime

import uvicorn
from fastapi import FastAPI
from prometheus_client import make_asgi_app
from pydantic import BaseModel, Field
from starlette.middleware.sessions import SessionMiddleware

from hanami_action import Action
from hanami_action.adapters.asgi import ASGIAction
from hanami_action.observability.logging import configure_logging

configure_logging(level="INFO", json_output=False)

# Create FastAPI app
app = FastAPI(
    title="Action Layer Demo",
    description="Demo API served by actions",
    version="0.1.0",
)
app.add_middleware(SessionMiddleware, secret_key="demo-secret")
app.mount("/metrics", make_asgi_app())

BOOKS = {
    "1": {"id": "1", "title": "Practical Object-Oriented Design", "updated_at": "2024-03-01"},
    "2": {"id": "2", "title": "Refactoring", "updated_at": "2024-05-12"},
}


class BookNotFound(KeyError):
    pass


class BookParams(BaseModel):
    title: str = Field(min_length=1)


class DemoAction(Action, sessions_enabled=True, security=True, default_charset="utf-8"):
    """Shared configuration for the demo actions."""


class Index(DemoAction, accepted_formats=["html", "json"]):
    def handle(self, request, response):
        notice = response.flash["notice"]
        if response.format == "json":
            response.body = json.dumps({"books": list(BOOKS.values()), "notice": notice})
            return
        items = "".join(f"<li>{book['title']}</li>" for book in BOOKS.values())
        banner = f"<p>{notice}</p>" if notice else ""
        response.body = f"<html><body>{banner}<ul>{items}</ul></body></html>"


Index.cache_control("public", max_age=60)


class Show(DemoAction, accepted_formats=["json"], handled_exceptions={BookNotFound: 404}):
    def handle(self, request, response):
        book = BOOKS.get(request.params["id"])
        if book is None:
            raise BookNotFound(request.params["id"])
        updated_at = datetime.fromisoformat(book["updated_at"]).replace(tzinfo=UTC)
        response.fresh(etag=f"book-{book['id']}-{book['updated_at']}", last_modified=updated_at)
        response.body = json.dumps(book)


class Create(DemoAction, params=BookParams, accepted_formats=["json"]):
    def handle(self, request, response):
        if not request.params.valid:
            response.status = 422
            response.body = json.dumps({"errors": request.params.errors}, default=str)
            return
        book_id = str(len(BOOKS) + 1)
        BOOKS[book_id] = {
            "id": book_id,
            "title": request.params["title"],
            "updated_at": datetime.now(UTC).date().isoformat(),
        }
        response.flash["notice"] = f"Created {request.params['title']}"
        response.redirect_to(f"/books/{book_id}", status=303)


class Headlines(DemoAction, accepted_formats=["txt"]):
    def handle(self, request, response):
        response.expires(30, "public")
        response.body = "\n".join(book["title"] for book in BOOKS.values())


app.add_route("/books", ASGIAction(Index), methods=["GET", "HEAD"])
app.add_route("/books", ASGIAction(Create), methods=["POST"])
app.add_route("/books/{id}", ASGIAction(Show), methods=["GET", "HEAD"])
app.add_route("/headlines", ASGIAction(Headlines), methods=["GET"])


if __name__ == "__main__":
    print("=" * 60)
    print("Action Layer Demo Server")
    print("=" * 60)
    print("\nStarting server at http://localhost:8000")
    print("\nTry these commands:")
    print("  curl -H 'Accept: application/json' http://localhost:8000/books")
    print("  curl -i http://localhost:8000/books/1")
    print("  curl -i http://localhost:8000/books/404")
    print("  curl -i -X POST -d 'title=Dune' http://localhost:8000/books")
    print("\nPress Ctrl+C to stop")
    print("=" * 60)
    print()

    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")
