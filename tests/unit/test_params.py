"""Unit tests for request parameters."""

import io
import json
from typing import Any

from pydantic import BaseModel

from hanami_action.params import (
    BODY_PARAMS,
    ROUTER_PARAMS,
    Params,
    extract_params,
    parse_query,
    read_body_params,
)


class BookParams(BaseModel):
    id: int
    title: str = "Untitled"


def body_environ(body: bytes, content_type: str) -> dict[str, Any]:
    return {
        "CONTENT_TYPE": content_type,
        "CONTENT_LENGTH": str(len(body)),
        "wsgi.input": io.BytesIO(body),
    }


class TestParsing:
    """Tests for query and body parsing."""

    def test_parse_query(self) -> None:
        """Test that single values collapse and repeated keys become lists."""
        assert parse_query("a=1&b=2&b=3&c=") == {"a": "1", "b": ["2", "3"], "c": ""}
        assert parse_query(None) == {}

    def test_form_body(self) -> None:
        """Test form-encoded bodies."""
        environ = body_environ(b"title=Dune&year=1965", "application/x-www-form-urlencoded")
        assert read_body_params(environ) == {"title": "Dune", "year": "1965"}

    def test_json_body(self) -> None:
        """Test JSON object bodies."""
        body = json.dumps({"book": {"title": "Dune"}}).encode()
        environ = body_environ(body, "application/json; charset=utf-8")
        assert read_body_params(environ) == {"book": {"title": "Dune"}}

    def test_malformed_json_body(self) -> None:
        """Test that malformed JSON is ignored."""
        environ = body_environ(b"{not json", "application/json")
        assert read_body_params(environ) == {}

    def test_json_array_body_is_ignored(self) -> None:
        """Test that only JSON objects become params."""
        environ = body_environ(b"[1, 2]", "application/json")
        assert read_body_params(environ) == {}

    def test_body_read_once(self) -> None:
        """Test that the parsed body is cached in the environ."""
        environ = body_environ(b"a=1", "application/x-www-form-urlencoded")
        first = read_body_params(environ)
        assert environ[BODY_PARAMS] is first
        assert read_body_params(environ) is first

    def test_other_content_types_are_not_read(self) -> None:
        """Test that unknown bodies are left alone."""
        environ = body_environ(b"raw", "text/plain")
        assert read_body_params(environ) == {}
        assert environ["wsgi.input"].read() == b"raw"

    def test_precedence(self) -> None:
        """Test that body overrides query and router overrides both."""
        environ = body_environ(b"id=2&title=Body", "application/x-www-form-urlencoded")
        environ["QUERY_STRING"] = "id=1&page=3"
        environ[ROUTER_PARAMS] = {"id": "23"}
        assert extract_params(environ) == {"id": "23", "page": "3", "title": "Body"}


class TestParams:
    """Tests for the Params mapping."""

    def test_mapping_interface(self) -> None:
        """Test reading raw params."""
        params = Params({"id": "23", "q": "x"})
        assert params["id"] == "23"
        assert params.get("missing") is None
        assert len(params) == 2
        assert set(params) == {"id", "q"}
        assert params.valid

    def test_valid_schema(self) -> None:
        """Test that a schema coerces values."""
        params = Params({"id": "23"}, schema=BookParams)
        assert params.valid
        assert params.errors == []
        assert params.to_dict() == {"id": 23, "title": "Untitled"}
        assert isinstance(params.model, BookParams)

    def test_invalid_schema(self) -> None:
        """Test that validation errors are collected."""
        params = Params({"id": "abc"}, schema=BookParams)
        assert not params.valid
        assert params.model is None
        assert params.errors[0]["loc"] == ("id",)
        assert params.to_dict() == {"id": "abc"}

    def test_dig(self) -> None:
        """Test nested lookups."""
        params = Params({"book": {"tags": ["a", "b"]}})
        assert params.dig("book", "tags", 1) == "b"
        assert params.dig("book", "missing", 0) is None
        assert params.dig("book", "tags", 5) is None

    def test_from_environ(self) -> None:
        """Test building params from an environ."""
        params = Params.from_environ({"QUERY_STRING": "id=7"}, BookParams)
        assert params.to_dict() == {"id": 7, "title": "Untitled"}
