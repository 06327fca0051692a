"""Request parameters.

Parameters are collected from the query string, a form-encoded or JSON
request body and router parameters (``environ["router.params"]``), in
that order, later sources overriding earlier ones. An action may declare
a pydantic model to validate them.

Examples:
    Reading raw parameters::

        params = Params({"id": "23"})
        params["id"]  # "23"

    Validating with a model::

        class BookParams(BaseModel):
            id: int

        params = Params({"id": "23"}, schema=BookParams)
        params.valid       # True
        params.to_dict()   # {"id": 23}
"""

import json
from collections.abc import Iterator, Mapping
from typing import Any
from urllib.parse import parse_qs

from pydantic import BaseModel, ValidationError

from hanami_action.observability.logging import get_logger

logger = get_logger(__name__)

ROUTER_PARAMS = "router.params"
BODY_PARAMS = "hanami.action.body_params"

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
JSON_CONTENT_TYPE = "application/json"


def parse_query(query_string: str | None) -> dict[str, Any]:
    """Parse a query string, collapsing single values.

    Example:
        >>> parse_query("a=1&b=2&b=3&c=")
        {'a': '1', 'b': ['2', '3'], 'c': ''}
    """
    if not query_string:
        return {}
    parsed = parse_qs(query_string, keep_blank_values=True)
    return {key: values[0] if len(values) == 1 else values for key, values in parsed.items()}


def read_body_params(environ: dict[str, Any]) -> dict[str, Any]:
    """Parse the request body once and cache the result in the environ."""
    if BODY_PARAMS in environ:
        return environ[BODY_PARAMS]

    params: dict[str, Any] = {}
    content_type = (environ.get("CONTENT_TYPE") or "").split(";", 1)[0].strip().lower()
    stream = environ.get("wsgi.input")

    if stream is not None and content_type in (FORM_CONTENT_TYPE, JSON_CONTENT_TYPE):
        try:
            length = int(environ.get("CONTENT_LENGTH") or 0)
        except ValueError:
            length = 0
        raw = stream.read(length) if length > 0 else b""

        if raw and content_type == FORM_CONTENT_TYPE:
            params = parse_query(raw.decode("utf-8", errors="replace"))
        elif raw:
            try:
                decoded = json.loads(raw)
            except ValueError:
                logger.warning("params.malformed_body", content_type=content_type)
                decoded = None
            if isinstance(decoded, dict):
                params = decoded

    environ[BODY_PARAMS] = params
    return params


def extract_params(environ: dict[str, Any]) -> dict[str, Any]:
    """Merge query, body and router parameters from a request environ."""
    return {
        **parse_query(environ.get("QUERY_STRING")),
        **read_body_params(environ),
        **dict(environ.get(ROUTER_PARAMS) or {}),
    }


class Params(Mapping[str, Any]):
    """Read-only parameter bag with optional validation.

    Attributes:
        raw: Parameters as received
        schema: Optional pydantic model used for validation
        errors: Validation errors (empty when valid or not validated)
    """

    def __init__(self, raw: dict[str, Any], schema: type[BaseModel] | None = None) -> None:
        self.raw = raw
        self.schema = schema
        self.errors: list[dict[str, Any]] = []
        self._model: BaseModel | None = None

        if schema is not None:
            try:
                self._model = schema.model_validate(raw)
            except ValidationError as e:
                self.errors = [dict(error) for error in e.errors(include_url=False)]

    @classmethod
    def from_environ(
        cls, environ: dict[str, Any], schema: type[BaseModel] | None = None
    ) -> "Params":
        return cls(extract_params(environ), schema)

    @property
    def valid(self) -> bool:
        return not self.errors

    @property
    def model(self) -> BaseModel | None:
        """The validated model instance, when a schema is declared and valid."""
        return self._model

    def to_dict(self) -> dict[str, Any]:
        if self._model is not None:
            return self._model.model_dump()
        return dict(self.raw)

    def dig(self, *keys: Any) -> Any:
        """Walk nested mappings and lists, returning None on any miss.

        Example:
            >>> Params({"book": {"tags": ["a", "b"]}}).dig("book", "tags", 1)
            'b'
        """
        current: Any = self.to_dict()
        for key in keys:
            try:
                current = current[key]
            except (KeyError, IndexError, TypeError):
                return None
        return current

    def __getitem__(self, key: str) -> Any:
        return self.to_dict()[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.to_dict())

    def __len__(self) -> int:
        return len(self.to_dict())

    def __repr__(self) -> str:
        return f"Params({self.raw!r}, valid={self.valid})"
