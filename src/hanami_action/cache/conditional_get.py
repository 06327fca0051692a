"""Conditional GET freshness evaluation.

A response is *fresh* when the client already holds the current
representation, as declared by ``If-None-Match`` (compared against the
candidate ETag) or ``If-Modified-Since`` (compared against the candidate
last-modified time). Validators combine with OR semantics.

Malformed request headers never raise: they simply make the validator
report "not fresh".

Examples:
    >>> environ = {"HTTP_IF_NONE_MATCH": "abc"}
    >>> ConditionalGet(environ, etag="abc").fresh()
    True
    >>> ConditionalGet(environ, etag="xyz").fresh()
    False
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from hanami_action.utils.headers import http_date, parse_http_date, to_timestamp

IF_NONE_MATCH = "HTTP_IF_NONE_MATCH"
IF_MODIFIED_SINCE = "HTTP_IF_MODIFIED_SINCE"
ETAG = "ETag"
LAST_MODIFIED = "Last-Modified"


class ETag:
    """Validator comparing the candidate ETag with ``If-None-Match``."""

    def __init__(self, environ: Mapping[str, Any], value: str | None) -> None:
        self.environ = environ
        self.value = value

    @property
    def none_match(self) -> str | None:
        return self.environ.get(IF_NONE_MATCH)

    def fresh(self) -> bool:
        if self.value is None or self.none_match is None:
            return False
        return str(self.value) == self.none_match

    def header(self) -> dict[str, str]:
        if self.value is None:
            return {}
        return {ETAG: str(self.value)}


class LastModified:
    """Validator comparing the candidate timestamp with ``If-Modified-Since``.

    The candidate may be a datetime (naive values are UTC) or an epoch
    timestamp. Comparison is by whole seconds since the epoch.
    """

    def __init__(self, environ: Mapping[str, Any], value: datetime | float | None) -> None:
        self.environ = environ
        self.value = value

    @property
    def modified_since(self) -> datetime | None:
        return parse_http_date(self.environ.get(IF_MODIFIED_SINCE))

    def fresh(self) -> bool:
        if self.value is None:
            return False
        modified_since = self.modified_since
        if modified_since is None:
            return False
        return int(modified_since.timestamp()) >= int(to_timestamp(self.value))

    def header(self) -> dict[str, str]:
        if self.value is None:
            return {}
        return {LAST_MODIFIED: http_date(self.value)}


class ConditionalGet:
    """Combines the ETag and Last-Modified validators.

    Args:
        environ: Request environ holding the conditional headers
        etag: Candidate ETag of the response, if any
        last_modified: Candidate last-modified time of the response, if any
    """

    def __init__(
        self,
        environ: Mapping[str, Any],
        etag: str | None = None,
        last_modified: datetime | float | None = None,
    ) -> None:
        self.validators = [ETag(environ, etag), LastModified(environ, last_modified)]

    def fresh(self) -> bool:
        return any(validator.fresh() for validator in self.validators)

    def headers(self) -> dict[str, str]:
        result: dict[str, str] = {}
        for validator in self.validators:
            result.update(validator.header())
        return result
