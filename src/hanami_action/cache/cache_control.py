"""``Cache-Control`` and ``Expires`` header builders.

Both builders are pure: they turn a set of directives into a header
mapping. The action lifecycle decides when to apply them.

Examples:
    >>> CacheControl("public", max_age=600).headers()
    {'Cache-Control': 'public, max-age=600'}
    >>> CacheControl("bogus").headers()
    {}
"""

import time
from collections.abc import Mapping
from typing import Any

from hanami_action.cache.directives import Directives
from hanami_action.utils.headers import http_date

CACHE_CONTROL = "Cache-Control"
EXPIRES = "Expires"


class CacheControl:
    """Builds the ``Cache-Control`` header from directives."""

    header = CACHE_CONTROL

    def __init__(self, *values: Any, **value_directives: Any) -> None:
        self.directives = Directives(*values, **value_directives)

    def headers(self) -> dict[str, str]:
        if self.directives:
            return {CACHE_CONTROL: self.directives.join(", ")}
        return {}

    def __repr__(self) -> str:
        return f"CacheControl({self.directives.join()!r})"


class Expires:
    """Builds ``Expires`` plus a companion ``Cache-Control`` with ``max-age``.

    Args:
        amount: Seconds from now until the response expires
        *values: Extra cache directives for the companion header
        **value_directives: Extra value directives

    Example:
        >>> headers = Expires(60, "public").headers(now=0)
        >>> headers["Expires"]
        'Thu, 01 Jan 1970 00:01:00 GMT'
        >>> headers["Cache-Control"]
        'public, max-age=60'
    """

    header = EXPIRES

    def __init__(self, amount: int, *values: Any, **value_directives: Any) -> None:
        self.amount = int(amount)
        # max-age always mirrors the expiry amount
        values = tuple(
            {name: seconds for name, seconds in value.items() if name != "max_age"}
            if isinstance(value, Mapping)
            else value
            for value in values
        )
        value_directives.pop("max_age", None)
        self.cache_control = CacheControl(
            *values, {**value_directives, "max_age": self.amount}
        )

    def expires_at(self, now: float | None = None) -> float:
        if now is None:
            now = time.time()
        return now + self.amount

    def headers(self, now: float | None = None) -> dict[str, str]:
        return {EXPIRES: http_date(self.expires_at(now)), **self.cache_control.headers()}

    def __repr__(self) -> str:
        return f"Expires({self.amount!r}, {self.cache_control.directives.join()!r})"
