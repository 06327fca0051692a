"""Cookie jar for reading request cookies and emitting ``Set-Cookie`` headers.

Only cookies changed during the request are written back. Assigning
``None`` deletes a cookie. Default options from the action configuration
(``path``, ``domain``, ``secure``, ``httponly``, ``samesite``, ``max_age``)
are merged into every cookie that is set.

Examples:
    >>> jar = CookieJar({"HTTP_COOKIE": "theme=dark"}, {"path": "/"})
    >>> jar["theme"]
    'dark'
    >>> jar["lang"] = "en"
    >>> jar.set_cookie_headers()
    ['lang=en; Path=/']
"""

import time
from collections.abc import Iterator
from http.cookies import SimpleCookie
from typing import Any
from urllib.parse import unquote

from hanami_action.utils.headers import http_date

HTTP_COOKIE = "HTTP_COOKIE"

# Option name to Morsel attribute
COOKIE_ATTRIBUTES = {
    "path": "path",
    "domain": "domain",
    "max_age": "max-age",
    "expires": "expires",
    "secure": "secure",
    "httponly": "httponly",
    "samesite": "samesite",
}


def parse_cookie_header(header: str | None) -> dict[str, str]:
    """Parse a ``Cookie`` request header; the first value of a name wins.

    Example:
        >>> parse_cookie_header("a=1; b=hello%20world; a=2")
        {'a': '1', 'b': 'hello world'}
    """
    cookies: dict[str, str] = {}
    if not header:
        return cookies

    for pair in header.replace(",", ";").split(";"):
        name, sep, value = pair.strip().partition("=")
        if not sep or not name:
            continue
        cookies.setdefault(unquote(name), unquote(value.strip().strip('"')))
    return cookies


class CookieJar:
    """Request cookies plus the changes to send back.

    Args:
        environ: Request environ holding ``HTTP_COOKIE``
        default_options: Options merged into every cookie that is set
    """

    def __init__(self, environ: dict[str, Any], default_options: dict[str, Any] | None = None) -> None:
        self._cookies: dict[str, Any] = parse_cookie_header(environ.get(HTTP_COOKIE))
        self._changes: list[str] = []
        self.default_options = dict(default_options or {})

    def __getitem__(self, key: str) -> Any:
        return self._cookies.get(key)

    def get(self, key: str, default: Any = None) -> Any:
        return self._cookies.get(key, default)

    def __setitem__(self, key: str, value: Any) -> None:
        if key not in self._changes:
            self._changes.append(key)
        self._cookies[key] = value

    def __delitem__(self, key: str) -> None:
        self[key] = None

    def __contains__(self, key: object) -> bool:
        return key in self._cookies and self._cookies[key] is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self._cookies)

    @property
    def changed(self) -> bool:
        return bool(self._changes)

    def to_dict(self) -> dict[str, Any]:
        return {key: value for key, value in self._cookies.items() if value is not None}

    def set_cookie_headers(self, now: float | None = None) -> list[str]:
        """``Set-Cookie`` values for every changed cookie."""
        headers = []
        for key in self._changes:
            value = self._cookies.get(key)
            if value is None:
                headers.append(self._delete_cookie(key))
            else:
                headers.append(self._set_cookie(key, self._merge_default_options(value, now)))
        return headers

    def _merge_default_options(self, value: Any, now: float | None) -> dict[str, Any]:
        if isinstance(value, dict):
            options = dict(value)
            if "max_age" in options and "expires" not in options:
                if now is None:
                    now = time.time()
                options["expires"] = now + int(options["max_age"])
        else:
            options = {"value": value}
        return {**self.default_options, **options}

    def _set_cookie(self, key: str, options: dict[str, Any]) -> str:
        cookie: SimpleCookie = SimpleCookie()
        cookie[key] = str(options.get("value", ""))
        morsel = cookie[key]

        for option, attribute in COOKIE_ATTRIBUTES.items():
            setting = options.get(option)
            if setting is None or setting is False:
                continue
            if option == "expires" and not isinstance(setting, str):
                setting = http_date(setting)
            morsel[attribute] = True if setting is True else str(setting)

        return morsel.OutputString()

    def _delete_cookie(self, key: str) -> str:
        return self._set_cookie(
            key,
            {
                "value": "",
                "path": self.default_options.get("path"),
                "domain": self.default_options.get("domain"),
                "max_age": 0,
                "expires": 0,
            },
        )
