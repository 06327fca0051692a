"""Unit tests for the cookie jar."""

from hanami_action.cookies import CookieJar, parse_cookie_header


class TestParseCookieHeader:
    """Tests for Cookie header parsing."""

    def test_parses_pairs(self) -> None:
        """Test simple and encoded values."""
        assert parse_cookie_header("a=1; b=hello%20world") == {"a": "1", "b": "hello world"}

    def test_first_value_wins(self) -> None:
        """Test duplicated names."""
        assert parse_cookie_header("a=1; a=2") == {"a": "1"}

    def test_ignores_garbage(self) -> None:
        """Test entries without a name or value separator."""
        assert parse_cookie_header("novalue; =x; ok=1") == {"ok": "1"}
        assert parse_cookie_header(None) == {}


class TestCookieJar:
    """Tests for CookieJar."""

    def test_reads_request_cookies(self) -> None:
        """Test reading cookies sent by the client."""
        jar = CookieJar({"HTTP_COOKIE": "theme=dark"})
        assert jar["theme"] == "dark"
        assert jar.get("lang", "en") == "en"
        assert "theme" in jar
        assert not jar.changed

    def test_set_cookie_with_defaults(self) -> None:
        """Test that default options are merged into new cookies."""
        jar = CookieJar({}, {"path": "/", "httponly": True})
        jar["lang"] = "en"
        assert jar.changed
        assert jar.set_cookie_headers() == ["lang=en; HttpOnly; Path=/"]

    def test_cookie_options_override_defaults(self) -> None:
        """Test per-cookie options."""
        jar = CookieJar({}, {"path": "/"})
        jar["token"] = {"value": "abc", "path": "/api", "secure": True}
        assert jar.set_cookie_headers() == ["token=abc; Path=/api; Secure"]

    def test_max_age_derives_expires(self) -> None:
        """Test that max_age sets an Expires date."""
        jar = CookieJar({})
        jar["session"] = {"value": "1", "max_age": 60}
        header = jar.set_cookie_headers(now=0)[0]
        assert "Max-Age=60" in header
        assert "expires=Thu, 01 Jan 1970 00:01:00 GMT" in header

    def test_delete_cookie(self) -> None:
        """Test that None removes a cookie on the client."""
        jar = CookieJar({"HTTP_COOKIE": "theme=dark"}, {"path": "/"})
        del jar["theme"]
        assert "theme" not in jar
        header = jar.set_cookie_headers()[0]
        assert header.startswith('theme=""')
        assert "Max-Age=0" in header
        assert "Path=/" in header

    def test_only_changed_cookies_are_sent(self) -> None:
        """Test that untouched request cookies are not echoed."""
        jar = CookieJar({"HTTP_COOKIE": "a=1; b=2"})
        jar["b"] = "3"
        assert jar.set_cookie_headers() == ["b=3"]
        assert jar.to_dict() == {"a": "1", "b": "3"}
