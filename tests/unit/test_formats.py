"""Unit tests for the format registry and Accept negotiation."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from hanami_action.exceptions import FormatCoercionError, UnknownFormatError
from hanami_action.formats import (
    DEFAULT_CONTENT_TYPE,
    AcceptEntry,
    FormatRegistry,
    content_type_with_charset,
    detect_format,
    mime_match,
    negotiate,
    parse_accept,
)

format_names = st.from_regex(r"[a-z][a-z0-9]{0,9}", fullmatch=True)
mime_types = st.from_regex(r"[a-z]{1,8}/[a-z][a-z0-9.+-]{0,12}", fullmatch=True)


class TestFormatRegistry:
    """Tests for FormatRegistry lookups and registration."""

    def test_default_mapping(self) -> None:
        """Test the built-in catch-all mapping."""
        registry = FormatRegistry()
        assert registry.format_for("application/octet-stream") == "all"
        assert registry.format_for("*/*") == "all"
        assert registry.mime_type_for("all") == "application/octet-stream"

    def test_standard_registry_has_well_known_types(self) -> None:
        """Test that the standard registry includes common formats."""
        registry = FormatRegistry.standard()
        assert registry.mime_type_for("html") == "text/html"
        assert registry.mime_type_for("json") == "application/json"
        assert registry.format_for("text/csv") == "csv"

    def test_mime_type_for_keeps_first_registration(self) -> None:
        """Test that later registrations do not change the primary MIME type."""
        registry = FormatRegistry()
        registry.register("json", "application/json")
        registry.register("json", "text/json")
        assert registry.mime_type_for("json") == "application/json"
        assert registry.mime_types_for("json") == ["application/json", "text/json"]

    def test_format_for_uses_latest_registration(self) -> None:
        """Test that re-registering a MIME type moves it to the new format."""
        registry = FormatRegistry()
        registry.register("custom", "application/x-thing")
        registry.register("thing", "application/x-thing")
        assert registry.format_for("application/x-thing") == "thing"

    @given(format_names, st.lists(mime_types, min_size=1, max_size=4, unique=True))
    def test_register_then_lookup(self, name: str, mimes: list[str]) -> None:
        """Test that every registered MIME type maps back to its format."""
        registry = FormatRegistry(mapping={})
        registry.register(name, mimes)
        assert registry.mime_type_for(name) == mimes[0]
        for mime in mimes:
            assert registry.format_for(mime) == name

    def test_unknown_lookups_return_none(self) -> None:
        """Test lookups for names that were never registered."""
        registry = FormatRegistry()
        assert registry.format_for("text/nothing") is None
        assert registry.format_for(None) is None
        assert registry.mime_type_for("nothing") is None

    @pytest.mark.parametrize("bad", [None, 12, "", "text/html"])
    def test_register_rejects_bad_format(self, bad: object) -> None:
        """Test that malformed format names raise a coercion error."""
        with pytest.raises(FormatCoercionError):
            FormatRegistry().register(bad, "text/plain")  # type: ignore[arg-type]

    @pytest.mark.parametrize("bad", [None, 3, "plain", "/x", "text/"])
    def test_register_rejects_bad_mime_type(self, bad: object) -> None:
        """Test that malformed MIME types raise a coercion error."""
        with pytest.raises(FormatCoercionError) as exc_info:
            FormatRegistry().register("txt", bad)  # type: ignore[arg-type]
        assert exc_info.value.value == bad

    def test_accept_sets_default_to_first(self) -> None:
        """Test that the first accepted format becomes the default."""
        registry = FormatRegistry.standard()
        registry.accept("json", "html", "json")
        assert registry.accepted == ["json", "html"]
        assert registry.default == "json"

    def test_accepted_formats_defaults_to_all_registered(self) -> None:
        """Test that without declarations every format is acceptable."""
        registry = FormatRegistry()
        registry.register("txt", "text/plain")
        assert registry.accepted_formats() == ["all", "txt"]

    def test_clear_restores_builtin_mapping(self) -> None:
        """Test that clear drops registrations, accepted and default."""
        registry = FormatRegistry.standard()
        registry.accept("html")
        registry.clear()
        assert registry.mime_types == ["application/octet-stream", "*/*"]
        assert registry.accepted == []
        assert registry.default is None

    def test_copy_is_independent(self) -> None:
        """Test that a copy shares no state with the original."""
        registry = FormatRegistry.standard()
        duplicate = registry.copy()
        duplicate.register("custom", "application/x-custom")
        duplicate.accept("custom")
        assert "custom" not in registry
        assert registry.accepted == []
        assert duplicate == duplicate.copy()


class TestParseAccept:
    """Tests for Accept header parsing."""

    def test_orders_by_quality(self) -> None:
        """Test that higher quality comes first."""
        entries = parse_accept("text/plain;q=0.5, application/json;q=0.9")
        assert [e.mime_type for e in entries] == ["application/json", "text/plain"]

    def test_specific_before_wildcards_at_same_quality(self) -> None:
        """Test that fewer wildcards win ties."""
        entries = parse_accept("*/*, text/*, text/html")
        assert [e.mime_type for e in entries] == ["text/html", "text/*", "*/*"]

    def test_header_order_breaks_remaining_ties(self) -> None:
        """Test that position decides between equal candidates."""
        entries = parse_accept("application/xml, application/json")
        assert [e.mime_type for e in entries] == ["application/xml", "application/json"]

    def test_zero_quality_is_dropped(self) -> None:
        """Test that q=0 excludes a media range."""
        entries = parse_accept("text/html;q=0, application/json")
        assert [e.mime_type for e in entries] == ["application/json"]

    def test_malformed_quality_counts_as_zero(self) -> None:
        """Test that an unparsable q value drops the entry."""
        assert parse_accept("text/html;q=high") == []

    @pytest.mark.parametrize("quality", ["nan", "inf", "-inf", "1.5"])
    def test_out_of_range_quality_counts_as_zero(self, quality: str) -> None:
        """Test that non-finite or out-of-range q values drop the entry."""
        assert parse_accept(f"application/json;q={quality}, text/html") == [
            AcceptEntry("text/html", 1.0, 1)
        ]

    def test_nan_quality_does_not_outrank_default(self) -> None:
        """Test that a q=nan entry cannot win negotiation."""
        registry = FormatRegistry.standard()
        registry.accept("html", "json")
        assert negotiate(registry, "application/json;q=nan, text/html") == ("html", "text/html")

    def test_empty_header(self) -> None:
        """Test that missing headers produce no candidates."""
        assert parse_accept(None) == []
        assert parse_accept("") == []


class TestNegotiate:
    """Tests for format negotiation."""

    def test_accepted_exact_match(self) -> None:
        """Test that text/html negotiates html when html is accepted."""
        registry = FormatRegistry.standard()
        registry.accept("html")
        assert negotiate(registry, "text/html") == ("html", "text/html")

    def test_any_registered_format_without_declarations(self) -> None:
        """Test negotiation when nothing was declared accepted."""
        registry = FormatRegistry.standard()
        assert negotiate(registry, "application/json") == ("json", "application/json")

    def test_unrecognized_accept_uses_catch_all(self) -> None:
        """Test the catch-all fallback for unknown media types."""
        registry = FormatRegistry.standard()
        assert negotiate(registry, "application/x-unknown") == ("all", DEFAULT_CONTENT_TYPE)

    def test_missing_accept_uses_catch_all(self) -> None:
        """Test the catch-all fallback without an Accept header."""
        assert negotiate(FormatRegistry.standard(), None) == ("all", DEFAULT_CONTENT_TYPE)

    def test_unrecognized_accept_uses_configured_default(self) -> None:
        """Test that a configured default wins over the catch-all."""
        registry = FormatRegistry.standard()
        registry.accept("json", "html")
        assert negotiate(registry, "application/x-unknown") == ("json", "application/json")

    def test_wildcard_matches_accepted_type(self) -> None:
        """Test that wildcard ranges match accepted concrete types."""
        registry = FormatRegistry.standard()
        registry.accept("json", "html")
        assert negotiate(registry, "text/*") == ("html", "text/html")
        assert negotiate(registry, "*/*") == ("json", "application/json")

    def test_quality_preference(self) -> None:
        """Test that the client's preference is honored."""
        registry = FormatRegistry.standard()
        registry.accept("html", "json")
        header = "text/html;q=0.4, application/json;q=0.8"
        assert negotiate(registry, header) == ("json", "application/json")

    def test_unaccepted_exact_match_is_skipped(self) -> None:
        """Test that registered but unaccepted formats are not chosen."""
        registry = FormatRegistry.standard()
        registry.accept("json")
        assert negotiate(registry, "text/html") == ("json", "application/json")

    def test_default_without_mime_type_raises(self) -> None:
        """Test that an unregistered default format is a configuration error."""
        registry = FormatRegistry()
        registry.set_default("pdf")
        with pytest.raises(UnknownFormatError) as exc_info:
            negotiate(registry, "text/html")
        assert exc_info.value.format == "pdf"


class TestHelpers:
    """Tests for MIME matching and Content-Type helpers."""

    @pytest.mark.parametrize(
        ("available", "requested", "expected"),
        [
            ("text/html", "text/html", True),
            ("text/html", "text/*", True),
            ("text/html", "*/*", True),
            ("application/json", "text/*", False),
            ("text/html", "text/plain", False),
            ("text/html", "garbage", False),
        ],
    )
    def test_mime_match(self, available: str, requested: str, expected: bool) -> None:
        """Test media range matching."""
        assert mime_match(available, requested) is expected

    def test_detect_format_ignores_parameters(self) -> None:
        """Test detecting a format from a Content-Type with charset."""
        registry = FormatRegistry.standard()
        assert detect_format("application/json; charset=utf-8", registry) == "json"
        assert detect_format(None, registry) is None

    def test_content_type_with_charset(self) -> None:
        """Test the charset parameter is only added when configured."""
        assert content_type_with_charset("text/html", "utf-8") == "text/html; charset=utf-8"
        assert content_type_with_charset("text/html", None) == "text/html"
