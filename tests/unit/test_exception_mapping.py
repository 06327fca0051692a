"""Unit tests for exception mapping resolution."""

import pytest
from pydantic import ValidationError

from hanami_action.core.exception_mapping import (
    HandlerMapping,
    StatusMapping,
    coerce_mapping,
    coerce_mappings,
    is_handled_exception,
    resolve_exception_mapping,
)


class RecordNotFound(LookupError):
    pass


class ArchivedRecord(RecordNotFound):
    pass


class TestCoercion:
    """Tests for turning raw values into mapping entries."""

    def test_int_becomes_status(self) -> None:
        """Test that status codes become StatusMapping."""
        assert coerce_mapping(422) == StatusMapping(status=422)

    def test_callable_becomes_handler(self) -> None:
        """Test that callables become HandlerMapping."""

        def handler(exc: Exception) -> int:
            return 400

        mapping = coerce_mapping(handler)
        assert isinstance(mapping, HandlerMapping)
        assert mapping.handler is handler

    def test_existing_entries_pass_through(self) -> None:
        """Test that already-coerced entries are kept as is."""
        entry = StatusMapping(status=404)
        assert coerce_mapping(entry) is entry

    @pytest.mark.parametrize("value", ["404", None, True, 4.04])
    def test_rejects_other_values(self, value: object) -> None:
        """Test that strings, None, booleans and floats are rejected."""
        with pytest.raises(ValueError):
            coerce_mapping(value)

    def test_status_must_be_http_status(self) -> None:
        """Test the status range validation."""
        with pytest.raises(ValidationError):
            StatusMapping(status=99)
        with pytest.raises(ValidationError):
            StatusMapping(status=600)

    def test_keys_must_be_exception_classes(self) -> None:
        """Test that non-exception keys are rejected."""
        with pytest.raises(ValueError, match="exception classes"):
            coerce_mappings({"KeyError": 404})
        with pytest.raises(ValueError):
            coerce_mappings({dict: 404})


class TestResolution:
    """Tests for most-specific-match resolution."""

    def test_base_mapping_covers_subclasses(self) -> None:
        """Test that a mapping for a base class fires for its subtypes."""
        mappings = coerce_mappings({LookupError: 404})
        assert resolve_exception_mapping(mappings, ArchivedRecord()) == StatusMapping(status=404)

    def test_specific_mapping_takes_precedence(self) -> None:
        """Test that the most specific mapping wins regardless of order."""
        mappings = coerce_mappings({ArchivedRecord: 410, LookupError: 404})
        assert resolve_exception_mapping(mappings, ArchivedRecord()).status == 410  # type: ignore[union-attr]
        assert resolve_exception_mapping(mappings, RecordNotFound()).status == 404  # type: ignore[union-attr]

    def test_unmapped_returns_none(self) -> None:
        """Test that unrelated exceptions are not handled."""
        mappings = coerce_mappings({LookupError: 404})
        assert resolve_exception_mapping(mappings, ValueError()) is None
        assert not is_handled_exception(mappings, ValueError())
        assert is_handled_exception(mappings, KeyError())

    def test_exception_mapping_catches_everything(self) -> None:
        """Test that a mapping for Exception covers any error."""
        mappings = coerce_mappings({Exception: 503})
        assert resolve_exception_mapping(mappings, ZeroDivisionError()).status == 503  # type: ignore[union-attr]
