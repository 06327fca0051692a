"""Unit tests for status code helpers."""

import pytest

from hanami_action.utils.status import (
    STATUSES_WITHOUT_BODY,
    message_for,
    requires_no_body,
    status_line,
)


class TestStatusMessages:
    """Tests for reason phrases."""

    @pytest.mark.parametrize(
        ("code", "message"),
        [
            (200, "OK"),
            (304, "Not Modified"),
            (404, "Not Found"),
            (422, "Unprocessable Entity"),
            (500, "Internal Server Error"),
        ],
    )
    def test_message_for(self, code: int, message: str) -> None:
        """Test standard reason phrases."""
        assert message_for(code) == message

    def test_unknown_code(self) -> None:
        """Test that unknown codes have no phrase."""
        assert message_for(299) is None

    def test_status_line(self) -> None:
        """Test WSGI status lines."""
        assert status_line(201) == "201 Created"
        assert status_line(299) == "299"


class TestBodilessStatuses:
    """Tests for statuses that must not carry a body."""

    @pytest.mark.parametrize("code", [100, 101, 150, 199, 204, 205, 304])
    def test_requires_no_body(self, code: int) -> None:
        """Test informational, no-content and not-modified statuses."""
        assert requires_no_body(code)
        assert code in STATUSES_WITHOUT_BODY

    @pytest.mark.parametrize("code", [200, 201, 206, 301, 404, 500])
    def test_allows_body(self, code: int) -> None:
        """Test that other statuses may carry a body."""
        assert not requires_no_body(code)
