"""Unit tests for flash messages."""

from hanami_action.flash import Flash


class TestFlash:
    """Tests for Flash."""

    def test_reads_current_messages(self) -> None:
        """Test that reads see messages from the previous request."""
        flash = Flash({"notice": "Saved"})
        assert flash["notice"] == "Saved"
        assert flash.get("alert", "none") == "none"
        assert "notice" in flash
        assert len(flash) == 1
        assert not flash.empty

    def test_writes_go_to_next(self) -> None:
        """Test that writes are stored for the next request."""
        flash = Flash()
        flash["notice"] = "Saved"
        assert flash["notice"] is None
        assert flash.next == {"notice": "Saved"}
        assert flash.empty

    def test_now_is_current(self) -> None:
        """Test the now view."""
        flash = Flash({"a": 1})
        flash.now["b"] = 2
        assert flash["b"] == 2
        assert flash.to_dict() == {"a": 1, "b": 2}

    def test_keep(self) -> None:
        """Test carrying messages over."""
        flash = Flash({"notice": "Saved", "alert": "Oops"})
        flash.keep("notice")
        assert flash.next == {"notice": "Saved"}
        flash.keep()
        assert flash.next == {"notice": "Saved", "alert": "Oops"}

    def test_discard(self) -> None:
        """Test dropping messages for the next request."""
        flash = Flash()
        flash["a"] = 1
        flash["b"] = 2
        flash.discard("a")
        assert flash.next == {"b": 2}
        flash.discard()
        assert flash.next == {}

    def test_sweep(self) -> None:
        """Test promoting next messages to current."""
        flash = Flash({"old": 1})
        flash["new"] = 2
        flash.sweep()
        assert flash.to_dict() == {"new": 2}
        assert flash.next == {}
        assert list(flash) == ["new"]
