"""Unit tests for slot exceptions."""

from lazyslot.exceptions import (
    ConstructionFailedError,
    RecursiveConstructionError,
    SlotAlreadyRegisteredError,
    SlotError,
    SlotNotRegisteredError,
)


class TestConstructionFailedError:
    """Tests for ConstructionFailedError."""

    def test_message_includes_cause(self):
        """Test the message names the slot, attempt and cause."""
        error = ConstructionFailedError("db.pool", 2, ConnectionError("refused"))

        assert "db.pool" in error.message
        assert "attempt 2" in error.message
        assert "ConnectionError: refused" in error.message

    def test_to_dict(self):
        """Test conversion to an error body."""
        error = ConstructionFailedError("db.pool", 1, OSError("disk"))

        assert error.to_dict() == {
            "error": "construction_failed",
            "message": error.message,
            "details": {"slot_name": "db.pool", "attempt": 1, "cause_type": "OSError"},
        }

    def test_without_cause(self):
        """Test the error can be built without a cause."""
        error = ConstructionFailedError("db.pool", 1)
        assert error.details["cause_type"] is None


class TestHierarchy:
    """Tests for the exception hierarchy."""

    def test_all_are_slot_errors(self):
        """Test every error derives from SlotError."""
        for error in (
            ConstructionFailedError("a", 1),
            RecursiveConstructionError("a"),
            SlotNotRegisteredError("a"),
            SlotAlreadyRegisteredError("a"),
        ):
            assert isinstance(error, SlotError)
            assert error.to_dict()["details"]

    def test_not_registered_str(self):
        """Test SlotNotRegisteredError reads as a message, not a quoted key."""
        error = SlotNotRegisteredError("cache")
        assert str(error) == "No slot registered under name: cache"
        assert isinstance(error, KeyError)
