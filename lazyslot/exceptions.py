"""
Custom exceptions for slot construction and registry lookups.
"""

from typing import Any, Dict, Optional


class SlotError(Exception):
    """Base exception for slot errors."""

    error_code = "slot_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a serializable error body."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": dict(self.details),
        }


class ConstructionFailedError(SlotError):
    """
    Raised when a slot's factory raises during construction.

    The factory's exception is chained as ``__cause__``. The slot is left
    uninitialized, so a later call attempts construction again.
    """

    error_code = "construction_failed"

    def __init__(self, slot_name: str, attempt: int, cause: Optional[BaseException] = None):
        self.slot_name = slot_name
        self.attempt = attempt

        message = f"Construction of slot '{slot_name}' failed (attempt {attempt})"
        if cause is not None:
            message = f"{message}: {type(cause).__name__}: {cause}"

        super().__init__(
            message=message,
            details={
                "slot_name": slot_name,
                "attempt": attempt,
                "cause_type": type(cause).__name__ if cause is not None else None,
            },
        )


class RecursiveConstructionError(SlotError):
    """Raised when a factory asks its own slot for the instance it is building."""

    error_code = "recursive_construction"

    def __init__(self, slot_name: str):
        self.slot_name = slot_name
        super().__init__(
            message=f"Slot '{slot_name}' was accessed by its own factory during construction",
            details={"slot_name": slot_name},
        )


class SlotNotRegisteredError(SlotError, KeyError):
    """Raised when a registry lookup names an unknown slot."""

    error_code = "slot_not_registered"

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            message=f"No slot registered under name: {name}",
            details={"name": name},
        )

    def __str__(self) -> str:
        return self.message


class SlotAlreadyRegisteredError(SlotError):
    """Raised when a name is registered twice in the same registry."""

    error_code = "slot_already_registered"

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            message=f"A slot is already registered under name: {name}",
            details={"name": name},
        )


__all__ = [
    "SlotError",
    "ConstructionFailedError",
    "RecursiveConstructionError",
    "SlotNotRegisteredError",
    "SlotAlreadyRegisteredError",
]
