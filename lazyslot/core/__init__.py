"""Slot strategies, the class-based singleton and the slot registry."""

from .slots import SingletonSlot, LazySlot, EagerSlot, ImportSlot
from .registry import SlotRegistry, get_registry, reset_registry
from .patterns import ThreadSafeSingleton

__all__ = [
    # Slots
    "SingletonSlot",
    "LazySlot",
    "EagerSlot",
    "ImportSlot",
    # Registry
    "SlotRegistry",
    "get_registry",
    "reset_registry",
    # Patterns
    "ThreadSafeSingleton",
]
