"""lazyslot: lazily initialized, thread-safe singleton slots.

Usage:
    from lazyslot import LazySlot, singleton_accessor

    pool_slot = LazySlot(ConnectionPool, name="db.pool")
    pool = pool_slot.get()

    @singleton_accessor
    def get_cache() -> Cache:
        return Cache()
"""

from .core import (
    SingletonSlot,
    LazySlot,
    EagerSlot,
    ImportSlot,
    SlotRegistry,
    get_registry,
    reset_registry,
    ThreadSafeSingleton,
)
from .accessor import singleton_accessor, retrying
from .config import SlotSettings, get_settings, reset_settings
from .exceptions import (
    SlotError,
    ConstructionFailedError,
    RecursiveConstructionError,
    SlotNotRegisteredError,
    SlotAlreadyRegisteredError,
)

__version__ = "1.0.0"

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
    # Accessors
    "singleton_accessor",
    "retrying",
    # Configuration
    "SlotSettings",
    "get_settings",
    "reset_settings",
    # Errors
    "SlotError",
    "ConstructionFailedError",
    "RecursiveConstructionError",
    "SlotNotRegisteredError",
    "SlotAlreadyRegisteredError",
]
