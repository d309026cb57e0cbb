"""Registry of named process-wide slots.

The registry maps names to slots so that application code can share
lazily built resources (connection pools, caches, clients) without
passing the slot objects around. Constants registered at start-up are
held in eager slots.
"""

import logging
import threading
from typing import Any, Callable, Dict, List, Optional, TypeVar

from ..constants import DEFAULT_REGISTRY_SLOT_NAME
from ..exceptions import SlotAlreadyRegisteredError, SlotNotRegisteredError
from .slots import EagerSlot, LazySlot, SingletonSlot

logger = logging.getLogger(__name__)

T = TypeVar('T')


class SlotRegistry:
    """Manages named singleton slots.

    The registry's lock guards only its name map. Instances are built by
    each slot under the slot's own lock, after the registry lock has been
    released, so factories may look up other registry entries.

    Example:
        >>> registry = SlotRegistry()
        >>> registry.register_lazy("db.pool", ConnectionPool)
        >>> registry.register_constant("app.region", "eu-west-1")
        >>> registry.get("db.pool") is registry.get("db.pool")
        True
    """

    def __init__(self):
        self._slots: Dict[str, SingletonSlot] = {}
        self._lock = threading.Lock()

    def register(self, slot: SingletonSlot[T]) -> SingletonSlot[T]:
        """
        Register an existing slot under its own name.

        Args:
            slot: Slot to register

        Returns:
            The registered slot

        Raises:
            SlotAlreadyRegisteredError: If the name is taken
        """
        with self._lock:
            if slot.name in self._slots:
                raise SlotAlreadyRegisteredError(slot.name)
            self._slots[slot.name] = slot
        logger.debug(f"Registered {slot.strategy} slot '{slot.name}'")
        return slot

    def register_lazy(
        self,
        name: str,
        factory: Callable[[], T],
        cleanup: Optional[Callable[[T], None]] = None,
    ) -> LazySlot[T]:
        """Register a slot built on first access."""
        return self.register(LazySlot(factory, name=name, cleanup=cleanup))

    def register_constant(self, name: str, value: T) -> EagerSlot[T]:
        """Register a value fixed at registration time."""
        return self.register(EagerSlot.of(value, name=name))

    def unregister(self, name: str) -> SingletonSlot:
        """
        Remove a slot from the registry.

        The slot's instance is left untouched; callers holding it keep it.

        Raises:
            SlotNotRegisteredError: If no slot has that name
        """
        with self._lock:
            try:
                slot = self._slots.pop(name)
            except KeyError:
                raise SlotNotRegisteredError(name) from None
        logger.debug(f"Unregistered slot '{name}'")
        return slot

    def slot(self, name: str) -> SingletonSlot:
        """Return the slot registered under name."""
        with self._lock:
            try:
                return self._slots[name]
            except KeyError:
                raise SlotNotRegisteredError(name) from None

    def get(self, name: str) -> Any:
        """Return the instance held by the named slot, constructing it if needed."""
        return self.slot(name).get()

    def names(self) -> List[str]:
        with self._lock:
            return sorted(self._slots)

    def reset_all(self) -> None:
        """Reset every slot in the registry (for testing)."""
        with self._lock:
            slots = list(self._slots.values())
        for slot in slots:
            slot.reset()

    def get_stats(self) -> Dict[str, Dict[str, Any]]:
        """Return per-slot statistics for monitoring.

        Returns:
            Dict mapping slot name to the slot's stats.
        """
        with self._lock:
            slots = list(self._slots.values())
        return {slot.name: slot.get_stats() for slot in slots}

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._slots

    def __len__(self) -> int:
        with self._lock:
            return len(self._slots)

    def __repr__(self) -> str:
        return f"SlotRegistry(slots={len(self)})"


# Module-level default registry
_registry_slot: LazySlot[SlotRegistry] = LazySlot(
    SlotRegistry,
    name=DEFAULT_REGISTRY_SLOT_NAME,
    slow_warning_ms=float("inf"),
)


def get_registry() -> SlotRegistry:
    """Get or create the default slot registry.

    Returns:
        The process-wide SlotRegistry instance.
    """
    return _registry_slot.get()


def reset_registry() -> None:
    """Drop the default registry (for testing)."""
    _registry_slot.reset()
