"""Thread-safe singleton base class.

Each subclass owns a dedicated LazySlot, so subclasses never share an
instance or a lock. Construction goes through the slot's check-lock-check
path and one-time setup runs inside it, so no caller can observe an
instance whose ``_initialize()`` has not finished.
"""

import logging
from abc import ABC
from typing import ClassVar, Optional, TypeVar

from ..slots import LazySlot

logger = logging.getLogger(__name__)

T = TypeVar('T', bound='ThreadSafeSingleton')


class ThreadSafeSingleton(ABC):
    """Abstract base class for thread-safe singletons.

    Usage:
        class ConnectionPool(ThreadSafeSingleton):
            def _initialize(self):
                # One-time initialization logic
                self.connections = open_connections()

            def _cleanup(self):
                close_connections(self.connections)

        # Get instance (creates on first call)
        pool = ConnectionPool.get_instance()
        assert pool is ConnectionPool()

    Note:
        Subclasses should implement `_initialize()` for one-time setup.
        Do NOT override `__new__` or `__init__` in subclasses. If
        `_initialize()` raises, no instance is published and the next
        access tries again.
    """

    _slot: ClassVar[Optional[LazySlot]] = None

    def __init_subclass__(cls, **kwargs) -> None:
        super().__init_subclass__(**kwargs)
        cls._slot = LazySlot(
            cls._create,
            name=f"{cls.__module__}.{cls.__qualname__}",
            cleanup=_cleanup_instance,
        )

    def __new__(cls: type[T]) -> T:
        """Return the subclass's single instance, creating it on first use."""
        return cls._own_slot().get()

    def __init__(self) -> None:
        """Does nothing; one-time setup belongs in `_initialize()`."""

    @classmethod
    def _own_slot(cls) -> LazySlot:
        slot = cls.__dict__.get("_slot")
        if slot is None:
            raise TypeError(f"{cls.__name__} cannot be instantiated directly; subclass it")
        return slot

    @classmethod
    def _create(cls: type[T]) -> T:
        instance = object.__new__(cls)
        instance._initialize()
        return instance

    def _initialize(self) -> None:
        """Override in subclasses for one-time initialization.

        This method is called exactly once per published instance, before
        the instance becomes visible to any caller.
        """
        pass

    @classmethod
    def get_instance(cls: type[T]) -> T:
        """Get the singleton instance.

        This is the preferred way to access the singleton.

        Returns:
            The singleton instance.
        """
        return cls._own_slot().get()

    @classmethod
    def has_instance(cls) -> bool:
        """Whether the instance has been constructed."""
        return cls._own_slot().is_initialized

    @classmethod
    def reset_instance(cls) -> None:
        """Reset the singleton instance (primarily for testing).

        Warning:
            This should only be used in tests. Using this in production
            code may lead to resource leaks or inconsistent state.
        """
        cls._own_slot().reset()

    def _cleanup(self) -> None:
        """Override in subclasses for cleanup logic.

        Called when reset_instance() is invoked. Use this to release
        resources, close connections, etc.
        """
        pass


def _cleanup_instance(instance: ThreadSafeSingleton) -> None:
    logger.debug(f"Cleaning up {type(instance).__name__} singleton")
    instance._cleanup()
