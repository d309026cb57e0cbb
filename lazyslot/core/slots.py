"""Singleton slot strategies.

A slot holds at most one instance of a value for as long as it lives. Three
strategies are provided, all with the same observable guarantee (every
caller receives the identical instance, and exactly one construction
succeeds):

- LazySlot: constructs on first ``get()`` using check-lock-check. Once
  published, reads take no lock.
- EagerSlot: constructs when the slot itself is created. Never locks.
- ImportSlot: the instance is a module-level attribute. The import system
  runs the module body exactly once under its per-module lock, so the
  host provides the run-once guarantee.

Construction failures leave a slot empty and raise
``ConstructionFailedError``; the next caller retries construction.
"""

import importlib
import logging
import sys
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

from ..constants import DEFAULT_SLOW_CONSTRUCTION_WARNING_MS
from ..exceptions import ConstructionFailedError, RecursiveConstructionError
from ..utils.timer_utils import Timer

logger = logging.getLogger(__name__)

T = TypeVar('T')

# Marks an empty slot; None is a legitimate instance value.
_EMPTY: Any = object()


def _factory_name(factory: Callable[..., Any]) -> str:
    module = getattr(factory, "__module__", None)
    qualname = getattr(factory, "__qualname__", None) or repr(factory)
    return f"{module}.{qualname}" if module else qualname


class SingletonSlot(ABC, Generic[T]):
    """Abstract base for a process-wide slot holding zero or one instance.

    Subclasses decide when construction happens. The base class tracks
    construction statistics and wraps factory failures.
    """

    strategy = "abstract"

    def __init__(self, name: str, slow_warning_ms: Optional[float] = None):
        self.name = name
        self._slow_warning_ms = slow_warning_ms
        self._construction_count = 0
        self._failure_count = 0

    @abstractmethod
    def get(self) -> T:
        """Return the slot's instance, constructing it if the strategy allows."""

    @property
    @abstractmethod
    def is_initialized(self) -> bool:
        """Whether an instance has been published."""

    @abstractmethod
    def peek(self) -> Optional[T]:
        """Return the instance if published, else None. Never constructs."""

    @abstractmethod
    def reset(self) -> None:
        """Drop the published instance (testing only)."""

    @property
    def construction_count(self) -> int:
        """Number of successful constructions since creation or last reset."""
        return self._construction_count

    @property
    def failure_count(self) -> int:
        """Number of failed construction attempts since creation or last reset."""
        return self._failure_count

    def __call__(self) -> T:
        return self.get()

    def _construct(self, factory: Callable[[], T]) -> T:
        """Run the factory once, recording timing and failures.

        Callers must hold whatever exclusion their strategy needs.
        """
        attempt = self._construction_count + self._failure_count + 1
        timer = Timer()
        try:
            with timer:
                instance = factory()
        except RecursiveConstructionError:
            self._failure_count += 1
            logger.error(
                f"Slot '{self.name}' construction failed on attempt {attempt}: "
                f"factory accessed its own slot"
            )
            raise
        except Exception as e:
            self._failure_count += 1
            logger.error(
                f"Slot '{self.name}' construction failed on attempt {attempt} "
                f"after {timer.elapsed_ms:.2f}ms: {type(e).__name__}: {e}"
            )
            raise ConstructionFailedError(self.name, attempt, e) from e

        self._construction_count += 1
        threshold_ms = self._resolve_slow_warning_ms()
        if threshold_ms is not None and timer.elapsed_ms > threshold_ms:
            logger.warning(
                f"Slot '{self.name}' construction took {timer.elapsed_ms:.2f}ms "
                f"(threshold {threshold_ms:.0f}ms)"
            )
        else:
            logger.info(f"Slot '{self.name}' constructed in {timer.elapsed_ms:.2f}ms")
        return instance

    def _resolve_slow_warning_ms(self) -> Optional[float]:
        """Log threshold for this slot; invalid settings never block construction."""
        if self._slow_warning_ms is not None:
            return self._slow_warning_ms
        from ..config import get_settings

        try:
            return get_settings().slow_construction_warning_ms
        except Exception as e:
            logger.warning(
                f"Settings unavailable for slot '{self.name}' ({type(e).__name__}); "
                f"using default slow construction threshold"
            )
            return DEFAULT_SLOW_CONSTRUCTION_WARNING_MS

    def _reset_counters(self) -> None:
        self._construction_count = 0
        self._failure_count = 0

    def get_stats(self) -> Dict[str, Any]:
        """Return slot state for monitoring.

        Returns:
            Dict with the slot name, strategy and construction counters.
        """
        return {
            "name": self.name,
            "strategy": self.strategy,
            "initialized": self.is_initialized,
            "construction_count": self.construction_count,
            "failure_count": self.failure_count,
        }

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(name={self.name!r}, "
            f"initialized={self.is_initialized}, "
            f"construction_count={self.construction_count})"
        )


class LazySlot(SingletonSlot[T]):
    """
    Slot constructed on first access with check-lock-check.

    The fast path is a single attribute read. The slow path takes the
    slot's own lock, re-checks, constructs and publishes. The instance
    reference is stored only after the factory has returned, and the store
    happens before the lock is released, so any reader that sees a
    non-empty slot sees a fully constructed instance.

    Example:
        >>> slot = LazySlot(ConnectionPool, name="db.pool")
        >>> pool = slot.get()          # constructs
        >>> pool is slot.get()         # fast path
        True
    """

    strategy = "lazy"

    def __init__(
        self,
        factory: Callable[[], T],
        name: Optional[str] = None,
        cleanup: Optional[Callable[[T], None]] = None,
        slow_warning_ms: Optional[float] = None,
    ):
        """
        Initialize an empty slot.

        Args:
            factory: Zero-argument callable; the only path to construction
            name: Name used in logs and errors (defaults to the factory's name)
            cleanup: Called with the dropped instance on reset()
            slow_warning_ms: Construction time above which a warning is
                logged (defaults to the configured setting)
        """
        super().__init__(name or _factory_name(factory), slow_warning_ms)
        self._factory = factory
        self._cleanup = cleanup
        self._value: Any = _EMPTY
        self._lock = threading.Lock()
        self._constructing_thread: Optional[int] = None

    def get(self) -> T:
        value = self._value
        if value is not _EMPTY:
            return value

        # Only the constructing thread ever writes its own ident here.
        if self._constructing_thread == threading.get_ident():
            raise RecursiveConstructionError(self.name)

        with self._lock:
            value = self._value
            if value is _EMPTY:
                self._constructing_thread = threading.get_ident()
                try:
                    value = self._construct(self._factory)
                finally:
                    self._constructing_thread = None
                self._value = value
        return value

    @property
    def is_initialized(self) -> bool:
        return self._value is not _EMPTY

    def peek(self) -> Optional[T]:
        value = self._value
        return None if value is _EMPTY else value

    def reset(self) -> None:
        """Drop the instance so the next get() constructs again.

        Warning:
            Only for tests. Holders of the old instance keep it, which breaks
            identity uniqueness for the lifetime of those references.

        Raises:
            RecursiveConstructionError: If called from the slot's own factory
        """
        if self._constructing_thread == threading.get_ident():
            raise RecursiveConstructionError(self.name)

        with self._lock:
            instance = self._value
            self._value = _EMPTY
            self._reset_counters()

        if instance is _EMPTY:
            return
        logger.debug(f"Slot '{self.name}' reset")
        if self._cleanup is not None:
            try:
                self._cleanup(instance)
            except Exception:
                logger.warning(f"Cleanup for slot '{self.name}' raised", exc_info=True)


class EagerSlot(SingletonSlot[T]):
    """
    Slot constructed when the slot is created.

    Construction happens before any accessor can race, so reads need no
    lock at all. A failing factory raises from the constructor and no slot
    comes into existence.
    """

    strategy = "eager"

    def __init__(
        self,
        factory: Callable[[], T],
        name: Optional[str] = None,
        slow_warning_ms: Optional[float] = None,
    ):
        super().__init__(name or _factory_name(factory), slow_warning_ms)
        self._value: T = self._construct(factory)

    @classmethod
    def of(cls, value: T, name: str) -> "EagerSlot[T]":
        """Wrap an already built value (a constant registered at start)."""
        return cls(lambda: value, name=name, slow_warning_ms=float("inf"))

    def get(self) -> T:
        return self._value

    @property
    def is_initialized(self) -> bool:
        return True

    def peek(self) -> Optional[T]:
        return self._value

    def reset(self) -> None:
        # Eager instances live as long as the slot does.
        logger.debug(f"Slot '{self.name}' is eager; reset keeps its instance")


class ImportSlot(SingletonSlot[T]):
    """
    Slot whose instance is a module-level attribute.

    The first get() imports the module. Python executes a module body once
    and makes concurrent importers wait on a per-module lock, so every
    caller observes the same fully initialized attribute. A module that
    raises during import is removed from ``sys.modules`` by the import
    system, which makes the next get() retry.

    Example:
        >>> slot = ImportSlot("myapp.pool", "POOL")
        >>> slot.get() is slot.get()
        True
    """

    strategy = "import"

    def __init__(
        self,
        module: str,
        attribute: str,
        name: Optional[str] = None,
        slow_warning_ms: Optional[float] = None,
    ):
        super().__init__(name or f"{module}.{attribute}", slow_warning_ms)
        self.module = module
        self.attribute = attribute
        self._value: Any = _EMPTY
        self._stats_lock = threading.Lock()

    def get(self) -> T:
        value = self._value
        if value is not _EMPTY:
            return value

        try:
            module = importlib.import_module(self.module)
            value = getattr(module, self.attribute)
        except Exception as e:
            with self._stats_lock:
                self._failure_count += 1
                attempt = self._construction_count + self._failure_count
            logger.error(
                f"Slot '{self.name}' import failed on attempt {attempt}: "
                f"{type(e).__name__}: {e}"
            )
            raise ConstructionFailedError(self.name, attempt, e) from e

        with self._stats_lock:
            if self._value is _EMPTY:
                self._value = value
                self._construction_count = 1
                logger.info(f"Slot '{self.name}' resolved from module {self.module}")
        return value

    @property
    def is_initialized(self) -> bool:
        return self._value is not _EMPTY

    def peek(self) -> Optional[T]:
        value = self._value
        return None if value is _EMPTY else value

    def reset(self) -> None:
        """Forget the instance and unload the module (testing only)."""
        with self._stats_lock:
            self._value = _EMPTY
            self._reset_counters()
            sys.modules.pop(self.module, None)
        logger.debug(f"Slot '{self.name}' reset; module {self.module} unloaded")


__all__ = ["SingletonSlot", "LazySlot", "EagerSlot", "ImportSlot"]
