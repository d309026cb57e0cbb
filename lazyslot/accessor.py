"""
Accessor functions backed by lazy slots.

Provides:
- singleton_accessor: turns a factory into a zero-argument ``get_instance``
- retrying: retries a failed construction with exponential backoff
"""

import functools
import logging
from typing import Callable, Optional, TypeVar, overload

from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
    before_sleep_log,
)

from .config import SlotSettings, get_settings
from .core.slots import LazySlot, SingletonSlot
from .exceptions import ConstructionFailedError

logger = logging.getLogger(__name__)

T = TypeVar('T')


@overload
def singleton_accessor(factory: Callable[[], T], *, name: Optional[str] = None) -> Callable[[], T]: ...


@overload
def singleton_accessor(
    factory: None = None, *, name: Optional[str] = None
) -> Callable[[Callable[[], T]], Callable[[], T]]: ...


def singleton_accessor(factory=None, *, name=None):
    """
    Build a process-wide accessor around a factory.

    The factory becomes the only code path that constructs the instance.
    The returned accessor takes no arguments, constructs on first call and
    returns the same instance afterwards. Usable bare or with arguments:

        @singleton_accessor
        def get_pool() -> ConnectionPool:
            return ConnectionPool(dsn=DSN)

        @singleton_accessor(name="cache.main")
        def get_cache() -> Cache:
            return Cache()

    The accessor exposes its slot as ``.slot`` and a test-only ``.reset()``.
    """

    def decorate(func: Callable[[], T]) -> Callable[[], T]:
        slot = LazySlot(func, name=name)

        @functools.wraps(func)
        def get_instance() -> T:
            return slot.get()

        get_instance.slot = slot  # type: ignore[attr-defined]
        get_instance.reset = slot.reset  # type: ignore[attr-defined]
        return get_instance

    if factory is None:
        return decorate
    return decorate(factory)


def retrying(
    accessor: Callable[[], T],
    settings: Optional[SlotSettings] = None,
) -> Callable[[], T]:
    """
    Wrap an accessor so that construction failures are retried.

    Only ConstructionFailedError is retried; since a failed construction
    leaves the slot empty, each retry makes a fresh attempt. After the last
    attempt the final ConstructionFailedError is re-raised.

    Args:
        accessor: Zero-argument accessor (a slot, or a singleton_accessor)
        settings: Retry settings (defaults to the library settings)

    Returns:
        Zero-argument accessor with retry logic
    """
    settings = settings or get_settings()
    target = accessor.get if isinstance(accessor, SingletonSlot) else accessor
    return retry(
        stop=stop_after_attempt(settings.retry_attempts),
        wait=wait_exponential(
            multiplier=settings.retry_initial_delay_seconds,
            max=settings.retry_max_delay_seconds,
        ),
        retry=retry_if_exception_type(ConstructionFailedError),
        reraise=True,
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )(target)
