"""Timing utilities for measuring slot construction.

Durations use a monotonic clock so that wall-clock adjustments during a
slow construction do not produce negative or inflated timings.
"""

import time
from typing import Optional


def elapsed_ms(start_time: float) -> float:
    """
    Calculate elapsed time in milliseconds since start_time.

    Args:
        start_time: Start time from time.perf_counter()

    Returns:
        Elapsed time in milliseconds

    Example:
        >>> start = time.perf_counter()
        >>> # ... construct something ...
        >>> duration = elapsed_ms(start)
    """
    return (time.perf_counter() - start_time) * 1000


class Timer:
    """
    Context manager for timing a construction.

    Usage:
        >>> with Timer() as t:
        ...     instance = factory()
        >>> print(f"Constructed in {t.elapsed_ms:.2f}ms")

    The elapsed time stays available after the block exits, including when
    the block raised.
    """

    def __init__(self):
        self.start_time: Optional[float] = None
        self._elapsed_ms: Optional[float] = None

    def start(self) -> "Timer":
        """Start the timer."""
        self.start_time = time.perf_counter()
        self._elapsed_ms = None
        return self

    def stop(self) -> float:
        """Stop the timer and return elapsed milliseconds."""
        if self.start_time is not None and self._elapsed_ms is None:
            self._elapsed_ms = elapsed_ms(self.start_time)
        return self._elapsed_ms or 0.0

    @property
    def running(self) -> bool:
        return self.start_time is not None and self._elapsed_ms is None

    @property
    def elapsed_ms(self) -> float:
        """
        Get elapsed time in milliseconds.

        If timer is still running, returns current elapsed time.
        If timer is stopped, returns final elapsed time.
        """
        if self.start_time is None:
            return 0.0
        if self._elapsed_ms is not None:
            return self._elapsed_ms
        return elapsed_ms(self.start_time)

    def __enter__(self) -> "Timer":
        self.start()
        return self

    def __exit__(self, *args) -> None:
        self.stop()

    def __repr__(self) -> str:
        return f"Timer(elapsed_ms={self.elapsed_ms:.2f})"
