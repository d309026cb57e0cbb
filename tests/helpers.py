"""Helpers shared by the unit tests."""

import importlib
import sys
import time


class CountingFactory:
    """Factory that counts calls and can fail a given number of times first."""

    def __init__(self, fail_times: int = 0, delay: float = 0.0, error: type = RuntimeError):
        self.calls = 0
        self.fail_times = fail_times
        self.delay = delay
        self.error = error

    def __call__(self):
        self.calls += 1
        call_number = self.calls
        if self.delay:
            time.sleep(self.delay)
        if call_number <= self.fail_times:
            raise self.error(f"construction {call_number} failed")
        return object()


def module_calls(name: str) -> int:
    """Number of times the body of a make_module module has executed."""
    return len(importlib.import_module(f"{name}_counter").calls)


def module_calls_or_zero(name: str) -> int:
    """Like module_calls, but 0 if the body has never run."""
    counter = sys.modules.get(f"{name}_counter")
    return len(counter.calls) if counter else 0
