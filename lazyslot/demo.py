"""Concurrent-caller race used by the demo entry point and the test suite.

Starts a group of threads on a barrier so that they call the accessor as
close to simultaneously as possible, then reports how many constructions
happened and how many distinct instances the callers observed.
"""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Dict

from .constants import DEMO_CONSTRUCTION_DELAY_SECONDS
from .core.slots import EagerSlot, ImportSlot, LazySlot, SingletonSlot
from .utils.timer_utils import Timer

logger = logging.getLogger(__name__)

IMPORT_MODULE = "lazyslot._demo_instance"
IMPORT_ATTRIBUTE = "INSTANCE"


class DemoResource:
    """Stand-in for an expensive shared resource; counts its constructions."""

    _created = 0
    _count_lock = threading.Lock()

    def __init__(self, delay: float = DEMO_CONSTRUCTION_DELAY_SECONDS):
        with DemoResource._count_lock:
            DemoResource._created += 1
            self.serial = DemoResource._created
        # Widen the window in which a broken slot would construct twice
        time.sleep(delay)

    @classmethod
    def created(cls) -> int:
        with cls._count_lock:
            return cls._created


@dataclass
class RaceResult:
    """Outcome of one race."""

    strategy: str
    threads: int
    constructions: int
    distinct_instances: int
    elapsed_ms: float

    @property
    def ok(self) -> bool:
        return self.constructions == 1 and self.distinct_instances == 1


def _make_lazy() -> SingletonSlot:
    return LazySlot(DemoResource, name="demo.lazy")


def _make_eager() -> SingletonSlot:
    return EagerSlot(DemoResource, name="demo.eager")


def _make_import() -> SingletonSlot:
    slot = ImportSlot(IMPORT_MODULE, IMPORT_ATTRIBUTE, name="demo.import")
    # Unload any earlier copy so the race sees a fresh module body
    slot.reset()
    return slot


STRATEGIES: Dict[str, Callable[[], SingletonSlot]] = {
    "lazy": _make_lazy,
    "eager": _make_eager,
    "import": _make_import,
}


def race(accessor: Callable[[], object], threads: int) -> list:
    """
    Call ``accessor`` from ``threads`` threads released together.

    Returns:
        The objects returned to each thread, in completion order.
    """
    barrier = threading.Barrier(threads)

    def call():
        barrier.wait()
        return accessor()

    with ThreadPoolExecutor(max_workers=threads, thread_name_prefix="race-") as executor:
        futures = [executor.submit(call) for _ in range(threads)]
        return [f.result() for f in futures]


def run_race(strategy: str, threads: int) -> RaceResult:
    """
    Race ``threads`` callers against a fresh slot of the given strategy.

    Args:
        strategy: One of "lazy", "eager" or "import"
        threads: Number of concurrent callers (at least 2)

    Returns:
        RaceResult with construction and identity counts
    """
    if strategy not in STRATEGIES:
        raise ValueError(f"Unknown strategy '{strategy}'. Choose from: {', '.join(STRATEGIES)}")
    if threads < 2:
        raise ValueError("A race needs at least 2 threads")

    before = DemoResource.created()
    with Timer() as timer:
        slot = STRATEGIES[strategy]()
        results = race(slot.get, threads)
    constructions = DemoResource.created() - before

    result = RaceResult(
        strategy=strategy,
        threads=threads,
        constructions=constructions,
        distinct_instances=len({id(r) for r in results}),
        elapsed_ms=timer.elapsed_ms,
    )
    logger.info(
        f"Race [{strategy}] threads={threads} constructions={constructions} "
        f"distinct={result.distinct_instances} in {result.elapsed_ms:.2f}ms"
    )
    return result
