"""
Race demo for the singleton slot strategies.

Starts N threads against a fresh slot and reports whether exactly one
instance was constructed and observed.

Usage:
    python -m lazyslot                          # lazy slot, default threads
    python -m lazyslot --strategy eager -t 64
    python -m lazyslot --strategy all -v
"""

import argparse
import logging
import sys

from .config import get_settings
from .constants import DEFAULT_DEMO_THREADS, LOG_FORMAT, MAX_DEMO_THREADS, MIN_DEMO_THREADS
from .demo import STRATEGIES, run_race

logger = logging.getLogger("lazyslot")


def _thread_count(value: str) -> int:
    count = int(value)
    if not MIN_DEMO_THREADS <= count <= MAX_DEMO_THREADS:
        raise argparse.ArgumentTypeError(
            f"threads must be between {MIN_DEMO_THREADS} and {MAX_DEMO_THREADS}"
        )
    return count


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="python -m lazyslot",
        description="Race threads against a singleton slot",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m lazyslot --strategy lazy --threads 32
  python -m lazyslot --strategy all
        """,
    )
    parser.add_argument(
        "--strategy", "-s",
        choices=[*STRATEGIES, "all"],
        default="lazy",
        help="Slot strategy to race (default: lazy)",
    )
    parser.add_argument(
        "--threads", "-t",
        type=_thread_count,
        default=DEFAULT_DEMO_THREADS,
        help=f"Number of concurrent callers (default: {DEFAULT_DEMO_THREADS})",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args(argv)

    log_level = "DEBUG" if args.verbose else get_settings().log_level
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format=LOG_FORMAT,
    )

    strategies = list(STRATEGIES) if args.strategy == "all" else [args.strategy]
    failed = False
    for strategy in strategies:
        result = run_race(strategy, args.threads)
        status = "OK" if result.ok else "VIOLATED"
        print(
            f"{strategy:>6}: {status}  threads={result.threads} "
            f"constructions={result.constructions} distinct={result.distinct_instances} "
            f"elapsed={result.elapsed_ms:.2f}ms"
        )
        if not result.ok:
            logger.error(f"Singleton invariant violated for strategy '{strategy}'")
            failed = True

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
