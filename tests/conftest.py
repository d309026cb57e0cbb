"""Shared test fixtures and configuration."""

import importlib
import os
import sys
import textwrap
import uuid
from pathlib import Path

import pytest

from helpers import CountingFactory

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))


# =============================================================================
# Environment Variable Fixtures
# =============================================================================

SETTINGS_ENV_VARS = (
    "LAZYSLOT_RETRY_ATTEMPTS",
    "LAZYSLOT_RETRY_INITIAL_DELAY_SECONDS",
    "LAZYSLOT_RETRY_MAX_DELAY_SECONDS",
    "LAZYSLOT_SLOW_CONSTRUCTION_WARNING_MS",
    "LAZYSLOT_LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Clear lazyslot environment variables."""
    for key in SETTINGS_ENV_VARS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def fast_retry_env(monkeypatch):
    """Retry settings with no backoff delay."""
    monkeypatch.setenv("LAZYSLOT_RETRY_ATTEMPTS", "3")
    monkeypatch.setenv("LAZYSLOT_RETRY_INITIAL_DELAY_SECONDS", "0")
    monkeypatch.setenv("LAZYSLOT_RETRY_MAX_DELAY_SECONDS", "0")


# =============================================================================
# Singleton Reset
# =============================================================================

@pytest.fixture(autouse=True)
def reset_library_singletons():
    """Reset settings and default registry before and after each test."""
    from lazyslot.config import reset_settings
    from lazyslot.core.registry import reset_registry

    reset_settings()
    reset_registry()

    yield

    reset_settings()
    reset_registry()


# =============================================================================
# Construction Helpers
# =============================================================================

@pytest.fixture
def counting_factory():
    """Factory that always succeeds."""
    return CountingFactory()


@pytest.fixture
def slow_factory():
    """Factory that sleeps, widening the race window."""
    return CountingFactory(delay=0.05)


# =============================================================================
# Import Slot Fixtures
# =============================================================================

@pytest.fixture
def make_module(tmp_path, monkeypatch):
    """
    Write a throwaway module and return its name.

    The module body starts by appending to ``counter.calls``, where
    ``counter`` is a sibling module, so each execution of the body is
    recorded.
    """
    created = []
    monkeypatch.syspath_prepend(str(tmp_path))

    def _make(body: str) -> str:
        name = f"lazyslot_test_mod_{uuid.uuid4().hex[:8]}"
        counter_name = f"{name}_counter"
        (tmp_path / f"{counter_name}.py").write_text("calls = []\n")
        (tmp_path / f"{name}.py").write_text(
            f"import {counter_name} as counter\ncounter.calls.append(1)\n" + textwrap.dedent(body)
        )
        importlib.invalidate_caches()
        created.extend([name, counter_name])
        return name

    yield _make

    for name in created:
        sys.modules.pop(name, None)


# =============================================================================
# Stress Test Markers
# =============================================================================

def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line(
        "markers", "stress: repeated races with many threads (slow)"
    )


def pytest_collection_modifyitems(config, items):
    """Skip stress tests unless RUN_STRESS_TESTS is set."""
    if not os.getenv("RUN_STRESS_TESTS"):
        skip_stress = pytest.mark.skip(
            reason="Set RUN_STRESS_TESTS=1 to run stress tests"
        )
        for item in items:
            if "stress" in item.keywords:
                item.add_marker(skip_stress)
