"""Unit tests for SlotRegistry."""

import threading
from concurrent.futures import ThreadPoolExecutor, as_completed

import pytest

from helpers import CountingFactory
from lazyslot.core.registry import SlotRegistry, get_registry, reset_registry
from lazyslot.core.slots import EagerSlot, LazySlot
from lazyslot.demo import race
from lazyslot.exceptions import (
    ConstructionFailedError,
    SlotAlreadyRegisteredError,
    SlotNotRegisteredError,
)


class TestRegister:
    """Tests for registering slots."""

    def test_register_lazy(self, counting_factory):
        """Test lazy registration defers construction."""
        registry = SlotRegistry()
        slot = registry.register_lazy("db.pool", counting_factory)

        assert isinstance(slot, LazySlot)
        assert "db.pool" in registry
        assert counting_factory.calls == 0

        assert registry.get("db.pool") is registry.get("db.pool")
        assert counting_factory.calls == 1

    def test_register_constant(self):
        """Test constants are held eagerly and returned as-is."""
        registry = SlotRegistry()
        value = ("eu-west-1", "eu-central-1")
        slot = registry.register_constant("app.regions", value)

        assert isinstance(slot, EagerSlot)
        assert slot.is_initialized is True
        assert registry.get("app.regions") is value

    def test_register_existing_slot(self, counting_factory):
        """Test registering a pre-built slot under its own name."""
        registry = SlotRegistry()
        slot = LazySlot(counting_factory, name="cache.main")

        assert registry.register(slot) is slot
        assert registry.slot("cache.main") is slot

    def test_duplicate_name_rejected(self, counting_factory):
        """Test a name can only be registered once."""
        registry = SlotRegistry()
        registry.register_lazy("db.pool", counting_factory)

        with pytest.raises(SlotAlreadyRegisteredError) as exc_info:
            registry.register_constant("db.pool", 1)
        assert exc_info.value.name == "db.pool"

    def test_names_sorted(self, counting_factory):
        """Test names() lists registered names in order."""
        registry = SlotRegistry()
        registry.register_constant("b", 2)
        registry.register_constant("a", 1)
        registry.register_lazy("c", counting_factory)

        assert registry.names() == ["a", "b", "c"]
        assert len(registry) == 3


class TestLookup:
    """Tests for lookups and removal."""

    def test_unknown_name(self):
        """Test get raises SlotNotRegisteredError for unknown names."""
        registry = SlotRegistry()

        with pytest.raises(SlotNotRegisteredError) as exc_info:
            registry.get("missing")
        assert "missing" in str(exc_info.value)

    def test_not_registered_is_key_error(self):
        """Test lookups can be handled as KeyError."""
        registry = SlotRegistry()
        with pytest.raises(KeyError):
            registry.slot("missing")

    def test_unregister(self, counting_factory):
        """Test unregister removes and returns the slot."""
        registry = SlotRegistry()
        slot = registry.register_lazy("db.pool", counting_factory)

        assert registry.unregister("db.pool") is slot
        assert "db.pool" not in registry

    def test_unregister_unknown(self):
        """Test unregistering an unknown name raises."""
        with pytest.raises(SlotNotRegisteredError):
            SlotRegistry().unregister("missing")

    def test_construction_failure_propagates(self):
        """Test factory failures surface through the registry."""
        registry = SlotRegistry()
        registry.register_lazy("flaky", CountingFactory(fail_times=1))

        with pytest.raises(ConstructionFailedError):
            registry.get("flaky")
        assert registry.get("flaky") is registry.get("flaky")


class TestFactoriesUsingRegistry:
    """Tests for factories that look up other registry entries."""

    def test_factory_can_read_registry(self):
        """Test a factory may resolve another slot during construction."""
        registry = SlotRegistry()
        registry.register_constant("db.dsn", "postgresql://localhost/app")
        registry.register_lazy("db.pool", lambda: {"dsn": registry.get("db.dsn")})

        assert registry.get("db.pool") == {"dsn": "postgresql://localhost/app"}

    def test_factory_can_register(self, counting_factory):
        """Test a factory may register further slots without deadlocking."""
        registry = SlotRegistry()

        def build():
            registry.register_lazy("derived", counting_factory)
            return object()

        registry.register_lazy("root", build)
        registry.get("root")

        assert "derived" in registry


class TestConcurrency:
    """Tests for concurrent registry use."""

    def test_concurrent_get_constructs_once(self, slow_factory):
        """Test racing lookups share one instance."""
        registry = SlotRegistry()
        registry.register_lazy("shared", slow_factory)

        results = race(lambda: registry.get("shared"), 16)

        assert len({id(r) for r in results}) == 1
        assert slow_factory.calls == 1

    def test_concurrent_registration_unique_names(self):
        """Test concurrent registration of distinct names."""
        registry = SlotRegistry()

        with ThreadPoolExecutor(max_workers=10) as executor:
            futures = [
                executor.submit(registry.register_constant, f"const-{i}", i)
                for i in range(100)
            ]
            for f in as_completed(futures):
                f.result()

        assert len(registry) == 100

    def test_concurrent_duplicate_registration(self):
        """Test only one of many racing registrations of a name succeeds."""
        registry = SlotRegistry()
        barrier = threading.Barrier(8)

        def register():
            barrier.wait()
            try:
                registry.register_constant("dup", object())
                return True
            except SlotAlreadyRegisteredError:
                return False

        results = race(register, 8)
        assert results.count(True) == 1


class TestResetAndStats:
    """Tests for reset_all and get_stats."""

    def test_reset_all(self, counting_factory):
        """Test reset_all resets lazy slots and keeps constants."""
        registry = SlotRegistry()
        registry.register_lazy("lazy", counting_factory)
        registry.register_constant("const", "value")
        first = registry.get("lazy")

        registry.reset_all()

        assert registry.get("lazy") is not first
        assert registry.get("const") == "value"

    def test_get_stats(self, counting_factory):
        """Test per-slot stats are reported by name."""
        registry = SlotRegistry()
        registry.register_lazy("lazy", counting_factory)
        registry.register_constant("const", 1)

        stats = registry.get_stats()

        assert stats["lazy"]["initialized"] is False
        assert stats["lazy"]["strategy"] == "lazy"
        assert stats["const"]["strategy"] == "eager"
        assert stats["const"]["construction_count"] == 1

    def test_repr(self):
        """Test string representation."""
        registry = SlotRegistry()
        registry.register_constant("a", 1)
        assert repr(registry) == "SlotRegistry(slots=1)"


class TestDefaultRegistry:
    """Tests for the module-level default registry."""

    def test_get_registry_singleton(self):
        """Test the default registry is shared."""
        assert get_registry() is get_registry()

    def test_reset_registry(self):
        """Test reset_registry drops the default registry."""
        first = get_registry()
        first.register_constant("a", 1)

        reset_registry()

        second = get_registry()
        assert second is not first
        assert "a" not in second

    def test_get_registry_race(self):
        """Test concurrent first access creates one registry."""
        results = race(get_registry, 16)
        assert len({id(r) for r in results}) == 1
