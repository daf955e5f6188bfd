"""Tests for the live endpoint registry."""

import asyncio

import pytest

from autoapi.discovery import SourceEnumerator
from autoapi.exceptions import DiscoveryError, NamingCollisionWarning
from autoapi.host.memory import InMemoryHost
from autoapi.registry import EndpointRegistry, RegistryBuilder


def _registry(host):
    return EndpointRegistry(
        SourceEnumerator(host), RegistryBuilder(table_prefix=host.table_prefix)
    )


@pytest.fixture
def simple_host():
    host = InMemoryHost(table_prefix="wp_")
    host.register_record_type("article")
    host.register_taxonomy("genre")
    host.add_table("wp_orders", [{"id": 1}])
    return host


class TestRebuild:
    """Rebuilding and publishing registries."""

    @pytest.mark.asyncio
    async def test_starts_empty(self, simple_host):
        """No endpoints exist before the first rebuild."""
        registry = _registry(simple_host)
        assert len(registry) == 0
        assert registry.current_registry() == ()
        assert registry.generation == 0
        assert registry.last_rebuilt_at is None

    @pytest.mark.asyncio
    async def test_rebuild_publishes_entries(self, simple_host):
        """A successful rebuild replaces the snapshot."""
        registry = _registry(simple_host)

        assert await registry.rebuild() is True
        assert registry.current_registry() == (
            ("Article", "/auto-api/v1/article"),
            ("Genre", "/auto-api/v1/genre"),
            ("Orders", "/auto-api/v1/orders"),
        )
        assert "orders" in registry
        assert registry.get("orders").source.raw_identifier == "wp_orders"
        assert registry.get("missing") is None
        assert registry.generation == 1
        assert registry.last_rebuilt_at is not None
        assert registry.last_error is None

    @pytest.mark.asyncio
    async def test_rebuild_is_idempotent(self, simple_host):
        """Rebuilding an unchanged host publishes an equal registry."""
        registry = _registry(simple_host)
        await registry.rebuild()
        first = dict(registry.snapshot())
        await registry.rebuild()

        assert dict(registry.snapshot()) == first
        assert registry.generation == 2

    @pytest.mark.asyncio
    async def test_rebuild_reflects_host_changes(self, simple_host):
        """Dropped tables disappear and new ones appear."""
        registry = _registry(simple_host)
        await registry.rebuild()

        simple_host.drop_table("wp_orders")
        simple_host.add_table("wp_invoices")
        await registry.rebuild()

        assert "orders" not in registry
        assert "invoices" in registry

    @pytest.mark.asyncio
    async def test_snapshot_is_read_only(self, simple_host):
        """Published snapshots cannot be mutated by readers."""
        registry = _registry(simple_host)
        await registry.rebuild()
        with pytest.raises(TypeError):
            registry.snapshot()["x"] = None

    @pytest.mark.asyncio
    async def test_old_snapshot_survives_rebuild(self, simple_host):
        """A snapshot taken before a rebuild keeps its contents."""
        registry = _registry(simple_host)
        await registry.rebuild()
        before = registry.snapshot()

        simple_host.drop_table("wp_orders")
        await registry.rebuild()

        assert "orders" in before
        assert "orders" not in registry.snapshot()

    @pytest.mark.asyncio
    async def test_collisions_are_recorded(self):
        """last_collisions lists the names taken over in the last build."""
        host = InMemoryHost(table_prefix="wp_")
        host.register_taxonomy("widgets")
        host.add_table("wp_widgets")
        registry = _registry(host)

        with pytest.warns(NamingCollisionWarning):
            await registry.rebuild()

        assert len(registry) == 1
        assert [c.short_name for c in registry.last_collisions] == ["widgets"]


class TestDiscoveryFailure:
    """Behaviour when enumeration fails."""

    @pytest.mark.asyncio
    async def test_first_failure_leaves_registry_empty(self):
        """Failing before any success publishes nothing."""
        registry = _registry(InMemoryHost(available=False))

        assert await registry.rebuild() is False
        assert len(registry) == 0
        assert isinstance(registry.last_error, DiscoveryError)
        assert registry.generation == 0

    @pytest.mark.asyncio
    async def test_failure_keeps_previous_registry(self, simple_host):
        """The last good registry stays in place on failure."""
        registry = _registry(simple_host)
        await registry.rebuild()
        good = registry.current_registry()

        simple_host.available = False
        assert await registry.rebuild() is False
        assert registry.current_registry() == good
        assert registry.last_error is not None

        simple_host.available = True
        assert await registry.rebuild() is True
        assert registry.last_error is None


class TestConcurrency:
    """Serialized rebuilds."""

    @pytest.mark.asyncio
    async def test_concurrent_rebuilds_are_serialized(self, simple_host):
        """Only one enumeration runs at a time."""
        registry = _registry(simple_host)
        active = 0
        peak = 0
        original = registry.enumerator.enumerate

        async def slow_enumerate():
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            try:
                return await original()
            finally:
                active -= 1

        registry.enumerator.enumerate = slow_enumerate
        results = await asyncio.gather(*(registry.rebuild() for _ in range(5)))

        assert results == [True] * 5
        assert peak == 1
        assert registry.generation == 5
        assert not registry.rebuilding

    @pytest.mark.asyncio
    async def test_readers_never_see_partial_registry(self, simple_host):
        """Snapshots read during rebuilds are always complete."""
        registry = _registry(simple_host)
        await registry.rebuild()
        expected = len(registry)
        seen = []

        async def reader():
            for _ in range(20):
                seen.append(len(registry.snapshot()))
                await asyncio.sleep(0)

        await asyncio.gather(reader(), registry.rebuild(), registry.rebuild())
        assert set(seen) == {expected}


class TestListeners:
    """Publication listeners."""

    @pytest.mark.asyncio
    async def test_sync_and_async_listeners(self, simple_host):
        """Both plain and coroutine listeners receive the snapshot."""
        registry = _registry(simple_host)
        received = []

        def sync_listener(snapshot):
            received.append(("sync", len(snapshot)))

        async def async_listener(snapshot):
            received.append(("async", len(snapshot)))

        registry.add_listener(sync_listener)
        registry.add_listener(async_listener)
        await registry.rebuild()

        assert received == [("sync", 3), ("async", 3)]

    @pytest.mark.asyncio
    async def test_failing_listener_does_not_break_rebuild(self, simple_host):
        """Listener errors are logged and later listeners still run."""
        registry = _registry(simple_host)
        calls = []

        def broken(snapshot):
            raise RuntimeError("boom")

        registry.add_listener(broken)
        registry.add_listener(lambda snapshot: calls.append(len(snapshot)))

        assert await registry.rebuild() is True
        assert calls == [3]

    @pytest.mark.asyncio
    async def test_listeners_not_called_on_failure(self):
        """Nothing is published, so nothing is announced."""
        registry = _registry(InMemoryHost(available=False))
        calls = []
        registry.add_listener(lambda snapshot: calls.append(snapshot))

        await registry.rebuild()
        assert calls == []


class ExplodingTablesHost(InMemoryHost):
    """In-memory host whose table listing can be switched to a driver crash."""

    exploding = False

    async def list_all_tables(self):
        if self.exploding:
            raise RuntimeError("driver exploded")
        return await super().list_all_tables()


class TestUnexpectedHostErrors:
    """Exceptions outside the host error hierarchy during rebuild."""

    @pytest.mark.asyncio
    async def test_unexpected_error_is_contained(self):
        """A crashing host call fails the rebuild without raising."""
        host = ExplodingTablesHost(table_prefix="wp_")
        host.register_taxonomy("genre")
        host.add_table("wp_orders")
        registry = _registry(host)
        assert await registry.rebuild() is True
        good = registry.current_registry()

        host.exploding = True
        assert await registry.rebuild() is False

        assert registry.current_registry() == good
        assert isinstance(registry.last_error, DiscoveryError)
        assert isinstance(registry.last_error.__cause__, RuntimeError)
        assert registry.generation == 1

    @pytest.mark.asyncio
    async def test_unexpected_builder_error_is_contained(self, simple_host):
        """Errors raised while building entries are wrapped too."""
        registry = _registry(simple_host)

        def broken_build(descriptors):
            raise ValueError("bad descriptor")

        registry.builder.build_report = broken_build
        assert await registry.rebuild() is False
        assert isinstance(registry.last_error, DiscoveryError)
        assert "ValueError" in registry.last_error.message
        assert len(registry) == 0


class TestSkippedSources:
    """Sources that cannot be served."""

    @pytest.mark.asyncio
    async def test_unroutable_table_is_skipped(self, simple_host):
        """Tables whose name would form a route template get no endpoint."""
        simple_host.add_table("wp_{x}")
        registry = _registry(simple_host)

        assert await registry.rebuild() is True
        assert "{x}" not in registry
        assert len(registry) == 3
        assert [d.raw_identifier for d in registry.last_skipped] == ["wp_{x}"]
