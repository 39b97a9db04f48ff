"""
Tests for the in-memory cache.
"""
import pytest

from storefront.infrastructure.cache.memory_cache import MemoryCache


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_cache(clock: FakeClock) -> MemoryCache:
    return MemoryCache(default_ttl=60, clock=clock)


class TestMemoryCache:
    """Test cases for MemoryCache."""

    @pytest.mark.asyncio
    async def test_set_and_get(self, memory_cache):
        await memory_cache.set("gumroad:list_all", [{"id": "g1"}])

        assert await memory_cache.get("gumroad:list_all") == [{"id": "g1"}]

    @pytest.mark.asyncio
    async def test_missing_key(self, memory_cache):
        assert await memory_cache.get("nothing") is None

    @pytest.mark.asyncio
    async def test_items_expire_after_ttl(self, memory_cache, clock):
        await memory_cache.set("key", "value", ttl=10)

        clock.advance(10)
        assert await memory_cache.get("key") == "value"

        clock.advance(1)
        assert await memory_cache.get("key") is None

    @pytest.mark.asyncio
    async def test_default_ttl(self, memory_cache, clock):
        await memory_cache.set("key", "value")

        clock.advance(61)

        assert await memory_cache.get("key") is None

    @pytest.mark.asyncio
    async def test_zero_ttl_never_expires(self, memory_cache, clock):
        await memory_cache.set("key", "value", ttl=0)

        clock.advance(10 ** 6)

        assert await memory_cache.get("key") == "value"

    @pytest.mark.asyncio
    async def test_values_are_copied(self, memory_cache):
        original = [{"id": "g1"}]
        await memory_cache.set("key", original)
        original.append({"id": "g2"})

        first = await memory_cache.get("key")
        first.append({"id": "g3"})

        assert await memory_cache.get("key") == [{"id": "g1"}]

    @pytest.mark.asyncio
    async def test_clear_namespace(self, memory_cache):
        await memory_cache.set("gumroad:list_all", [1])
        await memory_cache.set("patreon:list_all", [2])

        await memory_cache.clear("gumroad")

        assert await memory_cache.get("gumroad:list_all") is None
        assert await memory_cache.get("patreon:list_all") == [2]

        await memory_cache.clear()
        assert (await memory_cache.get_stats())["keys"] == 0

    @pytest.mark.asyncio
    async def test_stats(self, memory_cache):
        await memory_cache.set("key", "value")
        await memory_cache.get("key")
        await memory_cache.get("other")

        stats = await memory_cache.get_stats()

        assert stats["backend"] == "memory"
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["hit_rate"] == 0.5


class TestGetOrSet:
    """Read-through behaviour shared by every cache strategy."""

    @pytest.mark.asyncio
    async def test_value_function_runs_once(self, memory_cache):
        calls = []

        async def produce():
            calls.append(1)
            return ["fresh"]

        assert await memory_cache.get_or_set("key", produce) == ["fresh"]
        assert await memory_cache.get_or_set("key", produce) == ["fresh"]
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_empty_listing_is_cached(self, memory_cache):
        calls = []

        async def produce():
            calls.append(1)
            return []

        await memory_cache.get_or_set("key", produce)
        await memory_cache.get_or_set("key", produce)

        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_failure_is_not_stored(self, memory_cache):
        async def fail():
            raise RuntimeError("upstream down")

        with pytest.raises(RuntimeError):
            await memory_cache.get_or_set("key", fail)

        assert await memory_cache.get("key") is None
