"""
Unit tests for TTLCache.

Tests cover:
- Hits, misses and expiry
- Namespace invalidation
- Instance isolation
"""

from rebalancer.services import CacheKey, TTLCache


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now


class TestTTLCache:
    """Tests for read-through caching."""

    def test_get_or_compute_caches_value(self):
        """
        GIVEN an empty cache
        WHEN get_or_compute is called twice for the same key
        THEN the computation runs once
        """
        cache = TTLCache(ttl_seconds=60, clock=FakeClock())
        calls = []

        def compute():
            calls.append(1)
            return ["result"]

        key = CacheKey("proposed_trades", ("acct-1",))
        assert cache.get_or_compute(key, compute) == ["result"]
        assert cache.get_or_compute(key, compute) == ["result"]
        assert len(calls) == 1

    def test_entry_expires_after_ttl(self):
        clock = FakeClock()
        cache = TTLCache(ttl_seconds=60, clock=clock)
        key = CacheKey("drift", ("m1",))
        cache.set(key, "old")

        clock.now += 59
        assert cache.get(key) == "old"

        clock.now += 1
        assert cache.get(key) is None
        assert len(cache) == 0

    def test_scopes_are_distinct(self):
        cache = TTLCache()
        cache.set(CacheKey("proposed_trades", ("a",)), 1)

        assert cache.get(CacheKey("proposed_trades", ("b",))) is None
        assert cache.get(CacheKey("drift", ("a",))) is None

    def test_invalidate_namespace(self):
        cache = TTLCache()
        cache.set(CacheKey("proposed_trades", ("a",)), 1)
        cache.set(CacheKey("proposed_trades", ("b",)), 2)
        cache.set(CacheKey("drift", ("m",)), 3)

        cache.invalidate_namespace("proposed_trades")

        assert len(cache) == 1
        assert cache.get(CacheKey("drift", ("m",))) == 3

    def test_invalidate_and_clear(self):
        cache = TTLCache()
        key = CacheKey("drift", ("m",))
        cache.set(key, 3)
        cache.set(CacheKey("other"), 4)

        cache.invalidate(key)
        assert cache.get(key) is None

        cache.clear()
        assert len(cache) == 0

    def test_instances_do_not_share_state(self):
        first, second = TTLCache(), TTLCache()
        first.set(CacheKey("x"), 1)

        assert second.get(CacheKey("x")) is None
