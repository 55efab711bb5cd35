"""
Tests for the calculation cache and its key builders.
"""

import asyncio

from finplan.services.cache import (
    InMemoryCalculationCache,
    build_budget_cache_key,
    build_projection_cache_key,
    build_scenario_cache_key,
    fingerprint,
    user_prefix,
)


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestCacheKeys:

    def test_budget_key(self):
        assert build_budget_cache_key("u1", 30) == "budget_calc:u1:budget:30"

    def test_projection_key_marks_defaults(self):
        assert build_projection_cache_key("u1", 6) == "budget_calc:u1:projection:6:d:d"
        assert (
            build_projection_cache_key("u1", 12, 1.5, 3)
            == "budget_calc:u1:projection:12:1.5:3"
        )

    def test_scenario_key_hashes_payload(self):
        key = build_scenario_cache_key("u1", "can_i_afford", {"itemCost": 3000})
        prefix, digest = key.rsplit(":", 1)
        assert prefix == "budget_calc:u1:can_i_afford"
        assert len(digest) == 40

    def test_fingerprint_ignores_key_order(self):
        assert fingerprint({"a": 1, "b": 2}) == fingerprint({"b": 2, "a": 1})
        assert fingerprint({"a": 1}) != fingerprint({"a": 2})

    def test_empty_payloads_share_a_fingerprint(self):
        assert fingerprint(None) == fingerprint({})

    def test_custom_prefix(self):
        assert user_prefix("u1", "calc") == "calc:u1:"
        assert build_budget_cache_key("u1", 7, prefix="calc") == "calc:u1:budget:7"


class TestInMemoryCalculationCache:

    def test_set_and_get(self):
        cache = InMemoryCalculationCache()

        async def scenario():
            await cache.set("k", {"value": 1}, ttl_seconds=60)
            return await cache.get("k")

        assert asyncio.run(scenario()) == {"value": 1}

    def test_miss(self):
        cache = InMemoryCalculationCache()
        assert asyncio.run(cache.get("missing")) is None

    def test_entries_expire(self):
        clock = FakeClock()
        cache = InMemoryCalculationCache(clock=clock)
        asyncio.run(cache.set("k", {"value": 1}, ttl_seconds=300))

        clock.now += 299
        assert asyncio.run(cache.get("k")) == {"value": 1}

        clock.now += 1
        assert asyncio.run(cache.get("k")) is None
        assert len(cache) == 0

    def test_delete_prefix_is_scoped_to_user(self):
        cache = InMemoryCalculationCache()

        async def scenario():
            await cache.set("budget_calc:u1:budget:30", {}, 60)
            await cache.set("budget_calc:u1:projection:6:d:d", {}, 60)
            await cache.set("budget_calc:u10:budget:30", {}, 60)
            return await cache.delete_prefix(user_prefix("u1"))

        assert asyncio.run(scenario()) == 2
        assert len(cache) == 1
