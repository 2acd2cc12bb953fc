"""
Tests for the TTL cache, key normalisation and singleflight.
"""

import asyncio
import threading

import pytest

from ..cache.singleflight import SingleFlight
from ..cache.ttl_cache import TTLCache, normalize_key


class TestTTLCache:
    """Expiry and capacity behaviour"""

    def test_get_within_ttl_returns_value(self, clock):
        cache = TTLCache(ttl_seconds=60, clock=clock)
        cache.put("k", {"a": 1})
        clock.advance(59.9)
        assert cache.get("k") == {"a": 1}

    def test_get_at_or_after_ttl_is_absent(self, clock):
        cache = TTLCache(ttl_seconds=60, clock=clock)
        cache.put("k", "v")
        clock.advance(60)
        assert cache.get("k") is None
        # stale entry was dropped on lookup
        assert len(cache) == 0

    def test_missing_key(self, clock):
        cache = TTLCache(ttl_seconds=60, clock=clock)
        assert cache.get("nope") is None

    def test_put_overwrites_and_refreshes(self, clock):
        cache = TTLCache(ttl_seconds=60, clock=clock)
        cache.put("k", "old")
        clock.advance(50)
        cache.put("k", "new")
        clock.advance(50)
        assert cache.get("k") == "new"

    def test_default_ttl_is_thirty_minutes(self):
        assert TTLCache().ttl == 1800

    def test_capacity_evicts_least_recently_used(self, clock):
        cache = TTLCache(ttl_seconds=60, max_entries=2, clock=clock)
        cache.put("a", 1)
        cache.put("b", 2)
        cache.get("a")          # a is now most recent
        cache.put("c", 3)
        assert cache.get("b") is None
        assert cache.get("a") == 1
        assert cache.get("c") == 3
        assert cache.stats()["evicted"] == 1

    def test_capacity_prefers_dropping_expired(self, clock):
        cache = TTLCache(ttl_seconds=10, max_entries=2, clock=clock)
        cache.put("old", 1)
        clock.advance(5)
        cache.put("fresh", 2)
        clock.advance(6)        # "old" is now stale
        cache.put("newest", 3)
        assert cache.get("fresh") == 2
        assert cache.get("newest") == 3
        assert cache.stats()["evicted"] == 0

    def test_unbounded_when_no_capacity(self, clock):
        cache = TTLCache(ttl_seconds=60, max_entries=None, clock=clock)
        for i in range(1000):
            cache.put(str(i), i)
        assert len(cache) == 1000

    def test_evict_and_clear(self, clock):
        cache = TTLCache(ttl_seconds=60, clock=clock)
        cache.put("a", 1)
        cache.put("b", 2)
        assert cache.evict("a") is True
        assert cache.evict("a") is False
        cache.clear()
        assert len(cache) == 0

    def test_stats_count_hits_and_misses(self, clock):
        cache = TTLCache(ttl_seconds=60, clock=clock)
        cache.put("a", 1)
        cache.get("a")
        cache.get("b")
        stats = cache.stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["size"] == 1

    def test_concurrent_puts_from_threads(self):
        cache = TTLCache(ttl_seconds=60, max_entries=None)

        def writer(offset):
            for i in range(200):
                cache.put(f"{offset}-{i}", i)
                cache.get(f"{offset}-{i}")

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(cache) == 8 * 200


class TestNormalizeKey:
    """Cache key derivation"""

    def test_case_and_whitespace_insensitive(self):
        assert normalize_key("Python", False) == normalize_key(" python ", False)
        assert normalize_key("Machine  Learning", False) == normalize_key("machine learning", False)

    def test_plan_flag_separates_keys(self):
        assert normalize_key("python", False) != normalize_key("python", True, "2026-12-01")

    def test_exam_date_is_part_of_plan_key(self):
        a = normalize_key("Python", True, "2026-12-01")
        b = normalize_key("python ", True, " 2026-12-01")
        c = normalize_key("python", True, "2026-12-02")
        assert a == b
        assert a != c

    def test_deterministic(self):
        assert normalize_key("Rust", False) == normalize_key("Rust", False)


class TestSingleFlight:
    """Coalescing of concurrent identical work"""

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_execution(self):
        flights = SingleFlight()
        calls = 0
        release = asyncio.Event()

        async def work():
            nonlocal calls
            calls += 1
            await release.wait()
            return "done"

        first = asyncio.create_task(flights.do("k", work))
        await asyncio.sleep(0)
        second = asyncio.create_task(flights.do("k", work))
        await asyncio.sleep(0)
        assert flights.in_flight("k")
        release.set()

        (v1, shared1), (v2, shared2) = await asyncio.gather(first, second)
        assert v1 == v2 == "done"
        assert calls == 1
        assert (shared1, shared2) == (False, True)
        assert not flights.in_flight("k")

    @pytest.mark.asyncio
    async def test_errors_reach_every_caller(self):
        flights = SingleFlight()
        release = asyncio.Event()

        async def work():
            await release.wait()
            raise RuntimeError("boom")

        first = asyncio.create_task(flights.do("k", work))
        await asyncio.sleep(0)
        second = asyncio.create_task(flights.do("k", work))
        await asyncio.sleep(0)
        release.set()

        results = await asyncio.gather(first, second, return_exceptions=True)
        assert all(isinstance(r, RuntimeError) for r in results)

    @pytest.mark.asyncio
    async def test_sequential_calls_run_again(self):
        flights = SingleFlight()
        calls = 0

        async def work():
            nonlocal calls
            calls += 1
            return calls

        assert (await flights.do("k", work))[0] == 1
        assert (await flights.do("k", work))[0] == 2

    @pytest.mark.asyncio
    async def test_cancelling_the_first_caller_does_not_cancel_followers(self):
        flights = SingleFlight()
        calls = 0
        release = asyncio.Event()

        async def work():
            nonlocal calls
            calls += 1
            await release.wait()
            return "done"

        leader = asyncio.create_task(flights.do("k", work))
        await asyncio.sleep(0)
        follower = asyncio.create_task(flights.do("k", work))
        await asyncio.sleep(0)

        leader.cancel()
        with pytest.raises(asyncio.CancelledError):
            await leader
        assert flights.in_flight("k")

        release.set()
        assert await follower == ("done", True)
        assert calls == 1
        assert not flights.in_flight("k")

    @pytest.mark.asyncio
    async def test_work_finishes_when_every_caller_is_cancelled(self):
        flights = SingleFlight()
        finished = asyncio.Event()

        async def work():
            await asyncio.sleep(0.01)
            finished.set()
            return "done"

        caller = asyncio.create_task(flights.do("k", work))
        await asyncio.sleep(0)
        caller.cancel()
        with pytest.raises(asyncio.CancelledError):
            await caller

        await asyncio.wait_for(finished.wait(), timeout=1.0)
        await asyncio.sleep(0)
        assert not flights.in_flight("k")
