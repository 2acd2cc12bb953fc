"""
Tests for the concurrent search fan-out.
"""

import asyncio

import pytest

from ..core.errors import UpstreamUnavailable
from ..core.types import SearchQuery
from ..core.utils import Deadline
from ..search.aggregator import SearchAggregator, default_providers
from ..search.providers import DDGProvider, TavilyProvider
from ..search.queries import CURATE, PLAN, queries_for
from .conftest import FakeProvider, make_result

QUERIES = [
    SearchQuery(label="videos", template="best {subject} video courses tutorials", domains=["youtube.com"]),
]


class TestFanOut:

    @pytest.mark.asyncio
    async def test_partial_failure_keeps_surviving_results(self, settings):
        failing = FakeProvider("a", error=RuntimeError("provider down"))
        healthy = FakeProvider("b", results=[
            make_result(f"https://b.com/{i}", f"Rust {i}") for i in range(3)
        ])
        agg = SearchAggregator(providers=[failing, healthy], settings=settings)

        fan = await agg.fan_out("Rust", QUERIES)

        assert len(fan.results) == 3
        assert fan.attempted == 2
        assert len(fan.failures) == 1
        assert fan.failures[0].provider == "a"
        assert "provider down" in fan.failures[0].error

    @pytest.mark.asyncio
    async def test_all_failures_raise_upstream_unavailable(self, settings):
        agg = SearchAggregator(providers=[
            FakeProvider("a", error=RuntimeError("down")),
            FakeProvider("b", error=ConnectionError("refused")),
        ], settings=settings)

        with pytest.raises(UpstreamUnavailable) as exc_info:
            await agg.fan_out("Rust", QUERIES)
        assert exc_info.value.timed_out is False
        assert exc_info.value.http_status == 500

    @pytest.mark.asyncio
    async def test_all_timeouts_are_flagged(self, settings):
        settings.request_timeout_s = 0.05
        agg = SearchAggregator(providers=[FakeProvider("slow", delay=1.0)], settings=settings)

        with pytest.raises(UpstreamUnavailable) as exc_info:
            await agg.fan_out("Rust", QUERIES)
        assert exc_info.value.timed_out is True
        assert exc_info.value.http_status == 504

    @pytest.mark.asyncio
    async def test_one_slow_provider_does_not_block_the_rest(self, settings):
        settings.request_timeout_s = 0.05
        fast = FakeProvider("fast", results=[make_result("https://f.com", "Rust")])
        agg = SearchAggregator(providers=[fast, FakeProvider("slow", delay=1.0)], settings=settings)

        fan = await agg.fan_out("Rust", QUERIES)
        assert [r.url for r in fan.results] == ["https://f.com"]
        assert fan.failures[0].timed_out

    @pytest.mark.asyncio
    async def test_calls_run_concurrently(self, settings):
        started = []
        both_started = asyncio.Event()

        class Barrier(FakeProvider):
            async def search(self, query, depth="basic", max_results=5, domains=None):
                started.append(self.name)
                if len(started) == 2:
                    both_started.set()
                # sequential execution would never get past this
                await asyncio.wait_for(both_started.wait(), timeout=1.0)
                return []

        agg = SearchAggregator(providers=[Barrier("a"), Barrier("b")], settings=settings)
        fan = await agg.fan_out("Rust", QUERIES)
        assert fan.failures == []
        assert sorted(started) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_expired_deadline_fails_every_call(self, settings):
        provider = FakeProvider("a", results=[make_result("https://a.com", "Rust")])
        agg = SearchAggregator(providers=[provider], settings=settings)

        with pytest.raises(UpstreamUnavailable) as exc_info:
            await agg.fan_out("Rust", QUERIES, deadline=Deadline(0))
        assert exc_info.value.timed_out
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_query_parameters_reach_provider_and_results_are_labelled(self, settings):
        provider = FakeProvider("a", results=[make_result("https://a.com", "Rust")])
        agg = SearchAggregator(providers=[provider], settings=settings)

        fan = await agg.fan_out("Rust", queries_for(PLAN))

        queries = [c["query"] for c in provider.calls]
        assert "Rust syllabus curriculum key topics exam" in queries
        assert all(c["domains"] for c in provider.calls)
        assert {r.label for r in fan.results} == {"curriculum", "tips"}
        assert len(fan.for_label("tips")) == 1

    @pytest.mark.asyncio
    async def test_no_providers_is_upstream_unavailable(self, settings):
        agg = SearchAggregator(providers=[], settings=settings)
        with pytest.raises(UpstreamUnavailable):
            await agg.fan_out("Rust", QUERIES)


class TestProviderSelection:

    def test_tavily_only_with_key(self, settings):
        settings.enable_ddg = True
        assert [type(p) for p in default_providers(settings)] == [DDGProvider]

        settings.tavily_api_key = "tvly-test"
        assert [type(p) for p in default_providers(settings)] == [TavilyProvider, DDGProvider]

    def test_ddg_can_be_disabled(self, settings):
        settings.tavily_api_key = "tvly-test"
        settings.enable_ddg = False
        assert [type(p) for p in default_providers(settings)] == [TavilyProvider]


def test_query_catalogue():
    curate = queries_for(CURATE)
    assert [q.label for q in curate] == ["videos", "platforms"]
    assert curate[0].render("Rust") == "best Rust video courses tutorials"
    assert "youtube.com" in curate[0].domains

    with pytest.raises(ValueError):
        queries_for("nonsense")
