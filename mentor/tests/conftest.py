"""
Pytest configuration and fixtures for the study mentor tests.
"""

import asyncio
import copy
from datetime import datetime, timezone
from typing import List, Optional

import pytest

from ..cache.ttl_cache import TTLCache
from ..config.settings import Settings
from ..core.types import SearchResult
from ..llm.ollama_client import ModelResponse
from ..pipeline.orchestrator import StudyPipeline
from ..search.aggregator import SearchAggregator
from ..synth.invoker import SynthesisInvoker

LONG_CONTENT = (
    "A structured walkthrough covering ownership, borrowing, lifetimes, traits "
    "and error handling, with exercises after every chapter and worked examples."
)

FIXED_NOW = datetime(2026, 10, 18, 9, 0, tzinfo=timezone.utc)


def make_result(
    url: str,
    title: str,
    content: str = LONG_CONTENT,
    relevance: Optional[float] = None,
    timestamp: Optional[float] = None,
    source: str = "fake",
) -> SearchResult:
    return SearchResult(
        url=url,
        title=title,
        content=content,
        relevance_score=relevance,
        timestamp=timestamp,
        source=source,
    )


class FakeProvider:
    """Search provider double recording every query it receives."""

    def __init__(self, name: str, results: Optional[List[SearchResult]] = None,
                 error: Optional[BaseException] = None, delay: float = 0.0):
        self.name = name
        self.results = results or []
        self.error = error
        self.delay = delay
        self.calls: List[dict] = []

    async def search(self, query, depth="basic", max_results=5, domains=None):
        self.calls.append({"query": query, "depth": depth, "max_results": max_results, "domains": domains})
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        # the aggregator tags results in place
        return [copy.copy(r) for r in self.results]


class FakeGenerator:
    """Generative model double returning a canned reply."""

    def __init__(self, reply: str = "", error: Optional[BaseException] = None, delay: float = 0.0):
        self.reply = reply
        self.error = error
        self.delay = delay
        self.prompts: List[str] = []
        self.timeouts: List[Optional[float]] = []

    async def generate(self, prompt, temperature=None, max_tokens=None, timeout=None):
        self.prompts.append(prompt)
        self.timeouts.append(timeout)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return ModelResponse(content=self.reply, model="fake", processing_time=0.0)


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def settings() -> Settings:
    return Settings(
        tavily_api_key="",
        enable_ddg=False,
        request_timeout_s=2.0,
        request_deadline_s=10.0,
        llm_timeout_s=5.0,
        cache_ttl_s=1800,
        cache_max_entries=64,
        auth_required=False,
        jwt_secret="test-secret",
        cors_origins=["http://localhost:3000"],
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_pipeline(settings, clock):
    """Build a pipeline around the given provider and model doubles."""
    def _build(providers, generator, cache=None) -> StudyPipeline:
        return StudyPipeline(
            aggregator=SearchAggregator(providers=providers, settings=settings),
            invoker=SynthesisInvoker(generator, settings=settings),
            cache=cache or TTLCache(ttl_seconds=settings.cache_ttl_s, max_entries=64, clock=clock),
            settings=settings,
            now=lambda: FIXED_NOW,
        )
    return _build


# Markers for different test categories
def pytest_configure(config):
    """Configure pytest markers"""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
