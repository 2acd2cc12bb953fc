# mentor/search/aggregator.py
from __future__ import annotations
from typing import List, Optional, Sequence
import asyncio
import logging
from dataclasses import dataclass, field

from ..config.settings import get_settings
from ..core.errors import UpstreamUnavailable
from ..core.types import SearchQuery, SearchResult
from ..core.utils import Deadline
from .providers import DDGProvider, SearchProvider, TavilyProvider

logger = logging.getLogger(__name__)


@dataclass
class CallFailure:
    provider: str
    label: str
    error: str
    timed_out: bool = False


@dataclass
class FanOutResult:
    results: List[SearchResult] = field(default_factory=list)
    failures: List[CallFailure] = field(default_factory=list)
    attempted: int = 0

    def for_label(self, label: str) -> List[SearchResult]:
        return [r for r in self.results if r.label == label]


def default_providers(settings=None) -> List[SearchProvider]:
    cfg = settings or get_settings()
    providers: List[SearchProvider] = []
    # Include Tavily if a key exists
    if cfg.tavily_api_key:
        providers.append(TavilyProvider(settings=cfg))
    if cfg.enable_ddg:
        providers.append(DDGProvider(settings=cfg))
    return providers


class SearchAggregator:
    """
    Issues every (sub-query, provider) pair concurrently and joins on all of
    them. A failing call contributes nothing; only a total failure is raised.
    """

    def __init__(
        self,
        providers: Optional[Sequence[SearchProvider]] = None,
        settings=None,
    ):
        self.cfg = settings or get_settings()
        self.providers = list(providers) if providers is not None else default_providers(self.cfg)

    async def fan_out(
        self,
        subject: str,
        queries: Sequence[SearchQuery],
        deadline: Optional[Deadline] = None,
    ) -> FanOutResult:
        calls = [(q, p) for q in queries for p in self.providers]
        if not calls:
            raise UpstreamUnavailable("No search providers configured")

        logger.info(
            f"Fan-out for {subject!r}: {len(queries)} queries x "
            f"{[p.name for p in self.providers]}"
        )
        outcomes = await asyncio.gather(
            *[self._run_one(subject, q, p, deadline) for q, p in calls],
            return_exceptions=True,
        )

        merged = FanOutResult(attempted=len(calls))
        for (query, provider), outcome in zip(calls, outcomes):
            if isinstance(outcome, BaseException):
                timed_out = isinstance(outcome, asyncio.TimeoutError)
                error = "timed out" if timed_out else (str(outcome) or type(outcome).__name__)
                logger.warning(f"Provider {provider.name} failed for '{query.label}': {error}")
                merged.failures.append(CallFailure(provider.name, query.label, error, timed_out))
                continue
            merged.results.extend(outcome)

        logger.info(
            f"Aggregator collected {len(merged.results)} raw results "
            f"({len(merged.failures)}/{merged.attempted} calls failed)"
        )

        if len(merged.failures) == merged.attempted:
            timed_out = all(f.timed_out for f in merged.failures)
            raise UpstreamUnavailable(
                "All search providers failed",
                timed_out=timed_out,
                detail="; ".join(f"{f.provider}/{f.label}: {f.error}" for f in merged.failures),
            )
        return merged

    async def _run_one(
        self,
        subject: str,
        query: SearchQuery,
        provider: SearchProvider,
        deadline: Optional[Deadline],
    ) -> List[SearchResult]:
        timeout = self.cfg.request_timeout_s
        if deadline is not None:
            timeout = deadline.timeout_for(timeout)
            if timeout is not None and timeout <= 0:
                raise asyncio.TimeoutError()

        hits = await asyncio.wait_for(
            provider.search(
                query.render(subject),
                depth=query.depth,
                max_results=query.max_results,
                domains=query.domains,
            ),
            timeout=timeout,
        )
        for h in hits:
            h.label = query.label
            h.source = h.source or provider.name
        return hits
