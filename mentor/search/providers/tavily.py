# mentor/search/providers/tavily.py
from __future__ import annotations
from typing import List, Optional, Sequence
import logging

from tavily import AsyncTavilyClient

from ...config.settings import get_settings
from ...core.types import SearchResult
from ...core.utils import to_epoch_millis

logger = logging.getLogger(__name__)


class TavilyProvider:
    """
    Tavily provider using the official async client.
    If no API key is configured, returns empty and the aggregator will rely on others.
    """

    name = "tavily"

    def __init__(self, settings=None, client: Optional[AsyncTavilyClient] = None):
        self.cfg = settings or get_settings()
        self.api_key = self.cfg.tavily_api_key
        self._client = client

    def _get_client(self) -> AsyncTavilyClient:
        if self._client is None:
            self._client = AsyncTavilyClient(api_key=self.api_key)
        return self._client

    async def search(
        self,
        query: str,
        depth: str = "basic",
        max_results: int = 5,
        domains: Optional[Sequence[str]] = None,
    ) -> List[SearchResult]:
        if not self.api_key and self._client is None:
            logger.info("Tavily API key missing; skipping TavilyProvider")
            return []

        resp = await self._get_client().search(
            query,
            search_depth=depth,
            max_results=max_results,
            include_domains=list(domains) if domains else None,
        )

        results: List[SearchResult] = []
        for r in resp.get("results", []):
            url = r.get("url") or ""
            if not url:
                continue
            score = r.get("score")
            results.append(SearchResult(
                url=url,
                title=r.get("title") or "",
                content=r.get("content") or "",
                relevance_score=float(score) if score is not None else None,
                timestamp=to_epoch_millis(r.get("published_date")),
                source=self.name,
            ))
        return results
