# mentor/search/providers/ddg.py
from __future__ import annotations
from typing import List, Optional, Sequence
import asyncio
import logging

from ddgs import DDGS

from ...config.settings import get_settings
from ...core.types import SearchResult

logger = logging.getLogger(__name__)


def site_filter(query: str, domains: Optional[Sequence[str]]) -> str:
    """Express a domain allow-list as DuckDuckGo `site:` terms."""
    if not domains:
        return query
    sites = " OR ".join(f"site:{d}" for d in domains)
    return f"{query} ({sites})"


class DDGProvider:
    """
    DuckDuckGo (ddgs) provider. The client is synchronous, so each
    query runs in a worker thread.
    """

    name = "ddg"

    def __init__(self, settings=None):
        self.cfg = settings or get_settings()

    async def search(
        self,
        query: str,
        depth: str = "basic",
        max_results: int = 5,
        domains: Optional[Sequence[str]] = None,
    ) -> List[SearchResult]:
        # ddgs has no depth knob; "advanced" just asks for more hits
        if depth == "advanced":
            max_results *= 2
        return await asyncio.to_thread(self._search_sync, site_filter(query, domains), max_results)

    def _search_sync(self, query: str, max_results: int) -> List[SearchResult]:
        with DDGS() as ddg:
            raw = list(ddg.text(
                query,
                region=self.cfg.search_region,
                safesearch=self.cfg.safesearch,
                max_results=max_results,
            ))

        out: List[SearchResult] = []
        for r in raw:
            url = r.get("href") or r.get("link") or ""
            if not url:
                continue
            out.append(SearchResult(
                url=url,
                title=r.get("title") or "",
                content=r.get("body") or "",
                source=self.name,
            ))
        return out
