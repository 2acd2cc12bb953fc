from typing import List, Optional, Protocol, Sequence

from ...core.types import SearchResult
from .ddg import DDGProvider
from .tavily import TavilyProvider


class SearchProvider(Protocol):
    name: str

    async def search(
        self,
        query: str,
        depth: str = "basic",
        max_results: int = 5,
        domains: Optional[Sequence[str]] = None,
    ) -> List[SearchResult]: ...


__all__ = ["SearchProvider", "DDGProvider", "TavilyProvider"]
