# mentor/search/scoring.py
from __future__ import annotations
from typing import Iterable, List
import logging

from ..core.types import SearchResult
from ..core.utils import canonicalize_url

logger = logging.getLogger(__name__)

MIN_CONTENT_CHARS = 100
TOP_K = 5

PROMO_MARKERS = (
    "sponsored", "advertisement", "promo", "coupon", "discount",
    "% off", "buy now",
)


def is_promotional(title: str) -> bool:
    title = (title or "").lower()
    return any(m in title for m in PROMO_MARKERS)


def is_relevant(result: SearchResult, subject: str, min_content_chars: int = MIN_CONTENT_CHARS) -> bool:
    """
    Keep a result only when its title mentions the subject, its content is
    long enough to be useful, and the title is not an ad.
    """
    subject = (subject or "").strip().lower()
    title = (result.title or "").lower()
    if not subject or subject not in title:
        return False
    if len(result.content or "") <= min_content_chars:
        return False
    return not is_promotional(result.title)


def dedupe(results: Iterable[SearchResult]) -> List[SearchResult]:
    """First occurrence per canonical URL wins."""
    seen = set()
    uniq: List[SearchResult] = []
    for r in results:
        key = canonicalize_url(r.url)
        if not key or key in seen:
            continue
        seen.add(key)
        uniq.append(r)
    return uniq


def score_result(result: SearchResult) -> float:
    """
    Relevance plus recency as epoch millis. The timestamp term dominates
    any relevance difference, so newer results always rank first.
    """
    return (result.relevance_score or 0.0) + (result.timestamp or 0.0)


def rank(results: Iterable[SearchResult], top_k: int = TOP_K) -> List[SearchResult]:
    return sorted(results, key=score_result, reverse=True)[:top_k]


def filter_dedup_rank(
    results: Iterable[SearchResult],
    subject: str,
    top_k: int = TOP_K,
    min_content_chars: int = MIN_CONTENT_CHARS,
) -> List[SearchResult]:
    results = list(results)
    kept = [r for r in results if is_relevant(r, subject, min_content_chars)]
    uniq = dedupe(kept)
    top = rank(uniq, top_k)
    logger.info(
        f"Filter/dedup/rank for {subject!r}: {len(results)} raw -> "
        f"{len(kept)} relevant -> {len(uniq)} unique -> {len(top)} kept"
    )
    return top
