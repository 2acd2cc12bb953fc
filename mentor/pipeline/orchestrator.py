"""
Curation and study plan pipeline.

cache lookup -> (miss) fan-out search -> filter/dedup/rank -> synthesis -> cache

Concurrent misses for the same key are coalesced so only one of them runs
the upstream calls; the others receive the same result or the same error.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from ..cache.singleflight import SingleFlight
from ..cache.ttl_cache import CacheBackend, TTLCache, normalize_key
from ..config.settings import get_settings
from ..core.errors import InvalidRequest
from ..core.types import CuratedResourceSet, StudyPlan
from ..core.utils import Deadline, Timer, days_until
from ..llm.ollama_client import OllamaClient
from ..search.aggregator import SearchAggregator
from ..search.queries import CURATE, PLAN, queries_for
from ..search.scoring import filter_dedup_rank
from ..synth.invoker import SynthesisInvoker

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StudyPipeline:
    """
    Public entry points: curate_resources() and generate_study_plan().
    """

    def __init__(
        self,
        aggregator: SearchAggregator,
        invoker: SynthesisInvoker,
        cache: Optional[CacheBackend] = None,
        settings=None,
        now: Callable[[], datetime] = _utcnow,
    ):
        self.cfg = settings or get_settings()
        self.aggregator = aggregator
        self.invoker = invoker
        self.cache = cache if cache is not None else TTLCache(
            ttl_seconds=self.cfg.cache_ttl_s,
            max_entries=self.cfg.cache_max_entries,
        )
        self.now = now
        self._flights = SingleFlight()

    def _deadline(self, deadline: Optional[Deadline]) -> Deadline:
        return deadline or Deadline(self.cfg.request_deadline_s)

    @staticmethod
    def _clean_subject(subject: str) -> str:
        subject = " ".join((subject or "").split())
        if not subject:
            raise InvalidRequest("Subject is required")
        return subject

    # ---- curation ----

    async def curate_resources(
        self,
        subject: str,
        deadline: Optional[Deadline] = None,
    ) -> CuratedResourceSet:
        subject = self._clean_subject(subject)
        key = normalize_key(subject, False)

        cached = self.cache.get(key)
        if cached is not None:
            logger.info(f"Cache hit for {key!r}")
            return cached.model_copy(deep=True)

        logger.info(f"Cache miss for {key!r}")
        result, shared = await self._flights.do(
            key, lambda: self._curate_uncached(key, subject, self._deadline(deadline))
        )
        return result.model_copy(deep=True) if shared else result

    async def _curate_uncached(self, key: str, subject: str, deadline: Deadline) -> CuratedResourceSet:
        with Timer(f"curate {subject!r}"):
            fan = await self.aggregator.fan_out(subject, queries_for(CURATE), deadline)
            ranked = filter_dedup_rank(
                fan.results, subject,
                top_k=self.cfg.top_k,
                min_content_chars=self.cfg.min_content_chars,
            )
            curated = await self.invoker.curate(subject, ranked, deadline)
        self.cache.put(key, curated.model_copy(deep=True))
        return curated

    # ---- study plan ----

    async def generate_study_plan(
        self,
        subject: str,
        exam_date: str,
        deadline: Optional[Deadline] = None,
    ) -> StudyPlan:
        subject = self._clean_subject(subject)
        exam_date = (exam_date or "").strip()
        try:
            days = days_until(exam_date, self.now())
        except ValueError as e:
            raise InvalidRequest(f"Invalid exam date: {exam_date!r}") from e
        if days <= 0:
            logger.info(f"Exam date {exam_date} is not in the future ({days} days); planning anyway")

        key = normalize_key(subject, True, exam_date)
        cached = self.cache.get(key)
        if cached is not None:
            logger.info(f"Cache hit for {key!r}")
            return cached.model_copy(deep=True)

        logger.info(f"Cache miss for {key!r}")
        result, shared = await self._flights.do(
            key, lambda: self._plan_uncached(key, subject, exam_date, days, self._deadline(deadline))
        )
        return result.model_copy(deep=True) if shared else result

    async def _plan_uncached(
        self,
        key: str,
        subject: str,
        exam_date: str,
        days: int,
        deadline: Deadline,
    ) -> StudyPlan:
        with Timer(f"plan {subject!r}"):
            fan = await self.aggregator.fan_out(subject, queries_for(PLAN), deadline)
            curriculum = filter_dedup_rank(
                fan.for_label("curriculum"), subject,
                top_k=self.cfg.top_k,
                min_content_chars=self.cfg.min_content_chars,
            )
            tips = filter_dedup_rank(
                fan.for_label("tips"), subject,
                top_k=self.cfg.top_k,
                min_content_chars=self.cfg.min_content_chars,
            )
            plan = await self.invoker.plan(subject, exam_date, days, curriculum, tips, deadline)
        self.cache.put(key, plan.model_copy(deep=True))
        return plan


def build_pipeline(settings=None) -> StudyPipeline:
    """Wire the default providers, Ollama client and TTL cache."""
    cfg = settings or get_settings()
    return StudyPipeline(
        aggregator=SearchAggregator(settings=cfg),
        invoker=SynthesisInvoker(OllamaClient(settings=cfg), settings=cfg),
        settings=cfg,
    )
