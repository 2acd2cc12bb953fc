# mentor/synth/invoker.py
from __future__ import annotations
from typing import List, Optional, Sequence
import logging

from ..config.settings import get_settings
from ..core.errors import SynthesisInvocationFailed
from ..core.types import CuratedResourceSet, SearchResult, StudyPlan
from ..core.utils import Deadline, classify_resource_url
from ..llm.ollama_client import TextGenerator
from .extract import parse_structured
from .prompts import build_curate_prompt, build_plan_prompt, duration_label

logger = logging.getLogger(__name__)


class SynthesisInvoker:
    """
    Folds ranked sources into a prompt, calls the model once and turns the
    reply into a typed document.
    """

    def __init__(self, generator: TextGenerator, settings=None):
        self.cfg = settings or get_settings()
        self.generator = generator

    async def _complete(self, prompt: str, deadline: Optional[Deadline]) -> str:
        timeout = self.cfg.llm_timeout_s
        if deadline is not None:
            timeout = deadline.timeout_for(timeout)
            if timeout is not None and timeout <= 0:
                raise SynthesisInvocationFailed("Request deadline exceeded before synthesis", timed_out=True)

        try:
            response = await self.generator.generate(prompt, timeout=timeout)
        except SynthesisInvocationFailed:
            raise
        except Exception as e:
            logger.error(f"Synthesis invocation failed: {e}")
            raise SynthesisInvocationFailed(f"Model invocation failed: {e}") from e
        return response.content

    async def curate(
        self,
        subject: str,
        sources: Sequence[SearchResult],
        deadline: Optional[Deadline] = None,
    ) -> CuratedResourceSet:
        prompt = build_curate_prompt(subject, sources, self.cfg.excerpt_chars)
        raw = await self._complete(prompt, deadline)
        curated = parse_structured(raw, CuratedResourceSet)
        for resource in curated.resources:
            if not resource.format:
                resource.format = classify_resource_url(resource.url)
        logger.info(f"Synthesized {len(curated.resources)} resources for {subject!r}")
        return curated

    async def plan(
        self,
        subject: str,
        exam_date: str,
        days: int,
        curriculum: List[SearchResult],
        tips: List[SearchResult],
        deadline: Optional[Deadline] = None,
    ) -> StudyPlan:
        prompt = build_plan_prompt(subject, exam_date, days, curriculum, tips, self.cfg.excerpt_chars)
        raw = await self._complete(prompt, deadline)
        plan = parse_structured(raw, StudyPlan)

        overview = plan.overview
        overview.subject = overview.subject or subject
        overview.examDate = overview.examDate or exam_date
        overview.duration = overview.duration or duration_label(days)
        logger.info(f"Synthesized {len(plan.weeklyPlans)}-week plan for {subject!r} ({days} days)")
        return plan
