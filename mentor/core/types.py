# mentor/core/types.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Union

from pydantic import BaseModel, Field


@dataclass
class SearchResult:
    """
    A single raw result from a search provider (Tavily, DuckDuckGo).
    `timestamp` is epoch milliseconds when the provider reports a date.
    """
    url: str
    title: str
    content: str
    relevance_score: Optional[float] = None
    timestamp: Optional[float] = None
    source: str = ""   # provider name e.g. "tavily", "ddg"
    label: str = ""    # sub-query that produced it e.g. "videos"


@dataclass
class SearchQuery:
    """
    One sub-query of a fan-out. `template` is formatted with the subject.
    """
    label: str
    template: str
    depth: str = "basic"
    max_results: int = 5
    domains: List[str] = field(default_factory=list)

    def render(self, subject: str) -> str:
        return self.template.format(subject=subject)


# ---------- Synthesized documents (wire format) ----------

class CuratedResource(BaseModel):
    title: str
    url: str
    description: str = ""
    format: str = ""
    difficulty: str = ""


class CuratedResourceSet(BaseModel):
    resources: List[CuratedResource] = Field(default_factory=list)


class DailyTask(BaseModel):
    day: Union[int, str]
    tasks: List[str] = Field(default_factory=list)
    duration: Union[int, float, str] = ""


class WeeklyPlan(BaseModel):
    week: Union[int, str]
    goals: List[str] = Field(default_factory=list)
    dailyTasks: List[DailyTask] = Field(default_factory=list)


class PlanOverview(BaseModel):
    subject: str = ""
    duration: Union[int, float, str] = ""
    examDate: str = ""
    mainTopics: List[str] = Field(default_factory=list)


class StudyPlan(BaseModel):
    overview: PlanOverview
    weeklyPlans: List[WeeklyPlan] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
