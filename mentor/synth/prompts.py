"""
Prompts for curation and study plan synthesis.

Each prompt ends with an explicit JSON output contract. SCHEMA_VERSION is
bumped whenever the contract changes so cached/stored documents can be told
apart.
"""

from typing import Iterable

from ..core.types import SearchResult

SCHEMA_VERSION = "1"

EXCERPT_CHARS = 300


CURATE_PROMPT = """You are an expert learning advisor curating study resources.

Subject: {subject}

Candidate resources found on the web:
{sources}

Your task:
1. Select the most useful resources for learning {subject}
2. Prefer the candidates above; add well-known resources only if few candidates fit
3. Write a one or two sentence description of what each resource teaches
4. Classify the format (video, course, article, documentation, repository, website)
5. Estimate the difficulty (beginner, intermediate, advanced)

Output contract (schema v{schema_version}): respond with ONLY a JSON object, no commentary:
{{
  "resources": [
    {{
      "title": "string",
      "url": "string",
      "description": "string",
      "format": "string",
      "difficulty": "string"
    }}
  ]
}}
"""


PLAN_PROMPT = """You are an expert study coach creating a personalised study plan.

Subject: {subject}
Exam date: {exam_date}
Days until exam: {days}

Curriculum material:
{curriculum}

Study technique material:
{tips}

Your task:
1. Identify the main topics of {subject} from the curriculum material
2. Spread them across the {days} days available, grouped by week
3. Give each week concrete goals and each day concrete tasks with a duration
4. Finish with practical recommendations drawn from the study technique material
5. If no days remain, produce a short last-minute revision plan

Output contract (schema v{schema_version}): respond with ONLY a JSON object, no commentary:
{{
  "overview": {{
    "subject": "string",
    "duration": "string",
    "examDate": "string",
    "mainTopics": ["string"]
  }},
  "weeklyPlans": [
    {{
      "week": 1,
      "goals": ["string"],
      "dailyTasks": [
        {{"day": "string", "tasks": ["string"], "duration": "string"}}
      ]
    }}
  ],
  "recommendations": ["string"]
}}
"""


def format_excerpts(results: Iterable[SearchResult], max_chars: int = EXCERPT_CHARS) -> str:
    """Numbered source list, each excerpt cut to max_chars."""
    lines = []
    for i, r in enumerate(results, 1):
        excerpt = " ".join((r.content or "").split())[:max_chars]
        lines.append(f"[{i}] {r.title}\nURL: {r.url}\n{excerpt}")
    return "\n\n".join(lines) if lines else "(no sources found)"


def build_curate_prompt(
    subject: str,
    results: Iterable[SearchResult],
    max_chars: int = EXCERPT_CHARS,
) -> str:
    return CURATE_PROMPT.format(
        subject=subject,
        sources=format_excerpts(results, max_chars),
        schema_version=SCHEMA_VERSION,
    )


def build_plan_prompt(
    subject: str,
    exam_date: str,
    days: int,
    curriculum: Iterable[SearchResult],
    tips: Iterable[SearchResult],
    max_chars: int = EXCERPT_CHARS,
) -> str:
    return PLAN_PROMPT.format(
        subject=subject,
        exam_date=exam_date,
        days=days,
        curriculum=format_excerpts(curriculum, max_chars),
        tips=format_excerpts(tips, max_chars),
        schema_version=SCHEMA_VERSION,
    )


def duration_label(days: int) -> str:
    return f"{days} day" if abs(days) == 1 else f"{days} days"
