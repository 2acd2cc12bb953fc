# mentor/search/queries.py
"""
Sub-queries issued per intent. Each runs against every configured provider.
"""
from __future__ import annotations
from typing import Dict, List

from ..core.types import SearchQuery

VIDEO_DOMAINS = [
    "youtube.com", "coursera.org", "udemy.com", "edx.org", "khanacademy.org",
]
PLATFORM_DOMAINS = [
    "github.com", "medium.com", "dev.to", "freecodecamp.org",
    "w3schools.com", "geeksforgeeks.org", "developer.mozilla.org", "docs.python.org",
]
CURRICULUM_DOMAINS = [
    "coursera.org", "edx.org", "khanacademy.org", "ocw.mit.edu", "geeksforgeeks.org",
]
STUDY_TIPS_DOMAINS = [
    "medium.com", "edutopia.org", "collegeinfogeek.com", "reddit.com",
]

CURATE = "curate"
PLAN = "plan"

QUERY_SETS: Dict[str, List[SearchQuery]] = {
    CURATE: [
        SearchQuery(
            label="videos",
            template="best {subject} video courses tutorials",
            depth="advanced",
            max_results=10,
            domains=VIDEO_DOMAINS,
        ),
        SearchQuery(
            label="platforms",
            template="{subject} learning resources documentation guides",
            depth="advanced",
            max_results=10,
            domains=PLATFORM_DOMAINS,
        ),
    ],
    PLAN: [
        SearchQuery(
            label="curriculum",
            template="{subject} syllabus curriculum key topics exam",
            depth="advanced",
            max_results=8,
            domains=CURRICULUM_DOMAINS,
        ),
        SearchQuery(
            label="tips",
            template="how to study {subject} effectively exam preparation tips",
            depth="basic",
            max_results=5,
            domains=STUDY_TIPS_DOMAINS,
        ),
    ],
}


def queries_for(intent: str) -> List[SearchQuery]:
    try:
        return list(QUERY_SETS[intent])
    except KeyError:
        raise ValueError(f"Unknown search intent: {intent}")
