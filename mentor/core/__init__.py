from .errors import (
    MentorError,
    InvalidRequest,
    UpstreamUnavailable,
    SynthesisInvocationFailed,
    MalformedSynthesisOutput,
    RateLimited,
)
from .types import (
    SearchResult,
    SearchQuery,
    CuratedResource,
    CuratedResourceSet,
    StudyPlan,
)

__all__ = [
    "MentorError",
    "InvalidRequest",
    "UpstreamUnavailable",
    "SynthesisInvocationFailed",
    "MalformedSynthesisOutput",
    "RateLimited",
    "SearchResult",
    "SearchQuery",
    "CuratedResource",
    "CuratedResourceSet",
    "StudyPlan",
]
