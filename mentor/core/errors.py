# mentor/core/errors.py
from typing import Optional


class MentorError(Exception):
    """Base class for all pipeline errors."""

    kind = "internal"
    status_code = 500

    def __init__(self, message: str, timed_out: bool = False, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.timed_out = timed_out
        self.detail = detail

    @property
    def http_status(self) -> int:
        return 504 if self.timed_out else self.status_code

    def to_payload(self) -> dict:
        return {"error": self.message, "kind": self.kind}


class InvalidRequest(MentorError):
    """Raised when the subject or exam date cannot be used."""

    kind = "invalid_request"
    status_code = 400


class UpstreamUnavailable(MentorError):
    """Raised when every search sub-query for a request failed."""

    kind = "upstream_unavailable"


class SynthesisInvocationFailed(MentorError):
    """Raised when the generative model call itself errored."""

    kind = "synthesis_failed"


class MalformedSynthesisOutput(MentorError):
    """Raised when the model answered but its output does not fit the schema."""

    kind = "malformed_output"


class RateLimited(MentorError):
    """Raised when a caller exceeds its request allowance."""

    kind = "rate_limited"
    status_code = 429

    def __init__(self, message: str, retry_after: float = 0.0):
        super().__init__(message)
        self.retry_after = retry_after
