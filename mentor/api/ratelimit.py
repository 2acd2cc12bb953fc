# mentor/api/ratelimit.py
from collections import defaultdict
from typing import Callable, Dict, List, Optional
import logging
import threading
import time

from fastapi import Depends, Request

from ..core.errors import RateLimited
from .auth import ANONYMOUS, get_principal

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    In-memory sliding window limiter, one request log per caller.

    Args:
        max_requests: allowed requests per window; 0 or None disables limiting
        window_s: window length in seconds
        clock: time source, injectable for tests
    """

    def __init__(self, max_requests: Optional[int], window_s: float, clock: Callable[[], float] = time.monotonic):
        self.max_requests = max_requests or 0
        self.window_s = float(window_s)
        self._clock = clock
        self._requests: Dict[str, List[float]] = defaultdict(list)
        self._lock = threading.Lock()

    def check(self, caller: str) -> float:
        """
        Record a request for `caller`.
        Returns 0 when allowed, otherwise the seconds until a slot frees up.
        """
        if self.max_requests <= 0:
            return 0.0

        with self._lock:
            now = self._clock()
            caller_requests = self._requests[caller]

            # Remove old requests outside window
            caller_requests[:] = [ts for ts in caller_requests if now - ts < self.window_s]

            if len(caller_requests) >= self.max_requests:
                return max(0.0, self.window_s - (now - caller_requests[0]))

            caller_requests.append(now)
            return 0.0

    def reset(self) -> None:
        with self._lock:
            self._requests.clear()


def caller_id(request: Request, principal: str) -> str:
    """Authenticated callers are limited per principal, anonymous ones per client IP."""
    if principal != ANONYMOUS:
        return f"user:{principal}"
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return f"ip:{forwarded.split(',')[0].strip()}"
    return f"ip:{request.client.host if request.client else 'unknown'}"


async def enforce_rate_limit(request: Request, principal: str = Depends(get_principal)) -> None:
    limiter: RateLimiter = request.app.state.rate_limiter
    caller = caller_id(request, principal)
    retry_after = limiter.check(caller)
    if retry_after > 0:
        logger.warning(f"Rate limit exceeded for {caller} on {request.url.path}")
        raise RateLimited(
            "Too many requests, please try again later",
            retry_after=retry_after,
        )
