from .app import create_app
from .auth import get_principal
from .ratelimit import RateLimiter, enforce_rate_limit
from .store import InMemoryResultStore, ResultStore, StoredResult

__all__ = ["create_app", "get_principal", "RateLimiter", "enforce_rate_limit", "InMemoryResultStore", "ResultStore", "StoredResult"]
