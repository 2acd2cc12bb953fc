"""
Caching layer for the curation pipeline.

Provides:
- TTLCache: in-memory, TTL-bounded store with optional LRU capacity
- normalize_key: request parameters -> cache key
- SingleFlight: coalesces concurrent misses for the same key
"""

from .ttl_cache import CacheBackend, CacheEntry, TTLCache, normalize_key
from .singleflight import SingleFlight

__all__ = ["CacheBackend", "CacheEntry", "TTLCache", "normalize_key", "SingleFlight"]
