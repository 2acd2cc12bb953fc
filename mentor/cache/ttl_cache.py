"""
In-memory TTL cache for synthesized results.

Entries expire a fixed time after insertion and are evicted lazily when a
lookup finds them stale. An optional capacity bounds memory: once full, the
least recently used entry is dropped. Safe to share between concurrent
requests; the lock is only held for the duration of a single operation.
"""

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Optional, Protocol, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)

DEFAULT_TTL_S = 30 * 60


@dataclass
class CacheEntry(Generic[T]):
    key: str
    value: T
    inserted_at: float


class CacheBackend(Protocol):
    """What the pipeline needs from a cache."""

    def get(self, key: str) -> Optional[Any]: ...

    def put(self, key: str, value: Any) -> None: ...

    def evict(self, key: str) -> bool: ...


class TTLCache(Generic[T]):
    """
    Key -> (value, insertion time) store with expiry-on-read.

    Args:
        ttl_seconds: entry lifetime; an entry aged >= ttl is treated as absent
        max_entries: capacity before LRU eviction; None or 0 means unbounded
        clock: monotonic time source, injectable for tests
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_S,
        max_entries: Optional[int] = 512,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl = float(ttl_seconds)
        self.max_entries = int(max_entries) if max_entries else None
        self._clock = clock
        self._data: "OrderedDict[str, CacheEntry[T]]" = OrderedDict()
        self._lock = threading.Lock()
        self._stats = {"hits": 0, "misses": 0, "expired": 0, "evicted": 0}

    def _is_fresh(self, entry: CacheEntry[T], now: float) -> bool:
        return now - entry.inserted_at < self.ttl

    def get(self, key: str) -> Optional[T]:
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                self._stats["misses"] += 1
                return None
            if not self._is_fresh(entry, self._clock()):
                del self._data[key]
                self._stats["expired"] += 1
                self._stats["misses"] += 1
                return None
            self._data.move_to_end(key)
            self._stats["hits"] += 1
            return entry.value

    def put(self, key: str, value: T) -> None:
        with self._lock:
            now = self._clock()
            self._data.pop(key, None)
            self._data[key] = CacheEntry(key=key, value=value, inserted_at=now)
            self._trim(now)

    def evict(self, key: str) -> bool:
        with self._lock:
            return self._data.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            info: Dict[str, Any] = dict(self._stats)
            info["size"] = len(self._data)
            info["ttl_s"] = self.ttl
            info["max_entries"] = self.max_entries
            return info

    def _trim(self, now: float) -> None:
        # caller holds the lock
        if self.max_entries is None or len(self._data) <= self.max_entries:
            return
        dead = [k for k, e in self._data.items() if not self._is_fresh(e, now)]
        for k in dead:
            del self._data[k]
            self._stats["expired"] += 1
        while len(self._data) > self.max_entries:
            k, _ = self._data.popitem(last=False)
            self._stats["evicted"] += 1
            logger.debug(f"Cache full, evicted {k}")


def normalize_key(subject: str, plan: bool, exam_date: Optional[str] = None) -> str:
    """
    Deterministic cache key from request parameters: lower-cased, trimmed,
    inner whitespace collapsed.
    """
    def norm(value: Optional[str]) -> str:
        return " ".join((value or "").strip().lower().split())

    parts = [norm(subject), "plan" if plan else "curate"]
    if plan:
        parts.append(norm(exam_date))
    return "|".join(parts)
