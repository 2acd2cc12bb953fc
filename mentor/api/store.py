# mentor/api/store.py
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Protocol, Tuple


@dataclass
class StoredResult:
    principal: str
    kind: str            # "resources" or "plan"
    topic: str
    payload: Dict[str, Any]
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "topic": self.topic,
            "lastUpdated": self.created_at.isoformat(),
            **self.payload,
        }


class ResultStore(Protocol):
    """Per-principal record of curated resources and plans."""

    async def save(self, principal: str, kind: str, topic: str, payload: Dict[str, Any]) -> StoredResult: ...

    async def list(self, principal: str, kind: str) -> List[StoredResult]: ...


class InMemoryResultStore:
    """Process-local store; swap for a database-backed one in deployment."""

    def __init__(self):
        self._items: Dict[Tuple[str, str], List[StoredResult]] = {}

    async def save(self, principal: str, kind: str, topic: str, payload: Dict[str, Any]) -> StoredResult:
        record = StoredResult(principal=principal, kind=kind, topic=topic, payload=payload)
        self._items.setdefault((principal, kind), []).append(record)
        return record

    async def list(self, principal: str, kind: str) -> List[StoredResult]:
        # newest first
        return list(reversed(self._items.get((principal, kind), [])))
