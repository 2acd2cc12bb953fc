# mentor/cache/singleflight.py
from __future__ import annotations
import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Tuple

logger = logging.getLogger(__name__)


class SingleFlight:
    """
    Coalesces concurrent calls for the same key: the first caller starts the
    work, every caller (the first included) awaits the same outcome.

    The work runs in its own task, so cancelling one caller never cancels the
    shared execution or the other callers. Nothing is remembered once the
    call settles.
    """

    def __init__(self):
        self._calls: Dict[str, asyncio.Task] = {}

    def in_flight(self, key: str) -> bool:
        return key in self._calls

    def _settled(self, key: str, task: asyncio.Task) -> None:
        if self._calls.get(key) is task:
            del self._calls[key]
        # mark retrieved so a failure with no remaining callers does not warn
        if not task.cancelled():
            task.exception()

    async def do(self, key: str, fn: Callable[[], Awaitable[Any]]) -> Tuple[Any, bool]:
        """
        Run `fn` once per key at a time.
        Returns (value, shared) where shared is True for followers.
        """
        task = self._calls.get(key)
        shared = task is not None
        if shared:
            logger.info(f"Joining in-flight request for {key!r}")
        else:
            task = asyncio.ensure_future(fn())
            self._calls[key] = task
            task.add_done_callback(lambda t: self._settled(key, t))

        return await asyncio.shield(task), shared
