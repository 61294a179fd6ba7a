"""Per-traversal cache and request coalescing.

A :class:`TraversalState` belongs to exactly one expansion. Results are
keyed by ``(operation, path)``; while a call for a key is in flight every
other caller awaits the same future instead of issuing its own request.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

LIST = "list"
PROBE = "probe"


class TraversalState:
    __slots__ = ("_results", "_inflight", "visited", "transport_calls", "_closed")

    def __init__(self) -> None:
        self._results: dict[tuple[str, str], Any] = {}
        self._inflight: dict[tuple[str, str], asyncio.Future[Any]] = {}
        self.visited: set[tuple[int, str]] = set()
        self.transport_calls: int = 0
        self._closed: bool = False

    def cached(self, kind: str, path: str) -> tuple[bool, Any]:
        key = (kind, path)
        if key in self._results:
            return True, self._results[key]
        return False, None

    async def coalesce(
        self, kind: str, path: str, operation: Callable[[str], Awaitable[T]]
    ) -> T:
        """Run ``operation(path)`` at most once at a time for ``(kind, path)``.

        Successful results are cached for the rest of the traversal; failures
        are delivered to every waiter and not cached.
        """
        if self._closed:
            raise RuntimeError("TraversalState is closed")
        key = (kind, path)
        if key in self._results:
            logger.debug("cache hit %s %s", kind, path)
            return self._results[key]

        pending = self._inflight.get(key)
        if pending is None:
            self.transport_calls += 1
            pending = asyncio.ensure_future(operation(path))
            self._inflight[key] = pending
            pending.add_done_callback(lambda fut: self._settle(key, fut))
        else:
            logger.debug("joining in-flight %s %s", kind, path)
        # shield: one waiter being cancelled must not cancel the shared call
        return await asyncio.shield(pending)

    def _settle(self, key: tuple[str, str], fut: asyncio.Future[Any]) -> None:
        if self._inflight.get(key) is fut:
            del self._inflight[key]
        if fut.cancelled():
            return
        # retrieving the exception marks it as observed
        if fut.exception() is None and not self._closed:
            self._results[key] = fut.result()

    @property
    def pending(self) -> int:
        return len(self._inflight)

    def close(self) -> None:
        """Cancel outstanding calls and drop every cached entry."""
        self._closed = True
        for fut in list(self._inflight.values()):
            fut.cancel()
        self._inflight.clear()
        self._results.clear()
        self.visited.clear()
