#!/usr/bin/env python3
"""
motorlog Metadata Cache

TTL cache for hierarchy lookups (zones, lines, motors, production weeks)
with single-flight request coalescing:

    Absent -> (fetch in flight) -> Fresh -> (ttl elapses) -> Stale -> (fetch in flight) -> ...

- N concurrent callers for an absent/stale key share exactly one fetch.
- Failed fetches are never cached; every waiter gets the error and the next
  call retries.
- Coalescing is per key: a slow fetch never delays other keys.

One instance belongs to one event loop. Check-and-insert on both maps happens
without an await in between, which makes it atomic on that loop.
"""

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Dict, NamedTuple, Optional

from .core.errors import InvalidArgument

logger = logging.getLogger("motorlog.cache")


class CacheEntry(NamedTuple):
    """Cached value; replaced wholesale, never mutated."""
    value: Any
    expires_at: float


def _consume_exception(task: "asyncio.Task") -> None:
    # Waiters may all have gone away; keep asyncio from warning about the error
    if not task.cancelled():
        task.exception()


class MetadataCache:
    """Single-flight TTL cache keyed by opaque strings."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._pending: Dict[str, "asyncio.Task"] = {}
        self._stats = {"hits": 0, "misses": 0, "coalesced": 0, "failures": 0}

    async def get(self, key: str, ttl: float, fetch: Callable[[], Awaitable[Any]]) -> Any:
        """
        Return the cached value for key, fetching it if absent or stale.

        Args:
            key: Cache key, e.g. "zones" or "motors:<zone>:<line>"
            ttl: Seconds the fetched value stays fresh (> 0)
            fetch: Zero-argument coroutine function producing the value

        Returns:
            Cached or freshly fetched value

        Raises:
            InvalidArgument: empty key or non-positive ttl
            Whatever fetch raised, for every caller waiting on that fetch
        """
        if not key:
            raise InvalidArgument("cache key must not be empty")
        if ttl is None or ttl <= 0:
            raise InvalidArgument(f"ttl must be positive, got {ttl}")

        entry = self._entries.get(key)
        if entry is not None and self._clock() < entry.expires_at:
            self._stats["hits"] += 1
            return entry.value

        task = self._pending.get(key)
        if task is None:
            self._stats["misses"] += 1
            logger.debug(f"cache miss for {key}, fetching")
            task = asyncio.ensure_future(self._fill(key, ttl, fetch))
            task.add_done_callback(_consume_exception)
            self._pending[key] = task
        else:
            self._stats["coalesced"] += 1
            logger.debug(f"joining in-flight fetch for {key}")

        # A cancelled caller stops listening; the fetch keeps running for the others
        return await asyncio.shield(task)

    async def _fill(self, key: str, ttl: float, fetch: Callable[[], Awaitable[Any]]) -> Any:
        try:
            value = await fetch()
        except Exception as e:
            self._stats["failures"] += 1
            logger.warning(f"fetch for {key} failed, not caching: {e}")
            raise
        else:
            self._entries[key] = CacheEntry(value=value, expires_at=self._clock() + ttl)
            return value
        finally:
            self._pending.pop(key, None)

    def invalidate(self, key: Optional[str] = None) -> None:
        """Drop one entry, or every entry when key is None. In-flight fetches are left alone."""
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)

    def is_pending(self, key: str) -> bool:
        return key in self._pending

    def stats(self) -> Dict[str, int]:
        return {
            **self._stats,
            "entries": len(self._entries),
            "pending": len(self._pending),
        }
