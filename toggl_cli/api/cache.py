"""
Entity Cache.

Process-lifetime read-through memo for entities that do not change during
a run (projects). Unbounded, never invalidated, never persisted.

Concurrent lookups of the same missing key share one fetch: each key has
its own asyncio.Lock and the second caller finds the value already stored.
A fetch that raises stores nothing, so the next lookup tries again.
"""

import asyncio
from collections.abc import Awaitable, Callable, Hashable
from typing import Generic, TypeVar

from toggl_cli.core.logging import get_logger

logger = get_logger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class EntityCache(Generic[K, V]):
    """
    Key-to-value memo with at most one in-flight fetch per key.

    Usage:
        cache: EntityCache[int, Project] = EntityCache("project")
        project = await cache.get_or_fetch(project_id, lambda: fetch_project(project_id))
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._values: dict[K, V] = {}
        self._locks: dict[K, asyncio.Lock] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)

    def get(self, key: K) -> V | None:
        return self._values.get(key)

    def put(self, key: K, value: V) -> None:
        """Store a value observed elsewhere (e.g. from a list call)."""
        self._values[key] = value

    async def get_or_fetch(self, key: K, fetch: Callable[[], Awaitable[V]]) -> V:
        """
        Return the cached value for key, fetching it on first request.

        Args:
            key: Cache key
            fetch: Zero-argument coroutine factory producing the value

        Returns:
            The cached or freshly fetched value
        """
        if key in self._values:
            return self._values[key]

        lock = self._locks.setdefault(key, asyncio.Lock())
        async with lock:
            if key in self._values:
                return self._values[key]
            logger.debug("Cache miss", extra={"cache": self.name, "key": key})
            value = await fetch()
            self._values[key] = value
        self._locks.pop(key, None)
        return value

    def clear(self) -> None:
        self._values.clear()
        self._locks.clear()
