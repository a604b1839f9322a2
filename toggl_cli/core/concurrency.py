"""
Concurrency Infrastructure.

Named semaphores that bound how many requests run at once against the
Toggl API, plus a helper to run independent coroutines as one unit.

Semaphores:
    Created per name and per event loop. Capacity comes from
    application.yaml under `concurrency.semaphores.<name>` unless the
    caller passes one. Unknown names default to 4.

Usage:
    from toggl_cli.core.concurrency import gather_all, get_semaphore

    async with get_semaphore("workspace_fetch"):
        result = await client.get(url)

    timers, projects = await gather_all(get_recent(), get_projects())
"""

import asyncio
import weakref
from collections.abc import Awaitable
from typing import Any

from toggl_cli.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CAPACITY = 4

_semaphores: "weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, dict[str, asyncio.Semaphore]]" = (
    weakref.WeakKeyDictionary()
)


def get_semaphore(name: str, capacity: int | None = None) -> asyncio.Semaphore:
    """Get a named semaphore for concurrency-limiting API calls.

    Must be called from a running event loop; each loop gets its own
    semaphore so that separate asyncio.run() invocations never share one.
    """
    by_name = _semaphores.setdefault(asyncio.get_running_loop(), {})
    if name not in by_name:
        if capacity is None:
            from toggl_cli.core.config import get_app_config
            semaphore_config = get_app_config().application.concurrency.semaphores
            capacity = getattr(semaphore_config, name, DEFAULT_CAPACITY)
        by_name[name] = asyncio.Semaphore(capacity)
        logger.debug("Semaphore created", extra={"name": name, "capacity": capacity})
    return by_name[name]


def clear_semaphores() -> None:
    """Drop all semaphores."""
    _semaphores.clear()


async def gather_all(*aws: Awaitable[Any]) -> list[Any]:
    """Run awaitables concurrently and return their results in order.

    Uses a TaskGroup, so the first failure cancels the rest. The failing
    exception is re-raised on its own rather than wrapped in an
    ExceptionGroup, so callers handle it like a sequential call.
    """
    try:
        async with asyncio.TaskGroup() as tg:
            tasks = [tg.create_task(_as_coroutine(aw)) for aw in aws]
    except ExceptionGroup as eg:
        first = eg.exceptions[0]
        while isinstance(first, ExceptionGroup):
            first = first.exceptions[0]
        raise first from None
    return [task.result() for task in tasks]


async def _as_coroutine(aw: Awaitable[Any]) -> Any:
    return await aw
