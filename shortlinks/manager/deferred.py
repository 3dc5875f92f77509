"""
Deferred-task sink for asyncio hosts.

A `wait_until` callable for LinkManager: each awaitable handed to it is scheduled
as an independent task, so it keeps running after the primary call returns (and
even if that call is cancelled). Failures are logged, never raised back into
the caller. Call `drain()` on shutdown, or in tests, to wait for pending work.

Example:
    >>> sink = BackgroundTaskSink()
    >>> manager = await create_manager(backend, caches=[MemoryCache()], wait_until=sink)
    >>> await manager.get_target_url("AbC")
    >>> await sink.drain()
"""

import asyncio
import logging
from typing import Any, Awaitable, Set

logger = logging.getLogger(__name__)


class BackgroundTaskSink:
    def __init__(self) -> None:
        # Strong references: the event loop only keeps weak ones
        self._tasks: Set[asyncio.Future] = set()

    def __call__(self, awaitable: Awaitable[Any]) -> None:
        task = asyncio.ensure_future(awaitable)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)

    def __len__(self) -> int:
        return len(self._tasks)

    def _on_done(self, task: asyncio.Future) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Deferred task failed", exc_info=exc)

    async def drain(self) -> None:
        """Wait until every scheduled task, including ones scheduled meanwhile, is done."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
