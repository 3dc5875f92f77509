"""
Global pytest fixtures for the shortlinks test suite.

Responsibilities:
    - Provide isolated in-memory backend and cache fixtures for direct testing
    - Provide a LinkManager fixture wired to those fixtures (unit/integration)
    - Provide a recording `wait_until` sink so tests can assert what was deferred
      and then run it
"""

import pytest

from shortlinks.cache.memory_cache import MemoryCache
from shortlinks.manager.link_manager import LinkManager
from shortlinks.storage.storage import Storage


class RecordingSink:
    """A `wait_until` that records awaitables instead of scheduling them."""

    def __init__(self):
        self.pending = []
        self.calls = 0

    def __call__(self, awaitable):
        self.calls += 1
        self.pending.append(awaitable)

    async def run_all(self):
        while self.pending:
            await self.pending.pop(0)

    def close(self):
        # Avoid "coroutine was never awaited" warnings for tests that don't run them
        for awaitable in self.pending:
            close = getattr(awaitable, "close", None)
            if close is not None:
                close()
        self.pending.clear()


@pytest.fixture
def storage() -> Storage:
    """Provide a fresh in-memory backend."""
    return Storage()


@pytest.fixture
def cache() -> MemoryCache:
    """Provide a fresh in-memory cache without expiry."""
    return MemoryCache(maxsize=1000)


@pytest.fixture
def sink():
    s = RecordingSink()
    yield s
    s.close()


@pytest.fixture
def manager(storage: Storage, cache: MemoryCache) -> LinkManager:
    """
    Provide a LinkManager wired to the storage and cache fixtures.

    Side effects are awaited inline (no sink) so assertions can follow directly.
    """
    return LinkManager(backend=storage, caches=[cache], short_id_length=3)
