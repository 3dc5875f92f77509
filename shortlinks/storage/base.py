"""
Base backend interface for shortlinks.

Purpose:
    Define a small, stable contract that multiple durable stores
    (in-memory, PostgreSQL, SQLite, KV stores) can implement without requiring
    changes to the LinkManager.

Sync or async:
    Methods are declared as coroutines, but the manager also accepts plain
    functions: whatever a method returns is awaited only when it is awaitable.

Testing & Coverage:
    These are abstract methods and are not executed directly in tests.
    We annotate them with `# pragma: no cover` so coverage tools don't
    penalize the project for un-runnable abstract declarations.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Sequence


class BaseBackend(ABC):
    """Abstract base class for durable short-link stores."""

    async def init(self) -> None:
        """
        Prepare the backend before first use (e.g. create tables).

        Called once by the manager; must be idempotent. Default: nothing to do.
        """
        return None

    @abstractmethod  # pragma: no cover
    async def get_target_url(self, short_id: str) -> Optional[str]:
        """
        Return the target URL stored for `short_id`, or None when absent.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    async def create_short_link(self, short_id: str, target_url: str) -> None:
        """
        Store a new (short_id, target_url) mapping.

        Raises:
            ShortIdAlreadyExistsError: If `short_id` is already stored. This is
                the final uniqueness backstop for concurrent creators.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    async def check_short_ids_exist(self, short_ids: Sequence[str]) -> List[str]:
        """
        Return the subset of `short_ids` already present in the store.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    async def update_short_link_last_access_time(
        self, short_id: str, accessed_at: Optional[datetime] = None
    ) -> None:
        """
        Set the last access time of `short_id` (default: now). Unknown IDs are ignored.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    async def clean_unused_links(self, max_age: int) -> None:
        """
        Remove links whose last access time is older than `max_age` days.

        "Now" is taken when the cleanup executes.
        """
        raise NotImplementedError
