"""
Base cache interface for shortlinks.

Caches sit in front of the backend and are consulted in order by the manager.
They are best effort: a miss or a failure only means the next layer is asked.

The manager initialises each cache lazily on first use and records that on the
`initialised` attribute, so `init()` runs once per cache instance under normal
operation. Like backends, methods may be plain functions or coroutines.
"""

from abc import ABC, abstractmethod
from typing import Optional


class BaseCache(ABC):
    """Abstract base class for short-ID → target URL caches."""

    initialised: bool = False

    def init(self) -> None:
        """Prepare the cache (connect, warm, ...). Must be idempotent. Default: nothing."""
        return None

    @abstractmethod  # pragma: no cover
    def get(self, short_id: str) -> Optional[str]:
        """Return the cached target URL, or None on a miss."""
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def set(self, short_id: str, target_url: str) -> None:
        """Cache `target_url` under `short_id`."""
        raise NotImplementedError
