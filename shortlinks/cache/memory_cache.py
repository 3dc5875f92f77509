"""
Process-local cache for shortlinks.

Backed by `cachetools`: an LRUCache when no TTL is given, otherwise a TTLCache
(entries expire `ttl` seconds after being written). Lookups never touch I/O,
so the methods are plain functions.
"""

from typing import Optional

from cachetools import LRUCache, TTLCache

from .base import BaseCache


class MemoryCache(BaseCache):
    def __init__(self, maxsize: int = 10000, ttl: Optional[float] = None):
        if maxsize < 1:
            raise ValueError("maxsize must be positive")
        self.maxsize = maxsize
        self.ttl = ttl
        if ttl:
            self._entries = TTLCache(maxsize=maxsize, ttl=ttl)
        else:
            self._entries = LRUCache(maxsize=maxsize)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, short_id: str) -> bool:
        return short_id in self._entries

    def get(self, short_id: str) -> Optional[str]:
        return self._entries.get(short_id)

    def set(self, short_id: str, target_url: str) -> None:
        self._entries[short_id] = target_url

    def clear(self) -> None:
        self._entries.clear()
