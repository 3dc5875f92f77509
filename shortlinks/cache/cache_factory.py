"""
Cache factory – build the ordered cache chain from config
=========================================================

Environment variables (read at call time)
-----------------------------------------
- SHORTLINKS_CACHES:         comma-separated names, first is consulted first ("memory", "redis")
- SHORTLINKS_REDIS_URL:      Redis URL for "redis"
- SHORTLINKS_CACHE_TTL:      seconds; 0 disables expiry
- SHORTLINKS_CACHE_MAXSIZE:  capacity for "memory"
"""

import logging
import os
from typing import List, Optional, Sequence

from shortlinks.cache.base import BaseCache
from shortlinks.cache.memory_cache import MemoryCache

logger = logging.getLogger(__name__)


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def get_cache(name: str, **kwargs) -> BaseCache:
    """
    Return one cache instance by name.

    Raises
    ------
    ValueError
        Unknown cache name.
    """
    key = name.strip().lower()
    ttl = kwargs.get("ttl")
    if ttl is None:
        ttl = max(0, _int_env("SHORTLINKS_CACHE_TTL", 86400))

    if key == "memory":
        maxsize = kwargs.get("maxsize") or max(1, _int_env("SHORTLINKS_CACHE_MAXSIZE", 10000))
        return MemoryCache(maxsize=maxsize, ttl=ttl or None)

    if key == "redis":
        url = kwargs.get("url") or os.getenv("SHORTLINKS_REDIS_URL", "redis://localhost:6379/0")
        # Local import to avoid hard dependency when not using redis
        from shortlinks.cache.redis_cache import RedisCache
        return RedisCache(url=url, ttl=ttl or None)

    raise ValueError(f"Unknown cache: {name!r}")


def get_caches(names: Optional[Sequence[str]] = None) -> List[BaseCache]:
    """
    Build the cache chain in priority order. Empty when nothing is configured.
    """
    if names is None:
        names = [part for part in os.getenv("SHORTLINKS_CACHES", "").split(",") if part.strip()]
    caches = [get_cache(name) for name in names]
    logger.info("Cache chain: %s", [type(cache).__name__ for cache in caches] or "none")
    return caches
