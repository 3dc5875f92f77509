"""
Redis cache for shortlinks.

Stores `target_url` as a plain string under `<key_prefix><short_id>`, with an
optional expiry. The client is created lazily in `init()` unless one is injected,
so constructing the cache never opens a connection.

Example
-------
>>> cache = RedisCache(url="redis://localhost:6379/0", ttl=3600)
>>> await cache.init()
>>> await cache.set("AbC", "https://example.com")
>>> await cache.get("AbC")
'https://example.com'
>>> await cache.aclose()
"""

import logging
from typing import Optional

import redis.asyncio as redis

from .base import BaseCache

logger = logging.getLogger(__name__)


class RedisCache(BaseCache):
    def __init__(
        self,
        url: Optional[str] = None,
        client: Optional[redis.Redis] = None,
        ttl: Optional[int] = None,
        key_prefix: str = "sl:",
    ):
        if url is None and client is None:
            raise ValueError("RedisCache needs either a url or a client")
        self.url = url
        self.client = client
        self.ttl = ttl or None
        self.key_prefix = key_prefix

    def _key(self, short_id: str) -> str:
        return f"{self.key_prefix}{short_id}"

    async def init(self) -> None:
        if self.client is None:
            self.client = redis.from_url(self.url, encoding="utf-8", decode_responses=True)
        await self.client.ping()
        logger.info("Redis cache ready (prefix=%r, ttl=%s)", self.key_prefix, self.ttl)

    async def get(self, short_id: str) -> Optional[str]:
        value = await self.client.get(self._key(short_id))
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return value

    async def set(self, short_id: str, target_url: str) -> None:
        await self.client.set(self._key(short_id), target_url, ex=self.ttl)

    async def aclose(self) -> None:
        if self.client is not None:
            await self.client.aclose()
            self.client = None
            self.initialised = False
