"""
LinkManager module for shortlinks.

Responsibilities:
    - Allocate collision-free random short IDs, growing the ID length when a
      whole batch of candidates is already taken
    - Resolve short IDs through an ordered chain of caches, falling back to the backend
    - Write resolved URLs back into every cache and refresh the last access time
    - Delegate maintenance (access-time refresh, cleanup) to the backend

Design notes:
    - Backend and caches are injected; each method may be sync or async.
    - Side effects that need not block the caller (cache writes, access-time
      refresh, length-change propagation) go to an optional `wait_until` sink.
      Without a sink they are awaited inline. `_dispatch` is the only place
      that makes this decision.
    - The short-ID length only grows. It is shared by every call on the manager;
      the backend's own uniqueness constraint is the final guard against two
      concurrent creators picking the same ID.
    - Cache faults are fail-open: they are logged and the next layer is asked.
      Backend faults always propagate.
"""

import inspect
import logging
import threading
from datetime import datetime
from typing import Any, Awaitable, Callable, Optional, Sequence

from ..cache.base import BaseCache
from ..config import settings
from ..exceptions import ShortIdExhaustedError
from ..storage.base import BaseBackend
from .ids import generate_unique_short_ids

logger = logging.getLogger(__name__)

WaitUntil = Callable[[Awaitable[Any]], None]
LengthCallback = Callable[[int], Any]


async def _resolve(value: Any) -> Any:
    """Await `value` if it is awaitable, otherwise return it as is."""
    if inspect.isawaitable(value):
        return await value
    return value


class LinkManager:
    """
    Coordinates short-ID allocation and lookup for short links.
    """

    def __init__(
        self,
        backend: BaseBackend,
        caches: Optional[Sequence[BaseCache]] = None,
        short_id_length: Optional[int] = None,
        on_short_id_length_updated: Optional[LengthCallback] = None,
        wait_until: Optional[WaitUntil] = None,
        update_access_on_get: Optional[bool] = None,
        batch_size: Optional[int] = None,
        max_rounds: Optional[int] = None,
    ):
        """
        Initialize LinkManager with a backend and optional caches.

        Args:
            backend (BaseBackend): Durable store of record.
            caches (Optional[Sequence[BaseCache]]): Caches in priority order (first is asked first).
            short_id_length (Optional[int]): Initial short-ID length (default: settings.ID_LENGTH).
            on_short_id_length_updated (Optional[LengthCallback]): Called with the new length
                whenever it grows, so the host can persist it.
            wait_until (Optional[WaitUntil]): Sink for deferred awaitables (see deferred.py).
            update_access_on_get (Optional[bool]): Refresh last access time on a successful
                lookup (default: settings.UPDATE_ACCESS_ON_GET).
            batch_size (Optional[int]): Candidates generated per round (default: settings.BATCH_SIZE).
            max_rounds (Optional[int]): Rounds before giving up (default: settings.MAX_ROUNDS).

        Raises:
            ValueError: If a length, batch size or round count is below 1.
        """
        self.backend = backend
        self.caches = list(caches or [])
        self.on_short_id_length_updated = on_short_id_length_updated
        self.wait_until = wait_until
        self.update_access_on_get = (
            settings.UPDATE_ACCESS_ON_GET if update_access_on_get is None else update_access_on_get
        )
        self.batch_size = settings.BATCH_SIZE if batch_size is None else batch_size
        self.max_rounds = settings.MAX_ROUNDS if max_rounds is None else max_rounds
        length = settings.ID_LENGTH if short_id_length is None else short_id_length

        if length < 1:
            raise ValueError("short_id_length must be at least 1")
        if self.batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        if self.max_rounds < 1:
            raise ValueError("max_rounds must be at least 1")

        self._short_id_length = length
        self._length_lock = threading.Lock()
        self.initialised = False

    @property
    def short_id_length(self) -> int:
        """Current length of newly allocated short IDs. Never decreases."""
        return self._short_id_length

    async def init(self) -> None:
        """Run the backend's optional `init()` once."""
        if self.initialised:
            return
        init = getattr(self.backend, "init", None)
        if init is not None:
            await _resolve(init())
        self.initialised = True

    # ---------------------------------------------------------------------
    # Internal helpers
    # ---------------------------------------------------------------------
    async def _dispatch(self, result: Any) -> None:
        """Hand a pending result to `wait_until` if there is one, else await it."""
        if not inspect.isawaitable(result):
            return
        if self.wait_until is not None:
            self.wait_until(result)
        else:
            await result

    def _grow_short_id_length(self) -> int:
        with self._length_lock:
            self._short_id_length += 1
            return self._short_id_length

    async def _ensure_cache_initialised(self, cache: BaseCache) -> bool:
        if getattr(cache, "initialised", False):
            return True
        try:
            init = getattr(cache, "init", None)
            if init is not None:
                await _resolve(init())
        except Exception:
            logger.warning("Cache %s failed to initialise; skipping it", type(cache).__name__, exc_info=True)
            return False
        cache.initialised = True
        return True

    async def _cache_get(self, cache: BaseCache, short_id: str) -> Optional[str]:
        if not await self._ensure_cache_initialised(cache):
            return None
        try:
            return await _resolve(cache.get(short_id))
        except Exception:
            logger.warning("Cache %s lookup failed for %r", type(cache).__name__, short_id, exc_info=True)
            return None

    async def _cache_set(self, cache: BaseCache, short_id: str, target_url: str) -> None:
        if not await self._ensure_cache_initialised(cache):
            return
        try:
            await _resolve(cache.set(short_id, target_url))
        except Exception:
            logger.warning("Cache %s write failed for %r", type(cache).__name__, short_id, exc_info=True)

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------
    async def create_short_link(self, target_url: str) -> str:
        """
        Allocate a new short ID for `target_url` and store the mapping.

        Rules:
            - Each round generates a batch of distinct candidates at the current
              length and asks the backend which of them already exist.
            - The first free candidate (batch order) wins.
            - If all candidates are taken, the length grows by one and
              `on_short_id_length_updated` is notified before the next round.
            - The insert is always awaited: the ID exists before it is returned.

        Args:
            target_url (str): URL to link to. Not validated.

        Returns:
            str: The new short ID.

        Raises:
            ShortIdExhaustedError: If every round collided.
            BackendError: Propagated from the backend, e.g. ShortIdAlreadyExistsError
                when a concurrent creator won the race for the same ID.
        """
        await self.init()

        short_id = None
        for round_no in range(1, self.max_rounds + 1):
            length = self.short_id_length
            candidates = generate_unique_short_ids(self.batch_size, length)
            existing = set(await _resolve(self.backend.check_short_ids_exist(candidates)))
            short_id = next((c for c in candidates if c not in existing), None)
            if short_id is not None:
                logger.debug("Allocated short ID of length %d in round %d", length, round_no)
                break

            new_length = self._grow_short_id_length()
            logger.warning(
                "All %d candidate(s) of length %d are taken; growing short ID length to %d",
                len(candidates), length, new_length,
            )
            if self.on_short_id_length_updated is not None:
                await self._dispatch(self.on_short_id_length_updated(new_length))

        if short_id is None:
            raise ShortIdExhaustedError(self.max_rounds, self.short_id_length)

        await _resolve(self.backend.create_short_link(short_id, target_url))
        return short_id

    async def get_target_url(self, short_id: str) -> Optional[str]:
        """
        Resolve `short_id` to its target URL.

        Flow:
            1) Ask each cache in order; stop at the first hit.
            2) On a miss everywhere, ask the backend.
            3) On a hit (cache or backend): refresh the last access time if enabled,
               and write the URL into every cache. Both are deferred when a
               `wait_until` sink is configured.

        Misses are never cached.

        Returns:
            Optional[str]: The target URL, or None if unknown.

        Raises:
            BackendError: Propagated from the backend. Cache faults are logged only.
        """
        await self.init()

        target_url = None
        for cache in self.caches:
            target_url = await self._cache_get(cache, short_id)
            if target_url is not None:
                logger.debug("Cache hit for %r in %s", short_id, type(cache).__name__)
                break

        if target_url is None:
            target_url = await _resolve(self.backend.get_target_url(short_id))

        if target_url is None:
            return None

        if self.update_access_on_get:
            await self._dispatch(self.backend.update_short_link_last_access_time(short_id))

        for cache in self.caches:
            await self._dispatch(self._cache_set(cache, short_id, target_url))

        return target_url

    async def update_short_link_last_access_time(
        self, short_id: str, accessed_at: Optional[datetime] = None
    ) -> None:
        """Refresh the last access time of `short_id` (default: now, per the backend)."""
        if accessed_at is None:
            await _resolve(self.backend.update_short_link_last_access_time(short_id))
        else:
            await _resolve(self.backend.update_short_link_last_access_time(short_id, accessed_at))

    async def clean_unused_links(self, max_age: int) -> None:
        """Remove links not accessed within the last `max_age` days."""
        await _resolve(self.backend.clean_unused_links(max_age))


async def create_manager(backend: BaseBackend, **kwargs) -> LinkManager:
    """
    Build a LinkManager and run the backend's `init()` before returning it.

    Accepts the same keyword arguments as LinkManager.
    """
    manager = LinkManager(backend, **kwargs)
    await manager.init()
    return manager
