"""
Integration tests for LinkManager wired to the in-memory backend, a memory
cache and the asyncio BackgroundTaskSink.
"""

import re
from datetime import datetime, timedelta, timezone

import pytest

from shortlinks.cache.memory_cache import MemoryCache
from shortlinks.manager.deferred import BackgroundTaskSink
from shortlinks.manager.ids import ALLOWED_CHARS
from shortlinks.manager.link_manager import LinkManager, create_manager
from shortlinks.storage.storage import Storage

BASE62_PATTERN = re.compile(r"^[0-9a-zA-Z]+$")


@pytest.mark.asyncio
async def test_created_links_resolve_to_their_target(manager):
    created = {}
    for i in range(200):
        url = f"https://example.com/{i}"
        short_id = await manager.create_short_link(url)
        assert len(short_id) == manager.short_id_length
        assert BASE62_PATTERN.match(short_id)
        created[short_id] = url

    assert len(created) == 200
    for short_id, url in created.items():
        assert await manager.get_target_url(short_id) == url


@pytest.mark.asyncio
async def test_exhausted_single_char_space_grows_to_two():
    storage = Storage()
    for ch in ALLOWED_CHARS:
        await storage.create_short_link(ch, f"https://taken.example/{ch}")
    lengths = []
    manager = await create_manager(storage, short_id_length=1, on_short_id_length_updated=lengths.append)

    short_id = await manager.create_short_link("https://poto.nz")

    assert len(short_id) == 2
    assert manager.short_id_length == 2
    assert lengths == [2]
    assert await manager.get_target_url(short_id) == "https://poto.nz"


@pytest.mark.asyncio
async def test_missing_id_on_empty_store_is_none(manager):
    assert await manager.get_target_url("does-not-exist") is None


@pytest.mark.asyncio
async def test_stale_cache_value_wins_over_backend(storage, cache, manager):
    short_id = await manager.create_short_link("https://new.example")
    cache.set(short_id, "https://old.example")
    assert await manager.get_target_url(short_id) == "https://old.example"


@pytest.mark.asyncio
async def test_backend_hit_populates_a_newly_configured_cache(storage):
    writer = LinkManager(storage, short_id_length=4)
    short_id = await writer.create_short_link("https://example.com")

    fresh = MemoryCache()
    reader = LinkManager(storage, caches=[fresh], short_id_length=4)
    assert await reader.get_target_url(short_id) == "https://example.com"
    assert fresh.get(short_id) == "https://example.com"


@pytest.mark.asyncio
async def test_background_sink_completes_deferred_writes(storage):
    cache = MemoryCache()
    sink = BackgroundTaskSink()
    manager = await create_manager(storage, caches=[cache], short_id_length=3, wait_until=sink)

    short_id = await manager.create_short_link("https://example.com")
    storage.get_short_link(short_id).last_accessed_at = datetime.now(timezone.utc) - timedelta(days=5)

    assert await manager.get_target_url(short_id) == "https://example.com"
    await sink.drain()

    assert cache.get(short_id) == "https://example.com"
    age = datetime.now(timezone.utc) - storage.get_short_link(short_id).last_accessed_at
    assert age < timedelta(minutes=1)


@pytest.mark.asyncio
async def test_clean_unused_links_keeps_recently_accessed(storage, manager):
    now = datetime.now(timezone.utc)
    ids = {}
    for age in (1, 10, 45, 90):
        short_id = await manager.create_short_link(f"https://example.com/{age}")
        await manager.update_short_link_last_access_time(short_id, now - timedelta(days=age))
        ids[age] = short_id

    await manager.clean_unused_links(30)

    assert storage.get_short_link(ids[1]) is not None
    assert storage.get_short_link(ids[10]) is not None
    assert storage.get_short_link(ids[45]) is None
    assert storage.get_short_link(ids[90]) is None
    assert all(
        link.last_accessed_at >= now - timedelta(days=30) for link in storage.links.values()
    )


@pytest.mark.asyncio
async def test_lookup_rescues_link_from_cleanup(storage, manager, cache):
    short_id = await manager.create_short_link("https://example.com")
    await manager.update_short_link_last_access_time(short_id, datetime.now(timezone.utc) - timedelta(days=60))

    cache.clear()
    await manager.get_target_url(short_id)  # refreshes last access time
    await manager.clean_unused_links(30)
    assert await storage.get_target_url(short_id) == "https://example.com"
