# tests/services/test_cache_service.py
import pytest
from typing import List
from unittest.mock import AsyncMock

from redis.exceptions import ConnectionError as RedisConnectionError

from books_reviews.core.cache import InMemoryCacheStore, RedisCacheStore
from books_reviews.core.exceptions import CacheUnavailable, ResourceNotFound
from books_reviews.services.cache_service import CacheService

# Mark all tests in this file as async
pytestmark = pytest.mark.asyncio

TTL = 3600


# ==================== KEYS ====================


@pytest.mark.parametrize(
    "title, filter_name, expected",
    [
        ("Dune", "popular_last_month", "books:popular_last_month:Dune"),
        ("Dune", "", "books::Dune"),
        (None, "popular_last_month", "books:popular_last_month:"),
        (None, None, "books::"),
        ("", "", "books::"),
    ],
)
async def test_listing_key(title, filter_name, expected):
    assert CacheService.listing_key(title, filter_name) == expected


async def test_listing_keys_collide_when_parts_contain_separators():
    assert CacheService.listing_key("b:", "a") == CacheService.listing_key(None, "a:b")


async def test_detail_key():
    assert CacheService.detail_key(42) == "book:42"


# ==================== remember ====================


async def test_remember_computes_once_within_ttl(cache: CacheService, clock):
    producer = AsyncMock(return_value=[1, 2, 3])

    first = await cache.remember("numbers", TTL, producer, schema=List[int])
    clock.advance(TTL - 1)
    second = await cache.remember("numbers", TTL, producer, schema=List[int])

    assert first == second == [1, 2, 3]
    producer.assert_awaited_once()


async def test_remember_recomputes_after_ttl(cache: CacheService, clock):
    producer = AsyncMock(side_effect=[["first"], ["second"]])

    await cache.remember("words", TTL, producer, schema=List[str])
    clock.advance(TTL)
    value = await cache.remember("words", TTL, producer, schema=List[str])

    assert value == ["second"]
    assert producer.await_count == 2


async def test_remember_returns_independent_copies(cache: CacheService):
    producer = AsyncMock(return_value={"tags": ["a"]})

    await cache.remember("doc", TTL, producer, schema=dict)
    first = await cache.remember("doc", TTL, producer, schema=dict)
    first["tags"].append("mutated")
    second = await cache.remember("doc", TTL, producer, schema=dict)

    assert second == {"tags": ["a"]}


async def test_remember_does_not_store_failures(cache: CacheService, cache_store):
    producer = AsyncMock(side_effect=ResourceNotFound(resource_type="Book", resource_id=7))

    with pytest.raises(ResourceNotFound):
        await cache.remember("book:7", TTL, producer, schema=dict)

    assert await cache_store.get("book:7") is None


# ==================== forget ====================


async def test_forget_evicts(cache: CacheService):
    producer = AsyncMock(side_effect=[1, 2])
    await cache.remember("n", TTL, producer, schema=int)

    assert await cache.forget("n") is True
    assert await cache.remember("n", TTL, producer, schema=int) == 2


async def test_forget_absent_key_is_a_no_op(cache: CacheService):
    assert await cache.forget("never-set") is False
    assert await cache.forget("never-set") is False


# ==================== STORES ====================


async def test_in_memory_store_expires_entries(clock):
    store = InMemoryCacheStore(clock=clock)
    await store.set("k", "v", 10)

    clock.advance(9)
    assert await store.get("k") == "v"
    clock.advance(1)
    assert await store.get("k") is None


async def test_in_memory_store_drops_unread_expired_entries_on_write(clock):
    store = InMemoryCacheStore(clock=clock)
    for i in range(1000):
        await store.set(f"books::title-{i}", "[]", 10)

    clock.advance(100)
    await store.set("books::fresh", "[]", 10)

    assert store.keys() == ["books::fresh"]


async def test_redis_store_uses_expiring_set():
    client = AsyncMock()
    store = RedisCacheStore(client)

    await store.set("book:1", "{}", TTL)

    client.set.assert_awaited_once_with("book:1", "{}", ex=TTL)


async def test_unavailable_redis_propagates_without_computing():
    client = AsyncMock()
    client.get.side_effect = RedisConnectionError("Connection refused")
    cache = CacheService(RedisCacheStore(client))
    producer = AsyncMock(return_value=[])

    with pytest.raises(CacheUnavailable):
        await cache.remember("books::", TTL, producer, schema=list)

    producer.assert_not_awaited()


async def test_unavailable_redis_on_delete_propagates():
    client = AsyncMock()
    client.delete.side_effect = RedisConnectionError("Connection refused")
    cache = CacheService(RedisCacheStore(client))

    with pytest.raises(CacheUnavailable):
        await cache.forget("book:1")
