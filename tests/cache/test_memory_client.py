# tests/cache/test_memory_client.py
"""Tests for the in-memory cache client."""

import asyncio
from collections.abc import AsyncGenerator

import pytest

from blog_api.clients.memory_client import MemoryClient


@pytest.fixture
async def memory_client() -> AsyncGenerator[MemoryClient]:
    client = MemoryClient(max_entries=3, cleanup_interval=1)
    await client.start_lifecycle()
    try:
        yield client
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_set_get_delete(memory_client: MemoryClient) -> None:
    """Test a value can be stored, read and removed."""
    await memory_client.set("blog:post:1", "snapshot")
    assert await memory_client.get("blog:post:1") == "snapshot"

    assert await memory_client.delete("blog:post:1", "blog:post:2") == 1
    assert await memory_client.get("blog:post:1") is None


@pytest.mark.asyncio
async def test_exists_counts_keys(memory_client: MemoryClient) -> None:
    await memory_client.set("a", "1")
    await memory_client.set("b", "2")

    assert await memory_client.exists("a", "b", "c") == 2


@pytest.mark.asyncio
async def test_lru_eviction(memory_client: MemoryClient) -> None:
    """Test the least recently used key goes first when the client is full."""
    await memory_client.set("a", "1")
    await memory_client.set("b", "2")
    await memory_client.set("c", "3")
    await memory_client.get("a")

    await memory_client.set("d", "4")

    assert await memory_client.get("b") is None
    assert await memory_client.get("a") == "1"
    assert await memory_client.get("d") == "4"


@pytest.mark.asyncio
async def test_entry_expires(memory_client: MemoryClient) -> None:
    await memory_client.set("key", "value", ex=1)
    assert await memory_client.get("key") == "value"

    await asyncio.sleep(1.1)

    assert await memory_client.get("key") is None
    assert await memory_client.exists("key") == 0


@pytest.mark.asyncio
async def test_ttl_follows_redis_conventions(memory_client: MemoryClient) -> None:
    """Test ttl returns seconds left, -1 without expiry and -2 when missing."""
    await memory_client.set("timed", "v", ex=300)
    await memory_client.set("forever", "v")

    assert 298 <= await memory_client.ttl("timed") <= 300
    assert await memory_client.ttl("forever") == -1
    assert await memory_client.ttl("missing") == -2


@pytest.mark.asyncio
async def test_set_without_expiry_clears_ttl(memory_client: MemoryClient) -> None:
    await memory_client.set("key", "v", ex=300)
    await memory_client.set("key", "v2")

    assert await memory_client.ttl("key") == -1


@pytest.mark.asyncio
async def test_info(memory_client: MemoryClient) -> None:
    await memory_client.set("a", "1")
    await memory_client.set("b", "2")

    info = await memory_client.info()

    assert info["total_keys"] == 2
    assert info["max_entries"] == 3
    assert info["server"] == "In-Memory Cache"


@pytest.mark.asyncio
async def test_ping_reflects_lifecycle() -> None:
    client = MemoryClient()
    assert await client.ping() is False

    await client.start_lifecycle()
    assert await client.ping() is True

    await client.close()
    assert await client.ping() is False
