"""Redis backend of the cache manager."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from logging import getLogger
from time import perf_counter
from typing import Any

from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError

from blog_api.configs import file_logger, pool_kwargs
from blog_api.decorators import with_retry

logger = file_logger(getLogger(__name__))


@asynccontextmanager
async def _redis_call(operation: str) -> AsyncIterator[None]:
    # Every backend failure looks like a lost connection to the cache manager
    try:
        yield
    except RedisError as e:
        mssg = f"Redis {operation} failed: {e}"
        raise RedisConnectionError(mssg) from e


class RedisClient:
    """
    Thin async wrapper over a pooled ``redis.asyncio.Redis``.

    Values are plain strings (``decode_responses`` is on in ``pool_kwargs``).
    """

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        self.config = pool_kwargs if config is None else config
        self._pool: ConnectionPool | None = None
        self._redis: Redis | None = None

    @property
    def address(self) -> str:
        return f"{self.config.get('host')}:{self.config.get('port')}"

    @with_retry(max_retries=3, base_delay=0.5)
    async def connect(self) -> None:
        """
        Open the pool and check it answers.

        Raises:
            RedisConnectionError: Redis is still unreachable after retries.
        """
        self._pool = ConnectionPool(**self.config)
        self._redis = Redis(connection_pool=self._pool)
        try:
            async with _redis_call("ping"):
                answered = await self._redis.ping()
        except RedisConnectionError:
            await self.disconnect()
            raise
        if not answered:
            await self.disconnect()
            mssg = f"Redis at {self.address} did not answer PING"
            raise RedisConnectionError(mssg)
        logger.info(f"Connected to Redis at {self.address}")

    async def disconnect(self) -> None:
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None
        if self._pool is not None:
            await self._pool.aclose()
            self._pool = None
            logger.info("Redis pool closed")

    @property
    def client(self) -> Redis:
        if self._redis is None:
            mssg = "RedisClient.connect() has not been awaited"
            raise RuntimeError(mssg)
        return self._redis

    async def get(self, key: str) -> str | None:
        async with _redis_call(f"GET {key}"):
            return await self.client.get(key)

    async def set(self, key: str, value: str, ex: int | None = None) -> bool:
        async with _redis_call(f"SET {key}"):
            return bool(await self.client.set(key, value, ex=ex))

    async def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        async with _redis_call("DEL"):
            return await self.client.delete(*keys)

    async def exists(self, *keys: str) -> int:
        async with _redis_call("EXISTS"):
            return await self.client.exists(*keys)

    async def ttl(self, key: str) -> int:
        async with _redis_call(f"TTL {key}"):
            return await self.client.ttl(key)

    async def ping(self) -> bool:
        async with _redis_call("PING"):
            return bool(await self.client.ping())

    async def info(self) -> dict[str, Any]:
        async with _redis_call("INFO"):
            return dict(await self.client.info())

    async def health_check(self) -> dict[str, Any]:
        """PING round trip in milliseconds plus server version and memory use."""
        started = perf_counter()
        healthy = await self.ping()
        latency_ms = round((perf_counter() - started) * 1000, 2)
        server = await self.info()
        return {
            "status": "healthy" if healthy else "unhealthy",
            "latency_ms": latency_ms,
            "redis_version": server.get("redis_version"),
            "used_memory_human": server.get("used_memory_human"),
        }
