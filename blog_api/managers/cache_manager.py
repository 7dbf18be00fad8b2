"""Cache manager: Redis when available, an in-process LRU otherwise."""

from logging import getLogger
from typing import Any

from redis.exceptions import ConnectionError as RedisConnectionError

from blog_api.clients.memory_client import MemoryClient
from blog_api.clients.protocols import CacheClientProtocol
from blog_api.clients.redis_client import RedisClient
from blog_api.configs import CacheConfig, file_logger, settings
from blog_api.data import CacheStatistics
from blog_api.errors import (
    BASE_EXCEPTION,
    CacheDeserializationError,
    CacheKeyError,
    CacheSerializationError,
)
from blog_api.utils.cache_serializer import (
    compress,
    decompress,
    deserialize,
    do_compress,
    serialize,
)

logger = file_logger(getLogger(__name__))

CACHE_ERRORS = (RedisConnectionError, *BASE_EXCEPTION)


class CacheManager:
    """
    Namespaced JSON cache in front of a ``CacheClientProtocol`` backend.

    Keys are stored as ``{namespace}:{key}``, behind ``key_prefix`` if set.
    The backend is chosen once in ``initialize``. Backend and codec failures are counted and
    raised as ``CacheKeyError`` so each caller decides how to degrade.
    """

    def __init__(
        self,
        cache_config: CacheConfig | None = None,
        *,
        redis_enabled: bool | None = None,
    ) -> None:
        self.cache_config = cache_config or CacheConfig()
        self.redis_enabled = settings.REDIS_ENABLED if redis_enabled is None else redis_enabled
        self.redis_client = RedisClient()
        self.memory_client = MemoryClient(cleanup_interval=self.cache_config.cleanup_interval)
        self._client: CacheClientProtocol = self.memory_client
        self.is_redis_available = False
        self.statistics = CacheStatistics()

    async def initialize(self) -> None:
        """Use Redis if it is enabled and answers, else the in-memory client."""
        if self.redis_enabled:
            try:
                await self.redis_client.connect()
            except RedisConnectionError as e:
                logger.warning(f"Redis unreachable ({e}); caching in memory instead")
            else:
                self._client = self.redis_client
                self.is_redis_available = True
                logger.info("Cache backend: redis")
                return
        await self.memory_client.start_lifecycle()
        logger.info("Cache backend: in-memory")

    async def shutdown(self) -> None:
        if self.is_redis_available:
            await self.redis_client.disconnect()
        await self.memory_client.close()

    @property
    def backend(self) -> str:
        return "redis" if self.is_redis_available else "in-memory"

    def _build_key(self, key: str, namespace: str | None = None) -> str:
        parts = [self.cache_config.key_prefix, namespace, key]
        return ":".join(part for part in parts if part)

    def _failed(self, action: str, key: str, error: Exception) -> CacheKeyError:
        self.statistics.record("errors")
        logger.warning(f"Cache {action} failed for {key}: {error}")
        return CacheKeyError(f"Cache {action} failed for {key}")

    async def get(self, key: str, namespace: str | None = None) -> Any | None:
        """
        Decoded value under ``key``, or None when absent or expired.

        Raises:
            CacheKeyError: The backend failed or the stored text is unreadable.
        """
        full_key = self._build_key(key, namespace)
        try:
            raw = await self._client.get(full_key)
            value = None if raw is None else deserialize(decompress(raw))
        except (*CACHE_ERRORS, CacheDeserializationError) as e:
            raise self._failed("get", full_key, e) from e
        self.statistics.record("misses" if raw is None else "hits")
        return value

    async def set(
        self,
        key: str,
        value: object,
        ttl: int | None = None,
        namespace: str | None = None,
    ) -> bool:
        """
        Encode and store ``value``.

        Args:
            key: Key below the prefix and namespace.
            value: Anything orjson can encode.
            ttl: Seconds to live; ``default_ttl`` when omitted, never above ``max_ttl``.
            namespace: Optional key namespace.

        Raises:
            CacheKeyError: The value could not be encoded or the backend failed.
        """
        full_key = self._build_key(key, namespace)
        config = self.cache_config
        expires_in = min(config.default_ttl if ttl is None else ttl, config.max_ttl)
        try:
            text = serialize(value)
            if config.compression_enabled and do_compress(text, config.compression_threshold):
                text = compress(text)
            stored = await self._client.set(full_key, text, ex=expires_in)
        except (*CACHE_ERRORS, CacheSerializationError) as e:
            raise self._failed("set", full_key, e) from e
        self.statistics.record("sets")
        return stored

    async def delete(self, *keys: str, namespace: str | None = None) -> int:
        full_keys = [self._build_key(key, namespace) for key in keys]
        try:
            removed = await self._client.delete(*full_keys)
        except CACHE_ERRORS as e:
            raise self._failed("delete", ", ".join(full_keys), e) from e
        if removed:
            self.statistics.record("deletes")
        return removed

    async def exists(self, *keys: str, namespace: str | None = None) -> int:
        full_keys = [self._build_key(key, namespace) for key in keys]
        try:
            return await self._client.exists(*full_keys)
        except CACHE_ERRORS as e:
            raise self._failed("exists", ", ".join(full_keys), e) from e

    async def ttl(self, key: str, namespace: str | None = None) -> int:
        """Seconds left for ``key``; -1 without expiry, -2 when missing."""
        full_key = self._build_key(key, namespace)
        try:
            return await self._client.ttl(full_key)
        except CACHE_ERRORS as e:
            raise self._failed("ttl", full_key, e) from e

    async def ping(self) -> bool:
        try:
            return await self._client.ping()
        except CACHE_ERRORS as e:
            logger.warning(f"Cache ping failed: {e}")
            return False

    async def health_check(self) -> dict[str, Any]:
        """Backend name, reachability and counters, shaped like ``CacheHealthResponse``."""
        report: dict[str, Any] = {
            "backend": self.backend,
            "statistics": self.statistics.to_dict(),
        }
        try:
            if self.is_redis_available:
                report |= await self.redis_client.health_check()
            else:
                report["status"] = "healthy" if await self.memory_client.ping() else "unhealthy"
                report["info"] = await self.memory_client.info()
        except CACHE_ERRORS as e:
            report |= {"status": "unhealthy", "error": str(e)}
        return report
