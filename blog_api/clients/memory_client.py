"""In-process cache backend used when Redis is disabled or unreachable."""

from asyncio import CancelledError, Lock, Task, create_task, sleep
from collections import OrderedDict
from contextlib import suppress
from logging import getLogger
from sys import getsizeof
from time import monotonic

from blog_api.configs import file_logger

logger = file_logger(getLogger(__name__))

# Redis TTL replies
NO_EXPIRY = -1
MISSING = -2


class MemoryClient:
    """
    Bounded LRU dictionary with per-key deadlines.

    Expired keys are dropped when touched and by a periodic sweep. Once
    ``max_entries`` is reached, writing a new key evicts the least recently
    used one.
    """

    def __init__(self, max_entries: int = 10_000, cleanup_interval: int = 60) -> None:
        self.max_entries = max_entries
        self.cleanup_interval = cleanup_interval
        self._values: OrderedDict[str, str] = OrderedDict()
        self._deadlines: dict[str, float] = {}
        self._lock = Lock()
        self._sweeper: Task[None] | None = None
        self.is_connected = False

    async def start_lifecycle(self) -> None:
        self.is_connected = True
        if self._sweeper is None:
            self._sweeper = create_task(self._sweep_forever(), name="memory-cache-sweep")

    async def close(self) -> None:
        self.is_connected = False
        if self._sweeper is not None:
            self._sweeper.cancel()
            with suppress(CancelledError):
                await self._sweeper
            self._sweeper = None

    async def _sweep_forever(self) -> None:
        while self.is_connected:
            await sleep(self.cleanup_interval)
            async with self._lock:
                now = monotonic()
                stale = [key for key, deadline in self._deadlines.items() if deadline <= now]
                for key in stale:
                    self._drop(key)
            if stale:
                logger.debug(f"Swept {len(stale)} expired cache key(s)")

    def _drop(self, key: str) -> bool:
        self._deadlines.pop(key, None)
        return self._values.pop(key, None) is not None

    def _live(self, key: str) -> bool:
        """Whether ``key`` is present, dropping it first if its deadline passed."""
        deadline = self._deadlines.get(key)
        if deadline is not None and deadline <= monotonic():
            self._drop(key)
        return key in self._values

    async def get(self, key: str) -> str | None:
        async with self._lock:
            if not self._live(key):
                return None
            self._values.move_to_end(key)
            return self._values[key]

    async def set(self, key: str, value: str, ex: int | None = None) -> bool:
        """Store ``value``; as with Redis SET, omitting ``ex`` removes any expiry."""
        async with self._lock:
            if key not in self._values and len(self._values) >= self.max_entries:
                evicted, _ = self._values.popitem(last=False)
                self._deadlines.pop(evicted, None)
            self._values[key] = value
            self._values.move_to_end(key)
            if ex:
                self._deadlines[key] = monotonic() + ex
            else:
                self._deadlines.pop(key, None)
        return True

    async def delete(self, *keys: str) -> int:
        async with self._lock:
            return sum(self._drop(key) for key in keys)

    async def exists(self, *keys: str) -> int:
        async with self._lock:
            return sum(self._live(key) for key in keys)

    async def ttl(self, key: str) -> int:
        async with self._lock:
            if not self._live(key):
                return MISSING
            if key not in self._deadlines:
                return NO_EXPIRY
            return int(self._deadlines[key] - monotonic())

    async def ping(self) -> bool:
        return self.is_connected

    async def info(self) -> dict[str, str | int]:
        async with self._lock:
            size = sum(getsizeof(k) + getsizeof(v) for k, v in self._values.items())
            return {
                "server": "In-Memory Cache",
                "total_keys": len(self._values),
                "max_entries": self.max_entries,
                "used_memory_human": f"{size / 1024 / 1024:.2f}MB",
            }
