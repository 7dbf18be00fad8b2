"""Process-wide counters for cache traffic."""

from dataclasses import dataclass, field
from threading import Lock
from typing import Literal, TypeAlias

from blog_api.utils.helpers import today_str

CacheEvent: TypeAlias = Literal["hits", "misses", "sets", "deletes", "errors"]


@dataclass
class CacheStatistics:
    """
    Counts cache hits, misses, writes, deletes and backend errors.

    Shared by every request of the process and reported by ``/health``.
    """

    hits: int = 0
    misses: int = 0
    sets: int = 0
    deletes: int = 0
    errors: int = 0
    since: str = field(default_factory=today_str)
    _lock: Lock = field(default_factory=Lock, init=False, repr=False)

    def record(self, event: CacheEvent) -> None:
        with self._lock:
            setattr(self, event, getattr(self, event) + 1)

    @property
    def total_requests(self) -> int:
        return self.hits + self.misses

    @property
    def hit_rate(self) -> float:
        """Share of reads served from the cache, in percent."""
        if not self.total_requests:
            return 0.0
        return self.hits / self.total_requests * 100

    def reset(self) -> None:
        with self._lock:
            self.hits = self.misses = self.sets = self.deletes = self.errors = 0
            self.since = today_str()

    def to_dict(self) -> dict[str, int | str]:
        with self._lock:
            return {
                "hits": self.hits,
                "misses": self.misses,
                "sets": self.sets,
                "deletes": self.deletes,
                "errors": self.errors,
                "total_requests": self.total_requests,
                "hit_rate": f"{self.hit_rate:.2f}%",
                "since": self.since,
            }
