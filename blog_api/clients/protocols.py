"""Protocol definitions for the cache and search collaborators."""

from collections.abc import Awaitable, Sequence
from typing import Any, Protocol, runtime_checkable

from blog_api.schemas.post import PostSearchDocument, SearchResponse


@runtime_checkable
class CacheClientProtocol(Protocol):
    """String key-value store with per-key expiry, as seen by the cache manager."""

    def get(self, key: str) -> Awaitable[str | None]: ...

    def set(self, key: str, value: str, ex: int | None = None) -> Awaitable[bool]: ...

    def delete(self, *keys: str) -> Awaitable[int]: ...

    def exists(self, *keys: str) -> Awaitable[int]: ...

    def ttl(self, key: str) -> Awaitable[int]: ...

    def ping(self) -> Awaitable[bool]: ...

    def info(self) -> Awaitable[dict[str, Any]]: ...


@runtime_checkable
class SearchIndexProtocol(Protocol):
    """
    Interface of the full-text search index.

    The index is eventually consistent with the relational store and only
    ever holds ``PostSearchDocument`` projections keyed by post id.
    """

    async def index_post(self, document: PostSearchDocument) -> None:
        """Upsert the document under its post id."""
        ...

    async def delete_post(self, post_id: int) -> None:
        """Remove a document; a missing document is not an error."""
        ...

    async def multi_match(self, query: str, size: int) -> SearchResponse:
        """Fuzzy best-fields match over title and content."""
        ...

    async def related_by_tags(
        self,
        tags: Sequence[str],
        exclude_id: int,
        size: int,
    ) -> list[int]:
        """Ids of posts sharing at least one tag, best match first."""
        ...
