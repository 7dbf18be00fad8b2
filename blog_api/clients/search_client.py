"""Elasticsearch client module for the post search index."""

from collections.abc import Sequence
from logging import getLogger
from typing import Any

from elasticsearch import ApiError, AsyncElasticsearch, NotFoundError, TransportError
from pydantic import ValidationError

from blog_api.configs import file_logger, settings
from blog_api.decorators import with_retry
from blog_api.errors import SearchIndexError, SearchIndexUnavailableError
from blog_api.schemas.post import PostSearchDocument, SearchResponse

logger = file_logger(getLogger(__name__))

SEARCH_ERRORS = (ApiError, TransportError)

# Only the searchable projection of a post is indexed
POST_INDEX_MAPPINGS: dict[str, Any] = {
    "properties": {
        "id": {"type": "integer"},
        "title": {"type": "text", "analyzer": "standard"},
        "content": {"type": "text", "analyzer": "standard"},
        "tags": {"type": "keyword"},
    },
}

MULTI_MATCH_FIELDS = ["title", "content"]


class SearchClient:
    """
    Async Elasticsearch wrapper holding post search documents.

    The index is a derived copy of the relational store: writes made here are
    fire-and-forget from the caller's point of view, reads raise
    ``SearchIndexError`` because the result depends on them.
    """

    def __init__(
        self,
        url: str | None = None,
        index: str | None = None,
        request_timeout: float | None = None,
        client: AsyncElasticsearch | None = None,
    ) -> None:
        self.url = url or settings.ES_URL
        self.index = index or settings.ES_INDEX
        self.request_timeout = request_timeout or settings.ES_REQUEST_TIMEOUT
        self._es = client
        self._index_ready = False

    @property
    def client(self) -> AsyncElasticsearch:
        if self._es is None:
            mssg = "Search client not initialized. Call connect() first."
            raise RuntimeError(mssg)
        return self._es

    @with_retry(max_retries=5, base_delay=0.5, max_delay=5.0)
    async def connect(self) -> None:
        """
        Create the client and wait until the cluster answers a ping.

        Raises:
            ConnectionError: When the cluster is still unreachable after retries.
        """
        if self._es is None:
            self._es = AsyncElasticsearch(
                hosts=[self.url],
                request_timeout=self.request_timeout,
            )
        if not await self._es.ping():
            mssg = f"Cannot reach Elasticsearch at {self.url}"
            raise ConnectionError(mssg)
        logger.info(f"Connected to Elasticsearch at {self.url}")

    async def ensure_index(self) -> bool:
        """
        Create the posts index with its mapping when it does not exist.

        Returns:
            bool: True when the index was created by this call.
        """
        try:
            if await self.client.indices.exists(index=self.index):
                self._index_ready = True
                return False
            await self.client.indices.create(index=self.index, mappings=POST_INDEX_MAPPINGS)
        except SEARCH_ERRORS as e:
            if isinstance(e, ApiError) and e.error == "resource_already_exists_exception":
                self._index_ready = True
                return False
            mssg = f"Failed to create search index {self.index}"
            raise SearchIndexUnavailableError(mssg) from e
        logger.info(f"Created search index {self.index}")
        self._index_ready = True
        return True

    async def _require_index(self) -> None:
        # Dynamic mapping would store `tags` as analysed text
        if not self._index_ready:
            await self.ensure_index()

    async def index_post(self, document: PostSearchDocument) -> None:
        """Upsert a post document under its id."""
        await self._require_index()
        try:
            await self.client.index(
                index=self.index,
                id=str(document.id),
                document=document.model_dump(mode="json"),
            )
        except SEARCH_ERRORS as e:
            mssg = f"Failed to index post {document.id}"
            raise SearchIndexError(mssg) from e

    async def delete_post(self, post_id: int) -> None:
        """Remove a post document; documents that were never indexed are ignored."""
        try:
            await self.client.delete(index=self.index, id=str(post_id))
        except NotFoundError:
            logger.debug(f"Post {post_id} was not in the search index")
        except SEARCH_ERRORS as e:
            mssg = f"Failed to remove post {post_id} from the search index"
            raise SearchIndexError(mssg) from e

    async def multi_match(self, query: str, size: int) -> SearchResponse:
        """
        Fuzzy full-text search over title and content.

        Args:
            query: Free text entered by the user.
            size: Maximum number of hits to return.

        Returns:
            SearchResponse: Index documents with the index's total and timing.

        Raises:
            SearchIndexError: When the index cannot answer.
        """
        body = {
            "multi_match": {
                "query": query,
                "fields": MULTI_MATCH_FIELDS,
                "type": "best_fields",
                "fuzziness": "AUTO",
            },
        }
        await self._require_index()
        try:
            response = await self.client.search(index=self.index, query=body, size=size)
        except SEARCH_ERRORS as e:
            raise SearchIndexError from e

        hits = response["hits"]
        return SearchResponse(
            posts=_documents(hits["hits"]),
            total=_total_hits(hits),
            took=response["took"],
        )

    async def related_by_tags(
        self,
        tags: Sequence[str],
        exclude_id: int,
        size: int,
    ) -> list[int]:
        """
        Ids of posts sharing at least one tag with ``tags``, best match first.

        Args:
            tags: Tags of the source post.
            exclude_id: Source post id, never part of the result.
            size: Maximum number of ids.

        Returns:
            list[int]: Ranked post ids.

        Raises:
            SearchIndexError: When the index cannot answer.
        """
        body = {
            "bool": {
                "should": [{"term": {"tags": tag}} for tag in tags],
                "minimum_should_match": 1,
                "must_not": [{"ids": {"values": [str(exclude_id)]}}],
            },
        }
        await self._require_index()
        try:
            response = await self.client.search(
                index=self.index,
                query=body,
                size=size,
                source=False,
            )
        except SEARCH_ERRORS as e:
            mssg = f"Failed to find posts related to post {exclude_id}"
            raise SearchIndexError(mssg) from e

        ids = [int(hit["_id"]) for hit in response["hits"]["hits"]]
        return [post_id for post_id in ids if post_id != exclude_id][:size]

    async def ping(self) -> bool:
        if self._es is None:
            return False
        try:
            return bool(await self._es.ping())
        except SEARCH_ERRORS:
            return False

    async def close(self) -> None:
        if self._es is not None:
            await self._es.close()
            self._es = None
            logger.info("Elasticsearch connection closed.")


def _documents(raw_hits: list[dict[str, Any]]) -> list[PostSearchDocument]:
    documents: list[PostSearchDocument] = []
    for hit in raw_hits:
        try:
            documents.append(PostSearchDocument.model_validate(hit.get("_source") or {}))
        except ValidationError:
            logger.warning(f"Skipping undecodable search hit {hit.get('_id')}")
    return documents


def _total_hits(hits: dict[str, Any]) -> int:
    total = hits.get("total", 0)
    # Elasticsearch 7+ reports {"value": n, "relation": "eq"}
    return total.get("value", 0) if isinstance(total, dict) else int(total)
