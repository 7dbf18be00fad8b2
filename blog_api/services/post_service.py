"""
Post service.

Coordinates the three stores behind the post API:

- the relational store is the source of truth and owns every transaction;
- the cache holds post snapshots, filled on read and dropped on write;
- the search index receives projections through the task queue after commit.
"""

from logging import getLogger

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.clients.protocols import SearchIndexProtocol
from blog_api.configs import (
    DEFAULT_LOGS_PAGE_SIZE,
    DEFAULT_POSTS_PAGE_SIZE,
    file_logger,
    settings,
)
from blog_api.db import atomic
from blog_api.errors import CacheExceptionError, ValidationError
from blog_api.managers.cache_manager import CacheManager
from blog_api.managers.task_queue import TaskQueueProtocol
from blog_api.models.post import PostDB
from blog_api.repositories import ActivityLogRepository, PostRepository
from blog_api.schemas import (
    ActivityLogResponse,
    ActivityLogsResponse,
    DeleteResponse,
    PostCreate,
    PostResponse,
    PostSearchDocument,
    PostsResponse,
    PostUpdate,
    PostWithRelated,
    SearchResponse,
    TagSearchResponse,
)
from blog_api.services.activity_logger import ActivityLogger
from blog_api.services.related import RelatedContentResolver
from blog_api.utils.cache_keys import POST_NAMESPACE, post_key
from blog_api.utils.pagination import build_pagination, normalize_limit, normalize_page, offset

logger = file_logger(getLogger(__name__))


class PostService:
    """
    Post operations across the relational store, cache and search index.

    Args:
        session: Request-scoped database session.
        cache: Cache manager holding post snapshots.
        search: Search index client.
        tasks: Queue for fire-and-forget index updates.
        cache_ttl: Snapshot lifetime in seconds.
    """

    def __init__(
        self,
        session: AsyncSession,
        cache: CacheManager,
        search: SearchIndexProtocol,
        tasks: TaskQueueProtocol,
        cache_ttl: int = settings.POST_CACHE_TTL,
        related_limit: int = settings.RELATED_POSTS_LIMIT,
        search_limit: int = settings.SEARCH_RESULTS_LIMIT,
    ) -> None:
        self.session = session
        self.cache = cache
        self.search_index = search
        self.tasks = tasks
        self.cache_ttl = cache_ttl
        self.search_limit = search_limit
        self.posts = PostRepository(session)
        self.logs = ActivityLogRepository(session)
        self.activity = ActivityLogger(self.logs)
        self.related = RelatedContentResolver(search, self.posts, related_limit)

    # --- Writes ---

    async def create_post(self, data: PostCreate) -> PostResponse:
        """
        Create a post and its ``new_post`` log in one transaction.

        Raises:
            TransactionError: If either insert fails; nothing is persisted.
        """
        async with atomic(self.session, "create post"):
            post = await self.posts.create(data)
            await self.activity.log_post_created(_id(post))

        logger.info(f"Post {post.id} created")
        await self._schedule_index(post)
        return PostResponse.model_validate(post)

    async def update_post(self, post_id: int, data: PostUpdate) -> PostResponse:
        """
        Overlay the provided fields on an existing post.

        The cached snapshot is dropped rather than rewritten, so a concurrent
        reader can only repopulate it from the committed row.

        Raises:
            PostNotFoundError: If the post does not exist.
            TransactionError: If the update cannot be committed.
        """
        async with atomic(self.session, "update post"):
            post = await self.posts.get_or_raise(post_id)
            post = await self.posts.update(post, data.changes())

        await self._invalidate(post_id)
        await self._schedule_index(post)
        return PostResponse.model_validate(post)

    async def delete_post(self, post_id: int) -> DeleteResponse:
        """
        Delete a post together with the logs that reference it.

        A ``delete_post`` log without a post id records the deletion.

        Raises:
            PostNotFoundError: If the post does not exist.
            TransactionError: If any step fails; nothing is removed.
        """
        async with atomic(self.session, "delete post"):
            post = await self.posts.get_or_raise(post_id)
            removed = await self.logs.delete_by_post(post_id)
            await self.posts.delete(post)
            await self.activity.log_post_deleted()

        logger.info(f"Post {post_id} deleted along with {removed} activity log(s)")
        await self._invalidate(post_id)
        await self.tasks.submit(f"unindex-post-{post_id}", self.search_index.delete_post, post_id)
        return DeleteResponse(message="Post deleted successfully", id=post_id)

    # --- Reads ---

    async def get_post(self, post_id: int) -> PostResponse:
        """
        Read a post through the cache.

        Cache failures of any kind fall back to the relational store.

        Raises:
            PostNotFoundError: If the post does not exist.
        """
        if (cached := await self._cached(post_id)) is not None:
            return cached

        post = PostResponse.model_validate(await self.posts.get_or_raise(post_id))
        await self._store(post)
        return post

    async def get_post_with_related(self, post_id: int) -> PostWithRelated:
        """
        Read a post plus up to five posts that share a tag with it.

        Raises:
            PostNotFoundError: If the post does not exist.
            RelatedContentError: If related posts cannot be resolved.
        """
        post = await self.get_post(post_id)
        related = await self.related.resolve(post.id, post.tags)
        return PostWithRelated(
            post=post,
            related_posts=[PostResponse.model_validate(p) for p in related],
        )

    async def list_posts(self, page: int | None = None, limit: int | None = None) -> PostsResponse:
        page = normalize_page(page)
        limit = normalize_limit(limit, DEFAULT_POSTS_PAGE_SIZE)

        total = await self.posts.count()
        rows = await self.posts.list_page(offset(page, limit), limit)
        return PostsResponse(
            posts=[PostResponse.model_validate(p) for p in rows],
            pagination=build_pagination(page, limit, total),
        )

    async def search_by_tag(self, tag: str) -> TagSearchResponse:
        """
        Exact tag match against the relational store.

        The result is not paginated; a warning is logged when it grows past
        ``TAG_SEARCH_WARN_THRESHOLD``.

        Raises:
            ValidationError: If ``tag`` is empty.
        """
        if not tag or not tag.strip():
            raise ValidationError("Tag parameter is required")

        rows = await self.posts.find_by_tag(tag)
        if len(rows) > settings.TAG_SEARCH_WARN_THRESHOLD:
            logger.warning(f"Tag search for '{tag}' returned {len(rows)} posts without pagination")
        return TagSearchResponse(
            posts=[PostResponse.model_validate(p) for p in rows],
            count=len(rows),
        )

    async def search_posts(self, query: str) -> SearchResponse:
        """
        Full-text search served directly from the search index.

        Raises:
            ValidationError: If ``query`` is empty.
            SearchIndexError: If the index cannot answer.
        """
        if not query or not query.strip():
            raise ValidationError("Search query is required")
        return await self.search_index.multi_match(query, self.search_limit)

    async def list_activity_logs(
        self,
        page: int | None = None,
        limit: int | None = None,
    ) -> ActivityLogsResponse:
        page = normalize_page(page)
        limit = normalize_limit(limit, DEFAULT_LOGS_PAGE_SIZE)

        total = await self.logs.count()
        rows = await self.logs.list_page(offset(page, limit), limit)
        return ActivityLogsResponse(
            logs=[ActivityLogResponse.model_validate(log) for log in rows],
            pagination=build_pagination(page, limit, total),
        )

    # --- Cache and index helpers ---

    async def _cached(self, post_id: int) -> PostResponse | None:
        try:
            snapshot = await self.cache.get(post_key(post_id), POST_NAMESPACE)
        except CacheExceptionError as e:
            logger.warning(f"Cache read failed for post {post_id}: {e}")
            return None
        if snapshot is None:
            return None
        try:
            return PostResponse.model_validate(snapshot)
        except PydanticValidationError:
            logger.warning(f"Discarding invalid cache snapshot for post {post_id}")
            return None

    async def _store(self, post: PostResponse) -> None:
        try:
            await self.cache.set(
                post_key(post.id),
                post.model_dump(mode="json"),
                ttl=self.cache_ttl,
                namespace=POST_NAMESPACE,
            )
        except CacheExceptionError as e:
            logger.warning(f"Cache write failed for post {post.id}: {e}")

    async def _invalidate(self, post_id: int) -> None:
        try:
            await self.cache.delete(post_key(post_id), namespace=POST_NAMESPACE)
        except CacheExceptionError as e:
            logger.warning(f"Cache invalidation failed for post {post_id}: {e}")

    async def _schedule_index(self, post: PostDB) -> None:
        document = PostSearchDocument.model_validate(post)
        await self.tasks.submit(f"index-post-{document.id}", self.search_index.index_post, document)


def _id(post: PostDB) -> int:
    if post.id is None:
        mssg = "Post has no id after insert"
        raise RuntimeError(mssg)
    return post.id
