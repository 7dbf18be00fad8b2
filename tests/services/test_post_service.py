# tests/services/test_post_service.py
"""Tests for the post service across the relational store, cache and search index."""

from unittest.mock import AsyncMock

import pytest

from blog_api.errors import (
    CacheKeyError,
    DatabaseError,
    PostNotFoundError,
    SearchIndexError,
    TransactionError,
    ValidationError,
)
from blog_api.managers.cache_manager import CacheManager
from blog_api.models import ActivityAction
from blog_api.schemas import PostCreate, PostUpdate
from blog_api.services import PostService
from blog_api.utils.cache_keys import POST_NAMESPACE, post_key


def _post(title: str = "A", content: str = "x", tags: list[str] | None = None) -> PostCreate:
    return PostCreate(title=title, content=content, tags=tags or [])


async def _actions(service: PostService) -> list[tuple[str, int | None]]:
    page = await service.list_activity_logs(limit=100)
    return [(log.action, log.post_id) for log in page.logs]


class TestCreatePost:
    """Tests for creating posts."""

    @pytest.mark.asyncio
    async def test_create_assigns_id_and_timestamps(self, post_service: PostService) -> None:
        """Test the store assigns the id and equal timestamps."""
        post = await post_service.create_post(_post(tags=["go", "api"]))

        assert post.id >= 1
        assert post.tags == ["go", "api"]
        assert post.created_at == post.updated_at

    @pytest.mark.asyncio
    async def test_create_writes_new_post_log(self, post_service: PostService) -> None:
        """Test every created post is paired with a new_post log."""
        post = await post_service.create_post(_post())

        assert await _actions(post_service) == [(ActivityAction.NEW_POST, post.id)]

    @pytest.mark.asyncio
    async def test_create_indexes_post(self, post_service: PostService, search_index) -> None:
        """Test the post projection reaches the search index."""
        post = await post_service.create_post(_post(tags=["go"]))

        document = search_index.documents[post.id]
        assert document.title == "A"
        assert document.tags == ["go"]

    @pytest.mark.asyncio
    async def test_index_failure_does_not_fail_create(
        self,
        post_service: PostService,
        search_index,
    ) -> None:
        """Test an unreachable index leaves the committed post in place."""
        search_index.fail = True

        post = await post_service.create_post(_post())

        assert (await post_service.get_post(post.id)).title == "A"
        assert search_index.documents == {}

    @pytest.mark.asyncio
    async def test_log_failure_rolls_back_post(self, post_service: PostService) -> None:
        """Test a failing log insert leaves neither the post nor the log."""
        post_service.logs.create = AsyncMock(side_effect=DatabaseError("boom"))

        with pytest.raises(TransactionError) as exc_info:
            await post_service.create_post(_post())

        assert exc_info.value.detail == "Failed to create post"
        assert await post_service.posts.count() == 0
        assert await post_service.logs.count() == 0


class TestGetPost:
    """Tests for cache-aside reads."""

    @pytest.mark.asyncio
    async def test_miss_populates_cache(
        self,
        post_service: PostService,
        cache_manager: CacheManager,
    ) -> None:
        """Test a read from the store leaves a snapshot with a TTL."""
        post = await post_service.create_post(_post())

        await post_service.get_post(post.id)

        assert await cache_manager.exists(post_key(post.id), namespace=POST_NAMESPACE) == 1
        ttl = await cache_manager.ttl(post_key(post.id), namespace=POST_NAMESPACE)
        assert 0 < ttl <= 300

    @pytest.mark.asyncio
    async def test_hit_skips_store(self, post_service: PostService) -> None:
        """Test a cached snapshot is served without touching the store."""
        post = await post_service.create_post(_post())
        await post_service.get_post(post.id)
        post_service.posts.get_or_raise = AsyncMock(side_effect=AssertionError("store read"))

        cached = await post_service.get_post(post.id)

        assert cached.id == post.id
        assert cached.title == "A"

    @pytest.mark.asyncio
    async def test_cache_failure_falls_back_to_store(
        self,
        post_service: PostService,
        cache_manager: CacheManager,
    ) -> None:
        """Test cache errors are never surfaced to the caller."""
        post = await post_service.create_post(_post())
        cache_manager.get = AsyncMock(side_effect=CacheKeyError("down"))
        cache_manager.set = AsyncMock(side_effect=CacheKeyError("down"))

        assert (await post_service.get_post(post.id)).title == "A"

    @pytest.mark.asyncio
    async def test_invalid_snapshot_is_ignored(
        self,
        post_service: PostService,
        cache_manager: CacheManager,
    ) -> None:
        """Test a snapshot that no longer fits the post shape is read through."""
        post = await post_service.create_post(_post())
        await cache_manager.set(post_key(post.id), {"bogus": 1}, namespace=POST_NAMESPACE)

        assert (await post_service.get_post(post.id)).title == "A"

    @pytest.mark.asyncio
    async def test_missing_post_raises(self, post_service: PostService) -> None:
        """Test an unknown id is reported as not found."""
        with pytest.raises(PostNotFoundError) as exc_info:
            await post_service.get_post(999)

        assert exc_info.value.status_code == 404


class TestUpdatePost:
    """Tests for partial updates."""

    @pytest.mark.asyncio
    async def test_update_invalidates_snapshot(
        self,
        post_service: PostService,
        cache_manager: CacheManager,
    ) -> None:
        """Test the snapshot is dropped and the next read sees the new title."""
        post = await post_service.create_post(_post())
        await post_service.get_post(post.id)

        await post_service.update_post(post.id, PostUpdate(title="B"))

        assert await cache_manager.exists(post_key(post.id), namespace=POST_NAMESPACE) == 0
        assert (await post_service.get_post(post.id)).title == "B"

    @pytest.mark.asyncio
    async def test_empty_fields_are_left_unchanged(self, post_service: PostService) -> None:
        """Test empty title and content keep the stored values."""
        post = await post_service.create_post(_post(tags=["go"]))

        updated = await post_service.update_post(post.id, PostUpdate(title="", content=""))

        assert updated.title == "A"
        assert updated.content == "x"
        assert updated.tags == ["go"]
        assert updated.updated_at >= post.updated_at

    @pytest.mark.asyncio
    async def test_omitted_tags_are_kept(self, post_service: PostService) -> None:
        post = await post_service.create_post(_post(tags=["go", "api"]))

        updated = await post_service.update_post(post.id, PostUpdate(content="y"))

        assert updated.content == "y"
        assert updated.tags == ["go", "api"]

    @pytest.mark.asyncio
    async def test_explicit_empty_tags_clear_them(self, post_service: PostService) -> None:
        post = await post_service.create_post(_post(tags=["go", "api"]))

        updated = await post_service.update_post(post.id, PostUpdate(tags=[]))

        assert updated.tags == []

    @pytest.mark.asyncio
    async def test_update_reindexes(self, post_service: PostService, search_index) -> None:
        post = await post_service.create_post(_post(tags=["go"]))

        await post_service.update_post(post.id, PostUpdate(tags=["rust"]))

        assert search_index.documents[post.id].tags == ["rust"]

    @pytest.mark.asyncio
    async def test_whitespace_fields_are_left_unchanged(self, post_service: PostService) -> None:
        """Test blank title and content count as absent, as on create."""
        post = await post_service.create_post(_post())

        updated = await post_service.update_post(post.id, PostUpdate(title="   ", content="\t\n"))

        assert updated.title == "A"
        assert updated.content == "x"

    @pytest.mark.asyncio
    async def test_invalidation_failure_keeps_update(
        self,
        post_service: PostService,
        cache_manager: CacheManager,
    ) -> None:
        """Test a cache outage after commit does not fail or undo the update."""
        post = await post_service.create_post(_post())
        cache_manager.delete = AsyncMock(side_effect=CacheKeyError("down"))

        updated = await post_service.update_post(post.id, PostUpdate(title="B"))

        assert updated.title == "B"
        cache_manager.delete.assert_awaited_once()
        stored = await post_service.posts.get_by_id(post.id)
        assert stored is not None
        assert stored.title == "B"

    @pytest.mark.asyncio
    async def test_update_missing_post_raises(self, post_service: PostService) -> None:
        with pytest.raises(PostNotFoundError):
            await post_service.update_post(42, PostUpdate(title="B"))


class TestDeletePost:
    """Tests for transactional deletes."""

    @pytest.mark.asyncio
    async def test_delete_replaces_logs_with_delete_entry(
        self,
        post_service: PostService,
    ) -> None:
        """Test the post's logs are removed and a null-post delete_post log is added."""
        first = await post_service.create_post(_post(title="first"))
        second = await post_service.create_post(_post(title="second"))

        response = await post_service.delete_post(first.id)

        assert response.message == "Post deleted successfully"
        assert response.id == first.id
        actions = await _actions(post_service)
        assert (ActivityAction.NEW_POST, first.id) not in actions
        assert (ActivityAction.NEW_POST, second.id) in actions
        assert (ActivityAction.DELETE_POST, None) in actions

    @pytest.mark.asyncio
    async def test_delete_invalidates_and_unindexes(
        self,
        post_service: PostService,
        cache_manager: CacheManager,
        search_index,
    ) -> None:
        post = await post_service.create_post(_post())
        await post_service.get_post(post.id)

        await post_service.delete_post(post.id)

        assert await cache_manager.exists(post_key(post.id), namespace=POST_NAMESPACE) == 0
        assert post.id not in search_index.documents
        assert search_index.deleted == [post.id]
        with pytest.raises(PostNotFoundError):
            await post_service.get_post(post.id)

    @pytest.mark.asyncio
    async def test_invalidation_failure_keeps_delete(
        self,
        post_service: PostService,
        cache_manager: CacheManager,
        search_index,
    ) -> None:
        """Test a cache outage after commit does not fail or undo the delete."""
        post = await post_service.create_post(_post())
        cache_manager.delete = AsyncMock(side_effect=CacheKeyError("down"))

        response = await post_service.delete_post(post.id)

        assert response.id == post.id
        cache_manager.delete.assert_awaited_once()
        assert await post_service.posts.get_by_id(post.id) is None
        assert await _actions(post_service) == [(ActivityAction.DELETE_POST, None)]
        assert search_index.deleted == [post.id]

    @pytest.mark.asyncio
    async def test_second_delete_is_not_found(self, post_service: PostService) -> None:
        post = await post_service.create_post(_post())
        await post_service.delete_post(post.id)

        with pytest.raises(PostNotFoundError):
            await post_service.delete_post(post.id)

    @pytest.mark.asyncio
    async def test_failed_delete_keeps_post_and_logs(self, post_service: PostService) -> None:
        """Test a failure mid-transaction rolls back the log cleanup too."""
        post = await post_service.create_post(_post())
        post_service.posts.delete = AsyncMock(side_effect=DatabaseError("boom"))

        with pytest.raises(TransactionError) as exc_info:
            await post_service.delete_post(post.id)

        assert exc_info.value.detail == "Failed to delete post"
        assert await post_service.posts.count() == 1
        assert await _actions(post_service) == [(ActivityAction.NEW_POST, post.id)]


class TestListPosts:
    """Tests for paginated listing."""

    @pytest.mark.asyncio
    async def test_newest_first_with_metadata(self, post_service: PostService) -> None:
        for title in ("one", "two", "three"):
            await post_service.create_post(_post(title=title))

        page = await post_service.list_posts(page=1, limit=2)

        assert [p.title for p in page.posts] == ["three", "two"]
        assert page.pagination.total_count == 3
        assert page.pagination.total_pages == 2
        assert page.pagination.has_next is True
        assert page.pagination.has_prev is False

    @pytest.mark.asyncio
    async def test_page_past_end_is_empty(self, post_service: PostService) -> None:
        """Test an out-of-range page is legal and returns no posts."""
        for title in ("one", "two", "three"):
            await post_service.create_post(_post(title=title))

        page = await post_service.list_posts(page=5, limit=2)

        assert page.posts == []
        assert page.pagination.current_page == 5
        assert page.pagination.total_count == 3
        assert page.pagination.has_next is False
        assert page.pagination.has_prev is True

    @pytest.mark.asyncio
    async def test_page_and_limit_are_normalized(self, post_service: PostService) -> None:
        page = await post_service.list_posts(page=0, limit=500)

        assert page.pagination.current_page == 1
        assert page.pagination.limit == 100

    @pytest.mark.asyncio
    async def test_defaults(self, post_service: PostService) -> None:
        posts = await post_service.list_posts()
        logs = await post_service.list_activity_logs()

        assert posts.pagination.limit == 10
        assert logs.pagination.limit == 20
        assert posts.pagination.total_pages == 0


class TestSearch:
    """Tests for tag and full-text search."""

    @pytest.mark.asyncio
    async def test_tag_search_matches_exact_tag(self, post_service: PostService) -> None:
        go = await post_service.create_post(_post(title="go", tags=["go", "api"]))
        await post_service.create_post(_post(title="golang", tags=["golang"]))

        result = await post_service.search_by_tag("go")

        assert result.count == 1
        assert [p.id for p in result.posts] == [go.id]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("tag", ["", "   "])
    async def test_tag_search_requires_tag(self, post_service: PostService, tag: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await post_service.search_by_tag(tag)

        assert exc_info.value.detail == "Tag parameter is required"

    @pytest.mark.asyncio
    async def test_full_text_search_returns_index_documents(
        self,
        post_service: PostService,
    ) -> None:
        await post_service.create_post(_post(title="Async Python", content="event loops"))
        await post_service.create_post(_post(title="Rust", content="ownership"))

        result = await post_service.search_posts("python")

        assert result.total == 1
        assert result.posts[0].title == "Async Python"

    @pytest.mark.asyncio
    async def test_full_text_search_requires_query(self, post_service: PostService) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await post_service.search_posts("")

        assert exc_info.value.detail == "Search query is required"

    @pytest.mark.asyncio
    async def test_full_text_search_failure_propagates(
        self,
        post_service: PostService,
        search_index,
    ) -> None:
        search_index.fail = True

        with pytest.raises(SearchIndexError):
            await post_service.search_posts("python")


class TestPostLifecycle:
    """End-to-end walk through create, read, update, search and delete."""

    @pytest.mark.asyncio
    async def test_lifecycle(self, post_service: PostService, cache_manager: CacheManager) -> None:
        post = await post_service.create_post(_post(title="A", content="x", tags=["go", "api"]))
        assert (await post_service.get_post(post.id)).title == "A"

        await post_service.update_post(post.id, PostUpdate(title="B"))
        assert await cache_manager.exists(post_key(post.id), namespace=POST_NAMESPACE) == 0
        assert (await post_service.get_post(post.id)).title == "B"

        tagged = await post_service.search_by_tag("go")
        assert post.id in [p.id for p in tagged.posts]
        assert await _actions(post_service) == [(ActivityAction.NEW_POST, post.id)]

        await post_service.delete_post(post.id)
        with pytest.raises(PostNotFoundError):
            await post_service.get_post(post.id)
        assert await _actions(post_service) == [(ActivityAction.DELETE_POST, None)]
