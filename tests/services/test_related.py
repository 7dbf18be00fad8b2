# tests/services/test_related.py
"""Tests for the related content resolver."""

from unittest.mock import AsyncMock

import pytest

from blog_api.errors import DatabaseError, PostNotFoundError, RelatedContentError
from blog_api.repositories import PostRepository
from blog_api.schemas import PostCreate
from blog_api.services import PostService, RelatedContentResolver


async def _create(service: PostService, title: str, tags: list[str]) -> int:
    post = await service.create_post(PostCreate(title=title, content="body", tags=tags))
    return post.id


class TestRelatedContentResolver:
    """Tests for RelatedContentResolver."""

    @pytest.mark.asyncio
    async def test_empty_tags_skip_the_index(self, session) -> None:
        """Test a post without tags has no related posts and no index query is made."""
        search = AsyncMock()
        resolver = RelatedContentResolver(search, PostRepository(session))

        assert await resolver.resolve(1, []) == []
        search.related_by_tags.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_excludes_source_and_caps_at_limit(self, session) -> None:
        """Test the source id is dropped even if the index returns it."""
        search = AsyncMock()
        search.related_by_tags.return_value = [1, 2, 3, 2, 4, 5, 6, 7]
        posts = PostRepository(session)
        posts.get_many = AsyncMock(return_value=[])
        resolver = RelatedContentResolver(search, posts, limit=5)

        await resolver.resolve(1, ["go", "go"])

        search.related_by_tags.assert_awaited_once_with(["go"], 1, 5)
        posts.get_many.assert_awaited_once_with([2, 3, 4, 5, 6])

    @pytest.mark.asyncio
    async def test_index_failure_is_reported(self, session, search_index) -> None:
        search_index.fail = True
        resolver = RelatedContentResolver(search_index, PostRepository(session))

        with pytest.raises(RelatedContentError) as exc_info:
            await resolver.resolve(1, ["go"])

        assert exc_info.value.detail == "Failed to retrieve related posts"
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_store_failure_is_reported(self, session) -> None:
        search = AsyncMock()
        search.related_by_tags.return_value = [2]
        posts = PostRepository(session)
        posts.get_many = AsyncMock(side_effect=DatabaseError("boom"))
        resolver = RelatedContentResolver(search, posts)

        with pytest.raises(RelatedContentError):
            await resolver.resolve(1, ["go"])


class TestPostWithRelated:
    """Tests for PostService.get_post_with_related."""

    @pytest.mark.asyncio
    async def test_ranked_by_tag_overlap(self, post_service: PostService) -> None:
        source = await _create(post_service, "source", ["go", "api", "web"])
        one_tag = await _create(post_service, "one", ["go"])
        two_tags = await _create(post_service, "two", ["go", "api"])
        await _create(post_service, "unrelated", ["rust"])

        result = await post_service.get_post_with_related(source)

        assert result.post.id == source
        assert [p.id for p in result.related_posts] == [two_tags, one_tag]

    @pytest.mark.asyncio
    async def test_at_most_five_and_never_self(self, post_service: PostService) -> None:
        source = await _create(post_service, "source", ["go"])
        for i in range(7):
            await _create(post_service, f"other {i}", ["go"])

        result = await post_service.get_post_with_related(source)

        ids = [p.id for p in result.related_posts]
        assert len(ids) == 5
        assert source not in ids

    @pytest.mark.asyncio
    async def test_posts_deleted_from_store_are_dropped(
        self,
        post_service: PostService,
        search_index,
    ) -> None:
        """Test stale index entries never surface once the row is gone."""
        source = await _create(post_service, "source", ["go"])
        stale = await _create(post_service, "stale", ["go"])
        search_index.fail = True
        await post_service.delete_post(stale)
        search_index.fail = False

        result = await post_service.get_post_with_related(source)

        assert stale in search_index.documents
        assert result.related_posts == []

    @pytest.mark.asyncio
    async def test_untagged_post_has_no_related(self, post_service: PostService) -> None:
        source = await _create(post_service, "source", [])
        await _create(post_service, "other", ["go"])

        result = await post_service.get_post_with_related(source)

        assert result.related_posts == []

    @pytest.mark.asyncio
    async def test_missing_post(self, post_service: PostService) -> None:
        with pytest.raises(PostNotFoundError):
            await post_service.get_post_with_related(404)
