from collections.abc import Sequence
from logging import getLogger

from blog_api.clients.protocols import SearchIndexProtocol
from blog_api.configs import file_logger, settings
from blog_api.errors import DatabaseError, RelatedContentError, SearchIndexError
from blog_api.models.post import PostDB
from blog_api.repositories.post import PostRepository

logger = file_logger(getLogger(__name__))


class RelatedContentResolver:
    """
    Finds posts that share tags with a given post.

    Candidates are ranked by the search index, then reloaded from the
    relational store so callers always see authoritative rows.
    """

    def __init__(
        self,
        search: SearchIndexProtocol,
        posts: PostRepository,
        limit: int = settings.RELATED_POSTS_LIMIT,
    ) -> None:
        self.search = search
        self.posts = posts
        self.limit = limit

    async def resolve(self, post_id: int, tags: Sequence[str]) -> list[PostDB]:
        """
        Up to ``limit`` posts sharing at least one tag with the source post.

        Args:
            post_id: Source post id; never part of its own result.
            tags: Source post tags.

        Returns:
            list[PostDB]: Related posts in index ranking order.

        Raises:
            RelatedContentError: When the index or the store cannot answer.
        """
        if not tags:
            return []

        try:
            ranked_ids = await self.search.related_by_tags(
                list(dict.fromkeys(tags)),
                post_id,
                self.limit,
            )
        except SearchIndexError as e:
            logger.warning(f"Related lookup failed for post {post_id}: {e}")
            raise RelatedContentError from e

        ranked_ids = [i for i in dict.fromkeys(ranked_ids) if i != post_id][: self.limit]
        if not ranked_ids:
            return []

        try:
            return await self.posts.get_many(ranked_ids)
        except DatabaseError as e:
            raise RelatedContentError from e
