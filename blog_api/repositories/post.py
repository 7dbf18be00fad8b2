"""Post repository for database operations."""

from json import dumps
from logging import getLogger

from sqlalchemy import String, cast, desc, select
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.exc import SQLAlchemyError

from blog_api.configs import file_logger
from blog_api.errors.database import DatabaseError, PostNotFoundError
from blog_api.models.post import PostDB, utc_now
from blog_api.repositories.base import BaseRepository
from blog_api.schemas.post import PostCreate

logger = file_logger(getLogger(__name__))


class PostRepository(BaseRepository[PostDB]):
    """Repository for Post rows."""

    model = PostDB

    async def create(self, schema: PostCreate) -> PostDB:
        """
        Insert a new post; the store assigns ``id`` and both timestamps.

        Args:
            schema: Validated creation payload

        Returns:
            PostDB: Created post with its id
        """
        now = utc_now()
        post = PostDB(
            title=schema.title,
            content=schema.content,
            tags=list(schema.tags),
            created_at=now,
            updated_at=now,
        )
        return await self._save(post)

    async def get_or_raise(self, record_id: int) -> PostDB:
        post = await self.get_by_id(record_id)
        if post is None:
            raise PostNotFoundError(record_id)
        return post

    async def get_many(self, post_ids: list[int]) -> list[PostDB]:
        """
        Load posts by id, keeping the order of ``post_ids``.

        Ids without a row (e.g. deleted since they were indexed) are skipped.
        """
        if not post_ids:
            return []
        statement = select(PostDB).where(PostDB.id.in_(post_ids))  # type: ignore[union-attr]
        by_id = {post.id: post for post in await self._scalars(statement)}
        return [by_id[post_id] for post_id in post_ids if post_id in by_id]

    async def update(self, post: PostDB, changes: dict[str, str | list[str]]) -> PostDB:
        """
        Apply ``changes`` to ``post`` and bump ``updated_at``.

        Args:
            post: Loaded post
            changes: Column name to new value

        Returns:
            PostDB: Updated post
        """
        for key, value in changes.items():
            setattr(post, key, value)
        post.updated_at = utc_now()
        return await self._save(post)

    async def delete(self, post: PostDB) -> None:
        try:
            await self.session.delete(post)
            await self.session.flush()
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to delete post {post.id}") from e

    async def list_page(self, skip: int, limit: int) -> list[PostDB]:
        """Newest posts first."""
        statement = (
            select(PostDB)
            .order_by(desc(PostDB.created_at), desc(PostDB.id))
            .offset(skip)
            .limit(limit)
        )
        return list(await self._scalars(statement))

    async def find_by_tag(self, tag: str) -> list[PostDB]:
        """
        Every post whose tags contain ``tag`` exactly.

        Uses JSONB containment (served by the GIN index) on PostgreSQL. Other
        dialects store tags as JSON text, so the quoted tag is matched instead.
        Results are not paginated.
        """
        if self.session.get_bind().dialect.name == "postgresql":
            condition = PostDB.tags.cast(JSONB).contains([tag])  # type: ignore[attr-defined]
        else:
            condition = cast(PostDB.tags, String).contains(dumps(tag), autoescape=True)
        statement = (
            select(PostDB).where(condition).order_by(desc(PostDB.created_at), desc(PostDB.id))
        )
        return list(await self._scalars(statement))
