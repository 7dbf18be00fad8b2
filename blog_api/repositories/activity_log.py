"""Activity log repository for database operations."""

from sqlalchemy import delete, desc, select

from blog_api.models.activity_log import ActivityLogDB
from blog_api.models.post import utc_now
from blog_api.repositories.base import BaseRepository
from blog_api.schemas.activity_log import ActivityLogCreate


class ActivityLogRepository(BaseRepository[ActivityLogDB]):
    """Repository for the append-only audit trail."""

    model = ActivityLogDB

    async def create(self, schema: ActivityLogCreate) -> ActivityLogDB:
        log = ActivityLogDB(action=schema.action, post_id=schema.post_id, logged_at=utc_now())
        return await self._save(log)

    async def delete_by_post(self, post_id: int) -> int:
        """
        Remove every log that references ``post_id``.

        Returns:
            int: Number of rows deleted
        """
        statement = delete(ActivityLogDB).where(
            ActivityLogDB.post_id == post_id,  # type: ignore[arg-type]
        )
        result = await self._execute(statement)
        return result.rowcount or 0  # type: ignore[attr-defined]

    async def list_page(self, skip: int, limit: int) -> list[ActivityLogDB]:
        """Most recent logs first."""
        statement = (
            select(ActivityLogDB)
            .order_by(desc(ActivityLogDB.logged_at), desc(ActivityLogDB.id))
            .offset(skip)
            .limit(limit)
        )
        return list(await self._scalars(statement))
