from blog_api.models.activity_log import ActivityAction, ActivityLogDB
from blog_api.repositories.activity_log import ActivityLogRepository
from blog_api.schemas.activity_log import ActivityLogCreate


class ActivityLogger:
    """
    Writes audit entries for post lifecycle events.

    Entries are added to the caller's open transaction, so a log exists if and
    only if the change it describes was committed.
    """

    def __init__(self, logs: ActivityLogRepository) -> None:
        self.logs = logs

    async def log_post_created(self, post_id: int) -> ActivityLogDB:
        return await self.logs.create(
            ActivityLogCreate(action=ActivityAction.NEW_POST, post_id=post_id),
        )

    async def log_post_deleted(self) -> ActivityLogDB:
        """The post row is already gone, so the entry carries no post id."""
        return await self.logs.create(ActivityLogCreate(action=ActivityAction.DELETE_POST))
