"""Activity log routes."""

from fastapi import APIRouter
from fastapi.responses import ORJSONResponse

from blog_api.dependencies import PageQueryDep, PostServiceDep
from blog_api.schemas import ActivityLogsResponse

router = APIRouter(prefix="/activity-logs", tags=["🗒️ Activity Logs"])


@router.get(
    "",
    response_class=ORJSONResponse,
    response_model=ActivityLogsResponse,
    summary="List activity logs",
    description="Most recent entries first. Pages past the end return an empty list.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "logs": [
                            {
                                "id": 1,
                                "action": "new_post",
                                "post_id": 1,
                                "logged_at": "2025-01-01T10:00:00Z",
                            },
                        ],
                        "pagination": {
                            "current_page": 1,
                            "total_pages": 1,
                            "total_count": 1,
                            "limit": 20,
                            "has_next": False,
                            "has_prev": False,
                        },
                    },
                },
            },
        },
    },
    operation_id="activity_logs_list",
)
async def list_activity_logs(query: PageQueryDep, service: PostServiceDep) -> ActivityLogsResponse:
    """
    List activity logs.

    Parameters
    ----------
    query : PageQuery
        Page and page size.
    service : PostService
        Service dependency.

    Returns
    -------
    ActivityLogsResponse
        One page of logs with pagination metadata.
    """
    return await service.list_activity_logs(query.page, query.limit)
