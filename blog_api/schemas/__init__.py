from blog_api.schemas.activity_log import ActivityLogCreate, ActivityLogResponse
from blog_api.schemas.health import (
    CacheHealthResponse,
    CacheStatistics,
    ErrorResponse,
    HealthCheckResponse,
    SearchHealthResponse,
)
from blog_api.schemas.pagination import ActivityLogsResponse, PaginationResponse, PostsResponse
from blog_api.schemas.post import (
    DeleteResponse,
    PostCreate,
    PostResponse,
    PostSearchDocument,
    PostUpdate,
    PostWithRelated,
    SearchResponse,
    TagSearchResponse,
)

__all__ = [
    "ActivityLogCreate",
    "ActivityLogResponse",
    "ActivityLogsResponse",
    "CacheHealthResponse",
    "CacheStatistics",
    "DeleteResponse",
    "ErrorResponse",
    "HealthCheckResponse",
    "PaginationResponse",
    "PostCreate",
    "PostResponse",
    "PostSearchDocument",
    "PostUpdate",
    "PostWithRelated",
    "PostsResponse",
    "SearchHealthResponse",
    "SearchResponse",
    "TagSearchResponse",
]
