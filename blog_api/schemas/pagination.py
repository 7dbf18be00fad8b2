from pydantic import BaseModel, Field

from blog_api.schemas.activity_log import ActivityLogResponse
from blog_api.schemas.post import PostResponse


class PaginationResponse(BaseModel):
    """Pagination metadata."""

    current_page: int = Field(examples=[1])
    total_pages: int = Field(examples=[5])
    total_count: int = Field(examples=[50])
    limit: int = Field(examples=[10])
    has_next: bool = Field(examples=[True])
    has_prev: bool = Field(examples=[False])


class PostsResponse(BaseModel):
    """A page of posts."""

    posts: list[PostResponse] = Field(default_factory=list)
    pagination: PaginationResponse


class ActivityLogsResponse(BaseModel):
    """A page of activity logs."""

    logs: list[ActivityLogResponse] = Field(default_factory=list)
    pagination: PaginationResponse
