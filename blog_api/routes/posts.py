"""
Post Routes.

Summary
-------
Endpoints include:
  - Create post
  - List posts (paginated)
  - Search posts by exact tag
  - Full-text search
  - Get post by id
  - Get post with related posts
  - Update post
  - Delete post

Dependencies
------------
  - `PostServiceDep`: request-scoped service bound to the database session,
    the cache manager, the search client and the background task queue.

Errors
------
Every failure is answered with a single ``{"detail": ...}`` message by the
exception handlers registered in ``blog_api.main``.
"""

from typing import Annotated

from fastapi import APIRouter, Body, Query
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_201_CREATED

from blog_api.dependencies import PageQueryDep, PostServiceDep
from blog_api.schemas import (
    DeleteResponse,
    ErrorResponse,
    PostCreate,
    PostResponse,
    PostsResponse,
    PostUpdate,
    PostWithRelated,
    SearchResponse,
    TagSearchResponse,
)

router = APIRouter(prefix="/posts", tags=["📝 Posts"])

POST_EXAMPLE = {
    "id": 1,
    "title": "My First Blog Post",
    "content": "This is the content of my first blog post.",
    "tags": ["python", "programming"],
    "created_at": "2025-01-01T10:00:00Z",
    "updated_at": "2025-01-01T10:00:00Z",
}

BAD_REQUEST = {
    "model": ErrorResponse,
    "description": "Bad request",
    "content": {"application/json": {"example": {"detail": "title: Field required"}}},
}
NOT_FOUND = {
    "model": ErrorResponse,
    "description": "Not found",
    "content": {"application/json": {"example": {"detail": "Post with ID 1 not found"}}},
}
SERVER_ERROR = {
    "model": ErrorResponse,
    "description": "Storage or search index failure",
    "content": {"application/json": {"example": {"detail": "Failed to create post"}}},
}


@router.post(
    "",
    response_class=ORJSONResponse,
    response_model=PostResponse,
    status_code=HTTP_201_CREATED,
    summary="Create a new post",
    description="Create a post and its activity log entry in one transaction. "
    "The post is indexed for search in the background.",
    responses={
        201: {"content": {"application/json": {"example": POST_EXAMPLE}}},
        400: BAD_REQUEST,
        500: SERVER_ERROR,
    },
    operation_id="posts_create",
)
async def create_post(
    post: Annotated[
        PostCreate,
        Body(
            examples=[
                {
                    "title": "My First Blog Post",
                    "content": "This is the content of my first blog post.",
                    "tags": ["python", "programming"],
                },
            ],
        ),
    ],
    service: PostServiceDep,
) -> PostResponse:
    """
    Create a new post.

    Parameters
    ----------
    post : PostCreate
        Title, content and optional tags.
    service : PostService
        Service dependency.

    Returns
    -------
    PostResponse
        Created post with its id and timestamps.
    """
    return await service.create_post(post)


@router.get(
    "",
    response_class=ORJSONResponse,
    response_model=PostsResponse,
    summary="List posts",
    description="Newest posts first. Pages past the end return an empty list.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "posts": [POST_EXAMPLE],
                        "pagination": {
                            "current_page": 1,
                            "total_pages": 1,
                            "total_count": 1,
                            "limit": 10,
                            "has_next": False,
                            "has_prev": False,
                        },
                    },
                },
            },
        },
        400: BAD_REQUEST,
    },
    operation_id="posts_list",
)
async def list_posts(query: PageQueryDep, service: PostServiceDep) -> PostsResponse:
    return await service.list_posts(query.page, query.limit)


@router.get(
    "/search-by-tag",
    response_class=ORJSONResponse,
    response_model=TagSearchResponse,
    summary="Search posts by tag",
    description="Exact tag match against the database. Results are not paginated.",
    responses={
        200: {"content": {"application/json": {"example": {"posts": [POST_EXAMPLE], "count": 1}}}},
        400: {
            "description": "Missing tag",
            "content": {"application/json": {"example": {"detail": "Tag parameter is required"}}},
        },
    },
    operation_id="posts_search_by_tag",
)
async def search_by_tag(
    service: PostServiceDep,
    tag: Annotated[str | None, Query(description="Tag to match exactly")] = None,
) -> TagSearchResponse:
    return await service.search_by_tag(tag or "")


@router.get(
    "/search",
    response_class=ORJSONResponse,
    response_model=SearchResponse,
    summary="Full-text search",
    description="Fuzzy search over title and content, served from the search index "
    "(at most 50 results).",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "posts": [
                            {
                                "id": 1,
                                "title": "My First Blog Post",
                                "content": "This is the content of my first blog post.",
                                "tags": ["python", "programming"],
                            },
                        ],
                        "total": 1,
                        "took": 3,
                    },
                },
            },
        },
        400: {
            "description": "Missing query",
            "content": {"application/json": {"example": {"detail": "Search query is required"}}},
        },
        500: {
            "description": "Search index failure",
            "content": {"application/json": {"example": {"detail": "Search failed"}}},
        },
    },
    operation_id="posts_search",
)
async def search_posts(
    service: PostServiceDep,
    q: Annotated[str | None, Query(description="Free text query")] = None,
) -> SearchResponse:
    """
    Full-text search over posts.

    Parameters
    ----------
    service : PostService
        Service dependency.
    q : str | None
        Query text; required.

    Returns
    -------
    SearchResponse
        Index documents with the total hit count and the query time in ms.
    """
    return await service.search_posts(q or "")


@router.get(
    "/{post_id}",
    response_class=ORJSONResponse,
    response_model=PostResponse,
    summary="Get post by ID",
    description="Served from the cache when a snapshot is available.",
    responses={
        200: {"content": {"application/json": {"example": POST_EXAMPLE}}},
        400: BAD_REQUEST,
        404: NOT_FOUND,
    },
    operation_id="posts_get_by_id",
)
async def get_post(post_id: int, service: PostServiceDep) -> PostResponse:
    return await service.get_post(post_id)


@router.get(
    "/{post_id}/related",
    response_class=ORJSONResponse,
    response_model=PostWithRelated,
    summary="Get post with related posts",
    description="Up to five posts sharing at least one tag, ranked by the search index "
    "and loaded from the database.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {"post": POST_EXAMPLE, "related_posts": []},
                },
            },
        },
        404: NOT_FOUND,
        500: {
            "description": "Related posts unavailable",
            "content": {
                "application/json": {"example": {"detail": "Failed to retrieve related posts"}},
            },
        },
    },
    operation_id="posts_get_related",
)
async def get_post_with_related(post_id: int, service: PostServiceDep) -> PostWithRelated:
    """
    Get a post together with related posts.

    Parameters
    ----------
    post_id : int
        Post identifier.
    service : PostService
        Service dependency.

    Returns
    -------
    PostWithRelated
        The post and up to five related posts.
    """
    return await service.get_post_with_related(post_id)


@router.put(
    "/{post_id}",
    response_class=ORJSONResponse,
    response_model=PostResponse,
    summary="Update post",
    description="Empty title or content leave the stored value unchanged. "
    "Omit tags to keep them; send a list (even empty) to replace them.",
    responses={
        200: {"content": {"application/json": {"example": POST_EXAMPLE}}},
        400: BAD_REQUEST,
        404: NOT_FOUND,
        500: SERVER_ERROR,
    },
    operation_id="posts_update",
)
async def update_post(
    post_id: int,
    post: Annotated[
        PostUpdate,
        Body(examples=[{"title": "Updated Blog Post Title", "tags": ["python"]}]),
    ],
    service: PostServiceDep,
) -> PostResponse:
    """
    Update a post.

    Parameters
    ----------
    post_id : int
        Post identifier.
    post : PostUpdate
        Fields to change.
    service : PostService
        Service dependency.

    Returns
    -------
    PostResponse
        Updated post.
    """
    return await service.update_post(post_id, post)


@router.delete(
    "/{post_id}",
    response_class=ORJSONResponse,
    response_model=DeleteResponse,
    summary="Delete post",
    description="Removes the post and its activity logs, then records the deletion.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {"message": "Post deleted successfully", "id": 1},
                },
            },
        },
        404: NOT_FOUND,
        500: SERVER_ERROR,
    },
    operation_id="posts_delete",
)
async def delete_post(post_id: int, service: PostServiceDep) -> DeleteResponse:
    return await service.delete_post(post_id)
