"""Application dependencies."""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.clients.protocols import SearchIndexProtocol
from blog_api.db import get_session
from blog_api.managers.cache_manager import CacheManager
from blog_api.managers.task_queue import TaskQueueProtocol
from blog_api.services import PostService


def get_cache_manager(request: Request) -> CacheManager:
    return request.app.state.cache_manager


def get_search_client(request: Request) -> SearchIndexProtocol:
    return request.app.state.search_client


def get_task_queue(request: Request) -> TaskQueueProtocol:
    return request.app.state.task_queue


def get_post_service(
    session: Annotated[AsyncSession, Depends(get_session)],
    cache: Annotated[CacheManager, Depends(get_cache_manager)],
    search: Annotated[SearchIndexProtocol, Depends(get_search_client)],
    tasks: Annotated[TaskQueueProtocol, Depends(get_task_queue)],
) -> PostService:
    """
    Build the request-scoped PostService from the shared stores.

    Returns
    -------
    PostService
        Service bound to this request's database session.
    """
    return PostService(session, cache, search, tasks)


PostServiceDep = Annotated[PostService, Depends(get_post_service)]


@dataclass(frozen=True)
class PageQuery:
    """
    Query container for page based listing.

    Parameters
    ----------
    page : int | None
        Requested page, normalized to at least 1 by the service.
    limit : int | None
        Requested page size, clamped to [1, 100] by the service.
    """

    page: int | None = None
    limit: int | None = None


def get_page_query(
    page: Annotated[int | None, Query(description="Page number (default 1)")] = None,
    limit: Annotated[int | None, Query(description="Items per page (max 100)")] = None,
) -> PageQuery:
    return PageQuery(page=page, limit=limit)


PageQueryDep = Annotated[PageQuery, Depends(get_page_query)]
