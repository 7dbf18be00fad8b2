from blog_api.dependencies.dependencies import (
    PageQuery,
    PageQueryDep,
    PostServiceDep,
    get_cache_manager,
    get_page_query,
    get_post_service,
    get_search_client,
    get_task_queue,
)

__all__ = [
    "PageQuery",
    "PageQueryDep",
    "PostServiceDep",
    "get_cache_manager",
    "get_page_query",
    "get_post_service",
    "get_search_client",
    "get_task_queue",
]
