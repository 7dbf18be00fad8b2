from blog_api.configs.settings import (
    DEFAULT_LOGS_PAGE_SIZE,
    DEFAULT_POSTS_PAGE_SIZE,
    MAX_PAGE_SIZE,
    CacheConfig,
    RedisCacheConfig,
    file_logger,
    pool_kwargs,
    settings,
)

__all__ = [
    "CacheConfig",
    "DEFAULT_LOGS_PAGE_SIZE",
    "DEFAULT_POSTS_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "RedisCacheConfig",
    "file_logger",
    "pool_kwargs",
    "settings",
]
