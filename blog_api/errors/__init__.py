from blog_api.errors.base import BASE_EXCEPTION, BaseAppError, create_exception_handler
from blog_api.errors.cache import (
    CacheDeserializationError,
    CacheExceptionError,
    CacheKeyError,
    CacheSerializationError,
    cache_exception_handler,
)
from blog_api.errors.database import (
    DatabaseError,
    DatabaseInitializationError,
    PostNotFoundError,
    RecordNotFoundError,
    TransactionError,
    database_exception_handler,
)
from blog_api.errors.search import (
    RelatedContentError,
    SearchIndexError,
    SearchIndexUnavailableError,
    search_exception_handler,
)
from blog_api.errors.validation import (
    ValidationError,
    app_validation_exception_handler,
    validation_exception_handler,
)

__all__ = [
    "BASE_EXCEPTION",
    "BaseAppError",
    "CacheDeserializationError",
    "CacheExceptionError",
    "CacheKeyError",
    "CacheSerializationError",
    "DatabaseError",
    "DatabaseInitializationError",
    "PostNotFoundError",
    "RecordNotFoundError",
    "RelatedContentError",
    "SearchIndexError",
    "SearchIndexUnavailableError",
    "TransactionError",
    "ValidationError",
    "app_validation_exception_handler",
    "cache_exception_handler",
    "create_exception_handler",
    "database_exception_handler",
    "search_exception_handler",
    "validation_exception_handler",
]
