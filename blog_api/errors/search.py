"""Exceptions raised by the search index integration."""

from logging import getLogger

from starlette import status

from blog_api.configs import file_logger
from blog_api.errors.base import BaseAppError, create_exception_handler

logger = file_logger(getLogger(__name__))


class SearchIndexError(BaseAppError):
    """Raised when a search index request fails."""

    def __init__(self, detail: str = "Search failed") -> None:
        super().__init__(
            detail=detail,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


class SearchIndexUnavailableError(SearchIndexError):
    """Raised when the search index cannot be reached at all."""

    def __init__(self, detail: str = "Search index is unavailable") -> None:
        super().__init__(detail)


class RelatedContentError(SearchIndexError):
    """Raised when related posts cannot be resolved."""

    def __init__(self, detail: str = "Failed to retrieve related posts") -> None:
        super().__init__(detail)


search_exception_handler = create_exception_handler(logger)
