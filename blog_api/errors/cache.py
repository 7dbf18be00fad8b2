"""Errors raised by the cache layer."""

from logging import getLogger

from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from blog_api.configs import file_logger
from blog_api.errors.base import BaseAppError, create_exception_handler

logger = file_logger(getLogger(__name__))


class CacheExceptionError(BaseAppError):
    """
    Base class of cache failures.

    The post service treats the cache as optional and catches these; the
    handler only answers for the rare caller that lets one escape.
    """

    def __init__(self, detail: str = "Cache unavailable") -> None:
        super().__init__(detail, HTTP_500_INTERNAL_SERVER_ERROR)


class CacheKeyError(CacheExceptionError):
    """A read or write against the cache backend failed."""


class CacheSerializationError(CacheExceptionError):
    """A value could not be encoded or compressed for storage."""

    def __init__(self, detail: str = "Cannot encode cache value") -> None:
        super().__init__(detail)


class CacheDeserializationError(CacheExceptionError):
    """A stored value could not be decompressed or decoded."""

    def __init__(self, detail: str = "Cannot decode cache value") -> None:
        super().__init__(detail)


cache_exception_handler = create_exception_handler(logger)
