from collections.abc import Awaitable, Callable
from logging import Logger
from typing import TypeAlias

from fastapi import Request
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from blog_api.utils.helpers import host

# Failures a cache backend can raise besides its own client errors.
# ConnectionError, TimeoutError and PermissionError are OSError subclasses.
BASE_EXCEPTION: tuple[type[Exception], ...] = (OSError, MemoryError, RuntimeError)


class BaseAppError(Exception):
    """
    Application error carrying the HTTP status and the client-facing message.

    Args:
        detail: Message returned as ``{"detail": ...}``.
        status_code: HTTP status of the response.
    """

    def __init__(
        self,
        detail: str = "Internal Server Error",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code

    def __str__(self) -> str:
        return self.detail


ExceptionHandler: TypeAlias = Callable[[Request, Exception], Awaitable[ORJSONResponse]]


def create_exception_handler(logger: Logger) -> ExceptionHandler:
    """
    Build a handler answering ``{"detail": exc.detail}`` with ``exc.status_code``.

    Exceptions without those attributes become a plain 500.
    """

    async def handler(request: Request, exc: Exception) -> ORJSONResponse:
        status_code = getattr(exc, "status_code", HTTP_500_INTERNAL_SERVER_ERROR)
        detail = getattr(exc, "detail", "Internal Server Error")
        logger.warning(f"{detail} for ip: {host(request)} for endpoint {request.url.path}")
        return ORJSONResponse({"detail": detail}, status_code=status_code)

    return handler
