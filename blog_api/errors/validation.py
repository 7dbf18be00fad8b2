"""Custom validation error handling for FastAPI."""

from logging import getLogger
from typing import Any, cast

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_400_BAD_REQUEST

from blog_api.configs import file_logger
from blog_api.errors.base import BaseAppError, create_exception_handler
from blog_api.utils.helpers import host

logger = file_logger(getLogger(__name__))


class ValidationError(BaseAppError):
    """Raised when input is missing or malformed; no side effects have happened."""

    def __init__(self, detail: str = "Invalid input") -> None:
        super().__init__(detail=detail, status_code=HTTP_400_BAD_REQUEST)


def format_validation_error(error: dict[str, Any]) -> str:
    """
    Render one pydantic error entry as a single readable sentence.

    Args:
        error: Entry from ``RequestValidationError.errors()``.

    Returns:
        Message such as ``"title: Field required"``.
    """
    # Skip the 'body' / 'query' / 'path' location prefix
    field = ".".join(str(loc) for loc in error.get("loc", ())[1:])
    message = error.get("msg", "Invalid value")
    return f"{field}: {message}" if field else message


async def validation_exception_handler(
    request: Request,
    exc: Exception,
) -> ORJSONResponse:
    """
    Collapse request validation errors into a single 400 message.

    Args:
        request: The incoming request.
        exc: The RequestValidationError exception.

    Returns:
        ORJSONResponse with the first validation problem as ``detail``.
    """
    errors = cast(RequestValidationError, exc).errors()
    detail = format_validation_error(errors[0]) if errors else "Invalid input"

    logger.warning(
        f"Validation error for ip: {host(request)} at endpoint {request.url.path}: {detail}",
    )

    return ORJSONResponse(status_code=HTTP_400_BAD_REQUEST, content={"detail": detail})


app_validation_exception_handler = create_exception_handler(logger)
