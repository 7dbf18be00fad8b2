"""Errors raised by repositories and transaction boundaries."""

from logging import getLogger

from starlette.status import HTTP_404_NOT_FOUND, HTTP_500_INTERNAL_SERVER_ERROR

from blog_api.configs import file_logger
from blog_api.errors.base import BaseAppError, create_exception_handler

logger = file_logger(getLogger(__name__))


class DatabaseError(BaseAppError):
    """A statement failed or the relational store could not be reached."""

    def __init__(
        self,
        detail: str = "Database Error",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail, status_code)


class DatabaseInitializationError(DatabaseError):
    def __init__(self, detail: str = "Failed to initialize database") -> None:
        super().__init__(detail)


class RecordNotFoundError(DatabaseError):
    """Answered with 404; ``atomic`` re-raises it without wrapping."""

    def __init__(self, detail: str = "Record not found") -> None:
        super().__init__(detail, HTTP_404_NOT_FOUND)


class PostNotFoundError(RecordNotFoundError):
    def __init__(self, post_id: int | None = None) -> None:
        self.post_id = post_id
        if post_id is None:
            super().__init__("Post not found")
        else:
            super().__init__(f"Post with ID {post_id} not found")


class TransactionError(DatabaseError):
    """Raised after a rollback; ``detail`` names the failed action."""

    def __init__(self, detail: str = "Transaction failed") -> None:
        super().__init__(detail)


database_exception_handler = create_exception_handler(logger)
