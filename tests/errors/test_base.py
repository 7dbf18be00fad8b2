# tests/errors/test_base.py
"""Tests for the application error hierarchy and exception handlers."""

from unittest.mock import MagicMock

import pytest

from blog_api.errors import (
    BaseAppError,
    CacheKeyError,
    DatabaseError,
    PostNotFoundError,
    RelatedContentError,
    SearchIndexError,
    TransactionError,
    ValidationError,
    create_exception_handler,
)


def _request(path: str = "/api/v1/posts/1") -> MagicMock:
    request = MagicMock()
    request.client.host = "10.0.0.1"
    request.url.path = path
    return request


class TestBaseAppError:
    """Tests for BaseAppError."""

    def test_defaults(self) -> None:
        error = BaseAppError()
        assert error.detail == "Internal Server Error"
        assert error.status_code == 500

    def test_str_is_detail(self) -> None:
        assert str(BaseAppError("Something broke", 503)) == "Something broke"


class TestErrorClassification:
    """Tests for the status each error maps to."""

    @pytest.mark.parametrize(
        ("error", "status_code", "detail"),
        [
            (ValidationError("Tag parameter is required"), 400, "Tag parameter is required"),
            (PostNotFoundError(3), 404, "Post with ID 3 not found"),
            (PostNotFoundError(), 404, "Post not found"),
            (TransactionError("Failed to create post"), 500, "Failed to create post"),
            (DatabaseError(), 500, "Database Error"),
            (SearchIndexError(), 500, "Search failed"),
            (RelatedContentError(), 500, "Failed to retrieve related posts"),
            (CacheKeyError(), 500, "Cache unavailable"),
        ],
    )
    def test_status_and_detail(self, error: BaseAppError, status_code: int, detail: str) -> None:
        assert error.status_code == status_code
        assert error.detail == detail

    def test_related_error_is_search_error(self) -> None:
        assert isinstance(RelatedContentError(), SearchIndexError)


class TestCreateExceptionHandler:
    """Tests for create_exception_handler."""

    @pytest.mark.asyncio
    async def test_single_detail_response(self) -> None:
        logger = MagicMock()
        handler = create_exception_handler(logger)

        response = await handler(_request(), PostNotFoundError(1))

        assert response.status_code == 404
        assert response.body == b'{"detail":"Post with ID 1 not found"}'
        logger.warning.assert_called_once_with(
            "Post with ID 1 not found for ip: 10.0.0.1 for endpoint /api/v1/posts/1",
        )

    @pytest.mark.asyncio
    async def test_unknown_exception_is_500(self) -> None:
        handler = create_exception_handler(MagicMock())

        response = await handler(_request(), RuntimeError("boom"))

        assert response.status_code == 500
        assert response.body == b'{"detail":"Internal Server Error"}'
