# tests/utils/test_pagination.py
"""Tests for page/limit normalization and pagination metadata."""

import pytest

from blog_api.utils.pagination import (
    build_pagination,
    normalize_limit,
    normalize_page,
    offset,
    total_pages,
)


class TestNormalize:
    """Tests for normalize_page and normalize_limit."""

    @pytest.mark.parametrize(("page", "expected"), [(None, 1), (0, 1), (-3, 1), (1, 1), (7, 7)])
    def test_page(self, page: int | None, expected: int) -> None:
        assert normalize_page(page) == expected

    @pytest.mark.parametrize(
        ("limit", "expected"),
        [(None, 10), (0, 1), (-5, 1), (25, 25), (100, 100), (101, 100), (5000, 100)],
    )
    def test_limit(self, limit: int | None, expected: int) -> None:
        assert normalize_limit(limit, default=10) == expected


class TestBuildPagination:
    """Tests for build_pagination."""

    def test_offset_and_total_pages(self) -> None:
        assert offset(3, 10) == 20
        assert total_pages(21, 10) == 3
        assert total_pages(0, 10) == 0

    def test_middle_page(self) -> None:
        meta = build_pagination(page=2, limit=10, total_count=25)

        assert meta.total_pages == 3
        assert meta.has_next is True
        assert meta.has_prev is True

    def test_page_past_end(self) -> None:
        """Test a page beyond the last one is reported without a next page."""
        meta = build_pagination(page=9, limit=10, total_count=25)

        assert meta.current_page == 9
        assert meta.has_next is False
        assert meta.has_prev is True

    def test_empty_collection(self) -> None:
        meta = build_pagination(page=1, limit=10, total_count=0)

        assert meta.total_pages == 0
        assert meta.has_next is False
        assert meta.has_prev is False
