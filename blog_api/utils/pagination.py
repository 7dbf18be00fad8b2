"""Page/limit normalization and pagination metadata."""

from math import ceil

from blog_api.configs.settings import MAX_PAGE_SIZE
from blog_api.schemas.pagination import PaginationResponse


def normalize_page(page: int | None) -> int:
    """Missing or non-positive pages fall back to the first page."""
    if page is None or page < 1:
        return 1
    return page


def normalize_limit(limit: int | None, default: int) -> int:
    """
    Clamp a page size into ``[1, MAX_PAGE_SIZE]``.

    Args:
        limit: Requested page size, ``None`` when absent.
        default: Size used when nothing was requested.

    Returns:
        int: Effective page size.
    """
    if limit is None:
        return default
    return max(1, min(limit, MAX_PAGE_SIZE))


def offset(page: int, limit: int) -> int:
    return (page - 1) * limit


def total_pages(total_count: int, limit: int) -> int:
    return ceil(total_count / limit)


def build_pagination(page: int, limit: int, total_count: int) -> PaginationResponse:
    """
    Build pagination metadata for an already-normalized page and limit.

    Pages past the end are legal: ``has_next`` is False and the caller
    returns an empty list.
    """
    pages = total_pages(total_count, limit)
    return PaginationResponse(
        current_page=page,
        total_pages=pages,
        total_count=total_count,
        limit=limit,
        has_next=page < pages,
        has_prev=page > 1,
    )
