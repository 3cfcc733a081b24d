"""Pagination utilities.

Two flavours share this module:
- PaginationParams / pagination_params: page + per_page query parameters
  for admin list endpoints (page is 1-indexed, per_page max 100).
- Page / paginate: slicing an in-memory option list into fixed-size
  keyboard pages for wizard steps (page is 0-indexed and always clamped).
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from fastapi import Query

T = TypeVar("T")


@dataclass
class PaginationParams:
    """Pagination query parameters.

    Attributes:
        page: Current page number (1-indexed).
        per_page: Number of items per page.
    """

    page: int
    per_page: int

    @property
    def offset(self) -> int:
        """Number of items to skip (0 for page 1)."""
        return (self.page - 1) * self.per_page

    @property
    def limit(self) -> int:
        """Maximum number of items to return (same as per_page)."""
        return self.per_page


def pagination_params(
    page: int = Query(default=1, ge=1, description="Page number (1-indexed)"),
    per_page: int = Query(
        default=20,
        ge=1,
        le=100,
        description="Items per page (max 100)",
    ),
) -> PaginationParams:
    """FastAPI dependency for pagination query parameters.

    Args:
        page: Page number (default 1, must be >= 1).
        per_page: Items per page (default 20, between 1 and 100).

    Returns:
        PaginationParams with validated page and per_page.
    """
    return PaginationParams(page=page, per_page=per_page)


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of a sliced option list.

    Attributes:
        items: Items on the current page.
        current_page: Page index (0-indexed), clamped into range.
        total_pages: Number of pages; at least 1 even for an empty list.
    """

    items: list[T]
    current_page: int
    total_pages: int

    @property
    def has_previous(self) -> bool:
        """True when a page exists before the current one."""
        return self.current_page > 0

    @property
    def has_next(self) -> bool:
        """True when a page exists after the current one."""
        return self.current_page < self.total_pages - 1


def paginate(items: Sequence[T], page_size: int, current_page: int) -> Page[T]:
    """Slice items into the requested page.

    Out-of-range page numbers are clamped to [0, total_pages - 1], so a
    stale page index (e.g. after the option list shrank) never fails.

    Args:
        items: Full option list.
        page_size: Items per page (must be >= 1).
        current_page: Requested page index (0-indexed).

    Returns:
        Page with the visible items and clamped page index.

    Raises:
        ValueError: If page_size is less than 1.
    """
    if page_size < 1:
        msg = f"page_size must be at least 1. Got: {page_size}"
        raise ValueError(msg)

    total_pages = max(1, math.ceil(len(items) / page_size))
    page = max(0, min(current_page, total_pages - 1))
    start = page * page_size
    return Page(
        items=list(items[start : start + page_size]),
        current_page=page,
        total_pages=total_pages,
    )
