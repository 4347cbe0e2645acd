"""Pagination helpers for listing pages."""

from collections.abc import Sequence
from typing import TypeVar

from rental_listing.listing.constants import ELLIPSIS, PAGE_WINDOW_SIZE
from rental_listing.listing.models import PageWindow

T = TypeVar("T")


def total_pages(total_items: int, page_size: int) -> int:
    """Number of pages needed for ``total_items`` (0 when there are none)."""
    if total_items <= 0 or page_size <= 0:
        return 0
    return (total_items + page_size - 1) // page_size


def clamp_page(page: int, pages: int) -> int:
    """Clamp a requested page into ``[1, pages]`` (1 when there are no pages)."""
    return max(1, min(page, max(pages, 1)))


def compute_page_window(current_page: int, pages: int) -> list[int | str]:
    """Calculate which page numbers to display in pagination.

    Shows every page when there are at most five. Otherwise shows five
    consecutive pages around the current one, plus the first and last page
    with an ellipsis marking any gap.
    """
    if pages <= PAGE_WINDOW_SIZE:
        return list(range(1, pages + 1))

    current_page = clamp_page(current_page, pages)
    half = PAGE_WINDOW_SIZE // 2
    start = max(1, current_page - half)
    end = min(pages, current_page + half)

    if current_page <= half + 1:
        end = min(pages, PAGE_WINDOW_SIZE)
    elif current_page >= pages - half:
        start = max(1, pages - PAGE_WINDOW_SIZE + 1)

    tokens: list[int | str] = []
    if start > 1:
        tokens.append(1)
        if start > 2:
            tokens.append(ELLIPSIS)

    tokens.extend(range(start, end + 1))

    if end < pages:
        if end < pages - 1:
            tokens.append(ELLIPSIS)
        tokens.append(pages)

    return tokens


def build_page_window(current_page: int, pages: int) -> PageWindow:
    """Page links plus previous/next state for the current page.

    Pagination is hidden entirely when there is at most one page.
    """
    page = clamp_page(current_page, pages)
    return PageWindow(
        page=page,
        total_pages=pages,
        tokens=compute_page_window(page, pages),
        has_previous=page > 1,
        has_next=page < pages,
        visible=pages > 1,
    )


def paginate(items: Sequence[T], page: int, page_size: int) -> list[T]:
    """Return the slice of ``items`` shown on ``page`` (clamped)."""
    page = clamp_page(page, total_pages(len(items), page_size))
    start = (page - 1) * page_size
    return list(items[start : start + page_size])
