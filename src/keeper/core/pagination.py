"""Page metadata for navigation controls.

Usage with the paged-query trigger::

    start_page(page_number, page_size)
    users = await user_mapper.select_all()
    page = new_single_table_pagination(users)

When the rows come from a hand-written query whose total is counted
separately, use :func:`new_multi_table_pagination` instead.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict, dataclass
from typing import Any, Generic, TypeVar

from keeper.core.paging import Page

T = TypeVar("T")

DEFAULT_NAVIGATE_PAGES = 8


@dataclass(frozen=True)
class PageResult(Generic[T]):
    """One page of a larger collection plus navigation meta-data."""

    items: tuple[T, ...]
    page_number: int
    page_size: int
    total_count: int
    navigation_window: int

    # Rows on this page and their 1-based row numbers (0 when empty)
    size: int
    start_row: int
    end_row: int
    order_by: str | None

    page_count: int
    navigable_pages: tuple[int, ...]
    first_page: int
    previous_page: int
    next_page: int
    last_page: int

    is_first_page: bool
    is_last_page: bool
    has_previous_page: bool
    has_next_page: bool

    def as_dict(self) -> dict[str, Any]:
        """Plain-dict view for serializers."""
        data = asdict(self)
        data["items"] = list(self.items)
        data["navigable_pages"] = list(self.navigable_pages)
        return data


def count_pages(total_count: int, page_size: int) -> int:
    """Number of pages needed for ``total_count`` rows.

    Truncating quotient plus one when there is a remainder, which is the
    ceiling for non-negative totals.
    """
    if page_size <= 0:
        return 0
    quotient = abs(total_count) // page_size
    if total_count < 0:
        quotient = -quotient
    return quotient + (0 if total_count % page_size == 0 else 1)


class PaginationCalculator:
    """Computes page counts and the sliding navigation window."""

    def __init__(self, navigation_window: int = DEFAULT_NAVIGATE_PAGES):
        self.navigation_window = navigation_window

    def navigable_pages(
        self,
        page_number: int,
        page_count: int,
        navigation_window: int | None = None,
    ) -> tuple[int, ...]:
        """Contiguous run of page numbers centred on ``page_number``."""
        window = self.navigation_window if navigation_window is None else navigation_window

        if page_count <= window:
            return tuple(range(1, page_count + 1))

        start = page_number - window // 2
        end = page_number + window // 2

        if start < 1:
            return tuple(range(1, window + 1))
        if end > page_count:
            return tuple(range(page_count - window + 1, page_count + 1))
        return tuple(range(start, start + window))

    def compute(
        self,
        items: Sequence[T],
        page_number: int,
        page_size: int,
        total_count: int,
        navigation_window: int | None = None,
        order_by: str | None = None,
    ) -> PageResult[T]:
        """Build the page meta-data for already fetched ``items``.

        Never raises. A zero page size gives no navigable pages; a page
        number past the end gets the last window.
        """
        if navigation_window is None:
            navigation_window = self.navigation_window
        items = tuple(items)
        size = len(items)
        page_count = count_pages(total_count, page_size)
        pages = self.navigable_pages(page_number, page_count, navigation_window)

        if size:
            start_row = max(page_number - 1, 0) * max(page_size, 0) + 1
            end_row = start_row + size - 1
        else:
            start_row = end_row = 0

        return PageResult(
            items=items,
            page_number=page_number,
            page_size=page_size,
            total_count=total_count,
            navigation_window=navigation_window,
            size=size,
            start_row=start_row,
            end_row=end_row,
            order_by=order_by,
            page_count=page_count,
            navigable_pages=pages,
            first_page=pages[0] if pages else 0,
            previous_page=page_number - 1 if page_number > 1 else 0,
            next_page=page_number + 1 if page_number < page_count else 0,
            last_page=pages[-1] if pages else 0,
            is_first_page=page_number == 1,
            is_last_page=page_number == page_count,
            has_previous_page=page_number > 1,
            has_next_page=page_number < page_count,
        )


def new_multi_table_pagination(
    items: Sequence[T],
    page_number: int,
    page_size: int,
    total_count: int,
    navigate_pages: int = DEFAULT_NAVIGATE_PAGES,
) -> PageResult[T]:
    """Paginate rows of a hand-written query whose total is known.

    Args:
        items: Rows of the requested page
        page_number: Page number (1-indexed)
        page_size: Rows per page
        total_count: Rows across all pages
        navigate_pages: Page numbers to expose for navigation

    Returns:
        PageResult with the rows and navigation meta-data
    """
    return PaginationCalculator(navigate_pages).compute(
        items, page_number, page_size, total_count
    )


def new_single_table_pagination(
    rows: Sequence[T],
    navigate_pages: int = DEFAULT_NAVIGATE_PAGES,
) -> PageResult[T]:
    """Paginate the result of a mapper select.

    A :class:`~keeper.core.paging.Page` carries its own page number, size
    and total. Any other sequence is taken as a single page holding every
    row.
    """
    calculator = PaginationCalculator(navigate_pages)
    if isinstance(rows, Page):
        return calculator.compute(
            rows, rows.page_num, rows.page_size, rows.total, order_by=rows.order_by
        )
    return calculator.compute(rows, 1, len(rows), len(rows))
