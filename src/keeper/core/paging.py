"""Paged-query trigger.

``start_page`` marks the next select run by any mapper in the current
context as paged. The mapper consumes the request, counts the unpaged
statement and returns only the requested rows as a :class:`Page`.
"""

from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass
from typing import Generic, Iterable, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class PageRequest:
    """A pending page of the next select."""

    page_num: int
    page_size: int

    @property
    def offset(self) -> int:
        return max(self.page_num - 1, 0) * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size


_pending_page: ContextVar[PageRequest | None] = ContextVar(
    "keeper_pending_page", default=None
)


def start_page(page_num: int, page_size: int) -> PageRequest:
    """Page the next select executed in this context."""
    request = PageRequest(page_num=page_num, page_size=page_size)
    _pending_page.set(request)
    return request


def consume_page() -> PageRequest | None:
    """Return and clear the pending request, if any."""
    request = _pending_page.get()
    if request is not None:
        _pending_page.set(None)
    return request


def clear_page() -> None:
    """Drop a pending request that will not be used."""
    _pending_page.set(None)


class Page(list, Generic[T]):
    """Rows of one page, carrying the total of the unpaged query."""

    def __init__(
        self,
        rows: Iterable[T],
        page_num: int,
        page_size: int,
        total: int,
        order_by: str | None = None,
    ):
        super().__init__(rows)
        self.page_num = page_num
        self.page_size = page_size
        self.total = total
        self.order_by = order_by

    @property
    def pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return (self.total + self.page_size - 1) // self.page_size

    def __repr__(self) -> str:
        return (
            f"<Page {self.page_num}/{self.pages} size={self.page_size} "
            f"total={self.total} rows={list.__repr__(self)}>"
        )
