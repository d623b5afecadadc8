"""Row-window parameters for hand-written paged queries."""

from __future__ import annotations

from typing import Any


def page_params(
    page_number: int,
    page_size: int,
    params: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Add ``offset``, ``start_row``, ``end_row`` and ``limit`` to ``params``.

    Rows are numbered from 1. Nothing is added unless both the page number
    and the page size are positive.

    Args:
        page_number: Page number (1-indexed)
        page_size: Rows per page
        params: Query parameters to extend, a new dict when omitted

    Returns:
        The same ``params`` dict
    """
    if params is None:
        params = {}
    if page_number > 0 and page_size > 0:
        offset = page_size * (page_number - 1)
        params["offset"] = offset
        params["start_row"] = offset + 1
        params["end_row"] = page_size * page_number
        params["limit"] = page_size
    return params
