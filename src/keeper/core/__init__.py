"""Core data-access package: mapper, service base and pagination."""

from keeper.core.condition import Condition
from keeper.core.mapper import Mapper
from keeper.core.order_by import OrderBy
from keeper.core.pagination import (
    PageResult,
    PaginationCalculator,
    new_multi_table_pagination,
    new_single_table_pagination,
)
from keeper.core.paging import Page, PageRequest, clear_page, start_page
from keeper.core.query_page import page_params
from keeper.core.service import AbstractService, Keyed, Service

__all__ = [
    # Query building
    "Condition",
    "OrderBy",
    "page_params",
    # Persistence
    "Mapper",
    "Service",
    "AbstractService",
    "Keyed",
    # Paging
    "Page",
    "PageRequest",
    "start_page",
    "clear_page",
    "PageResult",
    "PaginationCalculator",
    "new_single_table_pagination",
    "new_multi_table_pagination",
]
