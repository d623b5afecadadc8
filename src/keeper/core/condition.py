"""Query condition passed to mapper operations."""

from __future__ import annotations

from typing import Any

from sqlalchemy import Select, text
from sqlalchemy.sql.expression import ColumnElement


class Condition:
    """Filter criteria, order clause and count column for one model.

    Criteria are SQLAlchemy boolean expressions and are ANDed together::

        condition = Condition(User).where(User.active.is_(True))
        condition.set_order_by_clause(str(OrderBy().add("name")))
    """

    def __init__(self, model: type[Any], *criteria: ColumnElement[bool]):
        self.model = model
        self.criteria: list[ColumnElement[bool]] = list(criteria)
        self.order_by_clause: str | None = None
        self.count_property: str | None = None

    def where(self, *criteria: ColumnElement[bool]) -> "Condition":
        self.criteria.extend(criteria)
        return self

    def set_order_by_clause(self, clause: str | None) -> "Condition":
        self.order_by_clause = clause or None
        return self

    def set_count_property(self, column: str | None) -> "Condition":
        self.count_property = column
        return self

    @property
    def is_empty(self) -> bool:
        """True when there are no filter criteria."""
        return not self.criteria

    def apply(self, stmt: Select, ordered: bool = True) -> Select:
        """Add the criteria (and the order clause) to ``stmt``."""
        if self.criteria:
            stmt = stmt.where(*self.criteria)
        if ordered and self.order_by_clause:
            stmt = stmt.order_by(text(self.order_by_clause))
        return stmt

    def __repr__(self) -> str:
        return (
            f"<Condition {self.model.__name__} criteria={len(self.criteria)} "
            f"order_by={self.order_by_clause!r}>"
        )
