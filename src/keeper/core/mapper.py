"""Generic persistence mapper over one ORM model."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, delete, func, inspect, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute
from sqlalchemy.sql.expression import ColumnElement

from keeper.core.condition import Condition
from keeper.core.paging import Page, consume_page
from keeper.database.models.base import Base
from keeper.errors import InvalidArgumentError
from keeper.logging import get_logger

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class Mapper(Generic[ModelT]):
    """CRUD statements for a single model with a single-column primary key.

    An *example* is a model instance used as a filter: every column whose
    loaded value is not None must be equal. Writes only flush; committing is
    left to whoever owns the session.
    """

    def __init__(self, session: AsyncSession, model: type[ModelT]):
        self.session = session
        self.model = model
        self._mapper = inspect(model)
        self._pk_column = self._mapper.primary_key[0]
        self._pk_key = self._mapper.get_property_by_column(self._pk_column).key

    # ---------- columns ----------

    @property
    def primary_key(self) -> InstrumentedAttribute:
        return getattr(self.model, self._pk_key)

    def column(self, name: str) -> InstrumentedAttribute:
        """Mapped column attribute called ``name``."""
        if name not in self._mapper.column_attrs:
            raise InvalidArgumentError(
                f"{self.model.__name__} has no column property {name!r}"
            )
        return getattr(self.model, name)

    def coerce_key(self, value: Any) -> Any:
        """Convert a textual key to the primary key column's Python type."""
        try:
            python_type = self._pk_column.type.python_type
        except NotImplementedError:
            return value
        if isinstance(value, python_type):
            return value
        try:
            return python_type(value.strip() if isinstance(value, str) else value)
        except (TypeError, ValueError) as e:
            raise InvalidArgumentError(
                f"{value!r} is not a valid {self.model.__name__} key"
            ) from e

    def _loaded_values(self, entity: ModelT) -> dict[str, Any]:
        # Read the instance dict directly so expired attributes are not lazy-loaded
        state = inspect(entity).dict
        return {
            attr.key: state[attr.key]
            for attr in self._mapper.column_attrs
            if state.get(attr.key) is not None
        }

    def example_criteria(self, example: ModelT | None) -> list[ColumnElement[bool]]:
        if example is None:
            return []
        return [
            getattr(self.model, key) == value
            for key, value in self._loaded_values(example).items()
        ]

    def _require_criteria(
        self,
        criteria: list[ColumnElement[bool]],
        action: str,
    ) -> list[ColumnElement[bool]]:
        if not criteria:
            raise InvalidArgumentError(
                f"the condition is empty when {action} {self.model.__name__} records"
            )
        return criteria

    def _condition_criteria(
        self,
        condition: Condition | None,
        action: str,
    ) -> list[ColumnElement[bool]]:
        if condition is None or condition.is_empty:
            return self._require_criteria([], action)
        return condition.criteria

    # ---------- read side ----------

    async def _fetch(self, stmt: Select, order_by: str | None = None) -> list[ModelT]:
        request = consume_page()
        if request is None:
            result = await self.session.execute(stmt)
            return list(result.scalars().all())

        count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
        total = (await self.session.execute(count_stmt)).scalar_one()
        result = await self.session.execute(
            stmt.offset(request.offset).limit(request.limit)
        )
        return Page(
            result.scalars().all(),
            page_num=request.page_num,
            page_size=request.page_size,
            total=total,
            order_by=order_by,
        )

    async def select_by_primary_key(self, key: Any) -> ModelT | None:
        return await self.session.get(self.model, key)

    async def select_one(self, example: ModelT) -> ModelT | None:
        """Single row matching ``example``.

        Raises:
            sqlalchemy.exc.MultipleResultsFound: more than one row matches
        """
        stmt = select(self.model).where(*self.example_criteria(example))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def select_one_by(self, *criteria: ColumnElement[bool]) -> ModelT | None:
        result = await self.session.execute(select(self.model).where(*criteria))
        return result.scalar_one_or_none()

    async def select(self, example: ModelT | None) -> list[ModelT]:
        stmt = select(self.model).where(*self.example_criteria(example))
        return await self._fetch(stmt)

    async def select_all(self) -> list[ModelT]:
        return await self._fetch(select(self.model))

    async def select_by_ids(self, ids: Sequence[Any]) -> list[ModelT]:
        if not ids:
            request = consume_page()
            if request is None:
                return []
            return Page([], page_num=request.page_num, page_size=request.page_size, total=0)
        stmt = select(self.model).where(self.primary_key.in_(list(ids)))
        return await self._fetch(stmt)

    async def select_by_condition(self, condition: Condition | None) -> list[ModelT]:
        stmt = select(self.model)
        if condition is None:
            return await self._fetch(stmt)
        return await self._fetch(condition.apply(stmt), condition.order_by_clause)

    async def select_count(self, example: ModelT | None = None) -> int:
        stmt = (
            select(func.count())
            .select_from(self.model)
            .where(*self.example_criteria(example))
        )
        return (await self.session.execute(stmt)).scalar_one()

    async def select_count_by_condition(self, condition: Condition | None) -> int:
        if condition is not None and condition.count_property:
            counted = func.count(self.column(condition.count_property))
        else:
            counted = func.count()
        stmt = select(counted).select_from(self.model)
        if condition is not None:
            stmt = condition.apply(stmt, ordered=False)
        return (await self.session.execute(stmt)).scalar_one()

    # ---------- write side ----------

    async def insert(self, entity: ModelT) -> ModelT:
        self.session.add(entity)
        await self.session.flush()
        return entity

    async def insert_list(self, entities: Iterable[ModelT]) -> list[ModelT]:
        entities = list(entities)
        self.session.add_all(entities)
        await self.session.flush()
        logger.debug("Rows inserted", model=self.model.__name__, rows=len(entities))
        return entities

    async def update_by_primary_key_selective(self, entity: ModelT) -> int:
        """Write the non-None columns of ``entity`` to the row with its key."""
        values = self._loaded_values(entity)
        key = values.pop(self._pk_key, None)
        if key is None:
            raise InvalidArgumentError(
                f"{self.model.__name__} has no primary key value to update by"
            )
        if not values:
            return 0
        stmt = update(self.model).where(self.primary_key == key).values(**values)
        result = await self.session.execute(stmt)
        logger.debug(
            "Row updated", model=self.model.__name__, key=key, rows=result.rowcount
        )
        return result.rowcount

    async def update_by_condition_selective(
        self,
        entity: ModelT,
        condition: Condition | None,
    ) -> int:
        """Write the non-None columns of ``entity`` to every matching row."""
        criteria = self._condition_criteria(condition, "updating")
        values = self._loaded_values(entity)
        values.pop(self._pk_key, None)
        if not values:
            return 0
        stmt = update(self.model).where(*criteria).values(**values)
        result = await self.session.execute(stmt)
        logger.debug(
            "Rows updated by condition",
            model=self.model.__name__,
            rows=result.rowcount,
        )
        return result.rowcount

    async def _delete_where(self, *criteria: ColumnElement[bool]) -> int:
        result = await self.session.execute(delete(self.model).where(*criteria))
        logger.debug("Rows deleted", model=self.model.__name__, rows=result.rowcount)
        return result.rowcount

    async def delete_by_primary_key(self, key: Any) -> int:
        return await self._delete_where(self.primary_key == key)

    async def delete(self, example: ModelT | None) -> int:
        criteria = self._require_criteria(self.example_criteria(example), "deleting")
        return await self._delete_where(*criteria)

    async def delete_by_condition(self, condition: Condition | None) -> int:
        criteria = self._condition_criteria(condition, "deleting")
        return await self._delete_where(*criteria)

    async def delete_by_ids(self, ids: Sequence[Any]) -> int:
        if not ids:
            return 0
        return await self._delete_where(self.primary_key.in_(list(ids)))
