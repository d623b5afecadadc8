"""Service layer base: one service per model, backed by a :class:`Mapper`.

Concrete services name their model explicitly::

    class UserService(AbstractService[User, int]):
        model = User

    service = UserService(session)
    page = await service.find_page(page_size=20, page_number=3)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any, ClassVar, Generic, Protocol, TypeVar, runtime_checkable

from sqlalchemy.ext.asyncio import AsyncSession

from keeper.config import settings
from keeper.core.condition import Condition
from keeper.core.mapper import Mapper
from keeper.core.order_by import OrderBy
from keeper.core.pagination import PageResult, new_single_table_pagination
from keeper.core.paging import clear_page, start_page
from keeper.core.query_page import page_params
from keeper.database.models.base import Base
from keeper.errors import InvalidArgumentError, ServiceError
from keeper.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T", bound=Base)
PK = TypeVar("PK")


@runtime_checkable
class Keyed(Protocol):
    """Entities that can receive their primary key from a service."""

    def assign_key(self, key: Any) -> None: ...


class Service(ABC, Generic[T, PK]):
    """CRUD and query operations every entity service offers."""

    # ---------- write side ----------

    @abstractmethod
    async def insert(self, entity: T) -> T:
        raise NotImplementedError

    @abstractmethod
    async def batch_insert(self, entities: Iterable[T]) -> list[T]:
        """Persist several entities. Keys are not generated for them."""
        raise NotImplementedError

    @abstractmethod
    async def update(self, model: T) -> int:
        raise NotImplementedError

    @abstractmethod
    async def update_by_id(self, model: T, id: PK) -> int:
        raise NotImplementedError

    @abstractmethod
    async def update_by_condition(self, model: T, condition: Condition | None) -> int:
        raise NotImplementedError

    @abstractmethod
    async def remove(self, id: PK) -> int:
        raise NotImplementedError

    @abstractmethod
    async def remove_by_example(self, example: T | None) -> int:
        raise NotImplementedError

    @abstractmethod
    async def remove_by_condition(self, condition: Condition | None) -> int:
        raise NotImplementedError

    @abstractmethod
    async def remove_by_ids(self, ids: str) -> int:
        """Delete by a comma-separated key list, e.g. ``"1,2,3"``."""
        raise NotImplementedError

    @abstractmethod
    async def remove_by_id_list(self, id_list: Iterable[PK]) -> int:
        raise NotImplementedError

    # ---------- read side ----------

    @abstractmethod
    async def get(self, id: PK) -> T | None:
        raise NotImplementedError

    @abstractmethod
    async def find_all(self) -> list[T]:
        raise NotImplementedError

    @abstractmethod
    async def find_ordered(self, order_by: OrderBy) -> list[T]:
        raise NotImplementedError

    @abstractmethod
    async def find_page(
        self,
        page_size: int,
        page_number: int,
        order_by: OrderBy | None = None,
    ) -> PageResult[T]:
        raise NotImplementedError

    @abstractmethod
    async def find_by_example(self, example: T) -> list[T]:
        """Rows equal to ``example`` on its non-None columns. No ordering."""
        raise NotImplementedError

    @abstractmethod
    async def find_by_condition(self, condition: Condition | None) -> list[T]:
        raise NotImplementedError

    @abstractmethod
    async def find_page_by_condition(
        self,
        condition: Condition | None,
        page_size: int,
        page_number: int,
        order_by: OrderBy | None = None,
    ) -> PageResult[T]:
        raise NotImplementedError

    @abstractmethod
    async def find_by(self, field_name: str, value: Any) -> T | None:
        """Find by a model attribute name (not the column name); ``value`` must be unique."""
        raise NotImplementedError

    @abstractmethod
    async def find_by_ids(self, ids: str) -> list[T]:
        """Find by a comma-separated key list, e.g. ``"1,2,3"``."""
        raise NotImplementedError

    @abstractmethod
    async def count(self) -> int:
        raise NotImplementedError

    @abstractmethod
    async def count_column(self, column: str) -> int:
        raise NotImplementedError

    @abstractmethod
    async def count_by_example(self, example: T) -> int:
        raise NotImplementedError

    @abstractmethod
    async def count_by_condition(self, condition: Condition | None) -> int:
        raise NotImplementedError


class AbstractService(Service[T, PK]):
    """Service implementation delegating to a :class:`Mapper` for ``model``."""

    model: ClassVar[type[Base]]

    def __init__(
        self,
        session: AsyncSession,
        mapper: Mapper[T] | None = None,
        navigate_pages: int | None = None,
    ):
        if getattr(type(self), "model", None) is None:
            raise ServiceError(f"{type(self).__name__} does not declare a model")
        self.session = session
        self.mapper = mapper or Mapper(session, self.model)
        self.navigate_pages = navigate_pages or settings.navigate_pages

    def _split_ids(self, ids: str) -> list[Any]:
        return [self.mapper.coerce_key(part) for part in ids.split(",") if part.strip()]

    # ---------- write side ----------

    async def insert(self, entity: T) -> T:
        return await self.mapper.insert(entity)

    async def batch_insert(self, entities: Iterable[T]) -> list[T]:
        return await self.mapper.insert_list(entities)

    async def update(self, model: T) -> int:
        return await self.mapper.update_by_primary_key_selective(model)

    async def update_by_id(self, model: T, id: PK) -> int:
        if not isinstance(model, Keyed):
            raise ServiceError(
                f"{type(model).__name__} does not implement assign_key()"
            )
        try:
            model.assign_key(id)
        except (AttributeError, TypeError, ValueError) as e:
            raise ServiceError(
                f"Could not assign key {id!r} to {type(model).__name__}: {e}"
            ) from e
        return await self.mapper.update_by_primary_key_selective(model)

    async def update_by_condition(self, model: T, condition: Condition | None) -> int:
        if condition is None:
            raise InvalidArgumentError("the condition is null when updating the records!")
        return await self.mapper.update_by_condition_selective(model, condition)

    async def remove(self, id: PK) -> int:
        return await self.mapper.delete_by_primary_key(id)

    async def remove_by_example(self, example: T | None) -> int:
        if example is None:
            raise InvalidArgumentError("the condition is null when deleting the records!")
        return await self.mapper.delete(example)

    async def remove_by_condition(self, condition: Condition | None) -> int:
        if condition is None:
            raise InvalidArgumentError("the condition is null when deleting the records!")
        return await self.mapper.delete_by_condition(condition)

    async def remove_by_ids(self, ids: str) -> int:
        return await self.remove_by_id_list(self._split_ids(ids))

    async def remove_by_id_list(self, id_list: Iterable[PK]) -> int:
        keys = [self.mapper.coerce_key(key) for key in id_list]
        removed = await self.mapper.delete_by_ids(keys)
        logger.debug(
            "Removed by id list",
            model=self.model.__name__,
            requested=len(keys),
            removed=removed,
        )
        return removed

    # ---------- read side ----------

    async def get(self, id: PK) -> T | None:
        return await self.mapper.select_by_primary_key(id)

    async def find_all(self) -> list[T]:
        return await self.mapper.select_all()

    async def find_ordered(self, order_by: OrderBy) -> list[T]:
        condition = Condition(self.model).set_order_by_clause(str(order_by))
        return await self.mapper.select_by_condition(condition)

    async def find_page(
        self,
        page_size: int,
        page_number: int,
        order_by: OrderBy | None = None,
    ) -> PageResult[T]:
        return await self.find_page_by_condition(None, page_size, page_number, order_by)

    async def find_by_example(self, example: T) -> list[T]:
        return await self.mapper.select(example)

    async def find_by_condition(self, condition: Condition | None) -> list[T]:
        return await self.mapper.select_by_condition(condition)

    async def find_page_by_condition(
        self,
        condition: Condition | None,
        page_size: int,
        page_number: int,
        order_by: OrderBy | None = None,
    ) -> PageResult[T]:
        """Fetch one page of the rows matching ``condition``.

        Paging only applies when ``page_size > 0`` and ``page_number >= 0``;
        otherwise every matching row is returned as a single page.
        """
        if order_by is not None:
            condition = condition if condition is not None else Condition(self.model)
            condition.set_order_by_clause(str(order_by))
        if page_size > 0 and page_number >= 0:
            start_page(page_number, page_size)
        try:
            rows = await self.mapper.select_by_condition(condition)
        finally:
            clear_page()
        return new_single_table_pagination(rows, self.navigate_pages)

    async def find_by(self, field_name: str, value: Any) -> T | None:
        """Find the single row whose ``field_name`` equals ``value``.

        Raises:
            ServiceError: ``field_name`` is not a mapped column of the model
            sqlalchemy.exc.MultipleResultsFound: more than one row matches
        """
        try:
            column = self.mapper.column(field_name)
        except InvalidArgumentError as e:
            raise ServiceError(str(e)) from e
        return await self.mapper.select_one_by(column == value)

    async def find_by_ids(self, ids: str) -> list[T]:
        return await self.mapper.select_by_ids(self._split_ids(ids))

    async def count(self) -> int:
        return await self.mapper.select_count()

    async def count_column(self, column: str) -> int:
        """Count rows where ``column`` is not NULL."""
        condition = Condition(self.model).set_count_property(column)
        return await self.mapper.select_count_by_condition(condition)

    async def count_by_example(self, example: T) -> int:
        return await self.mapper.select_count(example)

    async def count_by_condition(self, condition: Condition | None) -> int:
        return await self.mapper.select_count_by_condition(condition)

    # ---------- hand-written queries ----------

    def page_params(
        self,
        condition: Any,
        page_size: int = 0,
        page_number: int = 0,
        order_by: OrderBy | None = None,
    ) -> dict[str, Any]:
        """Bind parameters for a custom multi-table query.

        The dict always holds ``condition``; paging keys are added as by
        :func:`keeper.core.query_page.page_params` and ``order_by`` when given.
        """
        params: dict[str, Any] = {"condition": condition}
        page_params(page_number, page_size, params)
        if order_by is not None:
            params["order_by"] = str(order_by)
        return params
