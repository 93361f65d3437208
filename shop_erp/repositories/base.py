from __future__ import annotations

import logging
from typing import Any, Generic, Iterable, List, Mapping, Optional, Sequence, Type, TypeVar

from sqlalchemy import Executable, delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shop_erp.core.errors import StoreError
from shop_erp.db.base import Base

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


def _raw_message(exc: SQLAlchemyError) -> str:
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


class BaseRepository:
    """
    Base class for repositories providing common helpers.

    Driver failures are re-raised as StoreError carrying the raw message, after
    the session has been rolled back.
    """

    table_name: str = ""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _fail(self, exc: SQLAlchemyError, operation: str) -> StoreError:
        await self.session.rollback()
        message = _raw_message(exc)
        logger.warning("Store %s on %s failed: %s", operation, self.table_name or "-", message)
        return StoreError(message, operation=operation, table=self.table_name)

    async def execute(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        """Execute a SQLAlchemy statement."""
        try:
            return await self.session.execute(statement, params or {})
        except SQLAlchemyError as exc:
            raise await self._fail(exc, "execute") from exc

    async def scalars(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        """Execute and return scalars."""
        result = await self.execute(statement, params)
        return result.scalars()

    async def scalar_one_or_none(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        """Execute and return a single scalar or None."""
        result = await self.execute(statement, params)
        return result.scalar_one_or_none()

    async def commit(self) -> None:
        """Commit current transaction."""
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            raise await self._fail(exc, "commit") from exc

    async def add_all(self, entities: Iterable[Any]) -> None:
        """Add multiple entities to session."""
        self.session.add_all(list(entities))

    async def add(self, entity: Any) -> None:
        """Add a single entity to session."""
        self.session.add(entity)


class CrudRepository(BaseRepository, Generic[ModelT]):
    """
    Table-level select/insert/update/delete for one model.

    Records are addressed by ``key_field``: the numeric surrogate ``id`` or a
    business code such as ``part_no`` or ``job_id``. Listing supports equality
    filters (a list/tuple value means "one of") and ordering by column names,
    where a leading ``-`` sorts descending.
    """

    model: Type[ModelT]
    key_field: str = "id"
    default_order: Sequence[str] = ("-created_at", "-id")

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.table_name = self.model.__tablename__

    def _column(self, name: str):
        return getattr(self.model, name)

    def _ordering(self, order_by: Sequence[str]) -> list:
        clauses = []
        for name in order_by:
            if name.startswith("-"):
                clauses.append(self._column(name[1:]).desc())
            else:
                clauses.append(self._column(name).asc())
        return clauses

    async def list(
        self,
        *,
        filters: Optional[Mapping[str, Any]] = None,
        order_by: Optional[Sequence[str]] = None,
        limit: Optional[int] = None,
    ) -> List[ModelT]:
        stmt = select(self.model)
        for field, value in (filters or {}).items():
            column = self._column(field)
            if isinstance(value, (list, tuple, set)):
                stmt = stmt.where(column.in_(list(value)))
            else:
                stmt = stmt.where(column == value)
        stmt = stmt.order_by(*self._ordering(order_by or self.default_order))
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(await self.scalars(stmt))

    async def get(self, key: Any) -> Optional[ModelT]:
        stmt = (
            select(self.model)
            .where(self._column(self.key_field) == key)
            .execution_options(populate_existing=True)
        )
        return await self.scalar_one_or_none(stmt)

    async def find_one(self, **match: Any) -> Optional[ModelT]:
        stmt = select(self.model)
        for field, value in match.items():
            stmt = stmt.where(self._column(field) == value)
        return await self.scalar_one_or_none(stmt.limit(1))

    async def insert(self, values: Mapping[str, Any]) -> ModelT:
        row = self.model(**dict(values))
        await self.add(row)
        await self.commit()
        stmt = select(self.model).where(self.model.id == row.id).execution_options(populate_existing=True)
        return (await self.scalar_one_or_none(stmt))  # type: ignore

    async def insert_many(self, rows: Iterable[Mapping[str, Any]]) -> int:
        entities = [self.model(**dict(values)) for values in rows]
        await self.add_all(entities)
        await self.commit()
        return len(entities)

    async def update(self, key: Any, values: Mapping[str, Any]) -> Optional[ModelT]:
        if values:
            stmt = (
                update(self.model)
                .where(self._column(self.key_field) == key)
                .values(**dict(values))
                .execution_options(synchronize_session="fetch")
            )
            await self.execute(stmt)
            await self.commit()
        return await self.get(values.get(self.key_field, key))

    async def upsert(self, match: Mapping[str, Any], values: Mapping[str, Any]) -> ModelT:
        """Update the row matching every field in ``match`` or insert a new one."""
        existing = await self.find_one(**match)
        if existing is None:
            return await self.insert({**match, **values})
        stmt = (
            update(self.model)
            .where(self.model.id == existing.id)
            .values(**dict(values))
            .execution_options(synchronize_session="fetch")
        )
        await self.execute(stmt)
        await self.commit()
        stmt = select(self.model).where(self.model.id == existing.id).execution_options(populate_existing=True)
        return (await self.scalar_one_or_none(stmt))  # type: ignore

    async def delete(self, key: Any) -> None:
        stmt = delete(self.model).where(self._column(self.key_field) == key)
        await self.execute(stmt)
        await self.commit()
