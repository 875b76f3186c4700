import logging
from contextlib import asynccontextmanager
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Type, TypeVar

from fastapi import Depends
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from app.core.database import get_session
from app.core.exceptions import StoreFailure

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=SQLModel)


class RecordStore(Protocol):
    """The queries the services need from persistence; nothing else."""

    async def find_by_id(self, model: Type[ModelT], record_id: Any) -> Optional[ModelT]:
        ...

    async def list_filtered(
        self,
        model: Type[ModelT],
        *criteria: Any,
        order_by: Sequence[Any] = (),
        limit: Optional[int] = None,
    ) -> List[ModelT]:
        ...

    async def update_by_id(
        self,
        model: Type[ModelT],
        record_id: Any,
        values: Dict[str, Any],
        require_null: Sequence[str] = (),
        require_set: Sequence[str] = (),
    ) -> Optional[ModelT]:
        ...

    async def create_with(self, parent: ModelT, build_child: Callable[[ModelT], SQLModel]) -> ModelT:
        ...


class SqlRecordStore:
    """RecordStore over one AsyncSession; the caller owns the session lifecycle."""

    def __init__(self, session: AsyncSession):
        self.session = session

    @asynccontextmanager
    async def _store_errors(self):
        try:
            yield
        except SQLAlchemyError as exc:
            await self.session.rollback()
            message = str(getattr(exc, "orig", None) or exc)
            logger.error("Store call failed: %s", message)
            raise StoreFailure(message) from exc

    async def find_by_id(self, model, record_id):
        async with self._store_errors():
            return await self.session.get(model, record_id, populate_existing=True)

    async def list_filtered(self, model, *criteria, order_by=(), limit=None):
        stmt = select(model)
        if criteria:
            stmt = stmt.where(*criteria)
        if order_by:
            stmt = stmt.order_by(*order_by)
        if limit is not None:
            stmt = stmt.limit(limit)
        async with self._store_errors():
            res = await self.session.execute(stmt)
            return list(res.scalars().all())

    async def update_by_id(self, model, record_id, values, require_null=(), require_set=()):
        """Update one row only if the guard columns still hold.

        Returns the refreshed row, or None when no row matched (missing id or a
        guard that no longer holds).
        """
        conditions = [model.id == record_id]
        conditions += [getattr(model, col).is_(None) for col in require_null]
        conditions += [getattr(model, col).is_not(None) for col in require_set]
        stmt = (
            update(model)
            .where(*conditions)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        async with self._store_errors():
            res = await self.session.execute(stmt)
            if res.rowcount == 0:
                await self.session.rollback()
                return None
            await self.session.commit()
            return await self.session.get(model, record_id, populate_existing=True)

    async def create_with(self, parent, build_child):
        """Insert ``parent`` and the row ``build_child(parent)`` in one commit.

        The parent is flushed first so the child can use its generated id; if
        either insert fails neither row is kept.
        """
        async with self._store_errors():
            self.session.add(parent)
            await self.session.flush()
            child = build_child(parent)
            self.session.add(child)
            await self.session.commit()
            await self.session.refresh(parent)
        return parent


async def get_record_store(session: AsyncSession = Depends(get_session)) -> RecordStore:
    """Dependency that yields a RecordStore bound to the request's session."""
    return SqlRecordStore(session)
