from __future__ import annotations

from typing import Any, Iterable, List, Optional, TypeVar

from sqlalchemy import Executable, Select
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")


class BaseRepository:
    """
    Query helpers shared by the aggregate repositories.

    Repositories never commit on behalf of a service: the session belongs to
    the caller's unit of work. The user repository is the exception, it backs
    single-statement admin endpoints.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def execute(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        return await self.session.execute(statement, params or {})

    async def scalars(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        return (await self.execute(statement, params)).scalars()

    async def scalar_one_or_none(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        return (await self.execute(statement, params)).scalar_one_or_none()

    async def fetch_page(self, statement: Select, limit: Optional[int] = None, offset: int = 0) -> List[Any]:
        """Run an ordered select with optional paging; no limit means all rows."""
        statement = statement.offset(offset)
        if limit is not None:
            statement = statement.limit(limit)
        return list(await self.scalars(statement))

    async def insert(self, entity: T) -> T:
        """Add and flush so database defaults and the primary key are populated."""
        self.session.add(entity)
        await self.session.flush()
        return entity

    async def add(self, entity: Any) -> None:
        self.session.add(entity)

    async def add_all(self, entities: Iterable[Any]) -> None:
        self.session.add_all(list(entities))

    async def flush(self) -> None:
        await self.session.flush()

    async def commit(self) -> None:
        await self.session.commit()
