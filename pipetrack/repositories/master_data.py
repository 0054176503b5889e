from __future__ import annotations

from typing import List

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from pipetrack.db.models.master_data import MasterDataValue
from .base import BaseRepository

# Dialect INSERT constructs that support ON CONFLICT DO NOTHING.
_UPSERT_INSERTS = {"postgresql": postgresql_insert, "sqlite": sqlite_insert}


class MasterDataRepository(BaseRepository):
    """Repository for master-data option values."""

    async def list_values(self, category: str) -> List[str]:
        stmt = (
            select(MasterDataValue.value)
            .where(MasterDataValue.category == category)
            .order_by(MasterDataValue.position.asc(), MasterDataValue.created_at.asc())
        )
        res = await self.scalars(stmt)
        return list(res)

    async def list_all(self) -> List[MasterDataValue]:
        stmt = select(MasterDataValue).order_by(
            MasterDataValue.category.asc(), MasterDataValue.position.asc(), MasterDataValue.created_at.asc()
        )
        res = await self.scalars(stmt)
        return list(res)

    async def exists(self, category: str, value: str) -> bool:
        stmt = select(MasterDataValue.id).where(
            MasterDataValue.category == category, MasterDataValue.value == value
        )
        return (await self.scalar_one_or_none(stmt)) is not None

    async def next_position(self, category: str) -> int:
        stmt = select(func.coalesce(func.max(MasterDataValue.position), -1)).where(
            MasterDataValue.category == category
        )
        res = await self.execute(stmt)
        return int(res.scalar_one()) + 1

    async def append(self, category: str, value: str, position: int) -> bool:
        """
        Insert the value unless (category, value) already exists, in one
        statement: ON CONFLICT DO NOTHING on the unique pair. A concurrent
        writer that got there first is not an error.

        Returns:
            True if a row was inserted.
        """
        dialect = self.session.get_bind().dialect.name
        insert = _UPSERT_INSERTS.get(dialect)
        if insert is None:
            raise NotImplementedError(f"No conflict-free insert for dialect '{dialect}'")
        stmt = (
            insert(MasterDataValue)
            .values(category=category, value=value, position=position)
            .on_conflict_do_nothing(index_elements=["category", "value"])
        )
        result = await self.execute(stmt)
        return bool(result.rowcount)
