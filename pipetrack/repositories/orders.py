from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import select, update

from pipetrack.db.models.orders import Order, SubOrder
from .base import BaseRepository


class OrderRepository(BaseRepository):
    """Repository for orders and their sub-orders."""

    async def list_orders(
        self,
        *,
        status: Optional[str] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Order]:
        stmt = select(Order).where(Order.deleted_at.is_(None))
        if status:
            stmt = stmt.where(Order.status == status)
        if search:
            like = f"%{search}%"
            stmt = stmt.where(Order.order_no.ilike(like) | Order.customer_name.ilike(like))
        stmt = stmt.order_by(Order.created_at.desc(), Order.order_no.desc())
        return await self.fetch_page(stmt, limit, offset)

    async def get_order(self, order_id: UUID, *, include_deleted: bool = False) -> Optional[Order]:
        stmt = select(Order).where(Order.id == order_id)
        if not include_deleted:
            stmt = stmt.where(Order.deleted_at.is_(None))
        stmt = stmt.execution_options(populate_existing=True)
        return await self.scalar_one_or_none(stmt)

    async def get_by_order_no(self, order_no: str) -> Optional[Order]:
        stmt = (
            select(Order)
            .where(Order.order_no == order_no, Order.deleted_at.is_(None))
            .execution_options(populate_existing=True)
        )
        return await self.scalar_one_or_none(stmt)

    async def order_no_exists(self, order_no: str) -> bool:
        # Soft-deleted orders still hold their number (unique column).
        stmt = select(Order.id).where(Order.order_no == order_no)
        return (await self.scalar_one_or_none(stmt)) is not None

    async def update_order_fields(self, order_id: UUID, values: Dict[str, Any]) -> None:
        stmt = update(Order).where(Order.id == order_id).values(**values)
        await self.execute(stmt)

    async def soft_delete(self, order_id: UUID, at: datetime) -> bool:
        stmt = (
            update(Order)
            .where(Order.id == order_id, Order.deleted_at.is_(None))
            .values(deleted_at=at)
        )
        result = await self.execute(stmt)
        return bool(result.rowcount)

    async def set_order_status(self, order_id: UUID, status: str) -> None:
        await self.execute(update(Order).where(Order.id == order_id).values(status=status))

    async def get_sub_order(self, sub_order_id: UUID, *, for_update: bool = False) -> Optional[SubOrder]:
        """
        Load a sub-order. With for_update the row is locked until the end of
        the transaction (SELECT ... FOR UPDATE; SQLite ignores the clause and
        serializes writers itself).
        """
        stmt = select(SubOrder).where(SubOrder.id == sub_order_id).execution_options(populate_existing=True)
        if for_update:
            stmt = stmt.with_for_update()
        return await self.scalar_one_or_none(stmt)

    async def list_sub_orders(self, order_id: UUID, *, for_update: bool = False) -> List[SubOrder]:
        stmt = (
            select(SubOrder)
            .where(SubOrder.order_id == order_id)
            .order_by(SubOrder.line_no.asc())
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update()
        res = await self.scalars(stmt)
        return list(res)

    async def increment_counter(self, sub_order_id: UUID, column: str, quantity: int) -> None:
        """Atomically add quantity to one counter column: SET col = col + :qty."""
        col = getattr(SubOrder, column)
        stmt = (
            update(SubOrder)
            .where(SubOrder.id == sub_order_id)
            .values({column: col + quantity})
        )
        await self.execute(stmt)

    async def write_counters(self, sub_order_id: UUID, values: Dict[str, Any]) -> None:
        stmt = update(SubOrder).where(SubOrder.id == sub_order_id).values(**values)
        await self.execute(stmt)
