from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select

from pipetrack.db.models.ledger import ProductionRecord, ShippingRecord
from .base import BaseRepository


class LedgerRepository(BaseRepository):
    """Append-only access to production and shipping records."""

    async def add_production(self, record: ProductionRecord) -> ProductionRecord:
        return await self.insert(record)

    async def add_shipping(self, record: ShippingRecord) -> ShippingRecord:
        return await self.insert(record)

    async def list_production(
        self,
        *,
        order_id: Optional[UUID] = None,
        sub_order_id: Optional[UUID] = None,
        process: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[ProductionRecord]:
        stmt = select(ProductionRecord)
        if order_id:
            stmt = stmt.where(ProductionRecord.order_id == order_id)
        if sub_order_id:
            stmt = stmt.where(ProductionRecord.sub_order_id == sub_order_id)
        if process:
            stmt = stmt.where(ProductionRecord.process == process)
        stmt = stmt.order_by(ProductionRecord.timestamp.desc())
        return await self.fetch_page(stmt, limit, offset)

    async def list_shipping(
        self,
        *,
        order_id: Optional[UUID] = None,
        sub_order_id: Optional[UUID] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[ShippingRecord]:
        stmt = select(ShippingRecord)
        if order_id:
            stmt = stmt.where(ShippingRecord.order_id == order_id)
        if sub_order_id:
            stmt = stmt.where(ShippingRecord.sub_order_id == sub_order_id)
        stmt = stmt.order_by(ShippingRecord.timestamp.desc())
        return await self.fetch_page(stmt, limit, offset)

    async def production_entries(self, sub_order_id: UUID) -> List[tuple[int, Optional[str]]]:
        stmt = select(ProductionRecord.quantity, ProductionRecord.process).where(
            ProductionRecord.sub_order_id == sub_order_id
        )
        res = await self.execute(stmt)
        return [(q, p) for q, p in res.all()]

    async def shipping_quantities(self, sub_order_id: UUID) -> List[int]:
        stmt = select(ShippingRecord.quantity).where(ShippingRecord.sub_order_id == sub_order_id)
        res = await self.scalars(stmt)
        return list(res)
