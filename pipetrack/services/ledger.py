"""
Quantity ledger: append-only production and shipping records.

Each append is one transaction: the sub-order row is locked, the record is
inserted, the matching counter is incremented in SQL, and the line and order
statuses are re-derived before commit.
"""

from __future__ import annotations

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from pipetrack.core.errors import ValidationError
from pipetrack.db.base import utcnow
from pipetrack.db.models.ledger import ProductionRecord, ShippingRecord
from pipetrack.db.models.orders import SubOrder
from pipetrack.repositories.ledger import LedgerRepository
from pipetrack.repositories.orders import OrderRepository
from pipetrack.schemas.ledger import (
    ProductionMeta,
    ProductionRecordRead,
    ShippingMeta,
    ShippingRecordRead,
)
from pipetrack.services.base import BaseService
from pipetrack.services.cache import order_cache
from pipetrack.services.orders import OrderService
from pipetrack.services.progress import (
    PROCESS_COUNTERS,
    SHIPPED_COUNTER,
    normalize_process,
    validate_quantity,
)

logger = logging.getLogger(__name__)


class LedgerService(BaseService):
    """Appends ledger records and keeps sub-order counters in step."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = LedgerRepository(session)
        self.order_repo = OrderRepository(session)
        self.orders = OrderService(session)

    async def _lock_target(self, sub_order_id: UUID, order_id: Optional[UUID]) -> SubOrder:
        sub = await self.order_repo.get_sub_order(sub_order_id, for_update=True)
        if sub is None:
            raise ValidationError("Sub-order not found", details={"sub_order_id": str(sub_order_id)})
        if order_id is not None and order_id != sub.order_id:
            raise ValidationError(
                "Sub-order does not belong to the given order",
                details={"sub_order_id": str(sub_order_id), "order_id": str(order_id)},
            )
        return sub

    # PUBLIC_INTERFACE
    async def append_production(
        self,
        sub_order_id: UUID,
        quantity: int,
        process: Optional[str],
        meta: ProductionMeta,
    ) -> UUID:
        """
        Record completed pipes for one process stage of a sub-order.

        Packaging (the default stage) advances produced_quantity and therefore
        the status; the other stages only advance their own counter.

        Returns:
            Id of the new production record.
        Raises:
            ValidationError: bad quantity, unknown process, unknown sub-order or order mismatch.
            PersistenceError: the transaction could not be committed.
        """
        quantity = validate_quantity(quantity)
        stage = normalize_process(process)
        fields = meta.model_dump(include=set(ProductionMeta.model_fields) - {"order_id", "timestamp"})

        async with self.unit_of_work():
            sub = await self._lock_target(sub_order_id, meta.order_id)
            record = ProductionRecord(
                order_id=sub.order_id,
                sub_order_id=sub.id,
                quantity=quantity,
                process=stage.value,
                timestamp=meta.timestamp or utcnow(),
                **fields,
            )
            await self.repo.add_production(record)
            await self.order_repo.increment_counter(sub.id, PROCESS_COUNTERS[stage], quantity)
            order_status = await self.orders.sync_statuses(sub.order_id)
            record_id = record.id

        order_cache.invalidate("production appended")
        logger.info(
            "Production +%d (%s) on sub-order %s; order status %s",
            quantity,
            stage.value,
            sub_order_id,
            order_status.value,
        )
        return record_id

    # PUBLIC_INTERFACE
    async def append_shipping(self, sub_order_id: UUID, quantity: int, meta: ShippingMeta) -> UUID:
        """
        Record pipes shipped for a sub-order. No cap against produced stock.

        Returns:
            Id of the new shipping record.
        """
        quantity = validate_quantity(quantity)
        fields = meta.model_dump(include=set(ShippingMeta.model_fields) - {"order_id", "timestamp"})

        async with self.unit_of_work():
            sub = await self._lock_target(sub_order_id, meta.order_id)
            record = ShippingRecord(
                order_id=sub.order_id,
                sub_order_id=sub.id,
                quantity=quantity,
                timestamp=meta.timestamp or utcnow(),
                **fields,
            )
            await self.repo.add_shipping(record)
            await self.order_repo.increment_counter(sub.id, SHIPPED_COUNTER, quantity)
            order_status = await self.orders.sync_statuses(sub.order_id)
            record_id = record.id

        order_cache.invalidate("shipping appended")
        logger.info("Shipping +%d on sub-order %s; order status %s", quantity, sub_order_id, order_status.value)
        return record_id

    # PUBLIC_INTERFACE
    async def list_production_records(
        self,
        *,
        order_id: Optional[UUID] = None,
        sub_order_id: Optional[UUID] = None,
        process: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[ProductionRecordRead]:
        """Production records, newest first."""
        if process:
            process = normalize_process(process).value
        rows = await self.repo.list_production(
            order_id=order_id, sub_order_id=sub_order_id, process=process, limit=limit, offset=offset
        )
        return [ProductionRecordRead.model_validate(r) for r in rows]

    # PUBLIC_INTERFACE
    async def list_shipping_records(
        self,
        *,
        order_id: Optional[UUID] = None,
        sub_order_id: Optional[UUID] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[ShippingRecordRead]:
        """Shipping records, newest first."""
        rows = await self.repo.list_shipping(
            order_id=order_id, sub_order_id=sub_order_id, limit=limit, offset=offset
        )
        return [ShippingRecordRead.model_validate(r) for r in rows]
