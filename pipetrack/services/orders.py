from __future__ import annotations

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from pipetrack.core.errors import NotFoundError, ValidationError
from pipetrack.core.standards import unit_weight_tonnes
from pipetrack.db.base import utcnow
from pipetrack.db.models.orders import Order, SubOrder
from pipetrack.repositories.ledger import LedgerRepository
from pipetrack.repositories.orders import OrderRepository
from pipetrack.schemas.orders import OrderCreate, OrderRead, OrderUpdate
from pipetrack.services.base import BaseService
from pipetrack.services.cache import order_cache
from pipetrack.services.master_data import MasterDataRegistry
from pipetrack.services.progress import (
    LedgerEntry,
    OrderStatus,
    derive_sub_order_status,
    replay,
    rollup_order_status,
    validate_quantity,
)

logger = logging.getLogger(__name__)

# Sub-order attribute -> master data category it feeds.
_ITEM_CATEGORIES = (
    ("spec", "specs"),
    ("level", "levels"),
    ("interface_type", "interfaces"),
    ("lining", "linings"),
    ("length", "lengths"),
    ("coating", "coatings"),
)


class OrderService(BaseService):
    """
    Order aggregate service: creation, header maintenance, soft delete and
    status rollup.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = OrderRepository(session)
        self.ledger_repo = LedgerRepository(session)
        self.master_data = MasterDataRegistry(session)

    # PUBLIC_INTERFACE
    async def create_order(self, payload: OrderCreate, created_by: Optional[str] = None) -> UUID:
        """
        Create an order with its lines in one transaction.

        Missing unit weights are looked up from the pipe standards table and
        total weights default to unit weight x planned quantity. The order's
        descriptive values are fed into the master data registry.

        Raises:
            ValidationError: duplicate order number or non-positive planned quantity.
        """
        order_no = payload.order_no.strip()
        if not order_no:
            raise ValidationError("Order number is required")

        async with self.unit_of_work():
            if await self.repo.order_no_exists(order_no):
                raise ValidationError(f"Order number '{order_no}' already exists", details={"order_no": order_no})

            items: List[SubOrder] = []
            for line_no, item in enumerate(payload.items, start=1):
                planned = validate_quantity(item.planned_quantity)
                unit_weight = item.unit_weight
                if unit_weight is None:
                    unit_weight = unit_weight_tonnes(item.spec, item.level)
                total_weight = item.total_weight
                if total_weight is None and unit_weight is not None:
                    total_weight = unit_weight * planned
                items.append(
                    SubOrder(
                        line_no=line_no,
                        spec=item.spec,
                        level=item.level,
                        interface_type=item.interface_type,
                        lining=item.lining,
                        length=item.length,
                        coating=item.coating,
                        planned_quantity=planned,
                        unit_weight=unit_weight,
                        total_weight=total_weight,
                        batch_no=item.batch_no,
                    )
                )

            order = Order(
                order_no=order_no,
                customer_name=payload.customer_name,
                delivery_date=payload.delivery_date,
                workshop=payload.workshop,
                warehouse=payload.warehouse,
                remarks=payload.remarks,
                created_by=payload.created_by or created_by,
                status=OrderStatus.NEW.value,
                items=items,
            )
            await self.repo.add(order)
            await self.repo.flush()

            for attr, category in _ITEM_CATEGORIES:
                await self.master_data.add_many(category, (getattr(i, attr) for i in payload.items))
            await self.master_data.add_if_absent("warehouses", payload.warehouse)
            await self.master_data.add_if_absent("workshops", payload.workshop)
            order_id = order.id

        order_cache.invalidate("order created")
        logger.info("Created order %s with %d line(s)", order_no, len(items))
        return order_id

    # PUBLIC_INTERFACE
    async def list_orders(
        self,
        *,
        status: Optional[str] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[OrderRead]:
        """Non-deleted orders, newest first, served through the read cache."""

        async def load() -> List[OrderRead]:
            rows = await self.repo.list_orders(status=status, search=search, limit=limit, offset=offset)
            return [OrderRead.model_validate(o) for o in rows]

        return await order_cache.get_or_load(("orders", status, search, limit, offset), load)

    # PUBLIC_INTERFACE
    async def get_order(self, order_id: UUID) -> OrderRead:
        """Return one non-deleted order or raise NotFoundError."""
        order = await self.repo.get_order(order_id)
        if not order:
            raise NotFoundError("Order not found", details={"order_id": str(order_id)})
        return OrderRead.model_validate(order)

    # PUBLIC_INTERFACE
    async def get_by_order_no(self, order_no: str) -> OrderRead:
        """Look an order up by its number (order tracking page)."""
        order = await self.repo.get_by_order_no(order_no)
        if not order:
            raise NotFoundError("Order not found", details={"order_no": order_no})
        return OrderRead.model_validate(order)

    # PUBLIC_INTERFACE
    async def update_order(self, order_id: UUID, payload: OrderUpdate) -> OrderRead:
        """Update the enumerated header fields that were explicitly provided."""
        values = payload.model_dump(exclude_unset=True)
        async with self.unit_of_work():
            order = await self.repo.get_order(order_id)
            if not order:
                raise NotFoundError("Order not found", details={"order_id": str(order_id)})
            if values:
                await self.repo.update_order_fields(order_id, values)
                await self.master_data.add_if_absent("warehouses", values.get("warehouse"))
                await self.master_data.add_if_absent("workshops", values.get("workshop"))
        order_cache.invalidate("order updated")
        return await self.get_order(order_id)

    # PUBLIC_INTERFACE
    async def delete_order(self, order_id: UUID) -> None:
        """Soft delete: mark deleted_at. Lines and ledger records are kept."""
        async with self.unit_of_work():
            deleted = await self.repo.soft_delete(order_id, utcnow())
            if not deleted:
                raise NotFoundError("Order not found", details={"order_id": str(order_id)})
        order_cache.invalidate("order deleted")
        logger.info("Soft-deleted order %s", order_id)

    # PUBLIC_INTERFACE
    async def sync_statuses(self, order_id: UUID) -> OrderStatus:
        """
        Re-derive every line's status from its current counters and store the
        order rollup. Runs inside the caller's transaction; does not commit.
        """
        subs = await self.repo.list_sub_orders(order_id)
        statuses = []
        for sub in subs:
            status = derive_sub_order_status(sub.planned_quantity, sub.produced_quantity, sub.shipped_quantity)
            if sub.status != status.value:
                await self.repo.write_counters(sub.id, {"status": status.value})
            statuses.append(status.value)
        order_status = rollup_order_status(statuses)
        await self.repo.set_order_status(order_id, order_status.value)
        return order_status

    # PUBLIC_INTERFACE
    async def recompute_order(self, order_id: UUID) -> OrderRead:
        """
        Rebuild every line's counters and status by replaying its ledger, then
        store the order rollup. Idempotent.
        """
        async with self.unit_of_work():
            order = await self.repo.get_order(order_id)
            if not order:
                raise NotFoundError("Order not found", details={"order_id": str(order_id)})
            statuses = []
            for sub in await self.repo.list_sub_orders(order_id, for_update=True):
                entries = [
                    LedgerEntry("production", qty, process)
                    for qty, process in await self.ledger_repo.production_entries(sub.id)
                ]
                entries.extend(
                    LedgerEntry("shipping", qty) for qty in await self.ledger_repo.shipping_quantities(sub.id)
                )
                counters = replay(sub.planned_quantity, entries)
                values = counters.as_columns()
                values["status"] = counters.status.value
                await self.repo.write_counters(sub.id, values)
                statuses.append(counters.status.value)
            await self.repo.set_order_status(order_id, rollup_order_status(statuses).value)
        order_cache.invalidate("order recomputed")
        logger.info("Recomputed order %s from ledger", order_id)
        return await self.get_order(order_id)
