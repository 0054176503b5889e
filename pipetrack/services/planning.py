from __future__ import annotations

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from pipetrack.core.errors import NotFoundError, ValidationError
from pipetrack.db.models.planning import ProductionPlan
from pipetrack.repositories.orders import OrderRepository
from pipetrack.repositories.planning import ProductionPlanRepository
from pipetrack.schemas.planning import PlanCreate, PlanRead, PlanUpdate
from pipetrack.services.base import BaseService
from pipetrack.services.progress import normalize_process, validate_quantity

logger = logging.getLogger(__name__)


class PlanService(BaseService):
    """
    Production plan dispatch. Plans are work assignments only; they never
    touch the ledger or the sub-order counters.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = ProductionPlanRepository(session)
        self.order_repo = OrderRepository(session)

    # PUBLIC_INTERFACE
    async def create_plan(self, payload: PlanCreate) -> UUID:
        """Dispatch a plan for a sub-order of the given order."""
        quantity = validate_quantity(payload.quantity)
        process = normalize_process(payload.process)
        async with self.unit_of_work():
            sub = await self.order_repo.get_sub_order(payload.sub_order_id)
            if sub is None:
                raise ValidationError("Sub-order not found", details={"sub_order_id": str(payload.sub_order_id)})
            if sub.order_id != payload.order_id:
                raise ValidationError(
                    "Sub-order does not belong to the given order",
                    details={"sub_order_id": str(payload.sub_order_id), "order_id": str(payload.order_id)},
                )
            plan = ProductionPlan(
                order_id=payload.order_id,
                sub_order_id=payload.sub_order_id,
                workshop=payload.workshop,
                team=payload.team,
                shift=payload.shift,
                planned_date=payload.planned_date,
                quantity=quantity,
                process=process.value,
                status="pending",
            )
            await self.repo.create_plan(plan)
            plan_id = plan.id
        logger.info("Dispatched plan %s: %d x %s to %s", plan_id, quantity, process.value, payload.workshop)
        return plan_id

    # PUBLIC_INTERFACE
    async def list_plans(
        self,
        *,
        status: Optional[str] = "pending",
        order_id: Optional[UUID] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[PlanRead]:
        """Plans newest first; pending ones unless another status is asked for."""
        rows = await self.repo.list_plans(status=status, order_id=order_id, limit=limit, offset=offset)
        return [PlanRead.model_validate(p) for p in rows]

    # PUBLIC_INTERFACE
    async def update_plan(self, plan_id: UUID, payload: PlanUpdate) -> PlanRead:
        """Apply the provided plan fields (status, quantity, team, shift, planned_date)."""
        values = payload.model_dump(exclude_unset=True)
        if "quantity" in values:
            values["quantity"] = validate_quantity(values["quantity"])
        if "status" in values and values["status"] is None:
            raise ValidationError("Plan status cannot be cleared")
        async with self.unit_of_work():
            plan = await self.repo.get_plan(plan_id)
            if plan is None:
                raise NotFoundError("Plan not found", details={"plan_id": str(plan_id)})
            if values:
                await self.repo.update_plan(plan_id, values)
        plan = await self.repo.get_plan(plan_id)
        return PlanRead.model_validate(plan)
