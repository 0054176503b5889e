from __future__ import annotations

from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import select, update

from pipetrack.db.models.planning import ProductionPlan
from .base import BaseRepository


class ProductionPlanRepository(BaseRepository):
    """Repository for dispatched production plans."""

    async def list_plans(
        self,
        *,
        status: Optional[str] = "pending",
        order_id: Optional[UUID] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[ProductionPlan]:
        stmt = select(ProductionPlan)
        if status:
            stmt = stmt.where(ProductionPlan.status == status)
        if order_id:
            stmt = stmt.where(ProductionPlan.order_id == order_id)
        stmt = stmt.order_by(ProductionPlan.created_at.desc())
        return await self.fetch_page(stmt, limit, offset)

    async def get_plan(self, plan_id: UUID) -> Optional[ProductionPlan]:
        stmt = (
            select(ProductionPlan)
            .where(ProductionPlan.id == plan_id)
            .execution_options(populate_existing=True)
        )
        return await self.scalar_one_or_none(stmt)

    async def create_plan(self, plan: ProductionPlan) -> ProductionPlan:
        return await self.insert(plan)

    async def update_plan(self, plan_id: UUID, values: Dict[str, Any]) -> None:
        stmt = update(ProductionPlan).where(ProductionPlan.id == plan_id).values(**values)
        await self.execute(stmt)
