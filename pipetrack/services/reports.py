"""
Progress and dashboard reports.

Rows come straight from the current counters; pandas does the aggregation
and the CSV rendering.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional

import pandas as pd
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from pipetrack.db.base import utcnow
from pipetrack.db.models.ledger import ProductionRecord, ShippingRecord
from pipetrack.db.models.orders import Order, SubOrder
from pipetrack.db.models.planning import ProductionPlan
from pipetrack.schemas.reports import DashboardStats, ProgressReport, ProgressRow, ProgressTotals
from pipetrack.services.base import BaseService
from pipetrack.services.progress import Process, available_stock, progress_percent

PROGRESS_COLUMNS = [
    "order_id",
    "order_no",
    "customer_name",
    "delivery_date",
    "workshop",
    "sub_order_id",
    "line_no",
    "spec",
    "level",
    "interface_type",
    "lining",
    "length",
    "coating",
    "planned_quantity",
    "produced_quantity",
    "shipped_quantity",
    "available_stock",
    "production_percent",
    "shipping_percent",
    "total_weight",
    "status",
]


def _day_bounds(day: date) -> tuple[datetime, datetime]:
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


class ReportService(BaseService):
    """Read-only reporting over orders, lines and the ledger."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def _progress_records(
        self,
        *,
        order_no: Optional[str] = None,
        workshop: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """One row per sub-order of every non-deleted order, newest order first."""
        stmt = (
            select(
                Order.id,
                Order.order_no,
                Order.customer_name,
                Order.delivery_date,
                Order.workshop,
                SubOrder.id,
                SubOrder.line_no,
                SubOrder.spec,
                SubOrder.level,
                SubOrder.interface_type,
                SubOrder.lining,
                SubOrder.length,
                SubOrder.coating,
                SubOrder.planned_quantity,
                SubOrder.produced_quantity,
                SubOrder.shipped_quantity,
                SubOrder.total_weight,
                SubOrder.status,
            )
            .join(SubOrder, SubOrder.order_id == Order.id)
            .where(Order.deleted_at.is_(None))
            .order_by(Order.created_at.desc(), Order.order_no, SubOrder.line_no)
        )
        if order_no:
            stmt = stmt.where(Order.order_no == order_no)
        if workshop:
            stmt = stmt.where(Order.workshop == workshop)
        if status:
            stmt = stmt.where(SubOrder.status == status)

        res = await self.session.execute(stmt)
        data = []
        for (
            order_id,
            o_no,
            customer_name,
            delivery_date,
            o_workshop,
            sub_id,
            line_no,
            spec,
            level,
            interface_type,
            lining,
            length,
            coating,
            planned,
            produced,
            shipped,
            total_weight,
            sub_status,
        ) in res.all():
            data.append(
                {
                    "order_id": order_id,
                    "order_no": o_no,
                    "customer_name": customer_name,
                    "delivery_date": delivery_date,
                    "workshop": o_workshop,
                    "sub_order_id": sub_id,
                    "line_no": int(line_no),
                    "spec": spec,
                    "level": level,
                    "interface_type": interface_type,
                    "lining": lining,
                    "length": length,
                    "coating": coating,
                    "planned_quantity": int(planned or 0),
                    "produced_quantity": int(produced or 0),
                    "shipped_quantity": int(shipped or 0),
                    "available_stock": available_stock(produced, shipped),
                    "production_percent": progress_percent(produced, planned),
                    "shipping_percent": progress_percent(shipped, planned),
                    "total_weight": total_weight,
                    "status": sub_status,
                }
            )
        return data

    # PUBLIC_INTERFACE
    async def progress_frame(self, **filters) -> pd.DataFrame:
        """Progress rows as a DataFrame with PROGRESS_COLUMNS."""
        return pd.DataFrame(await self._progress_records(**filters), columns=PROGRESS_COLUMNS)

    # PUBLIC_INTERFACE
    async def progress_report(self, **filters) -> ProgressReport:
        """Progress rows plus totals."""
        records = await self._progress_records(**filters)
        if not records:
            return ProgressReport(rows=[], totals=ProgressTotals())

        df = pd.DataFrame(records, columns=PROGRESS_COLUMNS)

        planned = int(df["planned_quantity"].sum())
        produced = int(df["produced_quantity"].sum())
        shipped = int(df["shipped_quantity"].sum())
        weight = float(pd.to_numeric(df["total_weight"], errors="coerce").fillna(0).sum())
        totals = ProgressTotals(
            lines=len(df),
            planned_quantity=planned,
            produced_quantity=produced,
            shipped_quantity=shipped,
            total_weight=Decimal(str(round(weight, 3))),
            production_percent=progress_percent(produced, planned),
            shipping_percent=progress_percent(shipped, planned),
        )
        return ProgressReport(rows=[ProgressRow(**r) for r in records], totals=totals)

    # PUBLIC_INTERFACE
    async def dashboard(self, day: Optional[date] = None) -> DashboardStats:
        """
        Home page figures: pipes packaged and shipped on the given UTC day
        (today by default), order counts per status and pending plans.
        """
        day = day or utcnow().date()
        start, end = _day_bounds(day)

        packaged = await self.session.execute(
            select(func.coalesce(func.sum(ProductionRecord.quantity), 0)).where(
                ProductionRecord.process == Process.PACKAGING.value,
                ProductionRecord.timestamp >= start,
                ProductionRecord.timestamp < end,
            )
        )
        shipped = await self.session.execute(
            select(func.coalesce(func.sum(ShippingRecord.quantity), 0)).where(
                ShippingRecord.timestamp >= start,
                ShippingRecord.timestamp < end,
            )
        )
        by_status = await self.session.execute(
            select(Order.status, func.count(Order.id))
            .where(Order.deleted_at.is_(None))
            .group_by(Order.status)
        )
        pending = await self.session.execute(
            select(func.count(ProductionPlan.id)).where(ProductionPlan.status == "pending")
        )

        counts = {status: int(n) for status, n in by_status.all()}
        return DashboardStats(
            today=day,
            today_packaged=int(packaged.scalar_one()),
            today_shipped=int(shipped.scalar_one()),
            total_orders=sum(counts.values()),
            orders_by_status=counts,
            pending_plans=int(pending.scalar_one()),
        )
