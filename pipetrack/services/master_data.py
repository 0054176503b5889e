"""
Master data registry: per-category option lists offered for auto-complete.

Values are only ever appended. add_if_absent is idempotent with respect to
membership and keeps first-insertion order.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from pipetrack.core.errors import ValidationError
from pipetrack.repositories.master_data import MasterDataRepository
from pipetrack.services.base import BaseService

logger = logging.getLogger(__name__)

CATEGORIES: tuple[str, ...] = (
    "specs",
    "levels",
    "interfaces",
    "linings",
    "lengths",
    "coatings",
    "warehouses",
    "workshops",
)

DEFAULT_MASTER_DATA: Dict[str, List[str]] = {
    "specs": [
        "DN40", "DN50", "DN60", "DN65", "DN80", "DN100", "DN125", "DN150",
        "DN200", "DN250", "DN300", "DN350", "DN400", "DN450", "DN500", "DN600",
        "DN700", "DN800", "DN900", "DN1000", "DN1100", "DN1200", "DN1400",
        "DN1500", "DN1600", "DN1800", "DN2000", "DN2200", "DN2400", "DN2600",
    ],
    "levels": ["K12", "K11", "K10", "K9", "K8", "K7", "C100", "C64", "C50", "C40", "C30", "C25", "C20"],
    "interfaces": ["T型", "K型", "S型", "法兰"],
    "linings": ["水泥砂浆", "环氧陶瓷", "聚氨酯"],
    "lengths": ["6米", "5.7米", "8米"],
    "coatings": ["沥青漆", "环氧树脂", "锌层+沥青"],
    "warehouses": ["成品库A", "成品库B", "待发区"],
    "workshops": ["一车间", "二车间", "三车间", "四车间"],
}


def _check_category(category: str) -> str:
    if category not in CATEGORIES:
        raise ValidationError(
            f"Unknown master data category '{category}'",
            details={"allowed": list(CATEGORIES)},
        )
    return category


class MasterDataRegistry(BaseService):
    """Service for the master data registry."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = MasterDataRepository(session)

    # PUBLIC_INTERFACE
    async def add_if_absent(self, category: str, value: Optional[str]) -> bool:
        """
        Append value to category unless it is already present (exact, case-sensitive).

        Does not commit; callers run it inside their own unit of work.
        Blank values are ignored. Racing adds of the same value are safe:
        one inserts, the others return False.

        Returns:
            True if the value was added.
        Raises:
            ValidationError: unknown category.
        """
        _check_category(category)
        if value is None or not str(value).strip():
            return False
        if await self.repo.exists(category, value):
            return False
        position = await self.repo.next_position(category)
        # A concurrent writer may have added it since the check; the insert skips it then.
        if not await self.repo.append(category, value, position):
            return False
        logger.info("Master data %s += %r", category, value)
        return True

    # PUBLIC_INTERFACE
    async def add_many(self, category: str, values: Iterable[Optional[str]]) -> int:
        """add_if_absent for each value in order; returns how many were new."""
        added = 0
        for value in values:
            if await self.add_if_absent(category, value):
                added += 1
        return added

    # PUBLIC_INTERFACE
    async def register(self, category: str, value: str) -> List[str]:
        """Add one value in its own transaction and return the category list."""
        async with self.unit_of_work():
            await self.add_if_absent(category, value)
        return await self.list_category(category)

    # PUBLIC_INTERFACE
    async def list_category(self, category: str) -> List[str]:
        """Values of one category in first-insertion order."""
        _check_category(category)
        return await self.repo.list_values(category)

    # PUBLIC_INTERFACE
    async def list_all(self) -> Dict[str, List[str]]:
        """All categories (including empty ones) mapped to their values."""
        result: Dict[str, List[str]] = {c: [] for c in CATEGORIES}
        for row in await self.repo.list_all():
            if row.category in result:
                result[row.category].append(row.value)
        return result
