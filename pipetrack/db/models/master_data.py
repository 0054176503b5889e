from __future__ import annotations

from sqlalchemy import Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from pipetrack.db.base import Base, UUIDPkMixin, CreatedAtMixin


class MasterDataValue(UUIDPkMixin, CreatedAtMixin, Base):
    """One known option string (spec, level, lining...) offered for auto-complete."""
    __tablename__ = "master_data_values"
    __table_args__ = (
        UniqueConstraint("category", "value", name="uq_master_data_values_category_value"),
    )

    category: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
