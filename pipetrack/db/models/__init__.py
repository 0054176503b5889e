"""
ORM models for users, orders and sub-orders, the production/shipping ledger,
production plans and master data.

Importing this package ensures model classes are registered with the Base
metadata for Alembic and runtime usage.
"""

from .security import User  # noqa: F401
from .orders import Order, SubOrder  # noqa: F401
from .ledger import ProductionRecord, ShippingRecord  # noqa: F401
from .planning import ProductionPlan  # noqa: F401
from .master_data import MasterDataValue  # noqa: F401
