"""
API route modules.

This package contains subrouters for:
- Auth: login and current user
- Users: user administration
- Orders: order entry, lookup, soft delete and recompute
- Production / Shipping: ledger appends and listings
- Plans: production plan dispatch
- Master Data: option lists per category
- Reports: progress report, CSV export and dashboard figures

ROUTERS is mounted under /api/v1 by pipetrack.api.main.
"""

from .auth import router as auth_router
from .master_data import router as master_data_router
from .orders import router as orders_router
from .plans import router as plans_router
from .production import router as production_router
from .reports import router as reports_router
from .shipping import router as shipping_router
from .users import router as users_router

# Inclusion order drives the order of the OpenAPI document.
ROUTERS = (
    auth_router,
    users_router,
    orders_router,
    production_router,
    shipping_router,
    plans_router,
    master_data_router,
    reports_router,
)
