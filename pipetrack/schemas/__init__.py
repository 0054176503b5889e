"""
Public Pydantic schemas used by FastAPI routes, services, and tests.

Schemas are grouped by domain module (orders, ledger, planning, etc.) and also
include common reusable models such as standard and error responses.
"""

from .common import MessageResponse, CreatedResponse  # noqa: F401
