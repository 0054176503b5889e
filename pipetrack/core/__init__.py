"""
Core application utilities for settings, logging, errors and FastAPI dependencies.

This package provides:
- Application-level settings (separate from DB settings)
- Domain error taxonomy shared by services and the HTTP layer
- Dependency helpers (DB session, current user, role checks)
"""
