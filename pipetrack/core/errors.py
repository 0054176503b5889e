"""
Domain error taxonomy.

Services raise these; the HTTP layer maps them onto the standard error envelope
(see pipetrack.api.main). None of them is retried automatically.
"""

from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Base class for errors raised by services and repositories."""

    status_code: int = 400
    error_type: str = "domain_error"

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class ValidationError(DomainError):
    """Missing or malformed input, or a reference that does not resolve. No state was changed."""

    status_code = 400
    error_type = "validation_error"


class NotFoundError(DomainError):
    """Addressed entity does not exist (or is soft-deleted)."""

    status_code = 404
    error_type = "not_found"


class PersistenceError(DomainError):
    """Storage failure; the in-flight transaction has been rolled back."""

    status_code = 503
    error_type = "persistence_error"


class CapacityExceededError(DomainError):
    """
    Producing or shipping beyond the planned quantity.

    Declared for callers that opt into strict caps. The ledger accepts
    over-production and over-shipment and never raises this itself.
    """

    status_code = 409
    error_type = "capacity_exceeded"
