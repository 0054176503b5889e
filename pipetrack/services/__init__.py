"""
Service layer: business rules and transaction boundaries.

Services orchestrate repositories inside a unit of work and raise domain
errors from pipetrack.core.errors.
"""
