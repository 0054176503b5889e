"""
Repository layer for data access.

Repositories encapsulate SQLAlchemy queries for each aggregate. They never
commit on their own when called from a service unit of work; services own the
transaction boundary.
"""
