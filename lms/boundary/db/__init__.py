"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(): Async connection management

Dependencies: sqlalchemy, lms.configs
System role: Database adapter providing persistent storage for users,
organizations, course content, surveys, progress and analytics.
"""

from lms.boundary.db.base import Base, TimestampMixin, UUIDMixin
from lms.boundary.db.connection import (
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)
from lms.boundary.db import models  # noqa: F401  registers all tables on Base.metadata

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
]
