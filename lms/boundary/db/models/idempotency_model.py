"""
Idempotency key ORM model.

The client-supplied key is the primary key, so a second insert of the
same key fails on the database constraint.

Dependencies: sqlalchemy, lms.boundary.db.base
System role: Deduplication of repeated write requests
"""

import uuid

from sqlalchemy import JSON, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from lms.boundary.db.base import Base, TimestampMixin

KEY_TYPE_COURSE_UPSERT = "course_upsert"


class IdempotencyKeyModel(Base, TimestampMixin):
    """
    Idempotency key record.

    Attributes:
        id: Client supplied key (primary key)
        key_type: Operation the key guards, e.g. "course_upsert"
        resource_id: Id of the resource produced by the first request
        payload: Request payload of the first request
    """

    __tablename__ = "idempotency_keys"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    key_type: Mapped[str] = mapped_column(String(64), nullable=False)
    resource_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True), nullable=True, default=None
    )
    payload: Mapped[dict | None] = mapped_column(JSON, nullable=True, default=None)
