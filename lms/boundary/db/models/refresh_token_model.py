"""
Refresh token ORM model.

Every issued refresh token is recorded under its JWT ``jti`` so it can be
rotated exactly once and revoked on logout or reuse.

Dependencies: sqlalchemy, lms.boundary.db.base
System role: Server-side refresh token state
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lms.boundary.db.base import Base, UUIDMixin, TimestampMixin


class RefreshTokenModel(Base, UUIDMixin, TimestampMixin):
    """
    Refresh token record.

    Attributes:
        id: The token's jti
        user_id: Owner (CASCADE on user deletion)
        expires_at: Mirrors the JWT exp claim
        revoked_at: Set on rotation, logout or reuse detection
        replaced_by: jti of the token issued when this one was rotated
    """

    __tablename__ = "refresh_tokens"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    revoked_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None
    )
    replaced_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True), nullable=True, default=None
    )

    user = relationship("UserModel", back_populates="refresh_tokens")

    @property
    def is_revoked(self) -> bool:
        return self.revoked_at is not None
