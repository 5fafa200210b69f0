"""
User ORM model.

Represents a platform account: credentials, platform role and the
organization memberships that scope what the user may see and edit.

Dependencies: sqlalchemy, lms.boundary.db.base
System role: Identity persistence for the auth/session layer
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lms.boundary.db.base import Base, UUIDMixin, TimestampMixin

ROLE_ADMIN = "admin"
ROLE_LEARNER = "learner"


class UserModel(Base, UUIDMixin, TimestampMixin):
    """
    User ORM model.

    Attributes:
        id: UUID primary key (auto-generated)
        email: Unique login email, stored lowercase
        password_hash: bcrypt hash of the password
        first_name: Optional given name
        last_name: Optional family name
        role: Platform role ("admin" or "learner")
        is_active: Disabled accounts cannot log in or refresh
        last_login_at: Timestamp of the last successful login
        created_at: Account creation timestamp (UTC)
        updated_at: Last modification timestamp (UTC)

    Relationships:
        memberships: One-to-many with MembershipModel (CASCADE on user deletion)
        refresh_tokens: One-to-many with RefreshTokenModel (CASCADE)
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(320),
        nullable=False,
        unique=True,
        index=True,
        doc="Login email (lowercase)"
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="bcrypt password hash"
    )

    first_name: Mapped[str | None] = mapped_column(String(120), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(120), nullable=True)

    role: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=ROLE_LEARNER,
        doc="Platform role: admin or learner"
    )

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    last_login_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
    )

    # Relationships
    memberships = relationship(
        "MembershipModel",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )
    refresh_tokens = relationship(
        "RefreshTokenModel",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def active_memberships(self) -> list:
        """Memberships with status "active"."""
        return [m for m in self.memberships if m.status == "active"]
