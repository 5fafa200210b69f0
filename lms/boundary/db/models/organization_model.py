"""
Organization and membership ORM models.

Organizations are the tenants of the platform. Users join organizations
through membership rows that carry an organization-level role.

Dependencies: sqlalchemy, lms.boundary.db.base
System role: Multi-tenant persistence backing the org-context checks
"""

import uuid

from sqlalchemy import ForeignKey, JSON, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lms.boundary.db.base import Base, UUIDMixin, TimestampMixin

# Membership roles allowed to modify organization-scoped data
WRITABLE_ROLES = frozenset({"owner", "admin", "manager", "editor"})
ORG_ADMIN_ROLES = frozenset({"owner", "admin"})
MEMBERSHIP_ROLES = frozenset({"owner", "admin", "manager", "editor", "member", "viewer"})


class OrganizationModel(Base, UUIDMixin, TimestampMixin):
    """
    Organization ORM model.

    Attributes:
        id: UUID primary key (auto-generated)
        name: Display name
        contact_email: Billing/contact address
        subscription: Subscription tier (free-form, e.g. "standard")
        status: "active" or "inactive"
        settings: JSON blob of tenant preferences

    Relationships:
        memberships: One-to-many with MembershipModel (CASCADE on org deletion)
    """

    __tablename__ = "organizations"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_email: Mapped[str] = mapped_column(String(320), nullable=False)
    subscription: Mapped[str] = mapped_column(String(64), nullable=False, doc="Subscription tier")
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="active")
    settings: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    memberships = relationship(
        "MembershipModel",
        back_populates="organization",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class MembershipModel(Base, UUIDMixin, TimestampMixin):
    """
    Organization membership linking a user to an organization.

    Attributes:
        organization_id: Foreign key to organizations.id (CASCADE)
        user_id: Foreign key to users.id (CASCADE)
        role: Organization role (owner, admin, manager, editor, member, viewer)
        status: "active" or "inactive"; only active rows grant access
    """

    __tablename__ = "organization_memberships"
    __table_args__ = (
        UniqueConstraint("organization_id", "user_id", name="uq_membership_org_user"),
    )

    organization_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[str] = mapped_column(String(32), nullable=False, default="member")
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="active")

    organization = relationship("OrganizationModel", back_populates="memberships")
    user = relationship("UserModel", back_populates="memberships")

    @property
    def can_write(self) -> bool:
        return self.status == "active" and self.role in WRITABLE_ROLES
