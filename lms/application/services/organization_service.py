"""
Organization service orchestrator.

Coordinates organization lifecycle and membership management.

Dependencies: lms.boundary.db.CRUD
System role: Tenant use case orchestration
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from lms.application.serializers import membership_to_dict, organization_to_dict
from lms.boundary.db.CRUD.organization_crud import membership_crud, organization_crud
from lms.boundary.db.CRUD.user_crud import user_crud
from lms.boundary.db.models.organization_model import MEMBERSHIP_ROLES
from lms.core.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class OrganizationService:
    """Organization service orchestrator."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize organization service with async database session.

        Args:
            db: Async SQLAlchemy session
        """
        self.db = db

    async def list_organizations(self, ids: list[UUID] | None = None) -> list[dict]:
        """List organizations, optionally limited to the given ids."""
        orgs = await organization_crud.list_ordered(self.db, ids=ids)
        return [organization_to_dict(org) for org in orgs]

    async def get_organization(self, org_id: UUID) -> dict:
        """
        Get organization by ID.

        Raises:
            NotFoundError: If organization not found
        """
        org = await organization_crud.get_by_id(self.db, org_id)
        if org is None:
            raise NotFoundError("Organization", org_id)
        return organization_to_dict(org)

    async def create_organization(
        self,
        name: str,
        contact_email: str,
        subscription: str,
        status: str = "active",
        settings: dict | None = None,
    ) -> dict:
        """Create an organization."""
        org = await organization_crud.create(
            self.db,
            name=name,
            contact_email=contact_email,
            subscription=subscription,
            status=status,
            settings=settings or {},
        )
        logger.info("Organization created", extra={"organization_id": str(org.id)})
        return organization_to_dict(org)

    async def update_organization(self, org_id: UUID, **fields) -> dict:
        """
        Update organization fields; None values are ignored.

        Raises:
            NotFoundError: If organization not found
        """
        updates = {key: value for key, value in fields.items() if value is not None}
        org = await organization_crud.update_by_id(self.db, org_id, **updates)
        if org is None:
            raise NotFoundError("Organization", org_id)
        return organization_to_dict(org)

    async def delete_organization(self, org_id: UUID) -> None:
        """
        Delete an organization and its memberships.

        Raises:
            NotFoundError: If organization not found
        """
        deleted = await organization_crud.delete_by_id(self.db, org_id)
        if not deleted:
            raise NotFoundError("Organization", org_id)
        logger.info("Organization deleted", extra={"organization_id": str(org_id)})

    async def list_members(self, org_id: UUID) -> list[dict]:
        """List members of an organization with their emails."""
        await self.get_organization(org_id)
        memberships = await membership_crud.list_for_organization(self.db, org_id)
        return [
            membership_to_dict(m, email=m.user.email if m.user else None)
            for m in memberships
        ]

    async def add_member(self, org_id: UUID, user_id: UUID, role: str = "member") -> dict:
        """
        Add a user to an organization or change the role of an existing member.

        Raises:
            ValidationError: Unknown role
            NotFoundError: Organization or user not found
        """
        if role not in MEMBERSHIP_ROLES:
            raise ValidationError(f"Invalid membership role: {role}", field="role")
        await self.get_organization(org_id)
        user = await user_crud.get_by_id(self.db, user_id)
        if user is None:
            raise NotFoundError("User", user_id)

        membership = await membership_crud.upsert(self.db, org_id, user_id, role)
        logger.info(
            "Organization member upserted",
            extra={"organization_id": str(org_id), "user_id": str(user_id), "role": role},
        )
        return membership_to_dict(membership, email=user.email)

    async def remove_member(self, org_id: UUID, membership_id: UUID) -> None:
        """
        Remove a membership. Missing memberships are ignored.

        Raises:
            ValidationError: Membership belongs to another organization
        """
        membership = await membership_crud.get_by_id(self.db, membership_id)
        if membership is None:
            return
        if membership.organization_id != org_id:
            raise ValidationError("Membership does not belong to organization")
        await membership_crud.delete_by_id(self.db, membership_id)
        logger.info(
            "Organization member removed",
            extra={"organization_id": str(org_id), "membership_id": str(membership_id)},
        )
