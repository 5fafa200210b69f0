"""
Organization and membership CRUD operations.

Dependencies: sqlalchemy, lms.boundary.db.models
System role: Tenant and membership persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from lms.boundary.db.models.organization_model import MembershipModel, OrganizationModel
from lms.boundary.db.CRUD.base_crud import BaseCRUD


class OrganizationCRUD(BaseCRUD[OrganizationModel]):
    """CRUD operations for OrganizationModel."""

    def __init__(self) -> None:
        """Initialize OrganizationCRUD with OrganizationModel."""
        super().__init__(OrganizationModel)

    async def list_ordered(
        self,
        session: AsyncSession,
        ids: list[UUID] | None = None,
    ) -> Sequence[OrganizationModel]:
        """
        List organizations by name, optionally restricted to ids.

        Args:
            session: Async database session
            ids: Only return these organizations when given

        Returns:
            Sequence of OrganizationModels
        """
        stmt = select(OrganizationModel).order_by(OrganizationModel.name)
        if ids is not None:
            stmt = stmt.where(OrganizationModel.id.in_(ids))
        result = await session.execute(stmt)
        return result.scalars().all()


class MembershipCRUD(BaseCRUD[MembershipModel]):
    """CRUD operations for organization memberships."""

    def __init__(self) -> None:
        """Initialize MembershipCRUD with MembershipModel."""
        super().__init__(MembershipModel)

    async def get_for_user(
        self,
        session: AsyncSession,
        organization_id: UUID,
        user_id: UUID,
    ) -> MembershipModel | None:
        """Retrieve the membership row for (organization, user)."""
        stmt = select(MembershipModel).where(
            MembershipModel.organization_id == organization_id,
            MembershipModel.user_id == user_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_organization(
        self,
        session: AsyncSession,
        organization_id: UUID,
    ) -> Sequence[MembershipModel]:
        """List memberships of an organization with users eagerly loaded."""
        stmt = (
            select(MembershipModel)
            .where(MembershipModel.organization_id == organization_id)
            .options(selectinload(MembershipModel.user))
            .order_by(MembershipModel.created_at)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def upsert(
        self,
        session: AsyncSession,
        organization_id: UUID,
        user_id: UUID,
        role: str,
    ) -> MembershipModel:
        """
        Create or update the membership for (organization, user).

        An existing row gets the new role and is reactivated.

        Returns:
            MembershipModel: The stored membership
        """
        membership = await self.get_for_user(session, organization_id, user_id)
        if membership is None:
            return await self.create(
                session,
                organization_id=organization_id,
                user_id=user_id,
                role=role,
                status="active",
            )
        membership.role = role
        membership.status = "active"
        await session.flush()
        await session.refresh(membership)
        return membership


organization_crud = OrganizationCRUD()
membership_crud = MembershipCRUD()
