"""
User and refresh token CRUD operations.

Dependencies: sqlalchemy, lms.boundary.db.models
System role: Identity persistence operations
"""

from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from lms.boundary.db.base import utcnow
from lms.boundary.db.models.refresh_token_model import RefreshTokenModel
from lms.boundary.db.models.user_model import UserModel
from lms.boundary.db.CRUD.base_crud import BaseCRUD


class UserCRUD(BaseCRUD[UserModel]):
    """CRUD operations for UserModel with email lookups."""

    def __init__(self) -> None:
        """Initialize UserCRUD with UserModel."""
        super().__init__(UserModel)

    async def get_by_email(self, session: AsyncSession, email: str) -> UserModel | None:
        """
        Retrieve a user by email, case-insensitively.

        Args:
            session: Async database session
            email: Email address in any case

        Returns:
            UserModel if found, None otherwise
        """
        stmt = select(UserModel).where(func.lower(UserModel.email) == email.strip().lower())
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_many(self, session: AsyncSession, ids: list[UUID]) -> Sequence[UserModel]:
        if not ids:
            return []
        result = await session.execute(select(UserModel).where(UserModel.id.in_(ids)))
        return result.scalars().all()


class RefreshTokenCRUD(BaseCRUD[RefreshTokenModel]):
    """CRUD operations for persisted refresh tokens."""

    def __init__(self) -> None:
        """Initialize RefreshTokenCRUD with RefreshTokenModel."""
        super().__init__(RefreshTokenModel)

    async def record(
        self,
        session: AsyncSession,
        jti: str,
        user_id: UUID,
        expires_at: datetime,
    ) -> RefreshTokenModel:
        """Persist a newly issued refresh token under its jti."""
        return await self.create(session, id=UUID(jti), user_id=user_id, expires_at=expires_at)

    async def revoke(
        self,
        session: AsyncSession,
        token: RefreshTokenModel,
        replaced_by: str | None = None,
    ) -> RefreshTokenModel:
        """Mark a token revoked, optionally linking its replacement."""
        token.revoked_at = utcnow()
        if replaced_by:
            token.replaced_by = UUID(replaced_by)
        await session.flush()
        return token

    async def revoke_all_for_user(self, session: AsyncSession, user_id: UUID) -> int:
        """
        Revoke every outstanding refresh token of a user.

        Returns:
            int: Number of tokens revoked
        """
        stmt = (
            update(RefreshTokenModel)
            .where(RefreshTokenModel.user_id == user_id, RefreshTokenModel.revoked_at.is_(None))
            .values(revoked_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount or 0


user_crud = UserCRUD()
refresh_token_crud = RefreshTokenCRUD()
