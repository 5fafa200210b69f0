"""
Auth service orchestrator.

Coordinates login, registration, token refresh with rotation, logout
revocation and current-user lookups.

Dependencies: lms.core.security, lms.boundary.db.CRUD
System role: Auth/session use case orchestration
"""

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from lms.application.serializers import user_to_dict
from lms.boundary.db.base import utcnow
from lms.boundary.db.CRUD.user_crud import refresh_token_crud, user_crud
from lms.boundary.db.models.user_model import ROLE_LEARNER, UserModel
from lms.configs.auth import AuthSettings
from lms.core.exceptions import (
    AuthenticationError,
    ConflictError,
    PermissionDeniedError,
)
from lms.core.security import (
    REFRESH_TOKEN_TYPE,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)


class AuthService:
    """Auth service orchestrator."""

    def __init__(self, db: AsyncSession, settings: AuthSettings | None = None) -> None:
        """
        Initialize auth service with async database session.

        Args:
            db: Async SQLAlchemy session
            settings: Auth settings; defaults to application settings
        """
        self.db = db
        self.settings = settings

    async def _issue_tokens(self, user: UserModel) -> dict:
        """Sign a new access/refresh pair and persist the refresh jti."""
        active = user.active_memberships
        org_id = active[0].organization_id if active else None
        access = create_access_token(
            user.id, user.email, user.role, org_id=org_id, settings=self.settings
        )
        refresh = create_refresh_token(user.id, settings=self.settings)
        await refresh_token_crud.record(self.db, refresh.jti, user.id, refresh.expires_at)
        return {
            "user": user_to_dict(user),
            "access_token": access.token,
            "refresh_token": refresh.token,
            "expires_at": access.expires_at,
            "refresh_jti": refresh.jti,
        }

    async def login(self, email: str, password: str) -> dict:
        """
        Authenticate with email and password.

        Args:
            email: Account email (any case)
            password: Plaintext password

        Returns:
            dict: user, access_token, refresh_token, expires_at

        Raises:
            AuthenticationError: Unknown email or wrong password
            PermissionDeniedError: Account disabled
        """
        user = await user_crud.get_by_email(self.db, email)
        if user is None or not verify_password(password, user.password_hash):
            logger.warning("Login failed", extra={"email": email.lower()})
            raise AuthenticationError("Invalid credentials", error_code="invalid_credentials")
        if not user.is_active:
            raise PermissionDeniedError("Account disabled", error_code="account_disabled")

        user.last_login_at = utcnow()
        await self.db.flush()
        tokens = await self._issue_tokens(user)
        logger.info("User logged in", extra={"user_id": str(user.id)})
        return tokens

    async def register(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
    ) -> dict:
        """
        Create a learner account and sign it in.

        Raises:
            ConflictError: Email already registered
        """
        normalized = email.strip().lower()
        if await user_crud.get_by_email(self.db, normalized) is not None:
            raise ConflictError("User exists", error_code="user_exists")

        try:
            user = await user_crud.create(
                self.db,
                email=normalized,
                password_hash=hash_password(password, self.settings),
                first_name=first_name,
                last_name=last_name,
                role=ROLE_LEARNER,
                is_active=True,
                memberships=[],
            )
        except IntegrityError as e:
            # concurrent registration won the users.email constraint
            raise ConflictError("User exists", error_code="user_exists") from e
        logger.info("User registered", extra={"user_id": str(user.id)})
        return await self._issue_tokens(user)

    async def refresh(self, refresh_token: str) -> dict:
        """
        Rotate a refresh token.

        The presented token is revoked and linked to its replacement.
        Presenting a token that was already revoked revokes every
        outstanding token of the user.

        Raises:
            AuthenticationError: Invalid, expired, unknown or reused token
            PermissionDeniedError: Account disabled
        """
        claims = decode_token(refresh_token, REFRESH_TOKEN_TYPE, self.settings)
        stored = await refresh_token_crud.get_by_id(self.db, UUID(claims["jti"]))
        if stored is None:
            raise AuthenticationError("Invalid refresh token", error_code="invalid_token")

        if stored.is_revoked:
            revoked = await refresh_token_crud.revoke_all_for_user(self.db, stored.user_id)
            # revocation must survive the rollback of the failing request
            await self.db.commit()
            logger.warning(
                "Refresh token reuse detected",
                extra={"user_id": str(stored.user_id), "revoked": revoked},
            )
            raise AuthenticationError("Refresh token reuse detected", error_code="token_reused")

        user = await user_crud.get_by_id(self.db, stored.user_id)
        if user is None:
            raise AuthenticationError("Invalid refresh token", error_code="invalid_token")
        if not user.is_active:
            raise PermissionDeniedError("Account disabled", error_code="account_disabled")

        tokens = await self._issue_tokens(user)
        await refresh_token_crud.revoke(self.db, stored, replaced_by=tokens["refresh_jti"])
        logger.info("Refresh token rotated", extra={"user_id": str(user.id)})
        return tokens

    async def logout(self, refresh_token: str | None) -> bool:
        """
        Revoke a refresh token if one is presented.

        Invalid tokens are ignored so logout always succeeds.

        Returns:
            bool: True if a stored token was revoked
        """
        if not refresh_token:
            return False
        try:
            claims = decode_token(refresh_token, REFRESH_TOKEN_TYPE, self.settings)
        except AuthenticationError:
            logger.info("Logout with unusable refresh token")
            return False

        stored = await refresh_token_crud.get_by_id(self.db, UUID(claims["jti"]))
        if stored is None or stored.is_revoked:
            return False
        await refresh_token_crud.revoke(self.db, stored)
        logger.info("Refresh token revoked", extra={"user_id": str(stored.user_id)})
        return True

    async def get_user(self, user_id: UUID) -> UserModel | None:
        """Load a user with memberships."""
        return await user_crud.get_by_id(self.db, user_id)
