"""
Authentication dependencies.

Resolve the caller from a Bearer header or the access-token cookie and
enforce platform roles.

Dependencies: fastapi, lms.core.security, lms.application.services
System role: Request authentication and role guards
"""

import logging
from uuid import UUID

from fastapi import Depends, HTTPException, Request

from lms.api.deps.dependencies import get_auth_service, get_settings_dependency
from lms.application.services import AuthService
from lms.boundary.db.models.organization_model import ORG_ADMIN_ROLES
from lms.boundary.db.models.user_model import ROLE_ADMIN, UserModel
from lms.configs import Settings
from lms.core.exceptions import AuthenticationError, LMSException, PermissionDeniedError
from lms.core.security import ACCESS_TOKEN_TYPE, decode_token, extract_bearer_token

logger = logging.getLogger(__name__)


def as_http_error(error: LMSException) -> HTTPException:
    """Render a domain exception as the HTTPException guards raise."""
    return HTTPException(status_code=error.status_code, detail=error.to_dict())


def read_access_token(request: Request, settings: Settings) -> str | None:
    """Access token from the Authorization header, else the access cookie."""
    return extract_bearer_token(request.headers.get("Authorization")) or request.cookies.get(
        settings.auth.access_cookie_name
    )


async def get_optional_user(
    request: Request,
    settings: Settings = Depends(get_settings_dependency),
    auth_service: AuthService = Depends(get_auth_service),
) -> UserModel | None:
    """
    Resolve the caller if a token is presented.

    Returns:
        UserModel | None: None when no token is presented

    Raises:
        HTTPException(401): Token invalid or user no longer exists
        HTTPException(403): Account disabled
    """
    token = read_access_token(request, settings)
    if not token:
        return None
    try:
        claims = decode_token(token, ACCESS_TOKEN_TYPE, settings.auth)
    except AuthenticationError as e:
        logger.info("Rejected access token", extra={"reason": e.message})
        raise as_http_error(AuthenticationError("Invalid token", error_code=e.error_code))

    user = await auth_service.get_user(UUID(claims["sub"]))
    if user is None:
        raise as_http_error(AuthenticationError("Invalid token", error_code="invalid_token"))
    if not user.is_active:
        raise as_http_error(PermissionDeniedError("Account disabled", error_code="account_disabled"))
    return user


async def get_current_user(user: UserModel | None = Depends(get_optional_user)) -> UserModel:
    """
    Require an authenticated caller.

    Raises:
        HTTPException(401): No token presented
    """
    if user is None:
        raise as_http_error(AuthenticationError("Authentication required"))
    return user


def is_admin(user: UserModel) -> bool:
    """Platform admins and organization owners/admins may use the admin portal."""
    if user.role == ROLE_ADMIN:
        return True
    return any(m.role in ORG_ADMIN_ROLES for m in user.active_memberships)


async def require_admin(user: UserModel = Depends(get_current_user)) -> UserModel:
    """
    Require admin portal access.

    Raises:
        HTTPException(403): Caller is not an admin
    """
    if not is_admin(user):
        raise as_http_error(PermissionDeniedError("Admin access required"))
    return user


async def require_platform_admin(user: UserModel = Depends(get_current_user)) -> UserModel:
    """
    Require the platform admin role.

    Raises:
        HTTPException(403): Caller is not a platform admin
    """
    if user.role != ROLE_ADMIN:
        raise as_http_error(PermissionDeniedError("Platform admin access required"))
    return user


def ensure_self_or_admin(user: UserModel, user_id: UUID | None, message: str) -> None:
    """
    Learners may only act on their own records; platform admins on anyone's.

    Raises:
        PermissionDeniedError: ``user_id`` names another learner
    """
    if user_id is not None and user.role != ROLE_ADMIN and user.id != user_id:
        raise PermissionDeniedError(message)
