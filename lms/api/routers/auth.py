"""
Authentication API endpoints.

Routes:
- POST /api/auth/login - Password login
- POST /api/auth/register - Self-registration
- POST /api/auth/refresh - Rotate the refresh token
- POST /api/auth/logout - Revoke the refresh token and clear cookies
- GET /api/auth/me - Current user
- GET /api/auth/session - Current user, memberships and active organization
- GET /api/auth/verify - Token verification

Dependencies: lms.application.services, lms.models
System role: Auth/session HTTP API
"""

import logging

from fastapi import APIRouter, Depends, Request, Response, status

from lms.api.deps.auth import get_current_user
from lms.api.deps.dependencies import get_auth_service, get_settings_dependency
from lms.application.serializers import membership_to_dict, user_to_dict
from lms.application.services import AuthService
from lms.boundary.db.models.user_model import UserModel
from lms.configs import Settings
from lms.core.exceptions import ValidationError
from lms.models.auth import (
    AuthResponse,
    CurrentUserResponse,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    SessionResponse,
    VerifyResponse,
)
from lms.models.common import MessageResponse

from .router_utils import (
    clear_auth_cookies,
    handle_api_errors,
    require_fields,
    set_auth_cookies,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _auth_response(tokens: dict, response: Response, settings: Settings) -> AuthResponse:
    set_auth_cookies(
        response,
        tokens["access_token"],
        tokens["refresh_token"],
        tokens["expires_at"],
        settings,
    )
    return AuthResponse(
        user=tokens["user"],
        access_token=tokens["access_token"],
        refresh_token=tokens["refresh_token"],
        expires_at=tokens["expires_at"],
    )


def _session_payload(user: UserModel, request: Request, settings: Settings) -> dict:
    active = user.active_memberships
    active_org_id = active[0].organization_id if active else None
    cookie_org = request.cookies.get(settings.auth.active_org_cookie_name)
    for membership in active:
        if cookie_org and str(membership.organization_id) == cookie_org:
            active_org_id = membership.organization_id
    return {
        "user": user_to_dict(user),
        "memberships": [membership_to_dict(m) for m in active],
        "active_org_id": active_org_id,
    }


def _refresh_token_from(body: RefreshRequest | None, request: Request, settings: Settings) -> str | None:
    if body is not None and body.refresh_token:
        return body.refresh_token
    return request.cookies.get(settings.auth.refresh_cookie_name)


@router.post("/login", response_model=AuthResponse)
@handle_api_errors
async def login(
    request: LoginRequest,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings_dependency),
) -> AuthResponse:
    """
    Authenticate with email and password and set auth cookies.

    Args:
        request: LoginRequest with email and password
        response: Outgoing response carrying the cookies
        auth_service: Injected AuthService

    Returns:
        AuthResponse: User and token pair

    Raises:
        HTTPException(400): Missing email or password
        HTTPException(401): Invalid credentials
        HTTPException(403): Account disabled
    """
    require_fields(request, "email", "password")
    logger.info("Login attempt", extra={"email": request.email.lower()})

    tokens = await auth_service.login(request.email, request.password)
    return _auth_response(tokens, response, settings)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@handle_api_errors
async def register(
    request: RegisterRequest,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings_dependency),
) -> AuthResponse:
    """
    Create a learner account, sign it in and set auth cookies.

    Raises:
        HTTPException(400): Missing fields or malformed email
        HTTPException(409): User exists
    """
    require_fields(request, "email", "password", "first_name", "last_name")
    if "@" not in request.email:
        raise ValidationError("Invalid email address", field="email")

    logger.info("Registering user", extra={"email": request.email.lower()})
    tokens = await auth_service.register(
        email=request.email,
        password=request.password,
        first_name=request.first_name,
        last_name=request.last_name,
    )
    logger.info("User registered successfully", extra={"user_id": str(tokens["user"]["id"])})
    return _auth_response(tokens, response, settings)


@router.post("/refresh", response_model=AuthResponse)
@handle_api_errors
async def refresh(
    http_request: Request,
    response: Response,
    request: RefreshRequest | None = None,
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings_dependency),
) -> AuthResponse:
    """
    Rotate the refresh token from the body or the refresh cookie.

    Raises:
        HTTPException(400): No refresh token presented
        HTTPException(401): Invalid, expired, revoked or reused token
        HTTPException(403): Account disabled
    """
    token = _refresh_token_from(request, http_request, settings)
    if not token:
        raise ValidationError("Refresh token is required", field="refresh_token")

    tokens = await auth_service.refresh(token)
    return _auth_response(tokens, response, settings)


@router.post("/logout", response_model=MessageResponse)
@handle_api_errors
async def logout(
    http_request: Request,
    response: Response,
    request: RefreshRequest | None = None,
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings_dependency),
) -> MessageResponse:
    """Revoke the presented refresh token, if any, and clear auth cookies."""
    revoked = await auth_service.logout(_refresh_token_from(request, http_request, settings))
    clear_auth_cookies(response, settings)
    logger.info("Logged out", extra={"revoked": revoked})
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=CurrentUserResponse)
async def me(user: UserModel = Depends(get_current_user)) -> CurrentUserResponse:
    """Current user with memberships."""
    return CurrentUserResponse(user=user_to_dict(user))


@router.get("/session", response_model=SessionResponse)
async def session(
    request: Request,
    user: UserModel = Depends(get_current_user),
    settings: Settings = Depends(get_settings_dependency),
) -> SessionResponse:
    """Current user, active memberships and the organization in use."""
    return SessionResponse(**_session_payload(user, request, settings))


@router.get("/verify", response_model=VerifyResponse)
async def verify(
    request: Request,
    user: UserModel = Depends(get_current_user),
    settings: Settings = Depends(get_settings_dependency),
) -> VerifyResponse:
    """Confirm the presented access token is valid."""
    return VerifyResponse(valid=True, **_session_payload(user, request, settings))
