"""
Auth domain schemas.

Request/response schemas for login, registration, token refresh and
the current-user endpoints.

Dependencies: pydantic
System role: Auth API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Request schema for password login."""

    email: str | None = Field(None, description="Account email")
    password: str | None = Field(None, description="Plaintext password")


class RegisterRequest(BaseModel):
    """Request schema for self-registration."""

    email: str | None = Field(None, max_length=320, description="Account email")
    password: str | None = Field(None, description="Plaintext password")
    first_name: str | None = Field(None, max_length=120)
    last_name: str | None = Field(None, max_length=120)


class RefreshRequest(BaseModel):
    """Request schema for token refresh and logout; falls back to the cookie."""

    refresh_token: str | None = Field(None, description="Refresh token (optional if cookie is set)")


class MembershipSummary(BaseModel):
    """Membership as embedded in a user payload."""

    id: uuid.UUID
    organization_id: uuid.UUID
    role: str
    status: str


class UserResponse(BaseModel):
    """Public view of a user account."""

    id: uuid.UUID
    email: str
    first_name: str | None = None
    last_name: str | None = None
    role: str
    is_active: bool
    last_login_at: datetime | None = None
    created_at: datetime | None = None
    organization_id: uuid.UUID | None = Field(None, description="Active organization, if any")
    memberships: list[MembershipSummary] = Field(default_factory=list)


class AuthResponse(BaseModel):
    """Response schema for login, register and refresh."""

    user: UserResponse
    access_token: str
    refresh_token: str
    expires_at: datetime


class CurrentUserResponse(BaseModel):
    """Response schema for the current-user endpoint."""

    user: UserResponse


class SessionResponse(BaseModel):
    """Current user with memberships and the organization in use."""

    user: UserResponse
    memberships: list[MembershipSummary] = Field(default_factory=list)
    active_org_id: uuid.UUID | None = None


class VerifyResponse(SessionResponse):
    """Response schema for token verification."""

    valid: bool = True
