"""
Organization domain schemas.

Dependencies: pydantic
System role: Organization and membership API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class CreateOrganizationRequest(BaseModel):
    """Request schema for creating an organization."""

    name: str | None = Field(None, max_length=255)
    contact_email: str | None = Field(None, max_length=320)
    subscription: str | None = Field(None, max_length=64, description="Subscription tier")
    status: str = Field("active", description="active or inactive")
    settings: dict = Field(default_factory=dict)


class UpdateOrganizationRequest(BaseModel):
    """Request schema for updating an organization."""

    name: str | None = Field(None, min_length=1, max_length=255)
    contact_email: str | None = Field(None, max_length=320)
    subscription: str | None = Field(None, max_length=64)
    status: str | None = None
    settings: dict | None = None


class OrganizationResponse(BaseModel):
    """Response schema for organizations."""

    id: uuid.UUID
    name: str
    contact_email: str
    subscription: str
    status: str
    settings: dict
    created_at: datetime
    updated_at: datetime


class AddMemberRequest(BaseModel):
    """Request schema for adding (or re-roling) an organization member."""

    user_id: uuid.UUID | None = None
    role: str = Field("member", description="owner, admin, manager, editor, member or viewer")


class MemberResponse(BaseModel):
    """Response schema for organization memberships."""

    id: uuid.UUID
    organization_id: uuid.UUID
    user_id: uuid.UUID
    role: str
    status: str
    email: str | None = None
    created_at: datetime
