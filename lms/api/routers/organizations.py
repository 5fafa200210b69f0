"""
Admin organization API endpoints.

Routes:
- GET /api/admin/organizations - List organizations visible to the caller
- GET /api/admin/organizations/{org_id} - Get organization
- POST /api/admin/organizations - Create organization (platform admin)
- PUT /api/admin/organizations/{org_id} - Update organization
- DELETE /api/admin/organizations/{org_id} - Delete organization (platform admin)
- GET /api/admin/organizations/{org_id}/members - List members
- POST /api/admin/organizations/{org_id}/members - Add or re-role a member
- DELETE /api/admin/organizations/{org_id}/members/{membership_id} - Remove member

Dependencies: lms.application.services, lms.models
System role: Tenant management HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status

from lms.api.deps.auth import get_current_user, require_platform_admin
from lms.api.deps.dependencies import get_organization_service
from lms.api.deps.org_context import check_org_access
from lms.application.services import OrganizationService
from lms.boundary.db.models.user_model import ROLE_ADMIN, UserModel
from lms.models.common import DataResponse
from lms.models.organization import (
    AddMemberRequest,
    CreateOrganizationRequest,
    MemberResponse,
    OrganizationResponse,
    UpdateOrganizationRequest,
)

from .router_utils import handle_api_errors, require_fields

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/organizations", tags=["admin-organizations"])


@router.get("", response_model=DataResponse[list[OrganizationResponse]])
@handle_api_errors
async def list_organizations(
    user: UserModel = Depends(get_current_user),
    organization_service: OrganizationService = Depends(get_organization_service),
) -> DataResponse[list[OrganizationResponse]]:
    """List every organization for platform admins, else the caller's own."""
    ids = None
    if user.role != ROLE_ADMIN:
        ids = [m.organization_id for m in user.active_memberships]
    orgs = await organization_service.list_organizations(ids=ids)
    logger.info("Organizations retrieved successfully", extra={"count": len(orgs)})
    return DataResponse(data=[OrganizationResponse(**org) for org in orgs])


@router.get("/{org_id}", response_model=DataResponse[OrganizationResponse])
@handle_api_errors
async def get_organization(
    org_id: UUID,
    user: UserModel = Depends(get_current_user),
    organization_service: OrganizationService = Depends(get_organization_service),
) -> DataResponse[OrganizationResponse]:
    """
    Get organization by ID.

    Raises:
        HTTPException(403): Not a member
        HTTPException(404): Organization not found
    """
    check_org_access(user, org_id)
    org = await organization_service.get_organization(org_id)
    return DataResponse(data=OrganizationResponse(**org))


@router.post(
    "",
    response_model=DataResponse[OrganizationResponse],
    status_code=status.HTTP_201_CREATED,
)
@handle_api_errors
async def create_organization(
    request: CreateOrganizationRequest,
    _admin: UserModel = Depends(require_platform_admin),
    organization_service: OrganizationService = Depends(get_organization_service),
) -> DataResponse[OrganizationResponse]:
    """
    Create an organization.

    Raises:
        HTTPException(400): name, contact_email or subscription missing
        HTTPException(403): Caller is not a platform admin
    """
    require_fields(request, "name", "contact_email", "subscription")
    logger.info("Creating organization", extra={"organization_name": request.name})
    org = await organization_service.create_organization(
        name=request.name,
        contact_email=request.contact_email,
        subscription=request.subscription,
        status=request.status,
        settings=request.settings,
    )
    logger.info("Organization created successfully", extra={"organization_id": str(org["id"])})
    return DataResponse(data=OrganizationResponse(**org))


@router.put("/{org_id}", response_model=DataResponse[OrganizationResponse])
@handle_api_errors
async def update_organization(
    org_id: UUID,
    request: UpdateOrganizationRequest,
    user: UserModel = Depends(get_current_user),
    organization_service: OrganizationService = Depends(get_organization_service),
) -> DataResponse[OrganizationResponse]:
    """
    Update an organization.

    Raises:
        HTTPException(403): No write access to the organization
        HTTPException(404): Organization not found
    """
    check_org_access(user, org_id, write=True)
    org = await organization_service.update_organization(
        org_id, **request.model_dump(exclude_none=True)
    )
    return DataResponse(data=OrganizationResponse(**org))


@router.delete("/{org_id}", status_code=status.HTTP_204_NO_CONTENT)
@handle_api_errors
async def delete_organization(
    org_id: UUID,
    _admin: UserModel = Depends(require_platform_admin),
    organization_service: OrganizationService = Depends(get_organization_service),
) -> None:
    """
    Delete an organization and its memberships.

    Raises:
        HTTPException(404): Organization not found
    """
    logger.info("Deleting organization", extra={"organization_id": str(org_id)})
    await organization_service.delete_organization(org_id)


@router.get("/{org_id}/members", response_model=DataResponse[list[MemberResponse]])
@handle_api_errors
async def list_members(
    org_id: UUID,
    user: UserModel = Depends(get_current_user),
    organization_service: OrganizationService = Depends(get_organization_service),
) -> DataResponse[list[MemberResponse]]:
    """List members of an organization."""
    check_org_access(user, org_id)
    members = await organization_service.list_members(org_id)
    return DataResponse(data=[MemberResponse(**member) for member in members])


@router.post(
    "/{org_id}/members",
    response_model=DataResponse[MemberResponse],
    status_code=status.HTTP_201_CREATED,
)
@handle_api_errors
async def add_member(
    org_id: UUID,
    request: AddMemberRequest,
    user: UserModel = Depends(get_current_user),
    organization_service: OrganizationService = Depends(get_organization_service),
) -> DataResponse[MemberResponse]:
    """
    Add a user to the organization, or change an existing member's role.

    Raises:
        HTTPException(400): user_id missing or unknown role
        HTTPException(403): No write access to the organization
        HTTPException(404): Organization or user not found
    """
    check_org_access(user, org_id, write=True)
    require_fields(request, "user_id")
    logger.info(
        "Adding organization member",
        extra={"organization_id": str(org_id), "user_id": str(request.user_id), "role": request.role},
    )
    member = await organization_service.add_member(org_id, request.user_id, role=request.role)
    return DataResponse(data=MemberResponse(**member))


@router.delete("/{org_id}/members/{membership_id}", status_code=status.HTTP_204_NO_CONTENT)
@handle_api_errors
async def remove_member(
    org_id: UUID,
    membership_id: UUID,
    user: UserModel = Depends(get_current_user),
    organization_service: OrganizationService = Depends(get_organization_service),
) -> None:
    """
    Remove a membership; removing a missing membership succeeds.

    Raises:
        HTTPException(400): Membership belongs to another organization
        HTTPException(403): No write access to the organization
    """
    check_org_access(user, org_id, write=True)
    await organization_service.remove_member(org_id, membership_id)
