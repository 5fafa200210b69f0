"""
Organization context dependency.

Resolves the tenant a request targets and checks the caller's membership
in it. The organization id is taken from, in order: the X-Org-Id header,
the orgId / organizationId / org_id query parameters, the JSON body, the
org_id path parameter, and the active-organization cookie. Without any of
those the caller's first active membership is used.

Dependencies: fastapi, lms.api.deps.auth
System role: Multi-tenant access control
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable
from uuid import UUID

from fastapi import Depends, Request

from lms.api.deps.auth import as_http_error, get_optional_user
from lms.api.deps.dependencies import get_settings_dependency
from lms.boundary.db.models.organization_model import WRITABLE_ROLES
from lms.boundary.db.models.user_model import ROLE_ADMIN, UserModel
from lms.configs import Settings
from lms.core.exceptions import AuthenticationError, PermissionDeniedError, ValidationError

logger = logging.getLogger(__name__)

ORG_HEADER = "X-Org-Id"
ORG_QUERY_KEYS = ("orgId", "organizationId", "org_id")
ORG_BODY_KEYS = ("org_id", "organization_id", "orgId", "organizationId")
BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


@dataclass(frozen=True)
class OrgContext:
    """Resolved tenant scope of a request."""

    user: UserModel
    organization_id: UUID | None
    role: str | None
    is_platform_admin: bool = False

    @property
    def can_write(self) -> bool:
        return self.is_platform_admin or self.role in WRITABLE_ROLES


async def _body_org_id(request: Request) -> Any:
    if request.method not in BODY_METHODS:
        return None
    if "application/json" not in request.headers.get("content-type", ""):
        return None
    raw = await request.body()
    if not raw:
        return None
    try:
        body = json.loads(raw)
    except json.JSONDecodeError:
        return None
    if not isinstance(body, dict):
        return None
    for key in ORG_BODY_KEYS:
        if body.get(key):
            return body[key]
    return None


async def resolve_requested_org_id(request: Request, settings: Settings) -> str | None:
    """First non-empty organization id carried by the request, unparsed."""
    candidates = [request.headers.get(ORG_HEADER)]
    candidates += [request.query_params.get(key) for key in ORG_QUERY_KEYS]
    for candidate in candidates:
        if candidate:
            return candidate

    body_value = await _body_org_id(request)
    if body_value:
        return str(body_value)

    return request.path_params.get("org_id") or request.cookies.get(
        settings.auth.active_org_cookie_name
    ) or None


def parse_org_id(raw: Any) -> UUID:
    """Parse an organization id, rejecting non-UUID values with 400."""
    try:
        return UUID(str(raw))
    except ValueError:
        raise as_http_error(ValidationError("Invalid organization id", field="org_id"))


def check_org_access(user: UserModel | None, org_id: UUID | None, write: bool = False) -> OrgContext:
    """
    Check the caller may act in an organization.

    Args:
        user: Authenticated caller, if any
        org_id: Target organization; None falls back to the first active membership
        write: Require a writable organization role

    Returns:
        OrgContext: The resolved scope

    Raises:
        HTTPException(401): No authenticated user
        HTTPException(400): No organization resolvable
        HTTPException(403): Not a member, or role not writable
    """
    if user is None:
        raise as_http_error(AuthenticationError("User authentication required"))

    active = user.active_memberships
    if org_id is None and active:
        org_id = active[0].organization_id

    if user.role == ROLE_ADMIN:
        return OrgContext(user=user, organization_id=org_id, role="admin", is_platform_admin=True)

    if org_id is None:
        raise as_http_error(ValidationError("Organization context required", field="org_id"))

    membership = next((m for m in active if m.organization_id == org_id), None)
    if membership is None:
        logger.warning(
            "Organization access denied",
            extra={"user_id": str(user.id), "organization_id": str(org_id)},
        )
        raise as_http_error(PermissionDeniedError("Organization membership required"))
    if write and membership.role not in WRITABLE_ROLES:
        raise as_http_error(PermissionDeniedError("Insufficient organization permissions"))
    return OrgContext(user=user, organization_id=org_id, role=membership.role)


def require_org_access(write: bool = False) -> Callable:
    """
    Build a dependency enforcing membership in the requested organization.

    Args:
        write: Require a writable organization role (owner, admin, manager, editor)

    Returns:
        Callable: FastAPI dependency yielding an OrgContext
    """

    async def dependency(
        request: Request,
        user: UserModel | None = Depends(get_optional_user),
        settings: Settings = Depends(get_settings_dependency),
    ) -> OrgContext:
        if user is None:
            raise as_http_error(AuthenticationError("User authentication required"))
        raw = await resolve_requested_org_id(request, settings)
        return check_org_access(user, parse_org_id(raw) if raw else None, write=write)

    return dependency
