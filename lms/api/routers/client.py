"""
Learner-facing catalog API endpoints.

Routes:
- GET /api/client/courses - Published courses, optionally only assigned ones
- GET /api/client/courses/{identifier} - Course by id or slug
- GET /api/client/assignments - Caller's active assignments
- GET /api/client/surveys - Surveys visible to the caller's organization
- POST /api/client/surveys/{id}/responses - Submit survey answers

Dependencies: lms.application.services, lms.api.deps
System role: Client catalog HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from lms.api.deps.auth import get_current_user, get_optional_user
from lms.api.deps.dependencies import (
    get_course_service,
    get_settings_dependency,
    get_survey_service,
)
from lms.api.deps.org_context import (
    OrgContext,
    check_org_access,
    parse_org_id,
    require_org_access,
    resolve_requested_org_id,
)
from lms.application.services import CourseService, SurveyService
from lms.boundary.db.models.user_model import UserModel
from lms.configs import Settings
from lms.core.exceptions import ValidationError
from lms.models.common import DataResponse
from lms.models.course import AssignmentResponse, CourseResponse
from lms.models.survey import SubmitSurveyRequest, SurveyResponse, SurveySubmissionResponse

from .courses.course_responses import map_assignments_to_response, map_courses_to_response
from .router_utils import handle_api_errors

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/client", tags=["client"])


@router.get("/courses", response_model=DataResponse[list[CourseResponse]])
@handle_api_errors
async def list_client_courses(
    assigned: bool = False,
    org_id: str | None = Query(None, alias="orgId"),
    user: UserModel | None = Depends(get_optional_user),
    course_service: CourseService = Depends(get_course_service),
) -> DataResponse[list[CourseResponse]]:
    """
    List published courses.

    Args:
        assigned: Only courses with an active assignment in the organization
        org_id: Organization (required when assigned is true)

    Raises:
        HTTPException(400): assigned=true without orgId
        HTTPException(401/403): assigned=true without membership
    """
    if not assigned:
        courses = await course_service.list_published()
        return map_courses_to_response(courses)

    if not org_id:
        raise ValidationError("orgId is required when assigned=true", field="orgId")
    ctx = check_org_access(user, parse_org_id(org_id))
    logger.info(
        "Listing assigned courses",
        extra={"organization_id": str(ctx.organization_id), "user_id": str(ctx.user.id)},
    )
    courses = await course_service.list_assigned_courses(ctx.organization_id, ctx.user.id)
    return map_courses_to_response(courses)


@router.get("/courses/{identifier}", response_model=DataResponse[CourseResponse | None])
@handle_api_errors
async def get_client_course(
    identifier: str,
    include_drafts: bool = False,
    course_service: CourseService = Depends(get_course_service),
) -> DataResponse[CourseResponse | None]:
    """Course by id, then slug; data is null when missing or unpublished."""
    course = await course_service.find_course(identifier, include_drafts=include_drafts)
    return DataResponse(data=CourseResponse(**course) if course else None)


@router.get("/assignments", response_model=DataResponse[list[AssignmentResponse]])
@handle_api_errors
async def list_client_assignments(
    ctx: OrgContext = Depends(require_org_access()),
    course_service: CourseService = Depends(get_course_service),
) -> DataResponse[list[AssignmentResponse]]:
    """Active assignments of the caller (and organization-wide ones)."""
    assignments = await course_service.list_assignments(ctx.organization_id, ctx.user.id)
    return map_assignments_to_response(assignments)


@router.get("/surveys", response_model=DataResponse[list[SurveyResponse]])
@handle_api_errors
async def list_client_surveys(
    request: Request,
    status: str = "published",
    user: UserModel = Depends(get_current_user),
    settings: Settings = Depends(get_settings_dependency),
    survey_service: SurveyService = Depends(get_survey_service),
) -> DataResponse[list[SurveyResponse]]:
    """
    Surveys with the given status (``all`` disables the filter).

    When an organization is requested, or the caller belongs to one,
    only surveys assigned to it or to no organization are listed.
    """
    raw = await resolve_requested_org_id(request, settings)
    organization_id = None
    if raw or user.active_memberships:
        organization_id = check_org_access(user, parse_org_id(raw) if raw else None).organization_id

    surveys = await survey_service.list_surveys(
        status=None if status == "all" else status,
        organization_id=organization_id,
    )
    return DataResponse(data=[SurveyResponse(**survey) for survey in surveys])


@router.post(
    "/surveys/{survey_id}/responses",
    response_model=DataResponse[SurveySubmissionResponse],
    status_code=status.HTTP_201_CREATED,
)
@handle_api_errors
async def submit_survey_response(
    survey_id: UUID,
    request: SubmitSurveyRequest,
    user: UserModel = Depends(get_current_user),
    survey_service: SurveyService = Depends(get_survey_service),
) -> DataResponse[SurveySubmissionResponse]:
    """
    Store the caller's answers; a resubmission replaces earlier answers.

    Raises:
        HTTPException(400): Survey not published or required answers missing
        HTTPException(403): organization_id given without membership
        HTTPException(404): Survey not found
    """
    organization_id = request.organization_id
    if organization_id is not None:
        check_org_access(user, organization_id)
    elif user.active_memberships:
        organization_id = user.active_memberships[0].organization_id

    logger.info(
        "Submitting survey response",
        extra={"survey_id": str(survey_id), "user_id": str(user.id)},
    )
    response = await survey_service.submit_response(
        survey_id,
        user.id,
        request.answers,
        organization_id=organization_id,
    )
    return DataResponse(data=SurveySubmissionResponse(**response))
