"""
Admin survey API endpoints.

Routes:
- GET /api/admin/surveys - List surveys
- GET /api/admin/surveys/{id} - Get survey
- POST /api/admin/surveys - Create survey
- PUT /api/admin/surveys/{id} - Update survey
- DELETE /api/admin/surveys/{id} - Delete survey and responses
- GET /api/admin/surveys/{id}/responses - Responses with per-question summary

Dependencies: lms.application.services, lms.models
System role: Survey management HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status

from lms.api.deps.auth import require_admin
from lms.api.deps.dependencies import get_survey_service
from lms.application.services import SurveyService
from lms.boundary.db.models.user_model import UserModel
from lms.models.common import DataResponse
from lms.models.survey import (
    CreateSurveyRequest,
    SurveyResponse,
    SurveyResultsResponse,
    UpdateSurveyRequest,
)

from .router_utils import handle_api_errors, require_fields

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/surveys", tags=["admin-surveys"])


@router.get("", response_model=DataResponse[list[SurveyResponse]])
@handle_api_errors
async def list_surveys(
    status: str | None = None,
    _admin: UserModel = Depends(require_admin),
    survey_service: SurveyService = Depends(get_survey_service),
) -> DataResponse[list[SurveyResponse]]:
    """List surveys, optionally by status."""
    surveys = await survey_service.list_surveys(status=status)
    logger.info("Surveys retrieved successfully", extra={"count": len(surveys), "status": status})
    return DataResponse(data=[SurveyResponse(**survey) for survey in surveys])


@router.get("/{survey_id}", response_model=DataResponse[SurveyResponse])
@handle_api_errors
async def get_survey(
    survey_id: UUID,
    _admin: UserModel = Depends(require_admin),
    survey_service: SurveyService = Depends(get_survey_service),
) -> DataResponse[SurveyResponse]:
    """
    Get survey by ID.

    Raises:
        HTTPException(404): Survey not found
    """
    survey = await survey_service.get_survey(survey_id)
    return DataResponse(data=SurveyResponse(**survey))


@router.post("", response_model=DataResponse[SurveyResponse], status_code=status.HTTP_201_CREATED)
@handle_api_errors
async def create_survey(
    request: CreateSurveyRequest,
    admin: UserModel = Depends(require_admin),
    survey_service: SurveyService = Depends(get_survey_service),
) -> DataResponse[SurveyResponse]:
    """
    Create a survey.

    Raises:
        HTTPException(400): Title missing or unknown status
    """
    require_fields(request, "title")
    logger.info(
        "Creating survey",
        extra={"survey_title": request.title, "question_count": len(request.questions)},
    )
    survey = await survey_service.create_survey(
        title=request.title,
        description=request.description,
        type=request.type,
        status=request.status,
        questions=[question.model_dump() for question in request.questions],
        assigned_org_ids=request.assigned_org_ids,
        settings=request.settings,
        created_by=admin.id,
    )
    logger.info("Survey created successfully", extra={"survey_id": str(survey["id"])})
    return DataResponse(data=SurveyResponse(**survey))


@router.put("/{survey_id}", response_model=DataResponse[SurveyResponse])
@handle_api_errors
async def update_survey(
    survey_id: UUID,
    request: UpdateSurveyRequest,
    _admin: UserModel = Depends(require_admin),
    survey_service: SurveyService = Depends(get_survey_service),
) -> DataResponse[SurveyResponse]:
    """
    Update a survey; bumps its version.

    Raises:
        HTTPException(400): Unknown status
        HTTPException(404): Survey not found
    """
    fields = request.model_dump(exclude_none=True)
    survey = await survey_service.update_survey(survey_id, **fields)
    return DataResponse(data=SurveyResponse(**survey))


@router.delete("/{survey_id}", status_code=status.HTTP_204_NO_CONTENT)
@handle_api_errors
async def delete_survey(
    survey_id: UUID,
    _admin: UserModel = Depends(require_admin),
    survey_service: SurveyService = Depends(get_survey_service),
) -> None:
    """
    Delete a survey and its responses.

    Raises:
        HTTPException(404): Survey not found
    """
    logger.info("Deleting survey", extra={"survey_id": str(survey_id)})
    await survey_service.delete_survey(survey_id)


@router.get("/{survey_id}/responses", response_model=SurveyResultsResponse)
@handle_api_errors
async def get_survey_results(
    survey_id: UUID,
    _admin: UserModel = Depends(require_admin),
    survey_service: SurveyService = Depends(get_survey_service),
) -> SurveyResultsResponse:
    """
    Responses of a survey with a per-question summary.

    Raises:
        HTTPException(404): Survey not found
    """
    results = await survey_service.get_results(survey_id)
    return SurveyResultsResponse(**results)
