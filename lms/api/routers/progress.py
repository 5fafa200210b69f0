"""
Learner progress API endpoints.

Routes:
- POST /api/learner/progress - Store a progress snapshot
- GET /api/learner/progress - Lesson progress of a learner

Dependencies: lms.application.services, lms.models
System role: Progress tracking HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status

from lms.api.deps.auth import ensure_self_or_admin, get_current_user
from lms.api.deps.dependencies import get_progress_service
from lms.application.services import ProgressService
from lms.boundary.db.models.user_model import UserModel
from lms.core.exceptions import ValidationError
from lms.models.common import DataResponse
from lms.models.progress import (
    LessonProgressResponse,
    ProgressSnapshotRequest,
    ProgressSnapshotResponse,
)

from .router_utils import handle_api_errors, require_fields

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/learner/progress", tags=["progress"])

FOREIGN_PROGRESS_MESSAGE = "Cannot access another learner's progress"


def _parse_lesson_ids(raw: str) -> list[UUID]:
    try:
        return [UUID(part.strip()) for part in raw.split(",") if part.strip()]
    except ValueError:
        raise ValidationError("lesson_ids must be comma separated UUIDs", field="lesson_ids")


@router.post("", response_model=ProgressSnapshotResponse, status_code=status.HTTP_202_ACCEPTED)
@handle_api_errors
async def record_progress(
    request: ProgressSnapshotRequest,
    user: UserModel = Depends(get_current_user),
    progress_service: ProgressService = Depends(get_progress_service),
) -> ProgressSnapshotResponse:
    """
    Store lesson and course progress for a learner.

    Raises:
        HTTPException(400): user_id or course_id missing
        HTTPException(403): Writing another learner's progress
    """
    require_fields(request, "user_id", "course_id")
    ensure_self_or_admin(user, request.user_id, FOREIGN_PROGRESS_MESSAGE)

    logger.info(
        "Recording progress snapshot",
        extra={
            "user_id": str(request.user_id),
            "course_id": str(request.course_id),
            "lesson_count": len(request.lessons),
        },
    )
    result = await progress_service.record_snapshot(
        request.user_id,
        request.course_id,
        [lesson.model_dump() for lesson in request.lessons],
        course=request.course.model_dump() if request.course else None,
    )
    return ProgressSnapshotResponse(data=result)


@router.get("", response_model=DataResponse[list[LessonProgressResponse]])
@handle_api_errors
async def get_progress(
    user_id: UUID | None = None,
    lesson_ids: str | None = None,
    user: UserModel = Depends(get_current_user),
    progress_service: ProgressService = Depends(get_progress_service),
) -> DataResponse[list[LessonProgressResponse]]:
    """
    Lesson progress of a learner for a comma separated list of lessons.

    Raises:
        HTTPException(400): user_id or lesson_ids missing
        HTTPException(403): Reading another learner's progress
    """
    if user_id is None or not lesson_ids:
        raise ValidationError("user_id and lesson_ids are required")
    ensure_self_or_admin(user, user_id, FOREIGN_PROGRESS_MESSAGE)

    rows = await progress_service.get_lesson_progress(user_id, _parse_lesson_ids(lesson_ids))
    return DataResponse(data=[LessonProgressResponse(**row) for row in rows])
