"""
Admin lesson API endpoints.

Routes:
- POST /api/admin/lessons - Create lesson
- PATCH /api/admin/lessons/{id} - Update lesson
- DELETE /api/admin/lessons/{id} - Delete lesson (idempotent)
- POST /api/admin/lessons/reorder - Reorder lessons of a module

Dependencies: lms.application.services, lms.models
System role: Lesson authoring HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status

from lms.api.deps.auth import require_admin
from lms.api.deps.dependencies import get_curriculum_service
from lms.application.services import CurriculumService
from lms.models.common import DataResponse
from lms.models.course import (
    CreateLessonRequest,
    LessonResponse,
    OrderResponse,
    ReorderLessonsRequest,
    UpdateLessonRequest,
)

from .courses.course_responses import map_lesson_to_response, map_order_to_response
from .courses.course_validators import validate_lesson_creation, validate_lesson_update
from .router_utils import handle_api_errors

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/admin/lessons",
    tags=["admin-lessons"],
    dependencies=[Depends(require_admin)],
)


@router.post("/reorder", response_model=DataResponse[list[OrderResponse]])
@handle_api_errors
async def reorder_lessons(
    request: ReorderLessonsRequest,
    curriculum_service: CurriculumService = Depends(get_curriculum_service),
) -> DataResponse[list[OrderResponse]]:
    """
    Apply new positions to the lessons of a module.

    Raises:
        HTTPException(400): A lesson is not part of the module
        HTTPException(404): Module not found
    """
    logger.info(
        "Reordering lessons",
        extra={"module_id": str(request.module_id), "count": len(request.lessons)},
    )
    order = await curriculum_service.reorder_lessons(
        request.module_id, [item.model_dump() for item in request.lessons]
    )
    return map_order_to_response(order)


@router.post("", response_model=DataResponse[LessonResponse], status_code=status.HTTP_201_CREATED)
@handle_api_errors
async def create_lesson(
    request: CreateLessonRequest,
    curriculum_service: CurriculumService = Depends(get_curriculum_service),
) -> DataResponse[LessonResponse]:
    """
    Create a lesson; appended after existing lessons without order_index.

    Raises:
        HTTPException(400): module_id or title missing, unknown type
        HTTPException(404): Module not found
        HTTPException(409): Stale course_version
    """
    validate_lesson_creation(request)
    logger.info("Creating lesson", extra={"module_id": str(request.module_id)})
    lesson = await curriculum_service.create_lesson(
        request.module_id,
        request.title,
        type=request.type or "text",
        description=request.description,
        order_index=request.order_index,
        duration_s=request.duration_s,
        content=request.content,
        completion_rule=request.completion_rule,
        course_version=request.course_version,
    )
    logger.info("Lesson created successfully", extra={"lesson_id": str(lesson["id"])})
    return map_lesson_to_response(lesson)


@router.patch("/{lesson_id}", response_model=DataResponse[LessonResponse])
@handle_api_errors
async def update_lesson(
    lesson_id: UUID,
    request: UpdateLessonRequest,
    curriculum_service: CurriculumService = Depends(get_curriculum_service),
) -> DataResponse[LessonResponse]:
    """
    Patch a lesson.

    Raises:
        HTTPException(400): No fields to update or unknown type
        HTTPException(404): Lesson not found
        HTTPException(409): Stale course_version
    """
    validate_lesson_update(request)
    lesson = await curriculum_service.update_lesson(
        lesson_id,
        course_version=request.course_version,
        **request.model_dump(exclude={"course_version"}, exclude_none=True),
    )
    return map_lesson_to_response(lesson)


@router.delete("/{lesson_id}", status_code=status.HTTP_204_NO_CONTENT)
@handle_api_errors
async def delete_lesson(
    lesson_id: UUID,
    curriculum_service: CurriculumService = Depends(get_curriculum_service),
) -> None:
    """Delete a lesson; deleting a missing lesson succeeds."""
    await curriculum_service.delete_lesson(lesson_id)
