"""
Admin course API endpoints.

Routes:
- GET /api/admin/courses - List courses with modules and lessons
- GET /api/admin/courses/{id} - Get single course
- POST /api/admin/courses - Idempotent upsert of a course tree
- PUT /api/admin/courses/{id} - Update course metadata
- POST /api/admin/courses/{id}/publish - Publish course
- POST /api/admin/courses/{id}/assign - Assign course to an organization or learners
- DELETE /api/admin/courses/{id} - Delete course

Dependencies: lms.application.services, lms.models
System role: Course authoring HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status

from lms.api.deps.auth import require_admin
from lms.api.deps.dependencies import get_course_service
from lms.api.deps.org_context import check_org_access
from lms.application.services import CourseService
from lms.boundary.db.models.user_model import UserModel
from lms.models.common import DataResponse
from lms.models.course import (
    AssignCourseRequest,
    AssignmentResponse,
    CourseResponse,
    PublishCourseRequest,
    UpdateCourseRequest,
    UpsertCourseRequest,
)

from ..router_utils import handle_api_errors
from .course_responses import (
    map_assignments_to_response,
    map_course_to_response,
    map_courses_to_response,
)
from .course_validators import (
    validate_assignment,
    validate_course_update,
    validate_course_upsert,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/courses", tags=["admin-courses"])


@router.get("", response_model=DataResponse[list[CourseResponse]])
@handle_api_errors
async def list_courses(
    status: str | None = None,
    _admin: UserModel = Depends(require_admin),
    course_service: CourseService = Depends(get_course_service),
) -> DataResponse[list[CourseResponse]]:
    """
    List courses newest first, each with ordered modules and lessons.

    Args:
        status: Optional status filter (draft, published, archived)
        course_service: Injected CourseService

    Returns:
        DataResponse[list[CourseResponse]]: Courses
    """
    logger.info("Listing courses", extra={"status": status})
    courses = await course_service.list_courses(status=status)
    logger.info("Courses retrieved successfully", extra={"count": len(courses)})
    return map_courses_to_response(courses)


@router.get("/{course_id}", response_model=DataResponse[CourseResponse])
@handle_api_errors
async def get_course(
    course_id: UUID,
    _admin: UserModel = Depends(require_admin),
    course_service: CourseService = Depends(get_course_service),
) -> DataResponse[CourseResponse]:
    """
    Get course by ID.

    Raises:
        HTTPException(404): Course not found
    """
    course = await course_service.get_course(course_id)
    return map_course_to_response(course)


@router.post("", response_model=DataResponse[CourseResponse], status_code=status.HTTP_201_CREATED)
@handle_api_errors
async def upsert_course(
    request: UpsertCourseRequest,
    admin: UserModel = Depends(require_admin),
    course_service: CourseService = Depends(get_course_service),
) -> DataResponse[CourseResponse]:
    """
    Create or replace a course with its modules and lessons.

    A repeated idempotency_key (or client_event_id) is rejected.

    Args:
        request: UpsertCourseRequest with course, modules and optional keys
        admin: Authenticated admin
        course_service: Injected CourseService

    Returns:
        DataResponse[CourseResponse]: Stored course tree

    Raises:
        HTTPException(400): Missing title or invalid tree
        HTTPException(409): Idempotency key reused, stale version or slug conflict
    """
    validate_course_upsert(request)
    key = request.idempotency_key or request.client_event_id

    logger.info(
        "Upserting course",
        extra={
            "course_title": request.course.title,
            "module_count": len(request.modules),
            "has_idempotency_key": bool(key),
        },
    )

    course = await course_service.upsert_course(
        course=request.course.model_dump(),
        modules=[module.model_dump() for module in request.modules],
        idempotency_key=key,
        payload=request.model_dump(mode="json"),
        actor_id=admin.id,
    )

    logger.info(
        "Course upserted successfully",
        extra={"course_id": str(course["id"]), "version": course["version"]},
    )
    return map_course_to_response(course)


@router.put("/{course_id}", response_model=DataResponse[CourseResponse])
@handle_api_errors
async def update_course(
    course_id: UUID,
    request: UpdateCourseRequest,
    _admin: UserModel = Depends(require_admin),
    course_service: CourseService = Depends(get_course_service),
) -> DataResponse[CourseResponse]:
    """
    Update course metadata.

    Raises:
        HTTPException(400): No fields or invalid status
        HTTPException(404): Course not found
        HTTPException(409): Slug in use
    """
    validate_course_update(request)
    course = await course_service.update_course(
        course_id,
        title=request.title,
        slug=request.slug,
        description=request.description,
        status=request.status,
        metadata=request.metadata,
    )
    return map_course_to_response(course)


@router.post("/{course_id}/publish", response_model=DataResponse[CourseResponse])
@handle_api_errors
async def publish_course(
    course_id: UUID,
    request: PublishCourseRequest | None = None,
    _admin: UserModel = Depends(require_admin),
    course_service: CourseService = Depends(get_course_service),
) -> DataResponse[CourseResponse]:
    """
    Publish a course.

    Raises:
        HTTPException(404): Course not found
        HTTPException(409): Given version older than stored
    """
    version = request.version if request is not None else None
    logger.info("Publishing course", extra={"course_id": str(course_id), "version": version})
    course = await course_service.publish_course(course_id, version=version)
    logger.info("Course published successfully", extra={"course_id": str(course_id)})
    return map_course_to_response(course)


@router.post(
    "/{course_id}/assign",
    response_model=DataResponse[list[AssignmentResponse]],
    status_code=status.HTTP_201_CREATED,
)
@handle_api_errors
async def assign_course(
    course_id: UUID,
    request: AssignCourseRequest,
    admin: UserModel = Depends(require_admin),
    course_service: CourseService = Depends(get_course_service),
) -> DataResponse[list[AssignmentResponse]]:
    """
    Assign a course organization-wide, or to learners of the organization.

    Raises:
        HTTPException(400): organization_id missing
        HTTPException(403): No write access to the organization
        HTTPException(404): Course, organization or user not found
    """
    validate_assignment(request)
    check_org_access(admin, request.organization_id, write=True)

    logger.info(
        "Assigning course",
        extra={
            "course_id": str(course_id),
            "organization_id": str(request.organization_id),
            "user_count": len(request.user_ids),
        },
    )
    assignments = await course_service.assign_course(
        course_id,
        request.organization_id,
        user_ids=request.user_ids,
        due_at=request.due_at,
        assigned_by=admin.id,
    )
    return map_assignments_to_response(assignments)


@router.delete("/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
@handle_api_errors
async def delete_course(
    course_id: UUID,
    _admin: UserModel = Depends(require_admin),
    course_service: CourseService = Depends(get_course_service),
) -> None:
    """
    Delete a course with its modules and lessons.

    Raises:
        HTTPException(404): Course not found
    """
    logger.info("Deleting course", extra={"course_id": str(course_id)})
    await course_service.delete_course(course_id)
    logger.info("Course deleted successfully", extra={"course_id": str(course_id)})
