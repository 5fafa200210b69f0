"""
Admin module API endpoints.

Routes:
- POST /api/admin/modules - Create module
- PATCH /api/admin/modules/{id} - Update module
- DELETE /api/admin/modules/{id} - Delete module (idempotent)
- POST /api/admin/modules/reorder - Reorder modules of a course

Dependencies: lms.application.services, lms.models
System role: Module authoring HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status

from lms.api.deps.auth import require_admin
from lms.api.deps.dependencies import get_curriculum_service
from lms.application.services import CurriculumService
from lms.models.common import DataResponse
from lms.models.course import (
    CreateModuleRequest,
    ModuleResponse,
    OrderResponse,
    ReorderModulesRequest,
    UpdateModuleRequest,
)

from .courses.course_responses import map_module_to_response, map_order_to_response
from .courses.course_validators import validate_module_creation
from .router_utils import handle_api_errors

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/admin/modules",
    tags=["admin-modules"],
    dependencies=[Depends(require_admin)],
)


@router.post("/reorder", response_model=DataResponse[list[OrderResponse]])
@handle_api_errors
async def reorder_modules(
    request: ReorderModulesRequest,
    curriculum_service: CurriculumService = Depends(get_curriculum_service),
) -> DataResponse[list[OrderResponse]]:
    """
    Apply new positions to the modules of a course.

    Returns:
        DataResponse[list[OrderResponse]]: Every module of the course, sorted

    Raises:
        HTTPException(400): A module is not part of the course
        HTTPException(404): Course not found
    """
    logger.info(
        "Reordering modules",
        extra={"course_id": str(request.course_id), "count": len(request.modules)},
    )
    order = await curriculum_service.reorder_modules(
        request.course_id, [item.model_dump() for item in request.modules]
    )
    return map_order_to_response(order)


@router.post("", response_model=DataResponse[ModuleResponse], status_code=status.HTTP_201_CREATED)
@handle_api_errors
async def create_module(
    request: CreateModuleRequest,
    curriculum_service: CurriculumService = Depends(get_curriculum_service),
) -> DataResponse[ModuleResponse]:
    """
    Create a module; appended after existing modules without order_index.

    Raises:
        HTTPException(400): course_id or title missing
        HTTPException(404): Course not found
        HTTPException(409): Stale course_version
    """
    validate_module_creation(request)
    logger.info("Creating module", extra={"course_id": str(request.course_id)})
    module = await curriculum_service.create_module(
        request.course_id,
        request.title,
        description=request.description,
        order_index=request.order_index,
        course_version=request.course_version,
    )
    logger.info("Module created successfully", extra={"module_id": str(module["id"])})
    return map_module_to_response(module)


@router.patch("/{module_id}", response_model=DataResponse[ModuleResponse])
@handle_api_errors
async def update_module(
    module_id: UUID,
    request: UpdateModuleRequest,
    curriculum_service: CurriculumService = Depends(get_curriculum_service),
) -> DataResponse[ModuleResponse]:
    """
    Patch a module.

    Raises:
        HTTPException(400): No fields to update
        HTTPException(404): Module not found
        HTTPException(409): Stale course_version
    """
    module = await curriculum_service.update_module(
        module_id,
        course_version=request.course_version,
        title=request.title,
        description=request.description,
        order_index=request.order_index,
    )
    return map_module_to_response(module)


@router.delete("/{module_id}", status_code=status.HTTP_204_NO_CONTENT)
@handle_api_errors
async def delete_module(
    module_id: UUID,
    curriculum_service: CurriculumService = Depends(get_curriculum_service),
) -> None:
    """Delete a module and its lessons; deleting a missing module succeeds."""
    await curriculum_service.delete_module(module_id)
