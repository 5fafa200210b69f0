"""
Curriculum service orchestrator.

Module and lesson level authoring: create, patch, delete and reorder,
with optional optimistic checks against the parent course version.

Dependencies: lms.boundary.db.CRUD, lms.core
System role: Module/lesson use case orchestration
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from lms.application.serializers import lesson_to_dict, module_to_dict
from lms.boundary.db.CRUD.course_crud import course_crud, lesson_crud, module_crud
from lms.core.exceptions import NotFoundError, ValidationError, VersionConflictError

logger = logging.getLogger(__name__)


class CurriculumService:
    """Module and lesson service orchestrator."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize curriculum service with async database session.

        Args:
            db: Async SQLAlchemy session
        """
        self.db = db

    async def _check_course_version(self, course_id: UUID, course_version: int | None) -> None:
        """
        Verify the parent course exists and is not newer than the caller's copy.

        Raises:
            NotFoundError: Course missing
            VersionConflictError: Stored version is newer
        """
        course = await course_crud.get_by_id(self.db, course_id)
        if course is None:
            raise NotFoundError("Course", course_id)
        if course_version is not None and course_version < course.version:
            raise VersionConflictError(course.version)

    async def create_module(
        self,
        course_id: UUID,
        title: str,
        description: str | None = None,
        order_index: int | None = None,
        course_version: int | None = None,
    ) -> dict:
        """
        Add a module to a course; appended at the end without order_index.

        Raises:
            NotFoundError: Course missing
            VersionConflictError: Stale course_version
        """
        await self._check_course_version(course_id, course_version)
        if order_index is None:
            order_index = await module_crud.next_order_index(self.db, course_id)
        module = await module_crud.create(
            self.db,
            course_id=course_id,
            title=title,
            description=description,
            order_index=order_index,
            lessons=[],
        )
        logger.info("Module created", extra={"module_id": str(module.id), "course_id": str(course_id)})
        return module_to_dict(module)

    async def update_module(self, module_id: UUID, course_version: int | None = None, **fields: Any) -> dict:
        """
        Patch a module; None values are ignored.

        Raises:
            ValidationError: No fields to update
            NotFoundError: Module missing
            VersionConflictError: Stale course_version
        """
        updates = {key: value for key, value in fields.items() if value is not None}
        if not updates:
            raise ValidationError("No fields to update")
        module = await module_crud.get_by_id(self.db, module_id)
        if module is None:
            raise NotFoundError("Module", module_id)
        await self._check_course_version(module.course_id, course_version)

        module = await module_crud.update_by_id(self.db, module_id, **updates)
        logger.info("Module updated", extra={"module_id": str(module_id), "fields": sorted(updates)})
        return module_to_dict(module)

    async def delete_module(self, module_id: UUID) -> bool:
        """Delete a module and its lessons; missing modules are ignored."""
        deleted = await module_crud.delete_by_id(self.db, module_id)
        logger.info("Module delete", extra={"module_id": str(module_id), "deleted": deleted})
        return deleted

    async def reorder_modules(self, course_id: UUID, items: list[dict[str, Any]]) -> list[dict]:
        """
        Apply new order_index values to modules of a course.

        Raises:
            NotFoundError: Course missing
            ValidationError: A module is not part of the course
        """
        if not await course_crud.exists(self.db, course_id):
            raise NotFoundError("Course", course_id)
        modules = {module.id: module for module in await module_crud.list_for_course(self.db, course_id)}
        for item in items:
            module = modules.get(item["id"])
            if module is None:
                raise ValidationError(f"Module {item['id']} does not belong to course", field="modules")
            module.order_index = item["order_index"]
        await self.db.flush()

        ordered = sorted(modules.values(), key=lambda module: module.order_index)
        return [{"id": module.id, "order_index": module.order_index} for module in ordered]

    async def create_lesson(
        self,
        module_id: UUID,
        title: str,
        type: str = "text",
        description: str | None = None,
        order_index: int | None = None,
        duration_s: int | None = None,
        content: dict | None = None,
        completion_rule: dict | None = None,
        course_version: int | None = None,
    ) -> dict:
        """
        Add a lesson to a module; appended at the end without order_index.

        Raises:
            NotFoundError: Module or course missing
            VersionConflictError: Stale course_version
        """
        module = await module_crud.get_by_id(self.db, module_id)
        if module is None:
            raise NotFoundError("Module", module_id)
        await self._check_course_version(module.course_id, course_version)
        if order_index is None:
            order_index = await lesson_crud.next_order_index(self.db, module_id)

        lesson = await lesson_crud.create(
            self.db,
            module_id=module_id,
            title=title,
            description=description,
            type=type,
            order_index=order_index,
            duration_s=duration_s,
            content=content or {},
            completion_rule=completion_rule,
        )
        logger.info("Lesson created", extra={"lesson_id": str(lesson.id), "module_id": str(module_id)})
        return lesson_to_dict(lesson)

    async def update_lesson(self, lesson_id: UUID, course_version: int | None = None, **fields: Any) -> dict:
        """
        Patch a lesson; None values are ignored.

        Raises:
            ValidationError: No fields to update
            NotFoundError: Lesson missing
            VersionConflictError: Stale course_version
        """
        updates = {key: value for key, value in fields.items() if value is not None}
        if not updates:
            raise ValidationError("No fields to update")
        lesson = await lesson_crud.get_by_id(self.db, lesson_id)
        if lesson is None:
            raise NotFoundError("Lesson", lesson_id)
        if course_version is not None:
            module = await module_crud.get_by_id(self.db, lesson.module_id)
            if module is not None:
                await self._check_course_version(module.course_id, course_version)

        lesson = await lesson_crud.update_by_id(self.db, lesson_id, **updates)
        logger.info("Lesson updated", extra={"lesson_id": str(lesson_id), "fields": sorted(updates)})
        return lesson_to_dict(lesson)

    async def delete_lesson(self, lesson_id: UUID) -> bool:
        """Delete a lesson; missing lessons are ignored."""
        deleted = await lesson_crud.delete_by_id(self.db, lesson_id)
        logger.info("Lesson delete", extra={"lesson_id": str(lesson_id), "deleted": deleted})
        return deleted

    async def reorder_lessons(self, module_id: UUID, items: list[dict[str, Any]]) -> list[dict]:
        """
        Apply new order_index values to lessons of a module.

        Raises:
            NotFoundError: Module missing
            ValidationError: A lesson is not part of the module
        """
        if not await module_crud.exists(self.db, module_id):
            raise NotFoundError("Module", module_id)
        lessons = {lesson.id: lesson for lesson in await lesson_crud.list_for_module(self.db, module_id)}
        for item in items:
            lesson = lessons.get(item["id"])
            if lesson is None:
                raise ValidationError(f"Lesson {item['id']} does not belong to module", field="lessons")
            lesson.order_index = item["order_index"]
        await self.db.flush()

        ordered = sorted(lessons.values(), key=lambda lesson: lesson.order_index)
        return [{"id": lesson.id, "order_index": lesson.order_index} for lesson in ordered]
