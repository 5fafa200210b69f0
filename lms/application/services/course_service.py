"""
Course service orchestrator.

Coordinates the course lifecycle: idempotent upsert of the full
course → module → lesson tree, metadata updates, publishing, assignment
to organizations and learners, deletion, and learner catalog lookups.

Dependencies: lms.boundary.db.CRUD, lms.boundary.db.models, lms.core
System role: Course use case orchestration
"""

import logging
import uuid
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from lms.application.serializers import assignment_to_dict, course_to_dict
from lms.boundary.db.base import utcnow
from lms.boundary.db.CRUD.course_crud import (
    assignment_crud,
    course_crud,
    lesson_crud,
    module_crud,
)
from lms.boundary.db.CRUD.idempotency_crud import idempotency_crud
from lms.boundary.db.CRUD.organization_crud import organization_crud
from lms.boundary.db.CRUD.user_crud import user_crud
from lms.boundary.db.models.course_model import CourseModel, LessonModel, ModuleModel
from lms.boundary.db.models.idempotency_model import KEY_TYPE_COURSE_UPSERT
from lms.core.exceptions import (
    ConflictError,
    NotFoundError,
    ValidationError,
    VersionConflictError,
)
from lms.core.ordering import resolve_order
from lms.core.slugs import slugify

logger = logging.getLogger(__name__)


def _as_uuid(value: str) -> UUID | None:
    try:
        return UUID(value)
    except ValueError:
        return None


class CourseService:
    """Course service orchestrator."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize course service with async database session.

        Args:
            db: Async SQLAlchemy session
        """
        self.db = db

    async def _require_course(self, course_id: UUID) -> CourseModel:
        course = await course_crud.get_with_tree(self.db, course_id)
        if course is None:
            raise NotFoundError("Course", course_id)
        return course

    async def list_courses(self, status: str | None = None) -> list[dict]:
        """
        List courses newest first with ordered modules and lessons.

        Args:
            status: Optional status filter

        Returns:
            list[dict]: Course payloads
        """
        courses = await course_crud.list_with_tree(self.db, status=status)
        return [course_to_dict(course) for course in courses]

    async def get_course(self, course_id: UUID) -> dict:
        """
        Get course by ID.

        Raises:
            NotFoundError: If course not found
        """
        return course_to_dict(await self._require_course(course_id))

    async def _find_existing(self, course: dict[str, Any]) -> CourseModel | None:
        """Match an upsert target by id, then slug, then external id."""
        if course.get("id"):
            found = await course_crud.get_with_tree(self.db, course["id"])
            if found is not None:
                return found
        if course.get("slug"):
            found = await course_crud.get_by_slug(self.db, course["slug"])
            if found is not None:
                return found
        if course.get("external_id"):
            return await course_crud.get_by_external_id(self.db, course["external_id"])
        return None

    async def _unique_slug(self, base: str) -> str:
        slug = base
        suffix = 2
        while await course_crud.slug_taken(self.db, slug):
            slug = f"{base}-{suffix}"
            suffix += 1
        return slug

    async def upsert_course(
        self,
        course: dict[str, Any],
        modules: list[dict[str, Any]],
        idempotency_key: str | None = None,
        payload: dict | None = None,
        actor_id: UUID | None = None,
    ) -> dict:
        """
        Create or replace a course with its module and lesson tree.

        Args:
            course: Course fields (title required; id, slug, external_id
                select an existing course to update)
            modules: Ordered module payloads, each with nested lessons
            idempotency_key: Rejects a repeated request when given
            payload: Original request body stored with the key
            actor_id: Authoring user

        Returns:
            dict: The stored course with modules and lessons

        Raises:
            IdempotencyConflictError: Key already used
            VersionConflictError: Incoming version older than stored
            ConflictError: Explicit slug used by another course
            ValidationError: Module or lesson id owned by another course
        """
        key_record = None
        if idempotency_key:
            key_record = await idempotency_crud.claim(
                self.db, idempotency_key, KEY_TYPE_COURSE_UPSERT, payload=payload
            )

        existing = await self._find_existing(course)
        incoming_version = course.get("version")

        if existing is not None:
            if incoming_version is not None and incoming_version < existing.version:
                raise VersionConflictError(existing.version)
            target = existing
            await self._apply_course_fields(target, course)
            target.version = max(existing.version + 1, incoming_version or 0)
            created = False
        else:
            base_slug = course.get("slug") or slugify(course["title"])
            target = CourseModel(
                id=course.get("id") or uuid.uuid4(),
                title=course["title"],
                slug=await self._unique_slug(base_slug),
                description=course.get("description"),
                status=course.get("status") or "draft",
                version=incoming_version or 1,
                external_id=course.get("external_id"),
                organization_id=course.get("organization_id"),
                course_metadata=course.get("metadata") or {},
                created_by=actor_id,
                modules=[],
            )
            self.db.add(target)
            created = True

        await self._sync_modules(target, modules)
        await self.db.flush()

        if key_record is not None:
            await idempotency_crud.attach_resource(self.db, key_record, target.id)

        logger.info(
            "Course upserted",
            extra={
                "course_id": str(target.id),
                "created": created,
                "version": target.version,
                "module_count": len(modules),
            },
        )
        return course_to_dict(await self._require_course(target.id))

    async def _apply_course_fields(self, target: CourseModel, course: dict[str, Any]) -> None:
        if course.get("slug") and course["slug"].lower() != target.slug.lower():
            if await course_crud.slug_taken(self.db, course["slug"], exclude_id=target.id):
                raise ConflictError("Slug already in use", error_code="slug_conflict")
            target.slug = course["slug"]
        target.title = course.get("title") or target.title
        if "description" in course and course["description"] is not None:
            target.description = course["description"]
        if course.get("status"):
            target.status = course["status"]
        if course.get("external_id"):
            target.external_id = course["external_id"]
        if course.get("organization_id"):
            target.organization_id = course["organization_id"]
        if course.get("metadata") is not None:
            target.course_metadata = course["metadata"]

    async def _sync_modules(self, course: CourseModel, modules: list[dict[str, Any]]) -> None:
        """
        Make the course's modules and lessons match the payload.

        Existing children referenced by id are updated in place (lessons may
        move between modules of the same course), unknown ids are created,
        and children missing from the payload are deleted as orphans.
        """
        existing_modules = {module.id: module for module in course.modules}
        existing_lessons = {
            lesson.id: lesson for module in course.modules for lesson in module.lessons
        }

        synced: list[ModuleModel] = []
        for item in resolve_order(modules):
            module = existing_modules.get(item.get("id"))
            if module is None:
                if item.get("id") and await module_crud.exists(self.db, item["id"]):
                    raise ValidationError(
                        f"Module {item['id']} belongs to another course", field="modules"
                    )
                module = ModuleModel(id=item.get("id") or uuid.uuid4(), lessons=[])
            module.title = item["title"]
            module.description = item.get("description")
            module.order_index = item["order_index"]

            lessons: list[LessonModel] = []
            for lesson_item in resolve_order(item.get("lessons") or []):
                lesson = existing_lessons.get(lesson_item.get("id"))
                if lesson is None:
                    if lesson_item.get("id") and await lesson_crud.exists(self.db, lesson_item["id"]):
                        raise ValidationError(
                            f"Lesson {lesson_item['id']} belongs to another course",
                            field="lessons",
                        )
                    lesson = LessonModel(id=lesson_item.get("id") or uuid.uuid4())
                lesson.title = lesson_item["title"]
                lesson.description = lesson_item.get("description")
                lesson.type = lesson_item.get("type") or "text"
                lesson.order_index = lesson_item["order_index"]
                lesson.duration_s = lesson_item.get("duration_s")
                lesson.content = lesson_item.get("content") or {}
                lesson.completion_rule = lesson_item.get("completion_rule")
                lessons.append(lesson)

            module.lessons = lessons
            synced.append(module)

        course.modules = synced

    async def update_course(self, course_id: UUID, **fields: Any) -> dict:
        """
        Update course metadata; None values are ignored.

        Raises:
            NotFoundError: If course not found
            ConflictError: Slug used by another course
        """
        course = await self._require_course(course_id)
        updates = {key: value for key, value in fields.items() if value is not None}
        await self._apply_course_fields(course, updates)
        await self.db.flush()
        logger.info("Course updated", extra={"course_id": str(course_id), "fields": sorted(updates)})
        return course_to_dict(await self._require_course(course_id))

    async def publish_course(self, course_id: UUID, version: int | None = None) -> dict:
        """
        Publish a course.

        Raises:
            NotFoundError: If course not found
            VersionConflictError: Given version older than stored
        """
        course = await self._require_course(course_id)
        if version is not None:
            if version < course.version:
                raise VersionConflictError(course.version)
            course.version = version
        course.status = "published"
        course.published_at = utcnow()
        await self.db.flush()
        logger.info("Course published", extra={"course_id": str(course_id), "version": course.version})
        return course_to_dict(await self._require_course(course_id))

    async def delete_course(self, course_id: UUID) -> None:
        """
        Delete a course with its modules and lessons.

        Raises:
            NotFoundError: If course not found
        """
        deleted = await course_crud.delete_by_id(self.db, course_id)
        if not deleted:
            raise NotFoundError("Course", course_id)
        logger.info("Course deleted", extra={"course_id": str(course_id)})

    async def assign_course(
        self,
        course_id: UUID,
        organization_id: UUID,
        user_ids: list[UUID] | None = None,
        due_at: datetime | None = None,
        assigned_by: UUID | None = None,
    ) -> list[dict]:
        """
        Assign a course to an organization, or to learners within it.

        Active assignments with the same target are returned rather than
        duplicated.

        Raises:
            NotFoundError: Course, organization or a user not found
        """
        if not await course_crud.exists(self.db, course_id):
            raise NotFoundError("Course", course_id)
        if not await organization_crud.exists(self.db, organization_id):
            raise NotFoundError("Organization", organization_id)

        targets: list[UUID | None] = list(dict.fromkeys(user_ids or [])) or [None]
        known = {user.id for user in await user_crud.get_many(self.db, [t for t in targets if t])}
        for target in targets:
            if target is not None and target not in known:
                raise NotFoundError("User", target)

        assignments = []
        for target in targets:
            assignment = await assignment_crud.find_active(self.db, course_id, organization_id, target)
            if assignment is None:
                assignment = await assignment_crud.create(
                    self.db,
                    course_id=course_id,
                    organization_id=organization_id,
                    user_id=target,
                    due_at=due_at,
                    status="assigned",
                    active=True,
                    assigned_by=assigned_by,
                )
            assignments.append(assignment_to_dict(assignment))

        logger.info(
            "Course assigned",
            extra={
                "course_id": str(course_id),
                "organization_id": str(organization_id),
                "assignment_count": len(assignments),
            },
        )
        return assignments

    async def list_published(self, course_ids: list[UUID] | None = None) -> list[dict]:
        """List published courses, optionally limited to ids."""
        courses = await course_crud.list_with_tree(self.db, status="published", ids=course_ids)
        return [course_to_dict(course) for course in courses]

    async def find_course(self, identifier: str, include_drafts: bool = False) -> dict | None:
        """
        Look up a course by id, then by slug.

        Args:
            identifier: Course UUID or slug
            include_drafts: Return unpublished courses too

        Returns:
            dict | None: Course payload, None when not found or not visible
        """
        course = None
        course_id = _as_uuid(identifier)
        if course_id is not None:
            course = await course_crud.get_with_tree(self.db, course_id)
        if course is None:
            course = await course_crud.get_by_slug(self.db, identifier)
        if course is None:
            return None
        if course.status != "published" and not include_drafts:
            return None
        return course_to_dict(course)

    async def list_assignments(self, organization_id: UUID, user_id: UUID | None = None) -> list[dict]:
        """Active assignments visible to a learner (or org-wide only)."""
        assignments = await assignment_crud.list_active(self.db, organization_id, user_id)
        return [assignment_to_dict(assignment) for assignment in assignments]

    async def list_assigned_courses(self, organization_id: UUID, user_id: UUID | None = None) -> list[dict]:
        """Published courses with an active assignment in the organization."""
        assignments = await assignment_crud.list_active(self.db, organization_id, user_id)
        course_ids = list({assignment.course_id for assignment in assignments})
        if not course_ids:
            return []
        return await self.list_published(course_ids)
