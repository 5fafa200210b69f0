"""
Course, module, lesson and assignment CRUD operations.

Provides course-tree loading (course → modules → lessons), slug and
external id lookups, and assignment queries for the learner catalog.

Dependencies: sqlalchemy, lms.boundary.db.models
System role: Course content persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from lms.boundary.db.models.assignment_model import CourseAssignmentModel
from lms.boundary.db.models.course_model import CourseModel, LessonModel, ModuleModel
from lms.boundary.db.CRUD.base_crud import BaseCRUD


def _tree_options():
    return selectinload(CourseModel.modules).selectinload(ModuleModel.lessons)


class CourseCRUD(BaseCRUD[CourseModel]):
    """
    CRUD operations for CourseModel.

    Extends BaseCRUD with course-specific queries including
    eager loading of the module and lesson tree.
    """

    def __init__(self) -> None:
        """Initialize CourseCRUD with CourseModel."""
        super().__init__(CourseModel)

    async def get_with_tree(
        self,
        session: AsyncSession,
        id: UUID,
    ) -> CourseModel | None:
        """
        Retrieve course with eagerly loaded modules and lessons.

        populate_existing refreshes rows already in the identity map so
        children changed earlier in the transaction are reflected.

        Args:
            session: Async database session
            id: Course UUID

        Returns:
            CourseModel with modules and lessons loaded, None if not found
        """
        stmt = (
            select(CourseModel)
            .where(CourseModel.id == id)
            .options(_tree_options())
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_with_tree(
        self,
        session: AsyncSession,
        status: str | None = None,
        ids: list[UUID] | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[CourseModel]:
        """
        List courses newest first with modules and lessons loaded.

        Args:
            session: Async database session
            status: Only courses with this status
            ids: Only courses with these ids
            limit: Maximum number of courses
            offset: Number of courses to skip

        Returns:
            Sequence of CourseModels
        """
        stmt = (
            select(CourseModel)
            .options(_tree_options())
            .order_by(CourseModel.created_at.desc())
            .offset(offset)
        )
        if status is not None:
            stmt = stmt.where(CourseModel.status == status)
        if ids is not None:
            stmt = stmt.where(CourseModel.id.in_(ids))
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().unique().all()

    async def get_by_slug(self, session: AsyncSession, slug: str) -> CourseModel | None:
        """Retrieve course by slug, case-insensitively."""
        stmt = (
            select(CourseModel)
            .where(func.lower(CourseModel.slug) == slug.lower())
            .options(_tree_options())
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_external_id(self, session: AsyncSession, external_id: str) -> CourseModel | None:
        """Retrieve course by the external authoring system's id."""
        stmt = (
            select(CourseModel)
            .where(CourseModel.external_id == external_id)
            .options(_tree_options())
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def slug_taken(
        self,
        session: AsyncSession,
        slug: str,
        exclude_id: UUID | None = None,
    ) -> bool:
        """Check whether another course already uses a slug."""
        stmt = select(CourseModel.id).where(func.lower(CourseModel.slug) == slug.lower())
        if exclude_id is not None:
            stmt = stmt.where(CourseModel.id != exclude_id)
        result = await session.execute(stmt.limit(1))
        return result.scalar_one_or_none() is not None


class ModuleCRUD(BaseCRUD[ModuleModel]):
    """CRUD operations for ModuleModel."""

    def __init__(self) -> None:
        """Initialize ModuleCRUD with ModuleModel."""
        super().__init__(ModuleModel)

    async def list_for_course(self, session: AsyncSession, course_id: UUID) -> Sequence[ModuleModel]:
        """List modules of a course by order_index."""
        stmt = (
            select(ModuleModel)
            .where(ModuleModel.course_id == course_id)
            .order_by(ModuleModel.order_index, ModuleModel.created_at)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def next_order_index(self, session: AsyncSession, course_id: UUID) -> int:
        """Order index that appends a module at the end of a course."""
        stmt = select(func.max(ModuleModel.order_index)).where(ModuleModel.course_id == course_id)
        current = (await session.execute(stmt)).scalar_one_or_none()
        return 0 if current is None else current + 1


class LessonCRUD(BaseCRUD[LessonModel]):
    """CRUD operations for LessonModel."""

    def __init__(self) -> None:
        """Initialize LessonCRUD with LessonModel."""
        super().__init__(LessonModel)

    async def list_for_module(self, session: AsyncSession, module_id: UUID) -> Sequence[LessonModel]:
        """List lessons of a module by order_index."""
        stmt = (
            select(LessonModel)
            .where(LessonModel.module_id == module_id)
            .order_by(LessonModel.order_index, LessonModel.created_at)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def next_order_index(self, session: AsyncSession, module_id: UUID) -> int:
        """Order index that appends a lesson at the end of a module."""
        stmt = select(func.max(LessonModel.order_index)).where(LessonModel.module_id == module_id)
        current = (await session.execute(stmt)).scalar_one_or_none()
        return 0 if current is None else current + 1


class AssignmentCRUD(BaseCRUD[CourseAssignmentModel]):
    """CRUD operations for course assignments."""

    def __init__(self) -> None:
        """Initialize AssignmentCRUD with CourseAssignmentModel."""
        super().__init__(CourseAssignmentModel)

    async def find_active(
        self,
        session: AsyncSession,
        course_id: UUID,
        organization_id: UUID,
        user_id: UUID | None,
    ) -> CourseAssignmentModel | None:
        """Find an active assignment with the same target."""
        stmt = select(CourseAssignmentModel).where(
            CourseAssignmentModel.course_id == course_id,
            CourseAssignmentModel.organization_id == organization_id,
            CourseAssignmentModel.active.is_(True),
        )
        if user_id is None:
            stmt = stmt.where(CourseAssignmentModel.user_id.is_(None))
        else:
            stmt = stmt.where(CourseAssignmentModel.user_id == user_id)
        result = await session.execute(stmt.limit(1))
        return result.scalar_one_or_none()

    async def list_active(
        self,
        session: AsyncSession,
        organization_id: UUID,
        user_id: UUID | None = None,
    ) -> Sequence[CourseAssignmentModel]:
        """
        List active assignments visible in an organization.

        Args:
            session: Async database session
            organization_id: Organization scope
            user_id: When given, include that learner's personal assignments
                alongside the organization-wide ones; otherwise only
                organization-wide assignments

        Returns:
            Sequence of CourseAssignmentModels
        """
        target = CourseAssignmentModel.user_id.is_(None)
        if user_id is not None:
            target = or_(target, CourseAssignmentModel.user_id == user_id)
        stmt = (
            select(CourseAssignmentModel)
            .where(
                CourseAssignmentModel.organization_id == organization_id,
                CourseAssignmentModel.active.is_(True),
                target,
            )
            .order_by(CourseAssignmentModel.created_at)
        )
        result = await session.execute(stmt)
        return result.scalars().all()


course_crud = CourseCRUD()
module_crud = ModuleCRUD()
lesson_crud = LessonCRUD()
assignment_crud = AssignmentCRUD()
