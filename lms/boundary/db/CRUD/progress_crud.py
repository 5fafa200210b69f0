"""
Learner progress CRUD operations.

Dependencies: sqlalchemy, lms.boundary.db.models
System role: Lesson and course progress persistence operations
"""

from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lms.boundary.db.models.progress_model import CourseProgressModel, LessonProgressModel
from lms.boundary.db.CRUD.base_crud import BaseCRUD


class LessonProgressCRUD(BaseCRUD[LessonProgressModel]):
    """CRUD operations for LessonProgressModel."""

    def __init__(self) -> None:
        """Initialize LessonProgressCRUD with LessonProgressModel."""
        super().__init__(LessonProgressModel)

    async def upsert(
        self,
        session: AsyncSession,
        user_id: UUID,
        lesson_id: UUID,
        **values: Any,
    ) -> LessonProgressModel:
        """Create or update progress for (user, lesson)."""
        stmt = select(LessonProgressModel).where(
            LessonProgressModel.user_id == user_id,
            LessonProgressModel.lesson_id == lesson_id,
        )
        row = (await session.execute(stmt)).scalar_one_or_none()
        if row is None:
            return await self.create(session, user_id=user_id, lesson_id=lesson_id, **values)
        for field, value in values.items():
            setattr(row, field, value)
        await session.flush()
        return row

    async def list_for_user(
        self,
        session: AsyncSession,
        user_id: UUID,
        lesson_ids: list[UUID],
    ) -> Sequence[LessonProgressModel]:
        """List a learner's progress rows for the given lessons."""
        stmt = select(LessonProgressModel).where(
            LessonProgressModel.user_id == user_id,
            LessonProgressModel.lesson_id.in_(lesson_ids),
        )
        result = await session.execute(stmt)
        return result.scalars().all()


class CourseProgressCRUD(BaseCRUD[CourseProgressModel]):
    """CRUD operations for CourseProgressModel."""

    def __init__(self) -> None:
        """Initialize CourseProgressCRUD with CourseProgressModel."""
        super().__init__(CourseProgressModel)

    async def get_for_user(
        self,
        session: AsyncSession,
        user_id: UUID,
        course_id: UUID,
    ) -> CourseProgressModel | None:
        stmt = select(CourseProgressModel).where(
            CourseProgressModel.user_id == user_id,
            CourseProgressModel.course_id == course_id,
        )
        return (await session.execute(stmt)).scalar_one_or_none()

    async def upsert(
        self,
        session: AsyncSession,
        user_id: UUID,
        course_id: UUID,
        **values: Any,
    ) -> CourseProgressModel:
        """Create or update progress for (user, course)."""
        row = await self.get_for_user(session, user_id, course_id)
        if row is None:
            return await self.create(session, user_id=user_id, course_id=course_id, **values)
        for field, value in values.items():
            setattr(row, field, value)
        await session.flush()
        return row


lesson_progress_crud = LessonProgressCRUD()
course_progress_crud = CourseProgressCRUD()
