"""
Progress service orchestrator.

Stores learner progress snapshots for lessons and courses.

Dependencies: lms.boundary.db.CRUD, lms.core.progress
System role: Learner progress use case orchestration
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from lms.application.serializers import lesson_progress_to_dict
from lms.boundary.db.base import utcnow
from lms.boundary.db.CRUD.progress_crud import course_progress_crud, lesson_progress_crud
from lms.core.progress import STATUS_COMPLETED, clamp_percent, status_for_percent

logger = logging.getLogger(__name__)


class ProgressService:
    """Progress service orchestrator."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize progress service with async database session.

        Args:
            db: Async SQLAlchemy session
        """
        self.db = db

    async def record_snapshot(
        self,
        user_id: UUID,
        course_id: UUID,
        lessons: list[dict[str, Any]],
        course: dict[str, Any] | None = None,
    ) -> dict:
        """
        Upsert lesson progress rows and the course progress row.

        Percentages are clamped to 0..100; a lesson or course at 100 is
        completed. Course completion time is set once.

        Args:
            user_id: Learner
            course_id: Course the lessons belong to
            lessons: [{lesson_id, progress_percent, time_spent_s?, resume_at_s?}]
            course: Optional {percent, time_spent_s?}

        Returns:
            dict: user_id, course_id, updated_lessons
        """
        for item in lessons:
            percent = clamp_percent(item.get("progress_percent"))
            values: dict[str, Any] = {
                "course_id": course_id,
                "percent": percent,
                "status": status_for_percent(percent),
            }
            if item.get("time_spent_s") is not None:
                values["time_spent_s"] = item["time_spent_s"]
            if item.get("resume_at_s") is not None:
                values["resume_at_s"] = item["resume_at_s"]
            await lesson_progress_crud.upsert(self.db, user_id, item["lesson_id"], **values)

        if course is not None:
            percent = clamp_percent(course.get("percent"))
            status = status_for_percent(percent)
            existing = await course_progress_crud.get_for_user(self.db, user_id, course_id)
            values = {"percent": percent, "status": status}
            if course.get("time_spent_s") is not None:
                values["time_spent_s"] = course["time_spent_s"]
            if status == STATUS_COMPLETED and (existing is None or existing.completed_at is None):
                values["completed_at"] = utcnow()
            await course_progress_crud.upsert(self.db, user_id, course_id, **values)

        logger.info(
            "Progress snapshot stored",
            extra={"user_id": str(user_id), "course_id": str(course_id), "lessons": len(lessons)},
        )
        return {"user_id": user_id, "course_id": course_id, "updated_lessons": len(lessons)}

    async def get_lesson_progress(self, user_id: UUID, lesson_ids: list[UUID]) -> list[dict]:
        """List a learner's progress for the given lessons."""
        rows = await lesson_progress_crud.list_for_user(self.db, user_id, lesson_ids)
        return [lesson_progress_to_dict(row) for row in rows]
