"""
Learner progress ORM models.

Lesson and course progress are stored as the latest snapshot reported by
the learner client; one row per (user, lesson) and per (user, course).

Dependencies: sqlalchemy, lms.boundary.db.base
System role: Learner progress persistence
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from lms.boundary.db.base import Base, UUIDMixin, TimestampMixin


class LessonProgressModel(Base, UUIDMixin, TimestampMixin):
    """
    Per-lesson progress.

    Attributes:
        user_id: Learner (CASCADE)
        lesson_id: Lesson id
        course_id: Course the lesson belongs to
        percent: 0..100
        status: not_started, in_progress or completed
        time_spent_s: Accumulated seconds reported by the client
        resume_at_s: Media resume position in seconds
    """

    __tablename__ = "lesson_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "lesson_id", name="uq_lesson_progress_user_lesson"),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    lesson_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False, index=True)
    course_id: Mapped[uuid.UUID | None] = mapped_column(Uuid(as_uuid=True), nullable=True)
    percent: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="not_started")
    time_spent_s: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    resume_at_s: Mapped[int | None] = mapped_column(Integer, nullable=True, default=None)


class CourseProgressModel(Base, UUIDMixin, TimestampMixin):
    """
    Per-course progress.

    Attributes:
        user_id: Learner (CASCADE)
        course_id: Course id
        percent: 0..100
        status: not_started, in_progress or completed
        time_spent_s: Accumulated seconds
        completed_at: Set the first time percent reaches 100
    """

    __tablename__ = "course_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name="uq_course_progress_user_course"),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    course_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False, index=True)
    percent: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="not_started")
    time_spent_s: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None
    )
