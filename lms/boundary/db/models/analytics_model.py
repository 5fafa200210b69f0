"""
Analytics event and learner journey ORM models.

Events form an append-only log; journeys are derived per (user, course)
by reducing that log and are upserted in place.

Dependencies: sqlalchemy, lms.boundary.db.base
System role: Analytics persistence
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Integer, JSON, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from lms.boundary.db.base import Base, UUIDMixin, TimestampMixin, utcnow


class AnalyticsEventModel(Base, UUIDMixin):
    """
    Analytics event (append-only, no updated_at).

    Attributes:
        event_type: e.g. lesson_started, lesson_completed, quiz_passed
        user_id, org_id, course_id, module_id, lesson_id: Optional context ids
        session_id: Client session identifier
        user_agent: Reporting client
        payload: Free-form event data (duration ms, progress, score, ...)
        created_at: Event time
    """

    __tablename__ = "analytics_events"

    event_type: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    user_id: Mapped[uuid.UUID | None] = mapped_column(Uuid(as_uuid=True), nullable=True, index=True)
    org_id: Mapped[uuid.UUID | None] = mapped_column(Uuid(as_uuid=True), nullable=True)
    course_id: Mapped[uuid.UUID | None] = mapped_column(Uuid(as_uuid=True), nullable=True, index=True)
    module_id: Mapped[uuid.UUID | None] = mapped_column(Uuid(as_uuid=True), nullable=True)
    lesson_id: Mapped[uuid.UUID | None] = mapped_column(Uuid(as_uuid=True), nullable=True)
    session_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(512), nullable=True)
    payload: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, index=True
    )


class LearnerJourneyModel(Base, UUIDMixin, TimestampMixin):
    """
    Derived learner journey for one (user, course) pair.

    Attributes:
        started_at, last_active_at, completed_at: Journey timestamps
        total_time_spent: Seconds
        sessions_count: Distinct client sessions
        progress_percentage: 0..100
        engagement_score: 0..100
        milestones: [{type, lesson_id, at}]
        drop_off_points: Lesson ids where the learner paused or abandoned
        path_taken: Lesson ids visited, consecutive repeats collapsed
    """

    __tablename__ = "learner_journeys"
    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name="uq_journey_user_course"),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False, index=True)
    course_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False, index=True)
    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    last_active_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    total_time_spent: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    sessions_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    progress_percentage: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    engagement_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    milestones: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    drop_off_points: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    path_taken: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
