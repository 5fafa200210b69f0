"""
Analytics event and learner journey CRUD operations.

Dependencies: sqlalchemy, lms.boundary.db.models
System role: Analytics persistence operations
"""

from typing import Any, Iterable, Sequence
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from lms.boundary.db.models.analytics_model import AnalyticsEventModel, LearnerJourneyModel
from lms.boundary.db.CRUD.base_crud import BaseCRUD
from lms.core.exceptions import ConflictError


class AnalyticsEventCRUD(BaseCRUD[AnalyticsEventModel]):
    """CRUD operations for the append-only event log."""

    def __init__(self) -> None:
        """Initialize AnalyticsEventCRUD with AnalyticsEventModel."""
        super().__init__(AnalyticsEventModel)

    async def existing_ids(self, session: AsyncSession, ids: Iterable[UUID]) -> set[UUID]:
        """Return which of the given event ids are already in the log."""
        ids = list(ids)
        if not ids:
            return set()
        stmt = select(AnalyticsEventModel.id).where(AnalyticsEventModel.id.in_(ids))
        result = await session.execute(stmt)
        return set(result.scalars().all())

    async def append(self, session: AsyncSession, **values: Any) -> AnalyticsEventModel:
        """
        Insert one event.

        A client event id that another request inserted after our duplicate
        check fails the primary key on flush.

        Raises:
            ConflictError: ``duplicate_event`` when the id is already stored
        """
        event = AnalyticsEventModel(**values)
        session.add(event)
        try:
            await session.flush()
        except IntegrityError as e:
            raise ConflictError(
                "Analytics event already recorded",
                details={"event_id": str(values.get("id"))},
                error_code="duplicate_event",
            ) from e
        await session.refresh(event)
        return event

    async def list_filtered(
        self,
        session: AsyncSession,
        user_id: UUID | None = None,
        course_id: UUID | None = None,
        event_type: str | None = None,
        limit: int | None = None,
    ) -> Sequence[AnalyticsEventModel]:
        """
        List events oldest first with optional filters.

        Args:
            session: Async database session
            user_id: Filter by learner
            course_id: Filter by course
            event_type: Filter by event type
            limit: Maximum number of events

        Returns:
            Sequence of AnalyticsEventModels
        """
        stmt = select(AnalyticsEventModel).order_by(AnalyticsEventModel.created_at)
        if user_id is not None:
            stmt = stmt.where(AnalyticsEventModel.user_id == user_id)
        if course_id is not None:
            stmt = stmt.where(AnalyticsEventModel.course_id == course_id)
        if event_type is not None:
            stmt = stmt.where(AnalyticsEventModel.event_type == event_type)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()


class LearnerJourneyCRUD(BaseCRUD[LearnerJourneyModel]):
    """CRUD operations for derived learner journeys."""

    def __init__(self) -> None:
        """Initialize LearnerJourneyCRUD with LearnerJourneyModel."""
        super().__init__(LearnerJourneyModel)

    async def get_for_pair(
        self,
        session: AsyncSession,
        user_id: UUID,
        course_id: UUID,
    ) -> LearnerJourneyModel | None:
        stmt = select(LearnerJourneyModel).where(
            LearnerJourneyModel.user_id == user_id,
            LearnerJourneyModel.course_id == course_id,
        )
        return (await session.execute(stmt)).scalar_one_or_none()

    async def upsert(
        self,
        session: AsyncSession,
        user_id: UUID,
        course_id: UUID,
        **values: Any,
    ) -> LearnerJourneyModel:
        """Create or update the journey for (user, course)."""
        journey = await self.get_for_pair(session, user_id, course_id)
        if journey is None:
            return await self.create(session, user_id=user_id, course_id=course_id, **values)
        for field, value in values.items():
            setattr(journey, field, value)
        await session.flush()
        return journey

    async def list_filtered(
        self,
        session: AsyncSession,
        user_id: UUID | None = None,
        course_id: UUID | None = None,
    ) -> Sequence[LearnerJourneyModel]:
        stmt = select(LearnerJourneyModel).order_by(LearnerJourneyModel.updated_at.desc())
        if user_id is not None:
            stmt = stmt.where(LearnerJourneyModel.user_id == user_id)
        if course_id is not None:
            stmt = stmt.where(LearnerJourneyModel.course_id == course_id)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def course_summary(self, session: AsyncSession, course_id: UUID) -> dict[str, Any]:
        """
        Aggregate journey metrics for a course.

        Returns:
            dict: learners, average_progress, completions, average_engagement
        """
        stmt = select(
            func.count(LearnerJourneyModel.id),
            func.avg(LearnerJourneyModel.progress_percentage),
            func.count(LearnerJourneyModel.completed_at),
            func.avg(LearnerJourneyModel.engagement_score),
        ).where(LearnerJourneyModel.course_id == course_id)
        learners, avg_progress, completions, avg_engagement = (await session.execute(stmt)).one()
        return {
            "course_id": course_id,
            "learners": learners or 0,
            "average_progress": round(float(avg_progress or 0), 2),
            "completions": completions or 0,
            "average_engagement": round(float(avg_engagement or 0), 2),
        }


analytics_event_crud = AnalyticsEventCRUD()
learner_journey_crud = LearnerJourneyCRUD()
