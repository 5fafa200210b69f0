"""
Analytics service orchestrator.

Appends events to the log, rebuilds the derived learner journey for the
affected (user, course) pair, and serves journey queries and summaries.

Dependencies: lms.boundary.db.CRUD, lms.core.journey
System role: Analytics use case orchestration
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from lms.application.serializers import event_to_dict, journey_to_dict
from lms.boundary.db.CRUD.analytics_crud import analytics_event_crud, learner_journey_crud
from lms.core.journey import build_journey
from lms.core.progress import clamp_percent

logger = logging.getLogger(__name__)

EVENT_FIELDS = (
    "id",
    "event_type",
    "user_id",
    "org_id",
    "course_id",
    "module_id",
    "lesson_id",
    "session_id",
    "user_agent",
    "payload",
    "created_at",
)


class AnalyticsService:
    """Analytics service orchestrator."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize analytics service with async database session.

        Args:
            db: Async SQLAlchemy session
        """
        self.db = db

    async def _append(self, event: dict[str, Any]):
        values = {key: event[key] for key in EVENT_FIELDS if event.get(key) is not None}
        values.setdefault("payload", {})
        return await analytics_event_crud.append(self.db, **values)

    async def record_event(self, event: dict[str, Any]) -> tuple[dict, bool]:
        """
        Append one event and refresh the affected journey.

        An event whose client id is already stored is not written again.

        Args:
            event: Event fields; event_type required

        Returns:
            tuple: (event, created); the stored copy and False for a replay
        """
        event_id = event.get("id")
        if event_id is not None:
            existing = await analytics_event_crud.get_by_id(self.db, event_id)
            if existing is not None:
                logger.info("Duplicate analytics event ignored", extra={"event_id": str(event_id)})
                return event_to_dict(existing), False

        stored = await self._append(event)
        if stored.user_id and stored.course_id:
            await self.rebuild_journey(stored.user_id, stored.course_id)
        logger.info(
            "Analytics event stored",
            extra={"event_id": str(stored.id), "event_type": stored.event_type},
        )
        return event_to_dict(stored), True

    async def record_events(self, events: list[dict[str, Any]]) -> tuple[list[dict], list[str]]:
        """
        Append a batch, then rebuild each affected journey once.

        Events whose client id is already stored, or repeated within the
        batch, are skipped.

        Returns:
            tuple: (stored events, ids of skipped duplicates)
        """
        seen = await analytics_event_crud.existing_ids(
            self.db, [event["id"] for event in events if event.get("id") is not None]
        )
        stored, duplicates = [], []
        for event in events:
            event_id = event.get("id")
            if event_id is not None:
                if event_id in seen:
                    duplicates.append(str(event_id))
                    continue
                seen.add(event_id)
            stored.append(await self._append(event))

        pairs = {(e.user_id, e.course_id) for e in stored if e.user_id and e.course_id}
        for user_id, course_id in pairs:
            await self.rebuild_journey(user_id, course_id)
        logger.info(
            "Analytics batch stored",
            extra={"count": len(stored), "duplicates": len(duplicates), "journeys": len(pairs)},
        )
        return [event_to_dict(e) for e in stored], duplicates

    async def list_events(
        self,
        user_id: UUID | None = None,
        course_id: UUID | None = None,
        event_type: str | None = None,
        limit: int | None = None,
    ) -> list[dict]:
        events = await analytics_event_crud.list_filtered(
            self.db, user_id=user_id, course_id=course_id, event_type=event_type, limit=limit
        )
        return [event_to_dict(e) for e in events]

    async def rebuild_journey(self, user_id: UUID, course_id: UUID) -> dict:
        """
        Reduce the event log for (user, course) into the stored journey.

        Returns:
            dict: The upserted journey
        """
        events = await analytics_event_crud.list_filtered(self.db, user_id=user_id, course_id=course_id)
        snapshot = build_journey(events)
        journey = await learner_journey_crud.upsert(self.db, user_id, course_id, **snapshot.as_dict())
        return journey_to_dict(journey)

    async def upsert_journey(self, user_id: UUID, course_id: UUID, **fields: Any) -> dict:
        """
        Store client-reported journey fields for (user, course).

        Percentages and scores are clamped to 0..100; None values are ignored.
        """
        updates = {key: value for key, value in fields.items() if value is not None}
        for key in ("progress_percentage", "engagement_score"):
            if key in updates:
                updates[key] = clamp_percent(updates[key])
        journey = await learner_journey_crud.upsert(self.db, user_id, course_id, **updates)
        logger.info(
            "Journey upserted",
            extra={"user_id": str(user_id), "course_id": str(course_id)},
        )
        return journey_to_dict(journey)

    async def list_journeys(self, user_id: UUID | None = None, course_id: UUID | None = None) -> list[dict]:
        journeys = await learner_journey_crud.list_filtered(self.db, user_id=user_id, course_id=course_id)
        return [journey_to_dict(j) for j in journeys]

    async def course_summary(self, course_id: UUID) -> dict:
        """Aggregate journey metrics for a course."""
        return await learner_journey_crud.course_summary(self.db, course_id)
