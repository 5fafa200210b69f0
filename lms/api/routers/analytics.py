"""
Analytics API endpoints.

Routes:
- POST /api/analytics/events - Append one event
- POST /api/analytics/events/batch - Append a batch of events
- GET /api/analytics/events - Query events
- POST /api/analytics/journeys - Upsert a learner journey
- GET /api/analytics/journeys - Query learner journeys
- GET /api/analytics/courses/{course_id}/summary - Course engagement summary

Dependencies: lms.application.services, lms.models
System role: Analytics ingestion and reporting HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from lms.api.deps.auth import ensure_self_or_admin, get_current_user, require_admin
from lms.api.deps.dependencies import get_analytics_service
from lms.application.services import AnalyticsService
from lms.boundary.db.models.user_model import UserModel
from lms.core.exceptions import ValidationError
from lms.models.analytics import (
    MAX_BATCH_EVENTS,
    AnalyticsEventRequest,
    AnalyticsEventResponse,
    BatchEventsRequest,
    BatchStoredResponse,
    CourseSummaryResponse,
    EventStoredResponse,
    JourneyRequest,
    JourneyResponse,
)
from lms.models.common import DataResponse

from .router_utils import handle_api_errors, require_fields

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


def _event_fields(event: AnalyticsEventRequest, user: UserModel) -> dict:
    fields = event.model_dump(exclude_none=True)
    fields.setdefault("user_id", user.id)
    ensure_self_or_admin(user, fields["user_id"], "Cannot record analytics for another learner")
    return fields


@router.post("/events", response_model=EventStoredResponse, status_code=status.HTTP_201_CREATED)
@handle_api_errors
async def record_event(
    request: AnalyticsEventRequest,
    response: Response,
    user: UserModel = Depends(get_current_user),
    analytics_service: AnalyticsService = Depends(get_analytics_service),
) -> EventStoredResponse:
    """
    Append one analytics event; the caller is the default subject.

    Replaying an event id already stored answers 200 with status
    ``duplicate`` and the stored copy.

    Raises:
        HTTPException(400): event_type missing
        HTTPException(403): Event for another learner
    """
    require_fields(request, "event_type")
    event, created = await analytics_service.record_event(_event_fields(request, user))
    if not created:
        response.status_code = status.HTTP_200_OK
        return EventStoredResponse(status="duplicate", stored=False, data=event)
    return EventStoredResponse(data=event)


@router.post("/events/batch", response_model=BatchStoredResponse, status_code=status.HTTP_201_CREATED)
@handle_api_errors
async def record_events(
    request: BatchEventsRequest,
    user: UserModel = Depends(get_current_user),
    analytics_service: AnalyticsService = Depends(get_analytics_service),
) -> BatchStoredResponse:
    """
    Append a batch of analytics events.

    Events whose id is already stored are skipped and counted as duplicates.

    Raises:
        HTTPException(400): Too many events, or an event without event_type
        HTTPException(403): Event for another learner
    """
    if len(request.events) > MAX_BATCH_EVENTS:
        raise ValidationError(
            f"A batch holds at most {MAX_BATCH_EVENTS} events",
            details={"max_events": MAX_BATCH_EVENTS, "received": len(request.events)},
            error_code="too_many_events",
        )
    for index, event in enumerate(request.events):
        if not event.event_type:
            raise ValidationError(f"event_type is required (event {index})", field="event_type")

    logger.info("Storing analytics batch", extra={"count": len(request.events)})
    events, duplicates = await analytics_service.record_events(
        [_event_fields(event, user) for event in request.events]
    )
    return BatchStoredResponse(
        stored=len(events),
        duplicates=len(duplicates),
        duplicate_ids=duplicates,
        data=events,
    )


@router.get("/events", response_model=DataResponse[list[AnalyticsEventResponse]])
@handle_api_errors
async def list_events(
    user_id: UUID | None = None,
    course_id: UUID | None = None,
    event_type: str | None = None,
    limit: int = Query(100, ge=1, le=1000),
    _admin: UserModel = Depends(require_admin),
    analytics_service: AnalyticsService = Depends(get_analytics_service),
) -> DataResponse[list[AnalyticsEventResponse]]:
    """Query the event log, oldest first."""
    events = await analytics_service.list_events(
        user_id=user_id, course_id=course_id, event_type=event_type, limit=limit
    )
    return DataResponse(data=[AnalyticsEventResponse(**event) for event in events])


@router.post("/journeys", response_model=DataResponse[JourneyResponse], status_code=status.HTTP_201_CREATED)
@handle_api_errors
async def upsert_journey(
    request: JourneyRequest,
    user: UserModel = Depends(get_current_user),
    analytics_service: AnalyticsService = Depends(get_analytics_service),
) -> DataResponse[JourneyResponse]:
    """
    Upsert the journey of (user_id, course_id).

    Raises:
        HTTPException(400): user_id or course_id missing
        HTTPException(403): Journey of another learner
    """
    require_fields(request, "user_id", "course_id")
    ensure_self_or_admin(user, request.user_id, "Cannot update another learner's journey")
    fields = request.model_dump(exclude={"user_id", "course_id"}, exclude_none=True)
    journey = await analytics_service.upsert_journey(request.user_id, request.course_id, **fields)
    return DataResponse(data=JourneyResponse(**journey))


@router.get("/journeys", response_model=DataResponse[list[JourneyResponse]])
@handle_api_errors
async def list_journeys(
    user_id: UUID | None = None,
    course_id: UUID | None = None,
    _admin: UserModel = Depends(require_admin),
    analytics_service: AnalyticsService = Depends(get_analytics_service),
) -> DataResponse[list[JourneyResponse]]:
    """Query learner journeys."""
    journeys = await analytics_service.list_journeys(user_id=user_id, course_id=course_id)
    return DataResponse(data=[JourneyResponse(**journey) for journey in journeys])


@router.get("/courses/{course_id}/summary", response_model=DataResponse[CourseSummaryResponse])
@handle_api_errors
async def course_summary(
    course_id: UUID,
    _admin: UserModel = Depends(require_admin),
    analytics_service: AnalyticsService = Depends(get_analytics_service),
) -> DataResponse[CourseSummaryResponse]:
    """Learner count, average progress, completions and average engagement."""
    summary = await analytics_service.course_summary(course_id)
    return DataResponse(data=CourseSummaryResponse(**summary))
