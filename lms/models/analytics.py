"""
Analytics schemas.

Request/response schemas for the event log and learner journeys.

Dependencies: pydantic
System role: Analytics API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class AnalyticsEventRequest(BaseModel):
    """Request schema for a single analytics event."""

    id: uuid.UUID | None = None
    event_type: str | None = Field(None, max_length=100)
    user_id: uuid.UUID | None = None
    org_id: uuid.UUID | None = None
    course_id: uuid.UUID | None = None
    module_id: uuid.UUID | None = None
    lesson_id: uuid.UUID | None = None
    session_id: str | None = Field(None, max_length=255)
    user_agent: str | None = Field(None, max_length=512)
    payload: dict = Field(default_factory=dict)
    created_at: datetime | None = Field(None, description="Client event time; defaults to now")


MAX_BATCH_EVENTS = 50


class BatchEventsRequest(BaseModel):
    """Request schema for a batch of analytics events."""

    events: list[AnalyticsEventRequest] = Field(..., min_length=1)


class AnalyticsEventResponse(BaseModel):
    """Response schema for stored events."""

    id: uuid.UUID
    event_type: str
    user_id: uuid.UUID | None
    org_id: uuid.UUID | None
    course_id: uuid.UUID | None
    module_id: uuid.UUID | None
    lesson_id: uuid.UUID | None
    session_id: str | None
    user_agent: str | None
    payload: dict
    created_at: datetime


class EventStoredResponse(BaseModel):
    """Acknowledgement of a stored event; ``duplicate`` for a replayed id."""

    status: str = "stored"
    stored: bool = True
    data: AnalyticsEventResponse


class BatchStoredResponse(BaseModel):
    """Acknowledgement of a stored batch."""

    stored: int
    duplicates: int = 0
    duplicate_ids: list[uuid.UUID] = Field(default_factory=list)
    data: list[AnalyticsEventResponse]


class JourneyRequest(BaseModel):
    """Request schema for an explicit journey upsert."""

    user_id: uuid.UUID | None = None
    course_id: uuid.UUID | None = None
    started_at: datetime | None = None
    last_active_at: datetime | None = None
    completed_at: datetime | None = None
    total_time_spent: int | None = Field(None, ge=0)
    sessions_count: int | None = Field(None, ge=0)
    progress_percentage: float | None = None
    engagement_score: float | None = None
    milestones: list | None = None
    drop_off_points: list | None = None
    path_taken: list | None = None


class JourneyResponse(BaseModel):
    """Response schema for learner journeys."""

    id: uuid.UUID
    user_id: uuid.UUID
    course_id: uuid.UUID
    started_at: datetime | None
    last_active_at: datetime | None
    completed_at: datetime | None
    total_time_spent: int
    sessions_count: int
    progress_percentage: int
    engagement_score: int
    milestones: list
    drop_off_points: list
    path_taken: list
    updated_at: datetime


class CourseSummaryResponse(BaseModel):
    """Aggregated journey metrics for a course."""

    course_id: uuid.UUID
    learners: int
    average_progress: float
    completions: int
    average_engagement: float
