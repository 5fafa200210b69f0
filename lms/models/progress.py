"""
Learner progress schemas.

Dependencies: pydantic
System role: Progress API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class LessonProgressInput(BaseModel):
    """Progress of one lesson inside a snapshot."""

    lesson_id: uuid.UUID
    progress_percent: float = 0
    time_spent_s: int | None = Field(None, ge=0)
    resume_at_s: int | None = Field(None, ge=0)


class CourseProgressInput(BaseModel):
    """Course level progress inside a snapshot."""

    percent: float = 0
    time_spent_s: int | None = Field(None, ge=0)


class ProgressSnapshotRequest(BaseModel):
    """Request schema for a learner progress snapshot."""

    user_id: uuid.UUID | None = None
    course_id: uuid.UUID | None = None
    lessons: list[LessonProgressInput] = Field(default_factory=list)
    course: CourseProgressInput | None = None


class LessonProgressResponse(BaseModel):
    """Response schema for lesson progress rows."""

    user_id: uuid.UUID
    lesson_id: uuid.UUID
    course_id: uuid.UUID | None
    percent: int
    status: str
    time_spent_s: int
    resume_at_s: int | None
    updated_at: datetime


class ProgressSnapshotResult(BaseModel):
    user_id: uuid.UUID
    course_id: uuid.UUID
    updated_lessons: int


class ProgressSnapshotResponse(BaseModel):
    """Response schema for an accepted progress snapshot."""

    success: bool = True
    data: ProgressSnapshotResult
