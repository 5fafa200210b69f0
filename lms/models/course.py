"""
Course domain models and schemas.

Request/response schemas for course authoring (courses, modules, lessons),
publishing, assignment and reordering.

Dependencies: pydantic
System role: Course API contracts
"""

from pydantic import BaseModel, Field
import uuid
from datetime import datetime


class LessonPayload(BaseModel):
    """Lesson as nested in a course upsert."""

    id: uuid.UUID | None = None
    title: str | None = Field(None, max_length=255)
    description: str | None = None
    type: str = Field("text", description="video, quiz, reflection, text or resource")
    order_index: int | None = Field(None, ge=0)
    duration_s: int | None = Field(None, ge=0)
    content: dict = Field(default_factory=dict)
    completion_rule: dict | None = None


class ModulePayload(BaseModel):
    """Module as nested in a course upsert."""

    id: uuid.UUID | None = None
    title: str | None = Field(None, max_length=255)
    description: str | None = None
    order_index: int | None = Field(None, ge=0)
    lessons: list[LessonPayload] = Field(default_factory=list)


class CoursePayload(BaseModel):
    """Course fields of an upsert."""

    id: uuid.UUID | None = None
    title: str | None = Field(None, max_length=255)
    slug: str | None = Field(None, max_length=255)
    description: str | None = None
    status: str | None = None
    version: int | None = Field(None, ge=1)
    external_id: str | None = Field(None, max_length=255)
    organization_id: uuid.UUID | None = None
    metadata: dict | None = None


class UpsertCourseRequest(BaseModel):
    """Request schema for the idempotent course upsert."""

    course: CoursePayload
    modules: list[ModulePayload] = Field(default_factory=list)
    idempotency_key: str | None = Field(None, max_length=255)
    client_event_id: str | None = Field(None, max_length=255)


class UpdateCourseRequest(BaseModel):
    """Request schema for updating course metadata."""

    title: str | None = Field(None, min_length=1, max_length=255)
    slug: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    status: str | None = None
    metadata: dict | None = None


class PublishCourseRequest(BaseModel):
    """Request schema for publishing a course."""

    version: int | None = Field(None, ge=1)


class AssignCourseRequest(BaseModel):
    """Request schema for assigning a course to an organization or learners."""

    organization_id: uuid.UUID | None = None
    user_ids: list[uuid.UUID] = Field(default_factory=list)
    due_at: datetime | None = None


class CreateModuleRequest(BaseModel):
    """Request schema for creating a module."""

    course_id: uuid.UUID | None = None
    title: str | None = Field(None, max_length=255)
    description: str | None = None
    order_index: int | None = Field(None, ge=0)
    course_version: int | None = Field(None, ge=1)


class UpdateModuleRequest(BaseModel):
    """Request schema for patching a module."""

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    order_index: int | None = Field(None, ge=0)
    course_version: int | None = Field(None, ge=1)


class CreateLessonRequest(BaseModel):
    """Request schema for creating a lesson."""

    module_id: uuid.UUID | None = None
    title: str | None = Field(None, max_length=255)
    description: str | None = None
    type: str | None = None
    order_index: int | None = Field(None, ge=0)
    duration_s: int | None = Field(None, ge=0)
    content: dict = Field(default_factory=dict)
    completion_rule: dict | None = None
    course_version: int | None = Field(None, ge=1)


class UpdateLessonRequest(BaseModel):
    """Request schema for patching a lesson."""

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    type: str | None = None
    order_index: int | None = Field(None, ge=0)
    duration_s: int | None = Field(None, ge=0)
    content: dict | None = None
    completion_rule: dict | None = None
    course_version: int | None = Field(None, ge=1)


class ReorderItem(BaseModel):
    """New position of a module or lesson."""

    id: uuid.UUID
    order_index: int = Field(..., ge=0)


class ReorderModulesRequest(BaseModel):
    """Request schema for reordering the modules of a course."""

    course_id: uuid.UUID
    modules: list[ReorderItem] = Field(..., min_length=1)


class ReorderLessonsRequest(BaseModel):
    """Request schema for reordering the lessons of a module."""

    module_id: uuid.UUID
    lessons: list[ReorderItem] = Field(..., min_length=1)


class LessonResponse(BaseModel):
    """Response schema for lessons."""

    id: uuid.UUID
    module_id: uuid.UUID
    title: str
    description: str | None
    type: str
    order_index: int
    duration_s: int | None
    content: dict
    completion_rule: dict | None
    created_at: datetime
    updated_at: datetime


class ModuleResponse(BaseModel):
    """Response schema for modules, with lessons when loaded."""

    id: uuid.UUID
    course_id: uuid.UUID
    title: str
    description: str | None
    order_index: int
    lessons: list[LessonResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class CourseResponse(BaseModel):
    """Response schema for a course with its module/lesson tree."""

    id: uuid.UUID
    title: str
    slug: str
    description: str | None
    status: str
    version: int
    external_id: str | None
    organization_id: uuid.UUID | None
    metadata: dict
    published_at: datetime | None
    created_by: uuid.UUID | None
    modules: list[ModuleResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class AssignmentResponse(BaseModel):
    """Response schema for course assignments."""

    id: uuid.UUID
    course_id: uuid.UUID
    organization_id: uuid.UUID
    user_id: uuid.UUID | None
    due_at: datetime | None
    status: str
    active: bool
    assigned_by: uuid.UUID | None
    created_at: datetime


class OrderResponse(BaseModel):
    """Position of a reordered module or lesson."""

    id: uuid.UUID
    order_index: int
