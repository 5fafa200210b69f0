"""
Survey domain schemas.

Dependencies: pydantic
System role: Survey and survey response API contracts
"""

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class SurveyQuestion(BaseModel):
    """A single survey question."""

    id: str = Field(..., min_length=1, description="Stable question id referenced by answers")
    type: str = Field("text", description="text, single_choice, multiple_choice, rating, scale")
    prompt: str = Field(..., min_length=1)
    required: bool = False
    options: list[str] = Field(default_factory=list)


class CreateSurveyRequest(BaseModel):
    """Request schema for creating a survey."""

    title: str | None = Field(None, max_length=255)
    description: str | None = None
    type: str = "custom"
    status: str = "draft"
    questions: list[SurveyQuestion] = Field(default_factory=list)
    assigned_org_ids: list[uuid.UUID] = Field(default_factory=list)
    settings: dict = Field(default_factory=dict)


class UpdateSurveyRequest(BaseModel):
    """Request schema for updating a survey."""

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    type: str | None = None
    status: str | None = None
    questions: list[SurveyQuestion] | None = None
    assigned_org_ids: list[uuid.UUID] | None = None
    settings: dict | None = None


class SurveyResponse(BaseModel):
    """Response schema for surveys."""

    id: uuid.UUID
    title: str
    description: str | None
    type: str
    status: str
    version: int
    questions: list[dict]
    assigned_org_ids: list[str]
    settings: dict
    created_by: uuid.UUID | None
    created_at: datetime
    updated_at: datetime


class SubmitSurveyRequest(BaseModel):
    """Request schema for a learner's survey submission."""

    answers: dict[str, Any] = Field(default_factory=dict)
    organization_id: uuid.UUID | None = None


class SurveySubmissionResponse(BaseModel):
    """Response schema for a stored survey response."""

    id: uuid.UUID
    survey_id: uuid.UUID
    user_id: uuid.UUID
    organization_id: uuid.UUID | None
    answers: dict[str, Any]
    completed_at: datetime


class SurveyResultsResponse(BaseModel):
    """Responses of a survey with per-question tallies."""

    data: list[SurveySubmissionResponse]
    summary: dict[str, Any]
