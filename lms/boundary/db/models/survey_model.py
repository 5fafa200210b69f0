"""
Survey and survey response ORM models.

A survey carries its questions as JSON and the organizations it is
assigned to; responses reference the survey and the responding user.

Dependencies: sqlalchemy, lms.boundary.db.base
System role: Survey persistence
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, JSON, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lms.boundary.db.base import Base, UUIDMixin, TimestampMixin, utcnow

SURVEY_STATUSES = frozenset({"draft", "published", "archived"})


class SurveyModel(Base, UUIDMixin, TimestampMixin):
    """
    Survey ORM model.

    Attributes:
        title: Survey title
        description: Optional description
        type: Survey kind (e.g. "custom", "climate", "feedback")
        status: draft, published or archived
        version: Incremented on every update
        questions: List of {id, type, prompt, required, options}
        assigned_org_ids: Organization ids the survey targets; empty = all
        settings: JSON survey settings (anonymity, branding, etc.)
        created_by: Author user id

    Relationships:
        responses: One-to-many with SurveyResponseModel (CASCADE)
    """

    __tablename__ = "surveys"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    type: Mapped[str] = mapped_column(String(64), nullable=False, default="custom")
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="draft")
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    questions: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    assigned_org_ids: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    settings: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    created_by: Mapped[uuid.UUID | None] = mapped_column(Uuid(as_uuid=True), nullable=True)

    responses = relationship(
        "SurveyResponseModel",
        back_populates="survey",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class SurveyResponseModel(Base, UUIDMixin, TimestampMixin):
    """
    Survey response ORM model.

    Attributes:
        survey_id: Foreign key to surveys.id (CASCADE)
        user_id: Respondent (CASCADE)
        organization_id: Organization context of the response
        answers: Mapping of question id to answer value
        completed_at: Submission time
    """

    __tablename__ = "survey_responses"
    __table_args__ = (
        UniqueConstraint("survey_id", "user_id", name="uq_survey_response_user"),
    )

    survey_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("surveys.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    organization_id: Mapped[uuid.UUID | None] = mapped_column(Uuid(as_uuid=True), nullable=True)
    answers: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    completed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    survey = relationship("SurveyModel", back_populates="responses")
