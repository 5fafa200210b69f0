"""
Course assignment ORM model.

An assignment makes a course visible to an organization as a whole
(user_id is NULL) or to one learner in that organization.

Dependencies: sqlalchemy, lms.boundary.db.base
System role: Delivery targeting for the learner catalog
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lms.boundary.db.base import Base, UUIDMixin, TimestampMixin


class CourseAssignmentModel(Base, UUIDMixin, TimestampMixin):
    """
    Course assignment ORM model.

    Attributes:
        course_id: Assigned course (CASCADE)
        organization_id: Target organization (CASCADE)
        user_id: Target learner, NULL for organization-wide assignments
        due_at: Optional due date
        status: Assignment status, "assigned" on creation
        active: Inactive assignments are ignored by the catalog
        assigned_by: User who created the assignment
    """

    __tablename__ = "course_assignments"

    course_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    organization_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=True,
        default=None,
    )
    due_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="assigned")
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    assigned_by: Mapped[uuid.UUID | None] = mapped_column(Uuid(as_uuid=True), nullable=True)

    course = relationship("CourseModel", back_populates="assignments")
