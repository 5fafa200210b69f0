"""
Course, module and lesson ORM models.

Courses own an ordered list of modules; modules own an ordered list of
lessons. ``order_index`` determines display and traversal order at both
levels and children are deleted with their parent.

Dependencies: sqlalchemy, lms.boundary.db.base
System role: Course content persistence
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, JSON, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lms.boundary.db.base import Base, UUIDMixin, TimestampMixin

COURSE_STATUSES = frozenset({"draft", "published", "archived"})
LESSON_TYPES = frozenset({"video", "quiz", "reflection", "text", "resource"})
COMPLETION_RULE_TYPES = frozenset({"time_spent", "quiz_score", "manual"})


class CourseModel(Base, UUIDMixin, TimestampMixin):
    """
    Course ORM model.

    Attributes:
        id: UUID primary key (auto-generated or client supplied)
        title: Course title (255 char limit)
        slug: Unique URL slug
        description: Optional long description
        status: "draft", "published" or "archived"
        version: Monotonic content version for optimistic concurrency
        external_id: Optional unique id from an external authoring tool
        organization_id: Owning organization (SET NULL on deletion)
        course_metadata: JSON field (tags, difficulty, duration, etc.)
        published_at: Set when the course is published
        created_by: Author user id
        created_at: Course creation timestamp (UTC)
        updated_at: Last modification timestamp (UTC)

    Relationships:
        modules: One-to-many with ModuleModel ordered by order_index (CASCADE)
        assignments: One-to-many with CourseAssignmentModel (CASCADE)
    """

    __tablename__ = "courses"

    title: Mapped[str] = mapped_column(String(255), nullable=False, doc="Course title")

    slug: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        doc="URL slug"
    )

    description: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)

    status: Mapped[str] = mapped_column(String(32), nullable=False, default="draft")

    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    external_id: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        unique=True,
        default=None,
        doc="Identifier assigned by an external authoring system"
    )

    organization_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("organizations.id", ondelete="SET NULL"),
        nullable=True,
        default=None,
    )

    course_metadata: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        doc="Course metadata (tags, difficulty, estimated duration, etc.)"
    )

    published_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None
    )

    created_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        default=None,
    )

    # Relationships
    modules = relationship(
        "ModuleModel",
        back_populates="course",
        cascade="all, delete-orphan",
        order_by="ModuleModel.order_index",
        lazy="selectin",
    )
    assignments = relationship(
        "CourseAssignmentModel",
        back_populates="course",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class ModuleModel(Base, UUIDMixin, TimestampMixin):
    """
    Module ORM model: an ordered section of a course.

    Attributes:
        course_id: Foreign key to courses.id (CASCADE)
        title: Module title
        description: Optional description
        order_index: Position within the course (0-based)
    """

    __tablename__ = "modules"

    course_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    course = relationship("CourseModel", back_populates="modules")
    lessons = relationship(
        "LessonModel",
        back_populates="module",
        cascade="all, delete-orphan",
        order_by="LessonModel.order_index",
        lazy="selectin",
    )


class LessonModel(Base, UUIDMixin, TimestampMixin):
    """
    Lesson ORM model: an ordered unit of content within a module.

    Attributes:
        module_id: Foreign key to modules.id (CASCADE)
        title: Lesson title
        description: Optional description
        type: video, quiz, reflection, text or resource
        order_index: Position within the module (0-based)
        duration_s: Expected duration in seconds
        content: JSON body (video URL, quiz questions, text, etc.)
        completion_rule: {"type": time_spent|quiz_score|manual, "value": ...}
    """

    __tablename__ = "lessons"

    module_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("modules.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    type: Mapped[str] = mapped_column(String(32), nullable=False, default="text")
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    duration_s: Mapped[int | None] = mapped_column(Integer, nullable=True, default=None)
    content: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    completion_rule: Mapped[dict | None] = mapped_column(JSON, nullable=True, default=None)

    module = relationship("ModuleModel", back_populates="lessons")
