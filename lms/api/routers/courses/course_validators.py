"""
Course validation utilities.

Business logic validation not covered by Pydantic models.
These validators check domain-specific rules for courses, modules
and lessons.

Dependencies: lms.models.course, lms.boundary.db.models
System role: Course business logic validation
"""

from lms.boundary.db.models.course_model import (
    COMPLETION_RULE_TYPES,
    COURSE_STATUSES,
    LESSON_TYPES,
)
from lms.models.course import (
    AssignCourseRequest,
    CreateLessonRequest,
    CreateModuleRequest,
    LessonPayload,
    UpdateCourseRequest,
    UpdateLessonRequest,
    UpsertCourseRequest,
)


class CourseValidationError(ValueError):
    """Raised when course validation fails."""


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _validate_status(status: str | None) -> None:
    if status is not None and status not in COURSE_STATUSES:
        raise CourseValidationError(f"Invalid course status: {status}")


def _validate_lesson_fields(lesson_type: str | None, completion_rule: dict | None) -> None:
    if lesson_type is not None and lesson_type not in LESSON_TYPES:
        raise CourseValidationError(f"Invalid lesson type: {lesson_type}")
    if completion_rule is not None:
        rule_type = completion_rule.get("type")
        if rule_type not in COMPLETION_RULE_TYPES:
            raise CourseValidationError(f"Invalid completion rule type: {rule_type}")


def _validate_nested_lesson(lesson: LessonPayload, position: str) -> None:
    if _blank(lesson.title):
        raise CourseValidationError(f"Lesson title is required ({position})")
    _validate_lesson_fields(lesson.type, lesson.completion_rule)


def validate_course_upsert(request: UpsertCourseRequest) -> None:
    """
    Validate a course upsert with its module/lesson tree.

    Args:
        request: UpsertCourseRequest with course and modules

    Raises:
        CourseValidationError: If business validation fails
    """
    if _blank(request.course.title):
        raise CourseValidationError("Course title is required")
    _validate_status(request.course.status)

    for m_index, module in enumerate(request.modules):
        if _blank(module.title):
            raise CourseValidationError(f"Module title is required (module {m_index})")
        for l_index, lesson in enumerate(module.lessons):
            _validate_nested_lesson(lesson, f"module {m_index}, lesson {l_index}")


def validate_course_update(request: UpdateCourseRequest) -> None:
    """
    Validate course update request with business rules.

    Raises:
        CourseValidationError: If business validation fails
    """
    if not request.model_dump(exclude_none=True):
        raise CourseValidationError("No fields to update")
    _validate_status(request.status)


def validate_assignment(request: AssignCourseRequest) -> None:
    """
    Validate a course assignment.

    Raises:
        CourseValidationError: organization_id missing
    """
    if request.organization_id is None:
        raise CourseValidationError("organization_id is required")


def validate_module_creation(request: CreateModuleRequest) -> None:
    """
    Validate module creation.

    Raises:
        CourseValidationError: course_id or title missing
    """
    if request.course_id is None:
        raise CourseValidationError("course_id is required")
    if _blank(request.title):
        raise CourseValidationError("Module title is required")


def validate_lesson_creation(request: CreateLessonRequest) -> None:
    """
    Validate lesson creation.

    Raises:
        CourseValidationError: module_id or title missing, or unknown type / rule
    """
    if request.module_id is None:
        raise CourseValidationError("module_id is required")
    if _blank(request.title):
        raise CourseValidationError("Lesson title is required")
    _validate_lesson_fields(request.type, request.completion_rule)


def validate_lesson_update(request: UpdateLessonRequest) -> None:
    """Validate lesson type and completion rule when they are patched."""
    _validate_lesson_fields(request.type, request.completion_rule)
