"""
Course response mapping utilities.

Transforms service dictionaries into Pydantic response models.
Centralizes response construction logic.

Dependencies: lms.models.course, lms.models.common
System role: Course response transformation
"""

from typing import Any

from lms.models.common import DataResponse
from lms.models.course import (
    AssignmentResponse,
    CourseResponse,
    LessonResponse,
    ModuleResponse,
    OrderResponse,
)


def map_course_to_response(course_data: dict[str, Any]) -> DataResponse[CourseResponse]:
    """
    Wrap a course dictionary (with modules and lessons) in a data envelope.

    Args:
        course_data: Dictionary produced by course_to_dict

    Returns:
        DataResponse[CourseResponse]: Pydantic model for API response
    """
    return DataResponse[CourseResponse](data=CourseResponse(**course_data))


def map_courses_to_response(courses_data: list[dict[str, Any]]) -> DataResponse[list[CourseResponse]]:
    """Wrap a list of course dictionaries in a data envelope."""
    return DataResponse[list[CourseResponse]](
        data=[CourseResponse(**course) for course in courses_data]
    )


def map_module_to_response(module_data: dict[str, Any]) -> DataResponse[ModuleResponse]:
    return DataResponse[ModuleResponse](data=ModuleResponse(**module_data))


def map_lesson_to_response(lesson_data: dict[str, Any]) -> DataResponse[LessonResponse]:
    return DataResponse[LessonResponse](data=LessonResponse(**lesson_data))


def map_assignments_to_response(
    assignments_data: list[dict[str, Any]],
) -> DataResponse[list[AssignmentResponse]]:
    """Wrap course assignments in a data envelope."""
    return DataResponse[list[AssignmentResponse]](
        data=[AssignmentResponse(**assignment) for assignment in assignments_data]
    )


def map_order_to_response(order_data: list[dict[str, Any]]) -> DataResponse[list[OrderResponse]]:
    """Wrap the positions of reordered modules or lessons."""
    return DataResponse[list[OrderResponse]](data=[OrderResponse(**item) for item in order_data])
