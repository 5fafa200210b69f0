"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from lms.boundary.db.CRUD import course_crud, user_crud

    # Use singleton instances
    course = await course_crud.get_with_tree(db, course_id)

    # Or instantiate classes directly for custom behavior
    from lms.boundary.db.CRUD import CourseCRUD
    custom_crud = CourseCRUD()
"""

from lms.boundary.db.CRUD.base_crud import BaseCRUD
from lms.boundary.db.CRUD.user_crud import (
    RefreshTokenCRUD,
    UserCRUD,
    refresh_token_crud,
    user_crud,
)
from lms.boundary.db.CRUD.organization_crud import (
    MembershipCRUD,
    OrganizationCRUD,
    membership_crud,
    organization_crud,
)
from lms.boundary.db.CRUD.course_crud import (
    AssignmentCRUD,
    CourseCRUD,
    LessonCRUD,
    ModuleCRUD,
    assignment_crud,
    course_crud,
    lesson_crud,
    module_crud,
)
from lms.boundary.db.CRUD.idempotency_crud import IdempotencyKeyCRUD, idempotency_crud
from lms.boundary.db.CRUD.progress_crud import (
    CourseProgressCRUD,
    LessonProgressCRUD,
    course_progress_crud,
    lesson_progress_crud,
)
from lms.boundary.db.CRUD.survey_crud import (
    SurveyCRUD,
    SurveyResponseCRUD,
    survey_crud,
    survey_response_crud,
)
from lms.boundary.db.CRUD.analytics_crud import (
    AnalyticsEventCRUD,
    LearnerJourneyCRUD,
    analytics_event_crud,
    learner_journey_crud,
)

__all__ = [
    "BaseCRUD",
    "UserCRUD",
    "user_crud",
    "RefreshTokenCRUD",
    "refresh_token_crud",
    "OrganizationCRUD",
    "organization_crud",
    "MembershipCRUD",
    "membership_crud",
    "CourseCRUD",
    "course_crud",
    "ModuleCRUD",
    "module_crud",
    "LessonCRUD",
    "lesson_crud",
    "AssignmentCRUD",
    "assignment_crud",
    "IdempotencyKeyCRUD",
    "idempotency_crud",
    "LessonProgressCRUD",
    "lesson_progress_crud",
    "CourseProgressCRUD",
    "course_progress_crud",
    "SurveyCRUD",
    "survey_crud",
    "SurveyResponseCRUD",
    "survey_response_crud",
    "AnalyticsEventCRUD",
    "analytics_event_crud",
    "LearnerJourneyCRUD",
    "learner_journey_crud",
]
