"""Service orchestrators."""

from .analytics_service import AnalyticsService
from .auth_service import AuthService
from .course_service import CourseService
from .curriculum_service import CurriculumService
from .organization_service import OrganizationService
from .progress_service import ProgressService
from .survey_service import SurveyService

__all__ = [
    "AnalyticsService",
    "AuthService",
    "CourseService",
    "CurriculumService",
    "OrganizationService",
    "ProgressService",
    "SurveyService",
]
