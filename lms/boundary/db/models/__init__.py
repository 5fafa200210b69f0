"""
Database models package.

Exports:
  - UserModel, RefreshTokenModel: Identity and session state
  - OrganizationModel, MembershipModel: Tenants and their members
  - CourseModel, ModuleModel, LessonModel: Course content hierarchy
  - CourseAssignmentModel, IdempotencyKeyModel: Delivery and write dedup
  - LessonProgressModel, CourseProgressModel: Learner progress
  - SurveyModel, SurveyResponseModel: Surveys
  - AnalyticsEventModel, LearnerJourneyModel: Analytics

Dependencies: sqlalchemy, lms.boundary.db.base
System role: Database model definitions for domain entities
"""

from lms.boundary.db.models.user_model import UserModel
from lms.boundary.db.models.organization_model import MembershipModel, OrganizationModel
from lms.boundary.db.models.refresh_token_model import RefreshTokenModel
from lms.boundary.db.models.course_model import CourseModel, LessonModel, ModuleModel
from lms.boundary.db.models.assignment_model import CourseAssignmentModel
from lms.boundary.db.models.idempotency_model import IdempotencyKeyModel
from lms.boundary.db.models.progress_model import CourseProgressModel, LessonProgressModel
from lms.boundary.db.models.survey_model import SurveyModel, SurveyResponseModel
from lms.boundary.db.models.analytics_model import AnalyticsEventModel, LearnerJourneyModel

__all__ = [
    "UserModel",
    "OrganizationModel",
    "MembershipModel",
    "RefreshTokenModel",
    "CourseModel",
    "ModuleModel",
    "LessonModel",
    "CourseAssignmentModel",
    "IdempotencyKeyModel",
    "LessonProgressModel",
    "CourseProgressModel",
    "SurveyModel",
    "SurveyResponseModel",
    "AnalyticsEventModel",
    "LearnerJourneyModel",
]
