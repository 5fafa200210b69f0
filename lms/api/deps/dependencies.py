"""
Dependency injection container.

Factory functions for FastAPI dependencies.

Dependencies: lms.configs, lms.application, lms.boundary
System role: DI container for service injection
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from lms.configs import Settings, get_settings
from lms.boundary.db import get_async_db
from lms.application.services import (
    AnalyticsService,
    AuthService,
    CourseService,
    CurriculumService,
    OrganizationService,
    ProgressService,
    SurveyService,
)


def get_settings_dependency() -> Settings:
    """Application settings as a dependency (overridable in tests)."""
    return get_settings()


def get_auth_service(db: AsyncSession = Depends(get_async_db)) -> AuthService:
    """Get auth service with injected dependencies."""
    return AuthService(db=db)


def get_course_service(db: AsyncSession = Depends(get_async_db)) -> CourseService:
    """Get course service with injected dependencies."""
    return CourseService(db=db)


def get_curriculum_service(db: AsyncSession = Depends(get_async_db)) -> CurriculumService:
    """Get module/lesson service with injected dependencies."""
    return CurriculumService(db=db)


def get_organization_service(db: AsyncSession = Depends(get_async_db)) -> OrganizationService:
    """Get organization service with injected dependencies."""
    return OrganizationService(db=db)


def get_survey_service(db: AsyncSession = Depends(get_async_db)) -> SurveyService:
    """Get survey service with injected dependencies."""
    return SurveyService(db=db)


def get_progress_service(db: AsyncSession = Depends(get_async_db)) -> ProgressService:
    """Get progress service with injected dependencies."""
    return ProgressService(db=db)


def get_analytics_service(db: AsyncSession = Depends(get_async_db)) -> AnalyticsService:
    """Get analytics service with injected dependencies."""
    return AnalyticsService(db=db)
