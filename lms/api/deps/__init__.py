"""API-specific dependencies."""

# Re-export common dependencies
from .dependencies import (
    get_analytics_service,
    get_auth_service,
    get_course_service,
    get_curriculum_service,
    get_organization_service,
    get_progress_service,
    get_settings_dependency,
    get_survey_service,
)

__all__ = [
    "get_analytics_service",
    "get_auth_service",
    "get_course_service",
    "get_curriculum_service",
    "get_organization_service",
    "get_progress_service",
    "get_settings_dependency",
    "get_survey_service",
]
