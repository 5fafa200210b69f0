"""
Python client for the LMS REST API.

LMSApiClient handles transport (auth headers, key transforms, retries);
the DAL classes expose one API area each.
"""

from lms.client.api_client import LMSApiClient
from lms.client.dal import AnalyticsDAL, AuthDAL, CourseDAL, ProgressDAL, SurveyDAL
from lms.client.errors import ApiError
from lms.client.retry import with_retries

__all__ = [
    "AnalyticsDAL",
    "ApiError",
    "AuthDAL",
    "CourseDAL",
    "LMSApiClient",
    "ProgressDAL",
    "SurveyDAL",
    "with_retries",
]
