"""
CORS configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Browser origin allow-list for the admin and learner clients
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from lms.configs.base import BaseSettings


class CorsSettings(BaseSettings):
    """Allowed origins for credentialed browser requests."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CORS_",
        case_sensitive=False,
        extra="ignore",
    )

    allowed_origins: list[str] = Field(
        default=["http://localhost:5173", "http://localhost:3000"],
        description="Origins allowed to send cookies to the API",
    )
