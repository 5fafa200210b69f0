"""
Client data-access layer configuration.

Base URL, timeout and retry/backoff parameters for LMSApiClient.

Dependencies: pydantic, pydantic_settings
System role: Configuration for the Python REST client
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from lms.configs.base import BaseSettings


class ClientSettings(BaseSettings):
    """LMS REST client configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LMS_CLIENT_",
        case_sensitive=False,
        extra="ignore",
    )

    base_url: str = Field(default="http://localhost:8082", description="API base URL")
    timeout_seconds: float = Field(default=15.0, description="Per-request timeout")
    max_retries: int = Field(default=3, description="Attempts for retryable requests")
    backoff_initial: float = Field(default=0.5, description="First backoff delay in seconds")
    backoff_max: float = Field(default=8.0, description="Upper bound for a backoff delay")
