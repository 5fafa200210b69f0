"""
Shared settings for the LMS service.

Every settings group inherits the .env handling defined here. Runtime
mode (development, test, production) decides cookie security and docs
exposure.

Dependencies: pydantic_settings
System role: Root of the configuration classes
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class BaseSettings(PydanticBaseSettings):
    """Settings common to the API process and the scripts."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="LMS API", description="Title shown in OpenAPI and startup logs")
    environment: str = Field(default="development", description="development, test or production")
    debug: bool = Field(default=False, description="Expose docs and verbose errors")
    log_level: str = Field(default="INFO", description="Root logger level")

    @field_validator("log_level")
    @classmethod
    def _normalise_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"
