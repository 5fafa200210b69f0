"""
Authentication configuration settings.

JWT signing parameters, token lifetimes, password hashing cost and
cookie names used by the session layer.

Dependencies: pydantic, pydantic_settings
System role: Auth/session configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from lms.configs.base import BaseSettings


class AuthSettings(BaseSettings):
    """JWT and cookie configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="AUTH_",
        case_sensitive=False,
        extra="ignore",
    )

    jwt_secret: str = Field(
        default="change-me-in-production",
        description="HMAC secret used to sign access and refresh tokens",
    )
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    issuer: str = Field(default="lms-platform", description="JWT iss claim")
    audience: str = Field(default="lms-users", description="JWT aud claim")

    access_token_minutes: int = Field(default=15, description="Access token lifetime in minutes")
    refresh_token_days: int = Field(default=7, description="Refresh token lifetime in days")

    bcrypt_rounds: int = Field(default=12, description="bcrypt cost factor for password hashes")

    access_cookie_name: str = Field(default="access_token", description="Access token cookie name")
    refresh_cookie_name: str = Field(default="refresh_token", description="Refresh token cookie name")
    active_org_cookie_name: str = Field(
        default="lms_active_org",
        description="Cookie holding the caller's selected organization id",
    )
