"""
Auth cookie helpers.

Sets and clears the access/refresh token cookies. Production cookies are
Secure with SameSite=None so the admin SPA on another origin can send
them; elsewhere SameSite=Lax over plain HTTP.

Dependencies: fastapi, lms.configs
System role: Cookie-based session transport
"""

from datetime import datetime, timezone

from fastapi import Response

from lms.configs import Settings, get_settings


def _cookie_options(settings: Settings) -> dict:
    production = settings.is_production
    return {
        "httponly": True,
        "secure": production,
        "samesite": "none" if production else "lax",
        "path": "/",
    }


def set_auth_cookies(
    response: Response,
    access_token: str,
    refresh_token: str,
    access_expires_at: datetime,
    settings: Settings | None = None,
) -> None:
    """
    Attach both auth cookies to a response.

    Args:
        response: Outgoing response
        access_token: Signed access token
        refresh_token: Signed refresh token
        access_expires_at: Access token expiry, used for the cookie max-age
        settings: Application settings
    """
    settings = settings or get_settings()
    options = _cookie_options(settings)
    access_max_age = max(0, int((access_expires_at - datetime.now(timezone.utc)).total_seconds()))
    response.set_cookie(
        settings.auth.access_cookie_name,
        access_token,
        max_age=access_max_age,
        **options,
    )
    response.set_cookie(
        settings.auth.refresh_cookie_name,
        refresh_token,
        max_age=settings.auth.refresh_token_days * 24 * 60 * 60,
        **options,
    )


def clear_auth_cookies(response: Response, settings: Settings | None = None) -> None:
    """Expire both auth cookies."""
    settings = settings or get_settings()
    options = _cookie_options(settings)
    for name in (settings.auth.access_cookie_name, settings.auth.refresh_cookie_name):
        response.delete_cookie(name, **options)
