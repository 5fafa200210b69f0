"""Shared router helpers: error mapping, auth cookies and request validation."""

from .cookies import clear_auth_cookies, set_auth_cookies
from .error_handling import error_detail, handle_api_errors
from .validators import require_fields

__all__ = [
    "clear_auth_cookies",
    "error_detail",
    "handle_api_errors",
    "require_fields",
    "set_auth_cookies",
]
