"""
Core business logic module.

Contains the exception hierarchy, token/password primitives, and pure
domain functions (ordering, journey reduction, progress math).
"""

from lms.core.exceptions import (
    LMSException,
    ValidationError,
    AuthenticationError,
    PermissionDeniedError,
    NotFoundError,
    ConflictError,
    IdempotencyConflictError,
    VersionConflictError,
)

__all__ = [
    "LMSException",
    "ValidationError",
    "AuthenticationError",
    "PermissionDeniedError",
    "NotFoundError",
    "ConflictError",
    "IdempotencyConflictError",
    "VersionConflictError",
]
