"""
Exception hierarchy for the LMS application.

Provides layered exception structure for domain-specific errors.
Each exception carries an HTTP status and a machine-readable error code
so the API layer can render a consistent JSON error body.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class LMSException(Exception):
    """Base exception for all LMS application errors."""

    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        error_code: str | None = None,
    ) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context, merged into
                the error response body
            error_code: Overrides the class level error code
        """
        self.message = message
        self.details = details or {}
        if error_code:
            self.error_code = error_code
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Serialize for an HTTP error body."""
        return {"error": self.error_code, "message": self.message, **self.details}


class ValidationError(LMSException):
    """Raised when input validation fails."""

    status_code = 400
    error_code = "validation_error"

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
        error_code: str | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
            error_code: Overrides ``validation_error``
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details, error_code)


class AuthenticationError(LMSException):
    """Raised when credentials or tokens are missing or invalid."""

    status_code = 401
    error_code = "unauthorized"


class PermissionDeniedError(LMSException):
    """Raised when an authenticated caller lacks the required role."""

    status_code = 403
    error_code = "forbidden"


class NotFoundError(LMSException):
    """Raised when a requested resource does not exist."""

    status_code = 404
    error_code = "not_found"

    def __init__(
        self,
        resource: str,
        resource_id: Any = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} not found", details)


class ConflictError(LMSException):
    """Raised when a write collides with existing state."""

    status_code = 409
    error_code = "conflict"


class IdempotencyConflictError(ConflictError):
    """Raised when an idempotency key has already been used."""

    error_code = "idempotency_conflict"

    def __init__(self, key: str, resource_id: Any = None) -> None:
        details: dict[str, Any] = {"idempotency_key": key}
        if resource_id is not None:
            details["resource_id"] = str(resource_id)
        super().__init__("Idempotency key already used", details)


class VersionConflictError(ConflictError):
    """Raised when a client writes against a stale course version."""

    error_code = "version_conflict"

    def __init__(self, current_version: int) -> None:
        super().__init__(
            f"Course has newer version {current_version}",
            {"current_version": current_version},
        )
