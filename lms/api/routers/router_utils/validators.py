"""
Request validation helpers shared by routers.

Request schemas leave business-required fields optional so a missing
field is reported as 400 with the field names rather than a schema 422.

Dependencies: lms.core.exceptions
System role: Business validation of request bodies
"""

from typing import Any

from lms.core.exceptions import ValidationError


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def require_fields(request: Any, *names: str) -> None:
    """
    Ensure the named attributes of a request body are present and non-blank.

    Raises:
        ValidationError: Listing every missing field
    """
    missing = [name for name in names if _is_blank(getattr(request, name, None))]
    if missing:
        raise ValidationError(
            f"Missing required fields: {', '.join(missing)}",
            details={"fields": missing},
        )
