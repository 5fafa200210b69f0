"""
API error handling utilities.

Provides a decorator for consistent error handling across endpoints:
domain exceptions become HTTPExceptions whose detail is the JSON error
body ``{"error": ..., "message": ..., **details}``.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status
from pydantic import ValidationError as PydanticValidationError

from lms.core.exceptions import LMSException

logger = logging.getLogger(__name__)

# Type for the decorated function
F = TypeVar("F", bound=Callable[..., Any])


def error_detail(error: str, message: str, **details: Any) -> dict[str, Any]:
    """Build the JSON error body used by every HTTPException."""
    return {"error": error, "message": message, **details}


def handle_api_errors(func: F) -> F:
    """
    Decorator to handle service errors and transform them into HTTPExceptions.

    This centralizes:
    - Logging of errors with context
    - Mapping LMS exceptions to their HTTP status codes
    - Ensuring uniform error response formats
    """
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except HTTPException:
            raise

        except LMSException as e:
            log = logger.warning if e.status_code < 500 else logger.error
            log(
                e.message,
                extra={"error_code": e.error_code, "status_code": e.status_code, "endpoint": func.__name__},
            )
            raise HTTPException(status_code=e.status_code, detail=e.to_dict())

        except ValueError as e:
            # Generic ValueErrors from lower layers: 404 when they describe a missing row
            msg = str(e).lower()
            if "not found" in msg or "does not exist" in msg:
                logger.warning("Resource not found (ValueError)", extra={"error": str(e)})
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail=error_detail("not_found", str(e)),
                )
            logger.warning("Invalid request (ValueError)", extra={"error": str(e)})
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=error_detail("validation_error", str(e)),
            )

        except PydanticValidationError as e:
            logger.warning("Pydantic validation error", extra={"error": str(e)})
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=e.errors(include_url=False, include_context=False),
            )

        except Exception as e:
            logger.exception(
                "Unexpected failure in API operation",
                extra={"endpoint": func.__name__, "error": str(e)},
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=error_detail("internal_error", "An internal error occurred"),
            )

    return wrapper  # type: ignore
