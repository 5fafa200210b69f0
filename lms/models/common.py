"""
Common response models and utilities.

Generic response wrappers and error schemas.

Dependencies: pydantic
System role: Common API response structures
"""

from typing import Generic, TypeVar
from pydantic import BaseModel, Field

T = TypeVar("T")


class DataResponse(BaseModel, Generic[T]):
    """Envelope used by every collection and resource endpoint."""

    data: T


class SuccessResponse(BaseModel, Generic[T]):
    """Generic success response wrapper."""

    success: bool = True
    data: T


class MessageResponse(BaseModel):
    """Acknowledgement without a resource body."""

    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    """Error response schema (the ``detail`` of an HTTPException)."""

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error message")
