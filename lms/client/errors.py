"""
Client error type.

Dependencies: httpx
System role: Error surface of the client data-access layer
"""

from typing import Any

import httpx


class ApiError(Exception):
    """
    Raised for a failed API call.

    ``status`` is the HTTP status, or 0 when no response was received.
    ``code`` is the machine-readable error from the response body, if any.
    """

    def __init__(
        self,
        status: int,
        message: str,
        body: Any = None,
        code: str | None = None,
    ) -> None:
        self.status = status
        self.message = message
        self.body = body
        self.code = code
        super().__init__(f"[{status}] {message}")

    @property
    def retryable(self) -> bool:
        return self.status == 0 or self.status == 429 or self.status >= 500

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ApiError":
        """Build from a non-2xx response, reading ``detail.error`` / ``detail.message``."""
        try:
            body: Any = response.json()
        except ValueError:
            body = response.text

        message = response.reason_phrase or "Request failed"
        code = None
        detail = body.get("detail") if isinstance(body, dict) else None
        if isinstance(detail, dict):
            message = detail.get("message", message)
            code = detail.get("error")
        elif isinstance(detail, str):
            message = detail
        return cls(response.status_code, message, body=body, code=code)
