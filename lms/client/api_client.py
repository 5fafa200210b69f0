"""
Async HTTP client for the LMS API.

Wraps httpx with bearer-token and organization headers, camelCase <->
snake_case body transforms and retry/backoff for transient failures.

Dependencies: httpx, tenacity, lms.configs
System role: Transport of the client data-access layer
"""

import logging
from typing import Any

import httpx

from lms.client.errors import ApiError
from lms.client.retry import with_retries
from lms.client.transforms import to_camel, to_snake, transform_keys
from lms.configs import get_settings

logger = logging.getLogger(__name__)

ORG_HEADER = "X-Org-Id"


class LMSApiClient:
    """
    Async client for the LMS REST API.

    Usage:
        async with LMSApiClient("https://lms.example.com", access_token=token) as client:
            courses = await client.get("/api/client/courses")
    """

    def __init__(
        self,
        base_url: str | None = None,
        access_token: str | None = None,
        org_id: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_initial: float | None = None,
        backoff_max: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the client; unset options come from LMS_CLIENT_* settings.

        Args:
            base_url: API root
            access_token: Bearer token sent on every request
            org_id: Organization sent as X-Org-Id
            timeout: Request timeout in seconds
            max_retries: Total attempts per call
            backoff_initial: First retry delay in seconds
            backoff_max: Retry delay ceiling in seconds
            transport: Custom httpx transport
        """
        config = get_settings().client
        self.base_url = (base_url or config.base_url).rstrip("/")
        self.access_token = access_token
        self.org_id = org_id
        self.max_retries = max_retries if max_retries is not None else config.max_retries
        self.backoff_initial = backoff_initial if backoff_initial is not None else config.backoff_initial
        self.backoff_max = backoff_max if backoff_max is not None else config.backoff_max
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else config.timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> "LMSApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        if self.org_id:
            headers[ORG_HEADER] = str(self.org_id)
        return headers

    async def _send(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: dict[str, Any] | None = None,
        transform: bool = True,
    ) -> Any:
        body = transform_keys(json, to_snake) if transform and json is not None else json
        query = {key: value for key, value in (params or {}).items() if value is not None}
        try:
            response = await self._client.request(
                method, path, json=body, params=query, headers=self._headers()
            )
        except httpx.TimeoutException as e:
            raise ApiError(0, "Request timed out", code="timeout") from e
        except httpx.TransportError as e:
            raise ApiError(0, f"Network error: {e}", code="network_error") from e

        if response.is_error:
            raise ApiError.from_response(response)
        if not response.content:
            return None
        if "application/json" not in response.headers.get("content-type", ""):
            return response.text
        data = response.json()
        return transform_keys(data, to_camel) if transform else data

    async def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: dict[str, Any] | None = None,
        transform: bool = True,
    ) -> Any:
        """
        Send a request, retrying transient failures.

        Args:
            method: HTTP method
            path: Path below the base URL
            json: Request body; keys converted to snake_case
            params: Query parameters; None values dropped
            transform: Convert body keys (camelCase out, snake_case in)

        Returns:
            Any: Decoded response with camelCase keys, None for empty bodies

        Raises:
            ApiError: Non-2xx response, or no response after all attempts
        """

        @with_retries(self.max_retries, self.backoff_initial, self.backoff_max)
        async def attempt() -> Any:
            return await self._send(method, path, json=json, params=params, transform=transform)

        logger.debug("API request", extra={"method": method, "path": path})
        return await attempt()

    async def get(self, path: str, params: dict[str, Any] | None = None, **kwargs: Any) -> Any:
        return await self.request("GET", path, params=params, **kwargs)

    async def post(self, path: str, json: Any = None, **kwargs: Any) -> Any:
        return await self.request("POST", path, json=json, **kwargs)

    async def put(self, path: str, json: Any = None, **kwargs: Any) -> Any:
        return await self.request("PUT", path, json=json, **kwargs)

    async def patch(self, path: str, json: Any = None, **kwargs: Any) -> Any:
        return await self.request("PATCH", path, json=json, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> Any:
        return await self.request("DELETE", path, **kwargs)
