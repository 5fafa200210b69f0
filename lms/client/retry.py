"""
Retry policy for API calls.

Dependencies: tenacity, httpx
System role: Backoff for transient client failures
"""

import logging

import httpx
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from lms.client.errors import ApiError

logger = logging.getLogger(__name__)


def is_retryable(error: BaseException) -> bool:
    """Transport failures, 429 and 5xx are transient; everything else is not."""
    if isinstance(error, httpx.TransportError):
        return True
    return isinstance(error, ApiError) and error.retryable


def _log_retry(retry_state: RetryCallState) -> None:
    error = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "Retrying API call",
        extra={
            "attempt": retry_state.attempt_number,
            "wait_seconds": round(retry_state.next_action.sleep, 3) if retry_state.next_action else None,
            "error": str(error),
        },
    )


def with_retries(max_attempts: int = 3, initial: float = 0.5, max_wait: float = 8.0):
    """
    Decorator retrying an async call with exponential backoff and jitter.

    Args:
        max_attempts: Total attempts including the first
        initial: First backoff in seconds
        max_wait: Backoff ceiling in seconds

    Returns:
        A tenacity retry decorator; the last error is re-raised
    """
    return retry(
        retry=retry_if_exception(is_retryable),
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=initial, max=max_wait) + wait_random(0, initial),
        before_sleep=_log_retry,
        reraise=True,
    )
