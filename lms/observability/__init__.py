"""
Observability module.

Provides structured logging, correlation ID tracking and HTTP middleware.
"""

from lms.observability.correlation import get_correlation_id, set_correlation_id
from lms.observability.logger import configure_logging

__all__ = ["configure_logging", "get_correlation_id", "set_correlation_id"]
