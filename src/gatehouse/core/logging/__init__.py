"""Structured logging setup and request logging."""

from gatehouse.core.logging.middleware import (
    RequestLoggingMiddleware,
    access_context,
    get_client_ip,
)
from gatehouse.core.logging.setup import configure_logging


__all__ = [
    "RequestLoggingMiddleware",
    "access_context",
    "configure_logging",
    "get_client_ip",
]
