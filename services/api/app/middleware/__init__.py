"""
Middleware components for the API.

This package contains middleware for:
- Request logging with timing and slow request warnings
"""

from .request_logging import RequestLoggingMiddleware

__all__ = [
    "RequestLoggingMiddleware",
]
