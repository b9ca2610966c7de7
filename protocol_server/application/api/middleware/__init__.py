"""
Middleware Package
==================

AVAILABLE MIDDLEWARE:
---------------------
1. error_handler: unhandled exceptions → internal_error envelope
2. request_logging: request/response log lines with sanitized headers

MIDDLEWARE ORDERING:
--------------------
Starlette runs the most recently added middleware first, so registration
order is the reverse of execution order:

Request flow:  Client → request id → logging → CORS → error handling → Handler

``create_app`` registers them in that reverse order.
"""

from .error_handler import ErrorHandlingMiddleware, add_error_handling_middleware
from .request_logging import (
    RequestLoggingMiddleware,
    add_request_logging_middleware,
    sanitize_headers,
)

__all__ = [
    "ErrorHandlingMiddleware",
    "RequestLoggingMiddleware",
    "add_error_handling_middleware",
    "add_request_logging_middleware",
    "sanitize_headers",
]
