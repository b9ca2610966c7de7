"""
Request Logging Middleware
==========================

Logs one line when a request arrives and one when its response head is
ready: method, path, status code, duration. Bodies are never logged; they
can carry access tokens and prompts.

For streaming routes the "completed" line is written when the response
starts, not when the last chunk is delivered. Stream lifetime is logged by
the transport itself (stream_completed / stream_cancelled).
"""

import time
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from protocol_server.core.logging.logger import get_logger

logger = get_logger(__name__)


# ============================================================================
# CONFIGURATION
# ============================================================================
# Header values replaced with [REDACTED] before logging

SENSITIVE_HEADERS = {
    "authorization",
    "cookie",
    "x-api-key",
    "x-auth-token",
}


# ============================================================================
# REQUEST LOGGING MIDDLEWARE
# ============================================================================


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs request arrival and completion with sanitized headers."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()

        method = request.method
        path = request.url.path
        query_params = str(request.query_params) if request.query_params else None

        logger.info(
            f"Incoming request: {method} {path}",
            method=method,
            path=path,
            query_params=query_params,
            headers=sanitize_headers(dict(request.headers)),
            client_host=request.client.host if request.client else None,
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"Request failed: {method} {path}",
                method=method,
                path=path,
                error_type=type(e).__name__,
                duration_seconds=round(time.perf_counter() - start_time, 4),
            )
            raise

        logger.info(
            f"Request completed: {method} {path}",
            method=method,
            path=path,
            status_code=response.status_code,
            duration_seconds=round(time.perf_counter() - start_time, 4),
        )
        return response


def sanitize_headers(headers: dict[str, str]) -> dict[str, str]:
    """Copy of ``headers`` with sensitive values replaced by ``[REDACTED]``."""
    return {
        key: "[REDACTED]" if key.lower() in SENSITIVE_HEADERS else value
        for key, value in headers.items()
    }


def add_request_logging_middleware(app):
    app.add_middleware(RequestLoggingMiddleware)
    logger.info("Request logging middleware registered")
