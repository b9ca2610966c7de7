"""
Error Handling Middleware
=========================

Last line of defense for exceptions nothing else handled.

Protocol failures (invalid_request, invalid_session) are raised as
ProtocolError subclasses and turned into envelopes by the exception handlers
registered in ``create_app``; they never get this far. Anything that does
reach this middleware is a bug or an unexpected runtime failure, and the
client sees only the generic ``internal_error`` envelope:

    {"id": "<request id>", "error": {"code": "internal_error",
                                     "message": "An unexpected error occurred"}}

The full exception, with stack trace, goes to the log. Only when
``include_traceback`` is enabled (development) is the trace also attached to
the response under a top-level ``traceback`` key.
"""

import traceback
from collections.abc import Callable

import orjson
from fastapi import Request, Response, status
from starlette.middleware.base import BaseHTTPMiddleware

from protocol_server.application.api.error_responder import (
    INTERNAL_ERROR_MESSAGE,
    ErrorResponder,
)
from protocol_server.core.config.constants import MEDIA_TYPE_JSON, ErrorCode
from protocol_server.core.logging.logger import get_logger, get_request_id

logger = get_logger(__name__)


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Converts unhandled exceptions into ``internal_error`` responses.

    The request id bound by the request-id middleware doubles as the
    envelope's correlation id, so a client report can be matched to the log
    line carrying the stack trace.
    """

    def __init__(self, app, include_traceback: bool = False):
        """
        Args:
            app: The ASGI application
            include_traceback: Attach the formatted stack trace to the response
                              (never enable in production)
        """
        super().__init__(app)
        self.include_traceback = include_traceback

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)

        except Exception as e:
            method = request.method
            path = request.url.path
            correlation_id = get_request_id()

            logger.error(
                f"Unhandled exception in request: {method} {path}",
                method=method,
                path=path,
                error_type=type(e).__name__,
                error_message=str(e),
                exc_info=True,
            )

            if not self.include_traceback:
                return ErrorResponder.internal_error(correlation_id)

            content = ErrorResponder.format(
                correlation_id, ErrorCode.INTERNAL_ERROR, INTERNAL_ERROR_MESSAGE
            ).model_dump(mode="json")
            content["traceback"] = traceback.format_exc()

            return Response(
                content=orjson.dumps(content),
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                media_type=MEDIA_TYPE_JSON,
            )


def add_error_handling_middleware(app, include_traceback: bool = False):
    """
    Register ErrorHandlingMiddleware on ``app``.

    Register it before the other middleware so it wraps them (Starlette runs
    the most recently added middleware first).
    """
    app.add_middleware(ErrorHandlingMiddleware, include_traceback=include_traceback)
    logger.info("Error handling middleware registered", include_traceback=include_traceback)
