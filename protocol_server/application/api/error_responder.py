"""
Error Responder
===============

Maps failure conditions to the uniform error envelope and HTTP status.

STATUS MAPPING:
---------------
    invalid_request                 → 400
    invalid_session                 → 400
    invalid_session (DELETE target) → 404   (SessionNotFoundError)
    internal_error                  → 500

Every error response is JSON with ``Content-Type: application/json;
charset=utf-8``. Only the envelope's fixed message reaches the client;
exception details stay in the logs.
"""

from fastapi import status
from fastapi.responses import Response

from protocol_server.application.api.models.protocol import (
    ErrorBody,
    ErrorEnvelope,
    new_correlation_id,
)
from protocol_server.core.config.constants import MEDIA_TYPE_JSON, ErrorCode
from protocol_server.core.exceptions import ProtocolError, SessionNotFoundError

STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.INVALID_REQUEST: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_SESSION: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

INTERNAL_ERROR_MESSAGE = "An unexpected error occurred"


class ErrorResponder:
    """
    Builds error envelopes and the matching JSON responses.

    Usage:
        envelope = ErrorResponder.format("req-1", ErrorCode.INVALID_SESSION, "Session not found")
        return ErrorResponder.from_exception(exc)
    """

    @staticmethod
    def format(correlation_id: str | None, code: ErrorCode, message: str) -> ErrorEnvelope:
        """Build the envelope, generating an id when the caller gave none."""
        return ErrorEnvelope(
            id=correlation_id or new_correlation_id(),
            error=ErrorBody(code=code, message=message),
        )

    @staticmethod
    def status_for(code: ErrorCode) -> int:
        return STATUS_BY_CODE[code]

    @classmethod
    def respond(
        cls,
        correlation_id: str | None,
        code: ErrorCode,
        message: str,
        status_code: int | None = None,
        headers: dict[str, str] | None = None,
    ) -> Response:
        envelope = cls.format(correlation_id, code, message)
        return Response(
            content=envelope.model_dump_json(),
            status_code=status_code or cls.status_for(code),
            media_type=MEDIA_TYPE_JSON,
            headers=headers,
        )

    @classmethod
    def from_exception(cls, exc: ProtocolError, headers: dict[str, str] | None = None) -> Response:
        """Convert a ProtocolError into its error response."""
        status_code = None
        if isinstance(exc, SessionNotFoundError):
            status_code = status.HTTP_404_NOT_FOUND
        message = exc.message if exc.code is not ErrorCode.INTERNAL_ERROR else INTERNAL_ERROR_MESSAGE
        return cls.respond(exc.correlation_id, exc.code, message, status_code=status_code, headers=headers)

    @classmethod
    def internal_error(cls, correlation_id: str | None = None) -> Response:
        return cls.respond(correlation_id, ErrorCode.INTERNAL_ERROR, INTERNAL_ERROR_MESSAGE)
