"""
Base Exception Class

This module contains ONLY the base exception class that all other exceptions
inherit from. Specialized exceptions live in their themed modules.
"""

from typing import Any

from protocol_server.core.config.constants import ErrorCode


class ProtocolError(Exception):
    """
    Base exception for all protocol errors.

    Every subclass names the wire ``code`` it maps to, so the error responder
    can build the envelope without inspecting the exception type.

    Attributes:
        message: Error message (safe to show to the client)
        correlation_id: Caller's request id, if one could be recovered
        details: Additional error details for logging (never sent to clients)

    Example:
        raise InvalidSessionError(
            "Invalid or expired session ID",
            correlation_id="req-123",
            details={"session_id": session_id},
        )
    """

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        correlation_id: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.correlation_id = correlation_id
        self.details = (details or {}).copy()
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for logging.

        Returns:
            Dict with error_type, code, message, correlation_id, and details
        """
        return {
            "error_type": self.__class__.__name__,
            "code": self.code.value,
            "message": self.message,
            "correlation_id": self.correlation_id,
            "details": self.details,
        }

    def with_context(self, **context) -> "ProtocolError":
        """
        Add additional context to the error details.

        Returns:
            Self (for method chaining)
        """
        self.details.update(context)
        return self

    def __repr__(self) -> str:
        details_str = f", details={self.details}" if self.details else ""
        correlation_str = f", correlation_id='{self.correlation_id}'" if self.correlation_id else ""
        return f"{self.__class__.__name__}(message='{self.message}'{correlation_str}{details_str})"

    @classmethod
    def from_exception(
        cls,
        exc: Exception,
        message: str | None = None,
        correlation_id: str | None = None,
        **details
    ) -> "ProtocolError":
        """
        Create a ProtocolError from another exception.

        Useful for wrapping third-party exceptions (pydantic, orjson) with
        additional context.

        Example:
            >>> try:
            ...     payload = orjson.loads(raw)
            ... except orjson.JSONDecodeError as e:
            ...     raise InvalidRequestError.from_exception(e, "Malformed JSON body")
        """
        error_message = message or str(exc)
        error_details = {
            "original_error": exc.__class__.__name__,
            "original_message": str(exc),
            **details
        }
        return cls(error_message, correlation_id=correlation_id, details=error_details)
