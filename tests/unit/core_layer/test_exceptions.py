"""
Unit Tests for Core Exceptions

Tests the ProtocolError hierarchy and its helpers.
"""

import pytest

from protocol_server.core.config.constants import ErrorCode
from protocol_server.core.exceptions import (
    InvalidRequestError,
    InvalidSessionError,
    ProtocolError,
    SessionNotFoundError,
)


@pytest.mark.unit
class TestProtocolError:
    """Test the base exception class."""

    def test_base_error_creation(self):
        error = ProtocolError("Test message")

        assert str(error) == "Test message"
        assert error.code is ErrorCode.INTERNAL_ERROR
        assert error.details == {}
        assert error.correlation_id is None

    def test_details_are_copied(self):
        details = {"key": "value"}
        error = ProtocolError("Test", details=details)
        error.with_context(extra=1)

        assert details == {"key": "value"}
        assert error.details == {"key": "value", "extra": 1}

    def test_to_dict(self):
        error = InvalidRequestError("bad body", correlation_id="req-1", details={"field": "inputs"})

        assert error.to_dict() == {
            "error_type": "InvalidRequestError",
            "code": "invalid_request",
            "message": "bad body",
            "correlation_id": "req-1",
            "details": {"field": "inputs"},
        }

    def test_from_exception_wraps_original(self):
        error = InvalidRequestError.from_exception(ValueError("boom"), "Malformed", correlation_id="req-2")

        assert isinstance(error, InvalidRequestError)
        assert error.message == "Malformed"
        assert error.correlation_id == "req-2"
        assert error.details["original_error"] == "ValueError"

    def test_repr_includes_correlation_id(self):
        assert "req-3" in repr(ProtocolError("x", correlation_id="req-3"))


@pytest.mark.unit
class TestErrorCodes:
    """Test that each subclass maps to its wire code."""

    @pytest.mark.parametrize(
        ("exc_class", "code"),
        [
            (InvalidRequestError, ErrorCode.INVALID_REQUEST),
            (InvalidSessionError, ErrorCode.INVALID_SESSION),
            (SessionNotFoundError, ErrorCode.INVALID_SESSION),
        ],
    )
    def test_codes(self, exc_class, code):
        assert exc_class("x").code is code

    def test_session_not_found_is_invalid_session(self):
        assert issubclass(SessionNotFoundError, InvalidSessionError)
