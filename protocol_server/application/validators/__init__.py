"""
Request validators for the protocol endpoints.
"""

from protocol_server.application.validators.request_validator import (
    RequestValidator,
    ValidatedRequest,
    decode_body,
    parse_payload,
)

__all__ = [
    "RequestValidator",
    "ValidatedRequest",
    "decode_body",
    "parse_payload",
]
