"""
Validation Exceptions

All exceptions related to request validation
"""

from protocol_server.core.config.constants import ErrorCode
from protocol_server.core.exceptions.base import ProtocolError


class InvalidRequestError(ProtocolError):
    """
    Raised when a request body cannot be used.

    Common causes:
    - Body is not JSON, or not a JSON object
    - Missing session_id
    - Neither a prompt nor a structured stats input
    - max_tokens out of range
    """

    code = ErrorCode.INVALID_REQUEST
