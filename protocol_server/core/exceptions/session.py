"""
Session Exceptions

All exceptions related to session lookup and lifecycle
"""

from protocol_server.core.config.constants import ErrorCode
from protocol_server.core.exceptions.base import ProtocolError


class InvalidSessionError(ProtocolError):
    """
    Raised when a request references a session that is not live.

    Covers never-created, expired and already-closed sessions alike; the
    client cannot tell them apart.
    """

    code = ErrorCode.INVALID_SESSION


class SessionNotFoundError(InvalidSessionError):
    """
    Raised when closing a session that does not exist.

    Same wire code as InvalidSessionError, but answered with 404 instead of
    400 (the target of a DELETE is a resource).
    """
