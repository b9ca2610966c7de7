"""
System Constants and Enumerations

Wire-level constants shared by the routes, the streaming pipeline and the
error responder.
"""

from enum import Enum

# ============================================================================
# HTTP Headers
# ============================================================================

HEADER_REQUEST_ID = "X-Request-ID"

# ============================================================================
# Media Types
# ============================================================================

MEDIA_TYPE_JSON = "application/json; charset=utf-8"
MEDIA_TYPE_NDJSON = "application/x-ndjson"
MEDIA_TYPE_SSE = "text/event-stream"

SSE_DONE_SENTINEL = "data: [DONE]\n\n"

# ============================================================================
# Protocol Error Codes
# ============================================================================


class ErrorCode(str, Enum):
    """
    Error codes carried in the ``error.code`` field of every error envelope.

    INVALID_REQUEST: body could not be parsed or misses required fields
    INVALID_SESSION: session id is unknown, expired or already closed
    INTERNAL_ERROR: anything unexpected; internal details are never exposed
    """

    INVALID_REQUEST = "invalid_request"
    INVALID_SESSION = "invalid_session"
    INTERNAL_ERROR = "internal_error"


# ============================================================================
# Completion Finish Reasons
# ============================================================================


class FinishReason(str, Enum):
    """
    Why a completion stream ended.

    STOP: the whole response body was delivered
    LENGTH: delivery stopped at the caller's max_tokens cap
    """

    STOP = "stop"
    LENGTH = "length"


# ============================================================================
# Server Identity (initialize handshake)
# ============================================================================

SERVER_DESCRIPTION = "A session-oriented text completion server supporting stat analysis and streaming."
SERVER_CAPABILITIES = ("text-completions", "stat-analysis", "streaming")

# ============================================================================
# OAuth Discovery
# ============================================================================

OAUTH_AUTH_METHODS = ("client_secret_basic", "client_secret_post")
OAUTH_GRANT_TYPES = ("authorization_code", "refresh_token", "client_credentials")
OAUTH_RESPONSE_TYPES = ("code",)
OAUTH_SCOPES = ("text.completions", "session")
