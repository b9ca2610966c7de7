from protocol_server.application.api.models.protocol import (
    CompletionInputs,
    CompletionRequest,
    ErrorBody,
    ErrorEnvelope,
    InitializeResponse,
    ServerInfo,
    SessionAttributes,
    SessionCloseResponse,
    SessionCreateRequest,
    SessionCreateResponse,
    StatAnalysisResponse,
    StatComparison,
)

__all__ = [
    "CompletionInputs",
    "CompletionRequest",
    "ErrorBody",
    "ErrorEnvelope",
    "InitializeResponse",
    "ServerInfo",
    "SessionAttributes",
    "SessionCloseResponse",
    "SessionCreateRequest",
    "SessionCreateResponse",
    "StatAnalysisResponse",
    "StatComparison",
]
