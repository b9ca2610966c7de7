"""
Protocol API Models
===================

Pydantic models for every request and response body of the protocol. Each
response kind has its own explicit type; field presence is fixed:

- SessionCreateResponse: {id, session_id}
- SessionCloseResponse:  {id}
- StatAnalysisResponse:  {id, type, result, history}
- ErrorEnvelope:         {id, error: {code, message}}

Completion chunks (DeltaChunk) live in ``protocol_server.streaming.models``.
"""

import uuid
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from protocol_server.core.config.constants import ErrorCode


def new_correlation_id() -> str:
    return str(uuid.uuid4())


# ============================================================================
# SESSION MODELS
# ============================================================================


class SessionAttributes(BaseModel):
    """Optional attributes supplied when opening a session."""

    access_token: str | None = Field(default=None, description="Opaque token, stored but never verified")


class SessionCreateRequest(BaseModel):
    """Body of POST /v1/session."""

    id: str = Field(default_factory=new_correlation_id, description="Caller's request id (echoed back)")
    attributes: SessionAttributes = Field(default_factory=SessionAttributes)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"id": "req-001", "attributes": {"access_token": "demo_access_token"}}
        }
    )


class SessionCreateResponse(BaseModel):
    id: str
    session_id: str


class SessionCloseResponse(BaseModel):
    id: str = Field(default_factory=new_correlation_id)


# ============================================================================
# COMPLETION MODELS
# ============================================================================


class StatComparison(BaseModel):
    """
    Structured alternative to a prompt: two players' numeric stats.

    Only stats present for both players are compared.
    """

    player1: dict[str, float]
    player2: dict[str, float]


class CompletionInputs(BaseModel):
    prompt: str | None = Field(default=None, description="Prompt text")
    stats: StatComparison | None = Field(default=None, description="Stat comparison input")
    temperature: float = Field(default=0.7, description="Passed through, not used")
    max_tokens: int | None = Field(default=None, ge=1, description="Cap on completion tokens")

    @model_validator(mode="after")
    def require_content(self) -> "CompletionInputs":
        if not self.has_prompt and self.stats is None:
            raise ValueError("inputs must contain a non-empty prompt or stats")
        return self

    @property
    def has_prompt(self) -> bool:
        return self.prompt is not None and self.prompt.strip() != ""


class CompletionRequest(BaseModel):
    """Body of POST /v1/text/completions and /v1/text/completions/stream."""

    id: str = Field(default_factory=new_correlation_id, description="Caller's request id")
    session_id: str = Field(..., min_length=1, description="Session opened via POST /v1/session")
    inputs: CompletionInputs
    stream: bool = Field(
        default=True,
        description="ND-JSON stream when true, single JSON document when false",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "req-002",
                "session_id": "3f0c1c9e-8d0a-4c55-9a57-54d1b3b1a0f1",
                "inputs": {"prompt": "Hello, world!", "temperature": 0.7, "max_tokens": 100},
            }
        }
    )

    @field_validator("session_id")
    @classmethod
    def strip_session_id(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("session_id cannot be blank")
        return v.strip()


class StatAnalysisResponse(BaseModel):
    id: str
    type: str = "stat-analysis-response"
    result: dict[str, str]
    history: list[dict[str, Any]]


# ============================================================================
# INITIALIZE HANDSHAKE
# ============================================================================


class ServerInfo(BaseModel):
    name: str
    version: str
    description: str


class InitializeResponse(BaseModel):
    id: str = Field(default_factory=new_correlation_id)
    object_type: str = "initialize-response"
    server: ServerInfo
    capabilities: list[str]


# ============================================================================
# ERROR ENVELOPE
# ============================================================================


class ErrorBody(BaseModel):
    code: ErrorCode
    message: str


class ErrorEnvelope(BaseModel):
    """Uniform error payload: {"id": ..., "error": {"code": ..., "message": ...}}."""

    id: str = Field(default_factory=new_correlation_id)
    error: ErrorBody


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
    "new_correlation_id",
]
