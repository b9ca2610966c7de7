"""
Streaming data models.

DeltaChunk is the unit the chunker produces and the transport delivers. Wire
shape (absent optional fields are omitted, never sent as null):

    {"id": "<request id>", "delta": {"text": "...", "finish_reason": "stop"},
     "usage": {"prompt_tokens": 3, "completion_tokens": 9, "total_tokens": 12}}
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from protocol_server.core.config.constants import FinishReason


class UsageStats(BaseModel):
    """
    Approximate token accounting for one completion.

    Counts are word counts, not tokenizer output.
    """

    model_config = ConfigDict(frozen=True)

    prompt_tokens: int = Field(..., ge=0)
    completion_tokens: int = Field(..., ge=0)
    total_tokens: int = Field(..., ge=0)

    @classmethod
    def from_counts(cls, prompt_tokens: int, completion_tokens: int) -> "UsageStats":
        return cls(
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=prompt_tokens + completion_tokens,
        )

    @model_validator(mode="after")
    def check_total(self) -> "UsageStats":
        if self.total_tokens != self.prompt_tokens + self.completion_tokens:
            raise ValueError("total_tokens must equal prompt_tokens + completion_tokens")
        return self


class Delta(BaseModel):
    """Text increment plus the finish reason on the terminal chunk."""

    model_config = ConfigDict(frozen=True)

    text: str = ""
    finish_reason: FinishReason | None = None


class DeltaChunk(BaseModel):
    """
    One incremental unit of a completion response.

    ``finish_reason`` and ``usage`` are only ever set on the terminal chunk.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    request_id: str = Field(..., serialization_alias="id")
    delta: Delta = Field(default_factory=Delta)
    usage: UsageStats | None = None

    @property
    def text(self) -> str:
        return self.delta.text

    @property
    def finish_reason(self) -> FinishReason | None:
        return self.delta.finish_reason

    @property
    def is_terminal(self) -> bool:
        return self.usage is not None

    def to_wire(self) -> dict[str, Any]:
        """Dump with wire field names, dropping unset optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
