"""
Completion Service
==================

Produces response bodies for validated completion requests and prepares
them for delivery. There is no model inference here: text comes from a
small table of canned replies keyed on the prompt, and structured stat
inputs are answered by a deterministic comparison.

ARCHITECTURE:
-------------
Route → RequestValidator → CompletionService → ResponseChunker → StreamTransport

The service owns the chunker and the transport settings; routes only decide
which encoding to use and wrap the result in a response object.
"""

import re

from protocol_server.application.api.models.protocol import (
    CompletionRequest,
    StatAnalysisResponse,
    StatComparison,
)
from protocol_server.core.config.settings import Settings
from protocol_server.core.exceptions import InvalidSessionError
from protocol_server.core.logging.logger import get_logger
from protocol_server.session.store import SessionStore
from protocol_server.streaming.chunker import ResponseChunker
from protocol_server.streaming.models import DeltaChunk
from protocol_server.streaming.transport import StreamEncoding, StreamTransport

logger = get_logger(__name__)

GREETING_REPLY = "Hello there! How can I assist you today?"
WEATHER_REPLY = (
    "I don't have real-time weather data, but I can help you find a weather service!"
)
DEFAULT_REPLY = (
    "Thank you for your message. This is a demo protocol server, so I don't have real AI "
    "capabilities. In a production environment, this would connect to an actual language model."
)

_GREETING_WORDS = {"hello", "hi"}
_WORD_PATTERN = re.compile(r"[a-z']+")


def canned_reply(prompt: str) -> str:
    """Pick the canned reply for a prompt."""
    words = set(_WORD_PATTERN.findall(prompt.lower()))
    if words & _GREETING_WORDS:
        return GREETING_REPLY
    if "weather" in prompt.lower():
        return WEATHER_REPLY
    return DEFAULT_REPLY


def compare_stats(stats: StatComparison) -> dict[str, str]:
    """
    Compare two players stat by stat.

    Stats missing on either side are skipped. Values map to ``"player1"``,
    ``"player2"`` or ``"tie"``.
    """
    result: dict[str, str] = {}
    for stat, value in stats.player1.items():
        if stat not in stats.player2:
            continue
        other = stats.player2[stat]
        if value > other:
            result[stat] = "player1"
        elif value < other:
            result[stat] = "player2"
        else:
            result[stat] = "tie"
    return result


class CompletionService:
    """
    Turns validated requests into chunk lists and transports.

    USAGE:
    ------
    service = CompletionService(settings)
    chunks = service.build_chunks(request)
    transport = service.open_transport(StreamEncoding.SSE, request.id)
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.chunker = ResponseChunker(char_threshold=settings.streaming.CHUNK_CHAR_THRESHOLD)

    def generate_text(self, request: CompletionRequest) -> str:
        return canned_reply(request.inputs.prompt or "")

    def build_chunks(self, request: CompletionRequest) -> list[DeltaChunk]:
        """Generate the reply for ``request`` and split it into delta chunks."""
        max_tokens = request.inputs.max_tokens or self.settings.streaming.DEFAULT_MAX_TOKENS
        text = self.generate_text(request)
        chunks = self.chunker.split(
            text,
            max_tokens=max_tokens,
            request_id=request.id,
            prompt=request.inputs.prompt or "",
        )
        terminal = chunks[-1]
        logger.debug(
            "completion_chunked",
            correlation_id=request.id,
            chunk_count=len(chunks),
            finish_reason=terminal.finish_reason.value if terminal.finish_reason else None,
            total_tokens=terminal.usage.total_tokens if terminal.usage else None,
        )
        return chunks

    def open_transport(self, encoding: StreamEncoding, stream_id: str) -> StreamTransport:
        streaming = self.settings.streaming
        return StreamTransport(
            encoding,
            chunk_delay=streaming.STREAM_CHUNK_DELAY_SECONDS,
            max_duration=streaming.STREAM_MAX_DURATION_SECONDS,
            stream_id=stream_id,
        )

    def analyze_stats(self, request: CompletionRequest, store: SessionStore) -> StatAnalysisResponse:
        """
        Compare the request's stats and record the result on the session.

        The history is appended under the session's store lock and returned
        in full, oldest first.

        Raises:
            InvalidSessionError: If the session closed or expired after validation
        """
        result = compare_stats(request.inputs.stats)
        history = store.append_history(request.session_id, result)
        if history is None:
            raise InvalidSessionError(
                "Invalid or expired session ID",
                correlation_id=request.id,
                details={"session_id": request.session_id},
            )

        logger.info(
            "stat_analysis_completed",
            correlation_id=request.id,
            session_id=request.session_id,
            compared_stats=len(result),
            history_length=len(history),
        )
        return StatAnalysisResponse(id=request.id, result=result, history=history)
