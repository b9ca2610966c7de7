"""
Stream Transport

Delivers a chunk sequence to the client as ND-JSON or SSE.

WIRE ENCODINGS:
---------------
ND-JSON (``application/x-ndjson``): one JSON object per line

    {"id":"req-1","delta":{"text":"Hello there!"}}\\n

SSE (``text/event-stream``): one ``data:`` event per chunk, then a sentinel

    data: {"id":"req-1","delta":{"text":"Hello there!"}}\\n\\n
    data: [DONE]\\n\\n

STREAM LIFECYCLE:
-----------------
NOT_STARTED → STREAMING → COMPLETED
                        → CANCELLED   (consumer closed the stream, the client
                                       disconnected, or max_duration elapsed)

Delivery is a cooperative async generator: it yields one frame, sleeps for
the pacing delay, yields the next. Closing the generator (``aclose()``), or
the ASGI server cancelling the response task when the client goes away,
interrupts the pending sleep; nothing further is written.
"""

import asyncio
import time
import uuid
from collections.abc import AsyncGenerator, Callable, Iterable
from enum import Enum
from typing import Any

import orjson
from pydantic import BaseModel, ConfigDict

from protocol_server.core.config.constants import (
    MEDIA_TYPE_NDJSON,
    MEDIA_TYPE_SSE,
    SSE_DONE_SENTINEL,
)
from protocol_server.core.logging.logger import get_logger, get_request_id
from protocol_server.streaming.models import DeltaChunk

logger = get_logger(__name__)

DEFAULT_CHUNK_DELAY = 0.1
DEFAULT_MAX_DURATION = 300.0


class StreamState(str, Enum):
    """Lifecycle states of one delivery."""

    NOT_STARTED = "not_started"
    STREAMING = "streaming"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class StreamEncoding(str, Enum):
    """Wire framing used by a transport."""

    NDJSON = "ndjson"
    SSE = "sse"


class SSEEvent(BaseModel):
    """
    Represents an SSE event to send to client.

    Only ``data`` is required; ``event`` and ``id`` lines are written when set.
    """

    model_config = ConfigDict(frozen=True)

    data: Any
    event: str | None = None
    id: str | None = None

    def format(self) -> str:
        """Format as SSE protocol string."""
        lines = []
        if self.id:
            lines.append(f"id: {self.id}")
        if self.event:
            lines.append(f"event: {self.event}")

        if isinstance(self.data, str):
            lines.append(f"data: {self.data}")
        else:
            lines.append(f"data: {orjson.dumps(self.data).decode('utf-8')}")

        return "\n".join(lines) + "\n\n"


def encode_ndjson(chunk: DeltaChunk) -> str:
    """Serialize one chunk as an ND-JSON line."""
    return orjson.dumps(chunk.to_wire()).decode("utf-8") + "\n"


def encode_sse(chunk: DeltaChunk) -> str:
    """Serialize one chunk as an SSE ``data:`` event."""
    return SSEEvent(data=chunk.to_wire()).format()


def encode_json(chunk: DeltaChunk) -> bytes:
    """Serialize one chunk as a standalone JSON document."""
    return orjson.dumps(chunk.to_wire())


class StreamTransport:
    """
    Paced, cancellable delivery of one chunk sequence.

    One instance serves exactly one stream.

    Usage:
        transport = StreamTransport(StreamEncoding.SSE, chunk_delay=0.1)
        return StreamingResponse(
            transport.stream(chunks),
            media_type=transport.media_type,
            headers=transport.headers,
        )
    """

    def __init__(
        self,
        encoding: StreamEncoding,
        chunk_delay: float = DEFAULT_CHUNK_DELAY,
        max_duration: float | None = DEFAULT_MAX_DURATION,
        stream_id: str | None = None,
        request_id: str | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            encoding: ND-JSON or SSE framing
            chunk_delay: Seconds to wait between consecutive chunks (0 disables pacing)
            max_duration: Upper bound on delivery time in seconds (None disables)
            stream_id: Identifier used in log events
            request_id: Request id for log events (defaults to the one bound when constructed)
            clock: Monotonic time source
        """
        if chunk_delay < 0:
            raise ValueError("chunk_delay must not be negative")

        self.encoding = encoding
        self.chunk_delay = chunk_delay
        self.max_duration = max_duration
        self.stream_id = stream_id or str(uuid.uuid4())
        self.request_id = request_id or get_request_id()
        self._clock = clock
        self._state = StreamState.NOT_STARTED
        self._chunks_sent = 0

    @property
    def _log_context(self) -> dict[str, Any]:
        context = {"stream_id": self.stream_id}
        if self.request_id:
            context["request_id"] = self.request_id
        return context

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def chunks_sent(self) -> int:
        return self._chunks_sent

    @property
    def media_type(self) -> str:
        if self.encoding is StreamEncoding.SSE:
            return MEDIA_TYPE_SSE
        return MEDIA_TYPE_NDJSON

    @property
    def headers(self) -> dict[str, str]:
        if self.encoding is StreamEncoding.SSE:
            return {
                "Cache-Control": "no-cache",
                "Connection": "keep-alive",
                "X-Accel-Buffering": "no",
            }
        return {"X-Accel-Buffering": "no"}

    def _frame(self, chunk: DeltaChunk) -> str:
        if self.encoding is StreamEncoding.SSE:
            return encode_sse(chunk)
        return encode_ndjson(chunk)

    async def stream(self, chunks: Iterable[DeltaChunk]) -> AsyncGenerator[str, None]:
        """
        Yield framed chunks in order, pacing them by ``chunk_delay``.

        Raises:
            RuntimeError: If this transport already delivered a stream
        """
        if self._state is not StreamState.NOT_STARTED:
            raise RuntimeError(f"stream {self.stream_id} already {self._state.value}")

        self._state = StreamState.STREAMING
        started = self._clock()
        logger.debug("stream_started", **self._log_context, encoding=self.encoding.value)

        try:
            for index, chunk in enumerate(chunks):
                if index and self.chunk_delay:
                    await asyncio.sleep(self.chunk_delay)

                if self.max_duration is not None and self._clock() - started > self.max_duration:
                    logger.warning(
                        "stream_duration_exceeded",
                        **self._log_context,
                        max_duration=self.max_duration,
                        chunks_sent=self._chunks_sent,
                    )
                    self._state = StreamState.CANCELLED
                    return

                frame = self._frame(chunk)
                self._chunks_sent += 1
                yield frame

            if self.encoding is StreamEncoding.SSE:
                yield SSE_DONE_SENTINEL

            self._state = StreamState.COMPLETED
            logger.debug("stream_completed", **self._log_context, chunks_sent=self._chunks_sent)

        finally:
            # Still STREAMING: aclose() or task cancellation interrupted delivery
            if self._state is StreamState.STREAMING:
                self._state = StreamState.CANCELLED
                logger.info(
                    "stream_cancelled",
                    **self._log_context,
                    chunks_sent=self._chunks_sent,
                )
