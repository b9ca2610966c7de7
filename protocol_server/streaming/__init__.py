"""
Streaming pipeline: chunking a finished body and delivering it.
"""

from protocol_server.streaming.chunker import ResponseChunker, count_tokens
from protocol_server.streaming.models import Delta, DeltaChunk, UsageStats
from protocol_server.streaming.transport import StreamEncoding, StreamState, StreamTransport

__all__ = [
    "Delta",
    "DeltaChunk",
    "ResponseChunker",
    "StreamEncoding",
    "StreamState",
    "StreamTransport",
    "UsageStats",
    "count_tokens",
]
