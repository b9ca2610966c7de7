"""
Response Chunker

Splits a finished response body into an ordered list of DeltaChunks with
running usage accounting.

CHUNKING RULES:
---------------
1. Words accumulate into the open chunk. Once the chunk's words joined by
   single spaces, plus one trailing separator, exceed ``char_threshold``
   characters the chunk closes and a new one starts. A trailing partial
   chunk is kept.
2. Each chunk keeps the whitespace that preceded its words in the source, so
   concatenating every chunk's text gives back an exact prefix of the body
   and no chunk boundary falls inside a word.
3. A chunk costs its word count. A chunk is emitted only while the running
   total, including that chunk, stays within ``max_tokens``. The first chunk
   that would go over is dropped, its words are not counted, and emission
   stops with finish reason ``length``.
4. The last emitted chunk carries ``usage`` and the finish reason. If nothing
   could be emitted, a single empty control chunk carries them instead.

The chunker is a pure function of its inputs and builds the whole list
eagerly; the transport consumes it once.
"""

import re

from protocol_server.core.config.constants import FinishReason
from protocol_server.streaming.models import Delta, DeltaChunk, UsageStats

DEFAULT_CHAR_THRESHOLD = 10

# Leading whitespace + one word
_PIECE_PATTERN = re.compile(r"\s*\S+")


def count_tokens(text: str) -> int:
    """Approximate token count: whitespace-separated words."""
    return len(text.split())


class ResponseChunker:
    """
    Stateless splitter configured with a character threshold.

    Usage:
        chunker = ResponseChunker(char_threshold=10)
        chunks = chunker.split("Hello there! How can I assist you today?",
                               max_tokens=100, request_id="req-1",
                               prompt="Hello, world!")
    """

    def __init__(self, char_threshold: int = DEFAULT_CHAR_THRESHOLD):
        if char_threshold < 1:
            raise ValueError("char_threshold must be at least 1")
        self.char_threshold = char_threshold

    def _segments(self, full_text: str) -> list[tuple[str, int]]:
        """Group the body into (chunk_text, word_count) pairs."""
        segments: list[tuple[str, int]] = []
        pieces: list[str] = []
        words: list[str] = []

        for piece in _PIECE_PATTERN.findall(full_text):
            pieces.append(piece)
            words.append(piece.lstrip())
            if len(" ".join(words)) + 1 > self.char_threshold:
                segments.append(("".join(pieces), len(words)))
                pieces, words = [], []

        if pieces:
            segments.append(("".join(pieces), len(words)))

        return segments

    def split(
        self,
        full_text: str,
        max_tokens: int,
        request_id: str,
        prompt: str = "",
    ) -> list[DeltaChunk]:
        """
        Split ``full_text`` into delta chunks capped at ``max_tokens``.

        Args:
            full_text: Complete response body
            max_tokens: Cap on the summed word count of emitted chunks
            request_id: Caller's correlation id, copied onto every chunk
            prompt: Prompt text, used only for ``usage.prompt_tokens``

        Returns:
            Non-empty ordered list; the last element carries usage
        """
        if max_tokens < 1:
            raise ValueError("max_tokens must be at least 1")

        texts: list[str] = []
        completion_tokens = 0
        finish_reason = FinishReason.STOP

        for text, cost in self._segments(full_text):
            if completion_tokens + cost > max_tokens:
                finish_reason = FinishReason.LENGTH
                break
            completion_tokens += cost
            texts.append(text)

        usage = UsageStats.from_counts(count_tokens(prompt), completion_tokens)

        if not texts:
            return [
                DeltaChunk(
                    request_id=request_id,
                    delta=Delta(text="", finish_reason=finish_reason),
                    usage=usage,
                )
            ]

        chunks = [DeltaChunk(request_id=request_id, delta=Delta(text=text)) for text in texts[:-1]]
        chunks.append(
            DeltaChunk(
                request_id=request_id,
                delta=Delta(text=texts[-1], finish_reason=finish_reason),
                usage=usage,
            )
        )
        return chunks
