"""
Unit Tests for CompletionService

Tests canned replies, stat comparison and chunk preparation.
"""

import pytest

from protocol_server.application.api.models.protocol import CompletionRequest, StatComparison
from protocol_server.application.services.completion_service import (
    DEFAULT_REPLY,
    GREETING_REPLY,
    WEATHER_REPLY,
    CompletionService,
    canned_reply,
    compare_stats,
)
from protocol_server.core.config.constants import FinishReason
from protocol_server.core.config.settings import Settings
from protocol_server.core.exceptions import InvalidSessionError
from protocol_server.streaming.transport import StreamEncoding, StreamState


@pytest.fixture
def service():
    return CompletionService(Settings(STREAM_CHUNK_DELAY_SECONDS=0, DEFAULT_MAX_TOKENS=100))


def completion_request(**inputs) -> CompletionRequest:
    return CompletionRequest(id="req-1", session_id="s-1", inputs=inputs)


@pytest.mark.unit
class TestCannedReplies:
    """Test prompt → reply selection."""

    @pytest.mark.parametrize("prompt", ["Hello, world!", "hi there", "Well HELLO"])
    def test_greetings(self, prompt):
        assert canned_reply(prompt) == GREETING_REPLY

    def test_greeting_word_must_stand_alone(self):
        assert canned_reply("this is a thing") == DEFAULT_REPLY

    def test_weather(self):
        assert canned_reply("What's the weather like?") == WEATHER_REPLY

    def test_default(self):
        assert canned_reply("Tell me a story") == DEFAULT_REPLY


@pytest.mark.unit
class TestStatComparison:
    """Test deterministic stat analysis."""

    def test_compare_stats_per_stat_winner(self):
        stats = StatComparison(
            player1={"points": 30, "rebounds": 5, "assists": 7},
            player2={"points": 25, "rebounds": 8, "assists": 7, "steals": 2},
        )

        assert compare_stats(stats) == {
            "points": "player1",
            "rebounds": "player2",
            "assists": "tie",
        }

    def test_analyze_stats_appends_history(self, service, store):
        session_id = store.create()
        request = CompletionRequest(
            id="req-1",
            session_id=session_id,
            inputs={"stats": {"player1": {"points": 1}, "player2": {"points": 2}}},
        )

        first = service.analyze_stats(request, store)
        second = service.analyze_stats(request, store)

        assert first.result == {"points": "player2"}
        assert len(first.history) == 1
        assert len(second.history) == 2
        assert store.lookup(session_id).analysis_history == [{"points": "player2"}, {"points": "player2"}]
        assert second.type == "stat-analysis-response"

    def test_analyze_stats_on_closed_session_raises(self, service, store):
        session_id = store.create()
        store.close(session_id)
        request = CompletionRequest(
            id="req-5",
            session_id=session_id,
            inputs={"stats": {"player1": {"points": 1}, "player2": {"points": 2}}},
        )

        with pytest.raises(InvalidSessionError) as exc_info:
            service.analyze_stats(request, store)

        assert exc_info.value.correlation_id == "req-5"


@pytest.mark.unit
class TestChunkPreparation:
    """Test chunk and transport construction."""

    def test_build_chunks_uses_default_max_tokens(self, service):
        chunks = service.build_chunks(completion_request(prompt="Tell me a story"))

        assert "".join(chunk.text for chunk in chunks) == DEFAULT_REPLY
        assert chunks[-1].finish_reason is FinishReason.STOP

    def test_build_chunks_honours_max_tokens(self, service):
        chunks = service.build_chunks(completion_request(prompt="Tell me a story", max_tokens=5))

        assert chunks[-1].finish_reason is FinishReason.LENGTH
        assert chunks[-1].usage.completion_tokens <= 5
        assert chunks[-1].usage.prompt_tokens == 4

    def test_open_transport_uses_settings(self, service):
        transport = service.open_transport(StreamEncoding.SSE, stream_id="req-1")

        assert transport.chunk_delay == 0
        assert transport.max_duration == 300.0
        assert transport.stream_id == "req-1"
        assert transport.state is StreamState.NOT_STARTED
