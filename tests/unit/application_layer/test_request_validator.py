"""
Unit Tests for RequestValidator

Tests body decoding, model validation and session resolution.
"""

import orjson
import pytest

from protocol_server.application.api.models.protocol import SessionCreateRequest
from protocol_server.application.validators.request_validator import (
    RequestValidator,
    decode_body,
    parse_payload,
)
from protocol_server.core.config.constants import ErrorCode
from protocol_server.core.exceptions import InvalidRequestError, InvalidSessionError


def body(**payload) -> bytes:
    return orjson.dumps(payload)


@pytest.fixture
def validator(store):
    return RequestValidator(store)


@pytest.mark.unit
class TestBodyDecoding:
    """Test raw body handling."""

    @pytest.mark.parametrize("raw", [b"", b"   ", b"not json", b"{\"id\": ", b"[1, 2]", b"\"text\""])
    def test_unusable_bodies_rejected(self, raw):
        with pytest.raises(InvalidRequestError) as exc_info:
            decode_body(raw)

        assert exc_info.value.code is ErrorCode.INVALID_REQUEST

    def test_object_body_decoded(self):
        assert decode_body(b'{"id": "req-1"}') == {"id": "req-1"}

    def test_parse_payload_accepts_decoded_dict(self):
        parsed = parse_payload(SessionCreateRequest, {"id": "req-1"})

        assert parsed.id == "req-1"
        assert parsed.attributes.access_token is None

    def test_parse_payload_keeps_correlation_id(self):
        with pytest.raises(InvalidRequestError) as exc_info:
            parse_payload(SessionCreateRequest, {"id": "req-9", "attributes": "not-an-object"})

        assert exc_info.value.correlation_id == "req-9"
        assert exc_info.value.details["errors"]


@pytest.mark.unit
class TestCompletionValidation:
    """Test validation of completion requests."""

    def test_valid_prompt_request(self, validator, store):
        session_id = store.create()

        validated = validator.validate(
            body(id="req-1", session_id=session_id, inputs={"prompt": "Hello"})
        )

        assert validated.request.id == "req-1"
        assert validated.request.inputs.max_tokens is None
        assert validated.request.stream is True
        assert validated.session.id == session_id

    def test_valid_stats_request(self, validator, store):
        session_id = store.create()

        validated = validator.validate(
            {
                "session_id": session_id,
                "inputs": {"stats": {"player1": {"points": 10}, "player2": {"points": 12}}},
            }
        )

        assert validated.request.inputs.has_prompt is False
        assert validated.request.inputs.stats.player2 == {"points": 12.0}

    def test_missing_session_id(self, validator):
        with pytest.raises(InvalidRequestError) as exc_info:
            validator.validate(body(id="req-2", inputs={"prompt": "Hello"}))

        assert exc_info.value.correlation_id == "req-2"

    def test_blank_session_id(self, validator):
        with pytest.raises(InvalidRequestError):
            validator.validate(body(session_id="   ", inputs={"prompt": "Hello"}))

    def test_inputs_need_prompt_or_stats(self, validator, store):
        session_id = store.create()

        with pytest.raises(InvalidRequestError):
            validator.validate(body(session_id=session_id, inputs={"prompt": "  "}))

    def test_max_tokens_must_be_positive(self, validator, store):
        session_id = store.create()

        with pytest.raises(InvalidRequestError):
            validator.validate(body(session_id=session_id, inputs={"prompt": "Hi", "max_tokens": 0}))

    def test_require_prompt_rejects_stats_only(self, validator, store):
        session_id = store.create()

        with pytest.raises(InvalidRequestError) as exc_info:
            validator.validate(
                body(
                    id="req-3",
                    session_id=session_id,
                    inputs={"stats": {"player1": {}, "player2": {}}},
                ),
                require_prompt=True,
            )

        assert exc_info.value.correlation_id == "req-3"

    def test_unknown_session(self, validator):
        with pytest.raises(InvalidSessionError) as exc_info:
            validator.validate(body(id="req-4", session_id="missing", inputs={"prompt": "Hi"}))

        assert exc_info.value.code is ErrorCode.INVALID_SESSION
        assert exc_info.value.correlation_id == "req-4"
        assert exc_info.value.message == "Invalid or expired session ID"

    def test_expired_session(self, validator, store, clock):
        session_id = store.create()
        clock.advance(minutes=31)

        with pytest.raises(InvalidSessionError):
            validator.validate(body(session_id=session_id, inputs={"prompt": "Hi"}))

    def test_closed_session(self, validator, store):
        session_id = store.create()
        store.close(session_id)

        with pytest.raises(InvalidSessionError):
            validator.validate(body(session_id=session_id, inputs={"prompt": "Hi"}))

    def test_request_errors_checked_before_session(self, validator):
        # Unknown session AND malformed inputs: the body is rejected first
        with pytest.raises(InvalidRequestError):
            validator.validate(body(session_id="missing", inputs={}))
