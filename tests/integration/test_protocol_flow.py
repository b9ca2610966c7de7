"""
Integration Tests for the Protocol Flow

Drives a complete client conversation through the app with its lifespan
running: initialize, open a session, complete in every encoding, analyse
stats, close, and confirm the session is gone.
"""

import orjson
import pytest
from fastapi.testclient import TestClient

from protocol_server.application.app import create_app
from protocol_server.core.config.settings import Settings


@pytest.fixture
def live_client():
    app = create_app(Settings(STREAM_CHUNK_DELAY_SECONDS=0, LOG_FORMAT="json", LOG_LEVEL="DEBUG"))
    with TestClient(app) as client:
        yield client


@pytest.mark.integration
def test_full_session_conversation(live_client):
    init = live_client.post("/v1/initialize", json={"id": "init-1"})
    assert init.status_code == 200

    token = live_client.post("/oauth/token").json()["access_token"]
    opened = live_client.post(
        "/v1/session", json={"id": "open-1", "attributes": {"access_token": token}}
    )
    session_id = opened.json()["session_id"]

    ndjson = live_client.post(
        "/v1/text/completions",
        json={"id": "c-1", "session_id": session_id, "inputs": {"prompt": "What's the weather?"}},
    )
    lines = [orjson.loads(line) for line in ndjson.text.splitlines()]
    assert "".join(line["delta"]["text"] for line in lines).startswith("I don't have real-time")
    assert lines[-1]["delta"]["finish_reason"] == "stop"

    sse = live_client.post(
        "/v1/text/completions/stream",
        json={"id": "c-2", "session_id": session_id, "inputs": {"prompt": "hi", "max_tokens": 3}},
    )
    assert sse.text.endswith("data: [DONE]\n\n")
    assert '"finish_reason":"length"' in sse.text

    analysis = live_client.post(
        "/v1/text/completions",
        json={
            "id": "c-3",
            "session_id": session_id,
            "inputs": {"stats": {"player1": {"speed": 9}, "player2": {"speed": 9}}},
        },
    )
    assert analysis.json()["result"] == {"speed": "tie"}

    assert live_client.get("/health").json()["active_sessions"] == 1
    assert live_client.delete(f"/v1/session/{session_id}").status_code == 200

    after = live_client.post(
        "/v1/text/completions",
        json={"id": "c-4", "session_id": session_id, "inputs": {"prompt": "hello"}},
    )
    assert after.status_code == 400
    assert after.json()["error"]["code"] == "invalid_session"
