"""
FastAPI endpoint tests. Uses TestClient (no real HTTP server needed);
the SessionStore is injected with a fake generator, so no Gemini calls.
"""

import pytest
from fastapi.testclient import TestClient

from aicodeexplainer.api.dependencies import get_store
from aicodeexplainer.main import app
from aicodeexplainer.services.errors import CredentialError, TransportOrServiceError
from aicodeexplainer.services.generation_service import GenerationService
from aicodeexplainer.services.interaction_controller import (
    EMPTY_INPUT_MESSAGE,
    GENERIC_ERROR_MESSAGE,
    INVALID_KEY_MESSAGE,
    ControllerState,
    InteractionController,
)


def open_session(client, code=None):
    r = client.post("/sessions")
    assert r.status_code == 201, r.text
    session_id = r.json()["session_id"]
    if code is not None:
        assert client.put(f"/sessions/{session_id}/source", json={"source_code": code}).status_code == 200
    return session_id


class TestHealthAndLanguages:

    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json() == {"status": "ok", "service": "aicodeexplainer"}

    def test_languages(self, client):
        body = client.get("/languages").json()
        assert body["languages"] == ["Python", "JavaScript", "Java", "C++", "PHP", "Go"]
        assert body["default"] == "Python"


class TestSessions:

    def test_new_session_state(self, client):
        body = client.post("/sessions").json()
        assert body["source_code"] == ""
        assert body["target_language"] == "Python"
        assert body["output_text"] == ""
        assert body["loading"] is False

    def test_unknown_session(self, client):
        assert client.get("/sessions/nope").status_code == 404
        assert client.post("/sessions/nope/actions/explain").status_code == 404
        assert client.delete("/sessions/nope").status_code == 404

    def test_update_source_and_language(self, client):
        session_id = open_session(client, code="print(1)")
        r = client.put(f"/sessions/{session_id}/language", json={"target_language": "C++"})
        assert r.status_code == 200
        body = client.get(f"/sessions/{session_id}").json()
        assert body["source_code"] == "print(1)"
        assert body["target_language"] == "C++"

    def test_invalid_language(self, client):
        session_id = open_session(client)
        r = client.put(f"/sessions/{session_id}/language", json={"target_language": "Rust"})
        assert r.status_code == 422

    def test_delete_tears_down(self, client, store):
        session_id = open_session(client)
        keyboard = store.get(session_id).keyboard
        assert client.delete(f"/sessions/{session_id}").status_code == 204
        assert keyboard.listener_count == 0
        assert client.get(f"/sessions/{session_id}").status_code == 404


class TestActions:

    def test_explain(self, client, generator):
        session_id = open_session(client, code="x = 1")
        r = client.post(f"/sessions/{session_id}/actions/explain")
        assert r.status_code == 200
        assert r.json()["output_text"] == "Hello"
        assert r.json()["loading"] is False
        assert generator.prompts == ["Explain this code logic line by line in simple terms: \n\nx = 1"]

    def test_convert(self, client, generator):
        session_id = open_session(client, code="print(1)")
        client.put(f"/sessions/{session_id}/language", json={"target_language": "Go"})
        client.post(f"/sessions/{session_id}/actions/convert")
        assert generator.prompts == [
            "Strictly convert this code to Go. Only provide the code, no extra text: \n\nprint(1)"
        ]

    def test_empty_code(self, client, generator):
        session_id = open_session(client, code="  \n ")
        r = client.post(f"/sessions/{session_id}/actions/explain")
        assert r.status_code == 422
        assert r.json()["detail"] == EMPTY_INPUT_MESSAGE
        assert generator.prompts == []

    def test_unknown_intent(self, client):
        session_id = open_session(client, code="x")
        assert client.post(f"/sessions/{session_id}/actions/summarize").status_code == 422

    def test_busy_session(self, client, store, generator):
        session_id = open_session(client)
        store.get(session_id).controller = InteractionController(
            generator, ControllerState(source_code="x", loading=True),
        )
        r = client.post(f"/sessions/{session_id}/actions/explain")
        assert r.status_code == 409
        assert generator.prompts == []

    def test_invalid_key_is_sanitized(self, client, generator):
        generator.error = CredentialError("API key not valid: AIzaSECRET")
        session_id = open_session(client, code="x")
        body = client.post(f"/sessions/{session_id}/actions/explain").json()
        assert body["output_text"] == INVALID_KEY_MESSAGE
        assert "SECRET" not in body["output_text"]

    def test_service_failure_is_sanitized(self, client, generator):
        generator.error = TransportOrServiceError("503 UNAVAILABLE internal detail")
        session_id = open_session(client, code="x")
        body = client.post(f"/sessions/{session_id}/actions/convert").json()
        assert body["output_text"] == GENERIC_ERROR_MESSAGE


class TestKeys:

    def test_ctrl_enter_explains(self, client, generator):
        session_id = open_session(client, code="print(1)")
        r = client.post(f"/sessions/{session_id}/keys", json={"key": "Enter", "ctrl_key": True})
        assert r.status_code == 200
        assert r.json()["handled"] is True
        assert r.json()["state"]["output_text"] == "Hello"
        assert len(generator.prompts) == 1

    def test_plain_enter_ignored(self, client, generator):
        session_id = open_session(client, code="print(1)")
        r = client.post(f"/sessions/{session_id}/keys", json={"key": "Enter"})
        assert r.json()["handled"] is False
        assert generator.prompts == []

    def test_whitespace_code_reports_warning(self, client, generator):
        session_id = open_session(client, code="   ")
        r = client.post(f"/sessions/{session_id}/keys", json={"key": "Enter", "ctrl_key": True})
        assert r.status_code == 422
        assert r.json()["detail"] == EMPTY_INPUT_MESSAGE
        assert generator.prompts == []


class TestLifespan:

    def test_startup_and_shutdown(self):
        # TestClient must be used as context manager to trigger lifespan
        with TestClient(app) as client:
            store = get_store()
            assert isinstance(store.generator, GenerationService)

            session_id = client.post("/sessions").json()["session_id"]
            keyboard = store.get(session_id).keyboard
            assert keyboard.listener_count == 1

        assert len(store) == 0
        assert keyboard.listener_count == 0
        with pytest.raises(RuntimeError, match="not initialised"):
            get_store()
