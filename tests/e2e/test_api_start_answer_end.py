import pytest
from fastapi.testclient import TestClient

from api.deps import get_engine
from api_server import create_app
from fakes import AUDIO_B64, FIRST_QUESTION, FOLLOWUP_QUESTION


START_BODY = {"role": "backend", "level": "mid", "name": "Ana", "age": 29, "experience_years": 3}


@pytest.fixture
def client(engine):
    app = create_app()
    app.dependency_overrides[get_engine] = lambda: engine
    return TestClient(app)


def _start(client) -> str:
    resp = client.post("/api/session/start", json=START_BODY)
    assert resp.status_code == 200
    return resp.json()["session_id"]


def test_full_flow(client):
    start_resp = client.post("/api/session/start", json=START_BODY)
    assert start_resp.status_code == 200
    body = start_resp.json()
    assert body["first_question_text"] == FIRST_QUESTION
    assert body["interviewer_audio_url_or_base64"] == AUDIO_B64
    session_id = body["session_id"]

    answer_resp = client.post(f"/api/session/{session_id}/answer", json={"answer_text": "I'd use an index."})
    assert answer_resp.status_code == 200
    answer = answer_resp.json()
    assert answer["followup_question_text"] == FOLLOWUP_QUESTION
    assert answer["evaluation"]["score"] == 8.0
    assert answer["evaluation"]["followup_intent"] == "deepen"

    session_resp = client.get(f"/api/session/{session_id}")
    assert session_resp.status_code == 200
    snapshot = session_resp.json()
    assert snapshot["status"] == "awaiting_answer"
    assert len(snapshot["turns"]) == 2
    assert snapshot["rubric_scores"] == [8.0]

    end_resp = client.post(f"/api/session/{session_id}/end")
    assert end_resp.status_code == 200
    ended = end_resp.json()
    assert len(ended["final_report"]["rubric_breakdown"]) == 4
    assert ended["final_report"]["next_steps"]
    assert ended["live_scores"] == {"avg": 8.0, "median": 8.0, "max": 8.0}

    assert client.get(f"/api/session/{session_id}").json()["status"] == "ended"


def test_missing_fields_are_rejected(client):
    resp = client.post("/api/session/start", json={"role": "backend"})
    assert resp.status_code == 400
    assert resp.json() == {"detail": "Missing required fields"}

    session_id = _start(client)
    resp = client.post(f"/api/session/{session_id}/answer", json={})
    assert resp.status_code == 400


def test_invalid_values_are_rejected(client):
    resp = client.post("/api/session/start", json={**START_BODY, "level": "wizard"})
    assert resp.status_code == 400
    assert "level" in resp.json()["detail"]

    session_id = _start(client)
    resp = client.post(f"/api/session/{session_id}/answer", json={"answer_text": "  "})
    assert resp.status_code == 400


def test_unknown_session_is_404(client):
    assert client.post("/api/session/nope/answer", json={"answer_text": "x"}).status_code == 404
    assert client.post("/api/session/nope/end").status_code == 404
    assert client.get("/api/session/nope").status_code == 404


def test_ended_session_is_409(client):
    session_id = _start(client)
    assert client.post(f"/api/session/{session_id}/end").status_code == 200
    assert client.post(f"/api/session/{session_id}/answer", json={"answer_text": "x"}).status_code == 409
    assert client.post(f"/api/session/{session_id}/end").status_code == 409


def test_upstream_failure_is_502_and_retryable(client, generator):
    session_id = _start(client)
    generator.fail_on.add("evaluation")
    resp = client.post(f"/api/session/{session_id}/answer", json={"answer_text": "x"})
    assert resp.status_code == 502

    generator.fail_on.clear()
    resp = client.post(f"/api/session/{session_id}/answer", json={"answer_text": "x"})
    assert resp.status_code == 200
    assert client.get(f"/api/session/{session_id}").json()["rubric_scores"] == [8.0]


def test_malformed_generation_is_502(client, generator):
    generator.first = "   "
    resp = client.post("/api/session/start", json=START_BODY)
    assert resp.status_code == 502


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
