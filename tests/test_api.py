import asyncio

import pytest
from fastapi.testclient import TestClient

import app as app_module
from app import app
from talora_prep.api import InterviewPrepService, get_service

from conftest import PARTIAL_ANSWER, RecordingNotifier, STRONG_ANSWER


@pytest.fixture
def service(tmp_path):
    service = InterviewPrepService()
    assert service.initialize(use_llm=False, storage_dir=tmp_path / "sessions", notifier=RecordingNotifier())
    return service


@pytest.fixture
def client(service):
    app.dependency_overrides[get_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


def _start(client, **overrides):
    payload = {
        "candidate_id": "cand-1",
        "job_role": "Backend Developer",
        "skills": ["Python", "Docker"],
        "candidate_name": "Sam",
        "candidate_email": "sam@example.com",
        "max_questions": 2,
    }
    payload.update(overrides)
    return client.post("/interviews/start", json=payload)


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "llm_ready": False, "email_enabled": True}


def test_service_not_initialized_returns_503():
    app.dependency_overrides[get_service] = lambda: InterviewPrepService()
    try:
        response = _start(TestClient(app))
    finally:
        app.dependency_overrides.clear()
    assert response.status_code == 503


def test_full_interview_flow(client, service):
    started = _start(client)
    assert started.status_code == 200
    body = started.json()
    assert body["difficulty"] == "easy"
    assert body["question_number"] == 1
    session_id = body["session_id"]

    step = client.post(f"/interviews/{session_id}/answer", json={"transcript": PARTIAL_ANSWER})
    assert step.status_code == 200
    assert step.json()["end_interview"] is False
    assert step.json()["question_number"] == 2

    final = client.post(
        f"/interviews/{session_id}/answer",
        json={"transcript": [STRONG_ANSWER], "body_language": {"eye_contact": "high"}}
    )
    result = final.json()
    assert final.status_code == 200
    assert result["end_interview"] is True
    assert result["final_results"]["prep_score"] == 85
    assert result["final_results"]["status"] == "READY"
    assert "sent to your email" in result["closing_message"]
    assert "notification_sent" not in result
    assert len(service.notifier.sent) == 1


def test_answer_after_completion_conflicts(client):
    session_id = _start(client, max_questions=1).json()["session_id"]
    client.post(f"/interviews/{session_id}/answer", json={"transcript": STRONG_ANSWER})

    response = client.post(f"/interviews/{session_id}/answer", json={"transcript": STRONG_ANSWER})
    assert response.status_code == 409


def test_null_transcript_segments_are_treated_as_empty(client):
    session_id = _start(client).json()["session_id"]
    client.post(f"/interviews/{session_id}/answer", json={"transcript": [None, {"text": None}]})

    question = client.get(f"/interviews/{session_id}").json()["questions"][0]
    assert question["answer"] == ""
    assert question["penalty"] == 20


def test_unknown_session_is_404(client):
    assert client.get("/interviews/missing-session").status_code == 404
    assert client.post("/interviews/missing-session/answer", json={"transcript": "hi"}).status_code == 404


def test_session_view_hides_confidence_level(client):
    session_id = _start(client).json()["session_id"]
    client.post(f"/interviews/{session_id}/answer", json={"transcript": PARTIAL_ANSWER})

    view = client.get(f"/interviews/{session_id}").json()
    assert view["status"] == "in-progress"
    assert view["asked_count"] == 2
    assert view["questions"][0]["answer"] == PARTIAL_ANSWER
    assert view["questions"][0]["evaluation"] == "partial"
    assert all("confidence_level" not in q for q in view["questions"])
    assert view["final_results"] is None


def test_abandon_and_history(client):
    first = _start(client).json()["session_id"]
    second = _start(client, max_questions=1).json()["session_id"]
    client.post(f"/interviews/{second}/answer", json={"transcript": STRONG_ANSWER})

    abandoned = client.post(f"/interviews/{first}/abandon")
    assert abandoned.status_code == 200
    assert abandoned.json()["status"] == "abandoned"
    assert client.post(f"/interviews/{second}/abandon").status_code == 409

    history = client.get("/candidates/cand-1/interviews").json()
    assert [h["session_id"] for h in history] == [second, first]
    assert history[0]["prep_score"] == 95
    assert history[1]["prep_score"] is None


@pytest.mark.parametrize("overrides", [
    {"max_questions": 0},
    {"max_questions": 21},
    {"job_role": ""},
])
def test_invalid_start_request_is_rejected(client, overrides):
    assert _start(client, **overrides).status_code == 422


def test_practice_questions(client):
    response = client.post(
        "/practice/questions",
        json={"job_role": "Backend Developer", "skills": ["Python"], "difficulty": "hard", "count": 3}
    )
    body = response.json()
    assert response.status_code == 200
    assert body["difficulty"] == "hard"
    assert len(body["questions"]) == len(set(body["questions"])) == 3


def test_match(client):
    response = client.post("/match", json={
        "resume_text": "Backend developer with Python and PostgreSQL experience.",
        "job_description": "We need Python, Docker and AWS."
    })
    body = response.json()
    assert response.status_code == 200
    assert body["matching_skills"] == ["Python"]
    assert set(body["missing_skills"]) == {"Docker", "AWS"}
    assert body["match_score"] == 33


def test_match_upload_plain_text(client):
    response = client.post(
        "/match/upload",
        files={"file": ("resume.txt", b"Python and Docker engineer", "text/plain")},
        data={"job_description": "Python and Docker"}
    )
    assert response.status_code == 200
    assert response.json()["match_score"] == 100


@pytest.mark.parametrize("filename, content", [
    ("resume.docx", b"binary"),
    ("resume.txt", b""),
])
def test_match_upload_rejects_bad_files(client, filename, content):
    response = client.post(
        "/match/upload",
        files={"file": (filename, content, "application/octet-stream")},
        data={"job_description": "Python"}
    )
    assert response.status_code == 400


def test_match_upload_extracts_outside_event_loop(client, monkeypatch):
    ran_on_loop = []

    def fake_extract(content, filename):
        try:
            asyncio.get_running_loop()
            ran_on_loop.append(True)
        except RuntimeError:
            ran_on_loop.append(False)
        return "Python and Docker engineer"

    monkeypatch.setattr(app_module, "extract_text_from_bytes", fake_extract)
    response = client.post(
        "/match/upload",
        files={"file": ("resume.pdf", b"%PDF-1.4", "application/pdf")},
        data={"job_description": "Python and Docker"}
    )
    assert response.status_code == 200
    assert ran_on_loop == [False]
