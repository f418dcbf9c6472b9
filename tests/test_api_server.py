"""Tests for the FastAPI endpoints."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi.testclient import TestClient
import pytest

from quiz_portal.core.portal_backend import PortalBackend
from quiz_portal.server.api_server import create_api_app

from conftest import make_question


@pytest.fixture
def backend() -> PortalBackend:
    portal = PortalBackend()
    portal.register_user("student1@quizportal.com", "password123", "Student One")
    portal.register_user("student2@quizportal.com", "password123", "Student Two")
    portal.register_user("admin@quizportal.com", "adminpass", "Admin", is_admin=True)
    portal.load_questions([make_question("q1"), make_question("q2", correct=1, points=2)])
    return portal


@pytest.fixture
def api(backend) -> TestClient:
    return TestClient(create_api_app(backend))


def _login(api: TestClient, email: str, password: str) -> tuple[dict, dict]:
    response = api.post("/login", json={"email": email, "password": password})
    assert response.status_code == 200
    session = response.json()
    return session, {"Authorization": f"Bearer {session['token']}"}


def _result_body(user_id: str, email: str) -> dict:
    return {
        "user_id": user_id,
        "user_email": email,
        "answers": [
            {
                "question_id": "q1",
                "question_text": "Question q1?",
                "selected_option_index": -1,
                "selected_text": "No selection",
                "correct_option_text": "Alpha",
                "is_correct": False,
                "points_awarded": 0,
                "max_points": 1,
            }
        ],
        "total_points": 0,
        "max_possible_points": 1,
        "score_percentage": 0.0,
        "correct_answers": 0,
        "total_questions": 2,
        "answered_questions": 1,
        "completed_at": datetime.now(timezone.utc).isoformat(),
    }


def test_login_rejects_bad_credentials(api):
    response = api.post("/login", json={"email": "student1@quizportal.com", "password": "nope"})
    assert response.status_code == 401


def test_questions_require_bearer_token(api):
    assert api.get("/questions").status_code == 401
    assert api.get("/questions", headers={"Authorization": "Basic abc"}).status_code == 401

    _, headers = _login(api, "student1@quizportal.com", "password123")
    response = api.get("/questions", headers=headers)

    assert response.status_code == 200
    assert [q["id"] for q in response.json()] == ["q1", "q2"]
    assert response.json()[1]["points"] == 2


def test_submit_and_list_recent_results(api):
    session, headers = _login(api, "student1@quizportal.com", "password123")

    created = api.post("/results", json=_result_body(session["user_id"], session["email"]), headers=headers)
    assert created.status_code == 201
    result_id = created.json()["result_id"]

    recent = api.get("/results/recent", params={"limit": 5}, headers=headers)
    assert recent.status_code == 200
    body = recent.json()
    assert [r["result_id"] for r in body] == [result_id]
    assert body[0]["answers"][0]["selected_text"] == "No selection"

    _, other_headers = _login(api, "student2@quizportal.com", "password123")
    assert api.get("/results/recent", headers=other_headers).json() == []


def test_submitting_for_another_user_is_forbidden(api):
    _, headers = _login(api, "student1@quizportal.com", "password123")
    other, _ = _login(api, "student2@quizportal.com", "password123")

    response = api.post("/results", json=_result_body(other["user_id"], other["email"]), headers=headers)
    assert response.status_code == 403


def test_invalid_result_body_is_rejected(api):
    session, headers = _login(api, "student1@quizportal.com", "password123")
    body = _result_body(session["user_id"], session["email"])
    body["score_percentage"] = 150.0

    assert api.post("/results", json=body, headers=headers).status_code == 422


def test_admin_endpoints_require_admin(api):
    _, student_headers = _login(api, "student1@quizportal.com", "password123")
    _, admin_headers = _login(api, "admin@quizportal.com", "adminpass")
    new_question = {
        "id": "q3",
        "question_text": "Which keyword defines a function in Python?",
        "options": ["func", "def", "lambda", "fn"],
        "correct_option_index": 1,
    }

    assert api.get("/admin/results", headers=student_headers).status_code == 403
    assert api.post("/admin/questions", json=new_question, headers=student_headers).status_code == 403

    created = api.post("/admin/questions", json=new_question, headers=admin_headers)
    assert created.status_code == 201
    assert created.json()["time_limit_seconds"] == 30
    assert api.post("/admin/questions", json=new_question, headers=admin_headers).status_code == 422
    assert api.get("/admin/results", headers=admin_headers).status_code == 200


def test_logout_revokes_token(api):
    _, headers = _login(api, "student1@quizportal.com", "password123")

    assert api.post("/logout", headers=headers).status_code == 204
    assert api.get("/questions", headers=headers).status_code == 401
