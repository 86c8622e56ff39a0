from __future__ import annotations

from fastapi.testclient import TestClient

from tests.conftest import HR_HEADERS

# ---- 404: undefined routes ----


def test_undefined_route_returns_404(client: TestClient) -> None:
    resp = client.get("/nonexistent")
    assert resp.status_code == 404
    assert resp.json() == {"detail": "Not Found"}


def test_undefined_nested_route_returns_404(client: TestClient) -> None:
    resp = client.get("/v2/assessments")
    assert resp.status_code == 404


# ---- 405: wrong HTTP method on existing routes ----


def test_patch_assessment_returns_405(client: TestClient) -> None:
    resp = client.patch("/v1/assessments/a-1", json={}, headers=HR_HEADERS)
    assert resp.status_code == 405


def test_put_health_returns_405(client: TestClient) -> None:
    resp = client.put("/health", json={"status": "bad"})
    assert resp.status_code == 405


def test_get_generate_assessment_is_a_question_lookup(client: TestClient) -> None:
    resp = client.get("/v1/question-bank/generate-assessment")
    # Matches GET /{question_id} instead; there is no such question.
    assert resp.status_code == 404


def test_get_start_returns_405(client: TestClient) -> None:
    resp = client.get("/v1/assessments/a-1/start")
    assert resp.status_code == 405


def test_submissions_collection_rejects_put(client: TestClient) -> None:
    resp = client.put("/v1/assessment-submissions", json={}, headers=HR_HEADERS)
    assert resp.status_code == 405
