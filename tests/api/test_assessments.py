from __future__ import annotations

from fastapi.testclient import TestClient

from tests.conftest import (
    CANDIDATE_HEADERS,
    HR_HEADERS,
    make_assessment,
    make_question,
    store_assessment,
    store_questions,
)


def _seed_bank() -> None:
    store_questions(
        *(make_question(f"h{i}", "HTML", "easy") for i in range(5)),
        *(make_question(f"c{i}", "CSS", "medium") for i in range(5)),
        make_question("js1", "JavaScript", "hard"),
    )


# ---- create ----


def test_create_auto_assessment(client: TestClient) -> None:
    _seed_bank()
    resp = client.post(
        "/v1/assessments",
        json={
            "title": "Frontend screen",
            "categories": ["HTML", "CSS"],
            "difficulty": ["easy", "medium"],
            "questionCount": 4,
            "timeLimit": 30,
            "passingScore": 60,
            "jobId": "job-7",
        },
        headers=HR_HEADERS,
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["id"]
    assert data["type"] == "auto"
    assert data["questionCount"] == 4
    assert data["timeLimit"] == 30
    assert data["passingScore"] == 60
    assert data["preventCheating"] is True
    assert data["createdBy"] == "sarah.johnson"
    assert data["jobId"] == "job-7"

    listed = client.get("/v1/assessments").json()
    assert [a["id"] for a in listed] == [data["id"]]


def test_create_defaults(client: TestClient) -> None:
    _seed_bank()
    data = client.post(
        "/v1/assessments", json={"title": "Defaults"}, headers=HR_HEADERS
    ).json()
    assert data["questionCount"] == 20
    assert data["timeLimit"] == 60
    assert data["passingScore"] == 70
    assert data["difficulty"] == ["easy", "medium", "hard"]
    assert data["randomizeQuestions"] is True


def test_create_requires_actor(client: TestClient) -> None:
    _seed_bank()
    assert client.post("/v1/assessments", json={"title": "x"}).status_code == 401


def test_create_rejects_filters_with_no_questions(client: TestClient) -> None:
    _seed_bank()
    resp = client.post(
        "/v1/assessments",
        json={"title": "Backend", "categories": ["Go"]},
        headers=HR_HEADERS,
    )
    assert resp.status_code == 422
    assert "no questions match" in resp.json()["detail"]


def test_create_manual_with_unknown_question(client: TestClient) -> None:
    _seed_bank()
    resp = client.post(
        "/v1/assessments",
        json={"title": "Manual", "type": "manual", "questions": ["h1", "ghost"]},
        headers=HR_HEADERS,
    )
    assert resp.status_code == 422


def test_create_rejects_invalid_fields(client: TestClient) -> None:
    _seed_bank()
    for body in (
        {"title": "x", "questionCount": 0},
        {"title": "x", "timeLimit": 0},
        {"title": "x", "passingScore": 101},
        {"title": ""},
    ):
        resp = client.post("/v1/assessments", json=body, headers=HR_HEADERS)
        assert resp.status_code == 422, body


# ---- read / update ----


def test_get_assessment(client: TestClient) -> None:
    store_assessment(make_assessment("a-1", title="Screen"))
    resp = client.get("/v1/assessments/a-1")
    assert resp.status_code == 200
    assert resp.json()["title"] == "Screen"


def test_get_unknown_assessment(client: TestClient) -> None:
    assert client.get("/v1/assessments/nope").status_code == 404


def test_update_assessment(client: TestClient) -> None:
    _seed_bank()
    store_assessment(make_assessment("a-1", description="old", job_id="job-1"))

    resp = client.put(
        "/v1/assessments/a-1",
        json={"passingScore": 55, "description": None},
        headers=HR_HEADERS,
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["passingScore"] == 55
    assert data["description"] is None
    assert data["jobId"] == "job-1"


def test_update_to_unsatisfiable_filters_rejected(client: TestClient) -> None:
    _seed_bank()
    store_assessment(make_assessment("a-1"))
    resp = client.put(
        "/v1/assessments/a-1", json={"categories": ["Go"]}, headers=HR_HEADERS
    )
    assert resp.status_code == 422
    assert client.get("/v1/assessments/a-1").json()["categories"] == []


def test_update_unknown_assessment(client: TestClient) -> None:
    resp = client.put("/v1/assessments/nope", json={"title": "y"}, headers=HR_HEADERS)
    assert resp.status_code == 404


def test_list_filtered_by_job(client: TestClient) -> None:
    store_assessment(make_assessment("a-1", job_id="job-1", created_at=100))
    store_assessment(make_assessment("a-2", job_id="job-2", created_at=200))
    store_assessment(make_assessment("a-3", job_id="job-1", created_at=300))

    resp = client.get("/v1/assessments", params={"job_id": "job-1"})
    assert resp.status_code == 200
    assert [a["id"] for a in resp.json()] == ["a-3", "a-1"]

    assert client.get("/v1/assessments", params={"job_id": "job-9"}).json() == []
    assert len(client.get("/v1/assessments").json()) == 3


# ---- delete ----


def test_delete_assessment(client: TestClient) -> None:
    store_assessment(make_assessment("a-1"))
    resp = client.delete("/v1/assessments/a-1", headers=HR_HEADERS)
    assert resp.status_code == 204
    assert client.get("/v1/assessments/a-1").status_code == 404


def test_delete_unknown_assessment(client: TestClient) -> None:
    resp = client.delete("/v1/assessments/nope", headers=HR_HEADERS)
    assert resp.status_code == 404


def test_delete_requires_actor(client: TestClient) -> None:
    store_assessment(make_assessment("a-1"))
    assert client.delete("/v1/assessments/a-1").status_code == 401
    assert client.get("/v1/assessments/a-1").status_code == 200


def test_delete_refused_once_submissions_exist(client: TestClient) -> None:
    store_questions(make_question("q1", "HTML"))
    store_assessment(make_assessment("a-1"))
    submitted = client.post(
        "/v1/assessment-submissions",
        json={
            "assessmentId": "a-1",
            "candidateId": "cand-1",
            "applicationId": "app-1",
            "selectedQuestions": ["q1"],
            "answers": {},
            "timeSpent": 5,
            "startedAt": 1_760_000_000,
            "status": "submitted",
        },
        headers=CANDIDATE_HEADERS,
    )
    assert submitted.status_code == 201

    resp = client.delete("/v1/assessments/a-1", headers=HR_HEADERS)
    assert resp.status_code == 409
    assert client.get("/v1/assessments/a-1").status_code == 200


# ---- start ----


def test_start_draws_candidate_question_set(client: TestClient) -> None:
    _seed_bank()
    store_assessment(
        make_assessment("a-1", categories=("HTML",), difficulty=("easy",), question_count=3)
    )

    resp = client.post("/v1/assessments/a-1/start", headers=CANDIDATE_HEADERS)
    assert resp.status_code == 200
    data = resp.json()
    assert data["assessment"]["id"] == "a-1"
    questions = data["questions"]
    assert len(questions) == 3
    assert len({q["id"] for q in questions}) == 3
    assert all(q["category"] == "HTML" for q in questions)
    assert all("correctAnswer" not in q for q in questions)
    assert all("explanation" not in q for q in questions)


def test_start_manual_assessment_keeps_listed_questions(client: TestClient) -> None:
    _seed_bank()
    store_assessment(
        make_assessment(
            "a-1",
            type="manual",
            questions=("js1", "h0", "c0"),
            randomize_questions=False,
        )
    )
    resp = client.post("/v1/assessments/a-1/start", headers=CANDIDATE_HEADERS)
    assert [q["id"] for q in resp.json()["questions"]] == ["js1", "h0", "c0"]


def test_start_requires_actor(client: TestClient) -> None:
    store_assessment(make_assessment("a-1"))
    assert client.post("/v1/assessments/a-1/start").status_code == 401


def test_start_unknown_assessment(client: TestClient) -> None:
    resp = client.post("/v1/assessments/nope/start", headers=CANDIDATE_HEADERS)
    assert resp.status_code == 404


def test_start_when_bank_no_longer_matches(client: TestClient) -> None:
    store_assessment(make_assessment("a-1", categories=("Go",)))
    resp = client.post("/v1/assessments/a-1/start", headers=CANDIDATE_HEADERS)
    assert resp.status_code == 409
