from __future__ import annotations

from fastapi.testclient import TestClient

from tests.conftest import (
    CANDIDATE_HEADERS,
    HR_HEADERS,
    make_question,
    store_questions,
)


def _question_body(**overrides) -> dict:
    body = {
        "question": "Which tag creates a hyperlink?",
        "category": "HTML",
        "difficulty": "easy",
        "options": ["<a>", "<link>", "<href>", "<url>"],
        "correctAnswer": {"kind": "choice", "value": 0},
        "explanation": "<a> defines a hyperlink.",
        "points": 2,
    }
    body.update(overrides)
    return body


# ---- create ----


def test_create_question_returns_full_record(client: TestClient) -> None:
    resp = client.post("/v1/question-bank", json=_question_body(), headers=HR_HEADERS)
    assert resp.status_code == 201
    data = resp.json()
    assert data["id"]
    assert data["correctAnswer"] == {"kind": "choice", "value": 0}
    assert data["createdBy"] == "sarah.johnson"
    assert data["tags"] == ["html", "easy"]
    assert data["type"] == "mcq"
    assert data["createdAt"] > 0


def test_create_question_accepts_bare_index_key(client: TestClient) -> None:
    resp = client.post(
        "/v1/question-bank", json=_question_body(correctAnswer=2), headers=HR_HEADERS
    )
    assert resp.status_code == 201
    assert resp.json()["correctAnswer"] == {"kind": "choice", "value": 2}


def test_create_question_requires_actor(client: TestClient) -> None:
    resp = client.post("/v1/question-bank", json=_question_body())
    assert resp.status_code == 401


def test_create_question_rejects_key_out_of_range(client: TestClient) -> None:
    resp = client.post(
        "/v1/question-bank", json=_question_body(correctAnswer=4), headers=HR_HEADERS
    )
    assert resp.status_code == 422


def test_create_question_rejects_malformed_key(client: TestClient) -> None:
    resp = client.post(
        "/v1/question-bank", json=_question_body(correctAnswer="A"), headers=HR_HEADERS
    )
    assert resp.status_code == 422


def test_create_question_rejects_unknown_difficulty(client: TestClient) -> None:
    resp = client.post(
        "/v1/question-bank", json=_question_body(difficulty="expert"), headers=HR_HEADERS
    )
    assert resp.status_code == 422


def test_bulk_create(client: TestClient) -> None:
    resp = client.post(
        "/v1/question-bank/bulk",
        json=[_question_body(), _question_body(category="CSS")],
        headers=HR_HEADERS,
    )
    assert resp.status_code == 201
    assert [q["category"] for q in resp.json()] == ["HTML", "CSS"]
    assert len(client.get("/v1/question-bank").json()) == 2


# ---- read ----


def test_list_filters_by_category_and_difficulty(client: TestClient) -> None:
    store_questions(
        make_question("q1", "HTML", "easy"),
        make_question("q2", "CSS", "easy"),
        make_question("q3", "CSS", "hard"),
        make_question("q4", "React", "medium"),
    )

    resp = client.get(
        "/v1/question-bank",
        params=[("category", "CSS"), ("category", "HTML"), ("difficulty", "easy")],
    )
    assert resp.status_code == 200
    assert sorted(q["id"] for q in resp.json()) == ["q1", "q2"]

    assert len(client.get("/v1/question-bank").json()) == 4


def test_candidate_view_withholds_key_and_explanation(client: TestClient) -> None:
    store_questions(make_question("q1"))

    hr = client.get("/v1/question-bank/q1", headers=HR_HEADERS).json()
    candidate = client.get("/v1/question-bank/q1", headers=CANDIDATE_HEADERS).json()

    assert hr["correctAnswer"] == {"kind": "choice", "value": 0}
    assert hr["explanation"] == "Because q1."
    assert "correctAnswer" not in candidate
    assert "explanation" not in candidate
    assert candidate["options"] == ["a", "b", "c", "d"]


def test_get_unknown_question_is_404(client: TestClient) -> None:
    assert client.get("/v1/question-bank/nope").status_code == 404


def test_list_by_category(client: TestClient) -> None:
    store_questions(make_question("q1", "HTML"), make_question("q2", "CSS"))
    resp = client.get("/v1/question-bank/category/CSS")
    assert [q["id"] for q in resp.json()] == ["q2"]


def test_categories_are_sorted_and_distinct(client: TestClient) -> None:
    store_questions(
        make_question("q1", "React"),
        make_question("q2", "CSS"),
        make_question("q3", "CSS"),
    )
    assert client.get("/v1/question-bank/categories").json() == ["CSS", "React"]


# ---- generate ----


def test_generate_assessment_set(client: TestClient) -> None:
    store_questions(*(make_question(f"q{i}", "HTML", "easy") for i in range(6)))
    store_questions(make_question("other", "CSS", "easy"))

    resp = client.post(
        "/v1/question-bank/generate-assessment",
        json={"categories": ["HTML"], "difficulties": ["easy"], "count": 4},
        headers=CANDIDATE_HEADERS,
    )
    assert resp.status_code == 200
    data = resp.json()
    assert len(data) == 4
    assert len({q["id"] for q in data}) == 4
    assert all(q["category"] == "HTML" for q in data)
    assert all("correctAnswer" not in q for q in data)


def test_generate_returns_short_set_when_pool_small(client: TestClient) -> None:
    store_questions(make_question("q1"), make_question("q2"))
    resp = client.post(
        "/v1/question-bank/generate-assessment",
        json={"categories": [], "difficulties": [], "count": 10},
    )
    assert sorted(q["id"] for q in resp.json()) == ["q1", "q2"]


def test_generate_with_no_match_is_empty(client: TestClient) -> None:
    store_questions(make_question("q1", "HTML"))
    resp = client.post(
        "/v1/question-bank/generate-assessment",
        json={"categories": ["Rust"], "count": 3},
    )
    assert resp.status_code == 200
    assert resp.json() == []


def test_generate_rejects_negative_count(client: TestClient) -> None:
    resp = client.post("/v1/question-bank/generate-assessment", json={"count": -1})
    assert resp.status_code == 422


# ---- update / delete ----


def test_update_question(client: TestClient) -> None:
    store_questions(make_question("q1"))
    resp = client.put(
        "/v1/question-bank/q1",
        json={"points": 5, "correctAnswer": {"kind": "choice", "value": 3}},
        headers=HR_HEADERS,
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["points"] == 5
    assert data["correctAnswer"] == {"kind": "choice", "value": 3}
    assert data["question"] == "Question q1?"


def test_update_rejects_key_outside_new_options(client: TestClient) -> None:
    store_questions(make_question("q1", correct=3))
    resp = client.put(
        "/v1/question-bank/q1", json={"options": ["x", "y"]}, headers=HR_HEADERS
    )
    assert resp.status_code == 422


def test_update_unknown_question_is_404(client: TestClient) -> None:
    resp = client.put("/v1/question-bank/nope", json={"points": 2}, headers=HR_HEADERS)
    assert resp.status_code == 404


def test_delete_question(client: TestClient) -> None:
    store_questions(make_question("q1"))
    assert client.delete("/v1/question-bank/q1").status_code == 401
    assert client.delete("/v1/question-bank/q1", headers=HR_HEADERS).status_code == 204
    assert client.get("/v1/question-bank/q1").status_code == 404
    assert client.delete("/v1/question-bank/q1", headers=HR_HEADERS).status_code == 404
