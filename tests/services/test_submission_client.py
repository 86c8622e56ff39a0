from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from app.models.question import ChoiceAnswer
from app.models.submission import Submission, submission_to_wire
from app.services.session_controller import (
    SessionContext,
    SubmissionFailedError,
    TimedSession,
)
from app.services.submission_client import SubmissionClient

BASE = "http://ats.test"

START_BODY = {
    "assessment": {
        "id": "a-1",
        "title": "Frontend screen",
        "createdBy": "sarah.johnson",
        "type": "auto",
        "categories": ["HTML"],
        "difficulty": ["easy"],
        "questionCount": 1,
        "timeLimit": 1,
        "passingScore": 70,
        "preventCheating": False,
    },
    "questions": [
        {
            "id": "q1",
            "question": "What does HTML stand for?",
            "category": "HTML",
            "difficulty": "easy",
            "options": ["a", "b", "c", "d"],
            "points": 2,
            "type": "mcq",
        }
    ],
}


class Recorder:
    def __init__(self, status_code: int = 201) -> None:
        self.status_code = status_code
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path.endswith("/start"):
            return httpx.Response(200, json=START_BODY)
        if self.status_code >= 400:
            return httpx.Response(self.status_code, json={"detail": "boom"})
        payload = json.loads(request.content)
        payload.update(id="sub-1", status="graded", score=2, maxScore=2, percentage=100)
        return httpx.Response(self.status_code, json=payload)


def _client(recorder: Recorder) -> SubmissionClient:
    return SubmissionClient(
        BASE, actor_id="cand-1", transport=httpx.MockTransport(recorder)
    )


def test_start_parses_assessment_and_withheld_keys() -> None:
    recorder = Recorder()

    async def scenario():
        async with _client(recorder) as client:
            return await client.start("a-1")

    assessment, questions = asyncio.run(scenario())

    assert assessment.id == "a-1"
    assert assessment.time_limit == 1
    assert assessment.prevent_cheating is False
    assert assessment.difficulty == ("easy",)
    assert [q.id for q in questions] == ["q1"]
    assert questions[0].correct_answer is None
    assert questions[0].points == 2

    sent = recorder.requests[0]
    assert sent.method == "POST"
    assert sent.url.path == "/v1/assessments/a-1/start"
    assert sent.headers["X-Actor-Id"] == "cand-1"
    assert sent.headers["X-Actor-Role"] == "candidate"


def test_submit_sends_wire_format_and_idempotency_key() -> None:
    recorder = Recorder()
    submission = Submission(
        assessment_id="a-1",
        candidate_id="cand-1",
        application_id="app-1",
        selected_questions=("q1",),
        answers={"q1": ChoiceAnswer(1)},
        status="submitted",
        idempotency_key="k-1",
    )

    async def scenario():
        async with _client(recorder) as client:
            return await client.submit(submission)

    stored = asyncio.run(scenario())

    sent = recorder.requests[0]
    assert sent.url.path == "/v1/assessment-submissions"
    assert sent.headers["Idempotency-Key"] == "k-1"
    assert json.loads(sent.content) == submission_to_wire(submission)
    assert stored.id == "sub-1"
    assert stored.status == "graded"
    assert stored.answers == {"q1": ChoiceAnswer(1)}


def test_submit_raises_on_server_error() -> None:
    recorder = Recorder(status_code=503)
    submission = Submission(assessment_id="a-1", candidate_id="c", application_id="x")

    async def scenario():
        async with _client(recorder) as client:
            await client.submit(submission)

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(scenario())
    assert "Idempotency-Key" not in recorder.requests[0].headers


def test_session_persists_through_client() -> None:
    recorder = Recorder()

    async def scenario() -> TimedSession:
        async with _client(recorder) as client:
            assessment, questions = await client.start("a-1")
            session = TimedSession(
                assessment,
                questions,
                SessionContext("cand-1", "app-1"),
                client.submit,
            )
            await session.start()
            session.answer("q1", 1)
            await session.submit()
            return session

    session = asyncio.run(scenario())

    assert session.state == "submitted"
    assert session.result is not None and session.result.id == "sub-1"
    body = json.loads(recorder.requests[-1].content)
    # Keys were withheld, so no client-side score is sent.
    assert body["score"] is None
    assert body["answers"] == {"q1": {"kind": "choice", "value": 1}}
    assert recorder.requests[-1].headers["Idempotency-Key"] == session.idempotency_key


def test_failed_submit_through_client_keeps_session_open() -> None:
    recorder = Recorder(status_code=500)

    async def scenario() -> TimedSession:
        async with _client(recorder) as client:
            assessment, questions = await client.start("a-1")
            session = TimedSession(
                assessment, questions, SessionContext("cand-1", "app-1"), client.submit
            )
            await session.start()
            with pytest.raises(SubmissionFailedError, match="500"):
                await session.submit()
            return session

    session = asyncio.run(scenario())
    assert session.state == "in_progress"
