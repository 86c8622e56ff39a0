"""HTTP client for the assessment API.

SubmissionClient.submit has the Submitter signature TimedSession expects,
so a candidate-side session persists through the REST API:

    async with SubmissionClient(base_url, actor_id=candidate_id) as client:
        assessment, questions = await client.start(assessment_id)
        session = TimedSession(assessment, questions, ctx, client.submit)
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from app.models.assessment import AssessmentDefinition
from app.models.question import Question, parse_answer
from app.models.submission import Submission, submission_from_wire, submission_to_wire

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = httpx.Timeout(10.0, connect=5.0)


class SubmissionClient:
    def __init__(
        self,
        base_url: str,
        *,
        actor_id: str,
        role: str | None = "candidate",
        timeout: httpx.Timeout = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {"X-Actor-Id": actor_id}
        if role:
            headers["X-Actor-Role"] = role
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> SubmissionClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def start(
        self, assessment_id: str
    ) -> tuple[AssessmentDefinition, list[Question]]:
        """Fetch the question set for a new attempt (answer keys withheld)."""
        resp = await self._client.post(f"/v1/assessments/{assessment_id}/start")
        resp.raise_for_status()
        body = resp.json()
        return _assessment_from_json(body["assessment"]), [
            _question_from_json(q) for q in body["questions"]
        ]

    async def submit(self, submission: Submission) -> Submission:
        """POST the submission; raises httpx.HTTPError on any failure."""
        headers = {}
        if submission.idempotency_key:
            headers["Idempotency-Key"] = submission.idempotency_key
        resp = await self._client.post(
            "/v1/assessment-submissions",
            json=submission_to_wire(submission),
            headers=headers,
        )
        resp.raise_for_status()
        stored = submission_from_wire(resp.json())
        logger.debug("Submission persisted id=%s status=%s", stored.id, stored.status)
        return stored


def _question_from_json(data: dict[str, Any]) -> Question:
    key = data.get("correctAnswer")
    correct = parse_answer(key) if key is not None else None
    return Question(
        id=data["id"],
        question=data["question"],
        category=data["category"],
        difficulty=data["difficulty"],
        options=tuple(data.get("options") or ()),
        correct_answer=correct,  # type: ignore[arg-type]
        explanation=data.get("explanation"),
        points=data.get("points") or 1,
        type=data.get("type", "mcq"),
        tags=tuple(data.get("tags") or ()),
    )


def _assessment_from_json(data: dict[str, Any]) -> AssessmentDefinition:
    return AssessmentDefinition(
        id=data["id"],
        title=data["title"],
        created_by=data.get("createdBy", ""),
        description=data.get("description"),
        type=data.get("type", "auto"),
        categories=tuple(data.get("categories") or ()),
        difficulty=tuple(data.get("difficulty") or ()),
        question_count=data.get("questionCount", 20),
        randomize_questions=data.get("randomizeQuestions", True),
        shuffle_options=data.get("shuffleOptions", True),
        questions=tuple(data.get("questions") or ()),
        time_limit=data.get("timeLimit", 60),
        passing_score=data.get("passingScore", 70),
        allow_review=data.get("allowReview", True),
        show_results=data.get("showResults", True),
        prevent_cheating=data.get("preventCheating", True),
        job_id=data.get("jobId"),
        created_at=data.get("createdAt", 0),
    )
