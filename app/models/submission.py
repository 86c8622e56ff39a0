"""Assessment submission record and its JSON wire format.

The wire format uses camelCase keys:

    assessmentId, candidateId, applicationId, selectedQuestions, answers,
    score, maxScore, percentage, categoryScores, timeSpent, status,
    startedAt, submittedAt

plus id, gradedAt, flagged, passed and idempotencyKey.  Timestamps are
epoch seconds.  submission_from_wire(submission_to_wire(s)) == s.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from app.models.question import AnswerValue, answer_to_json, parse_answer

SubmissionStatus = Literal["pending", "in_progress", "submitted", "graded"]
SUBMISSION_STATUSES: tuple[SubmissionStatus, ...] = (
    "pending",
    "in_progress",
    "submitted",
    "graded",
)


@dataclass(frozen=True, slots=True)
class Submission:
    assessment_id: str
    candidate_id: str
    application_id: str
    id: str | None = None  # assigned on persistence
    selected_questions: tuple[str, ...] = ()
    answers: dict[str, AnswerValue] = field(default_factory=dict)
    score: int | None = None
    max_score: int | None = None
    percentage: int | None = None
    category_scores: dict[str, int] = field(default_factory=dict)
    time_spent: int | None = None  # minutes
    status: SubmissionStatus = "pending"
    started_at: int | None = None
    submitted_at: int | None = None
    graded_at: int | None = None
    flagged: bool = False
    passed: bool | None = None
    idempotency_key: str | None = None


def submission_to_wire(submission: Submission) -> dict[str, Any]:
    return {
        "id": submission.id,
        "assessmentId": submission.assessment_id,
        "candidateId": submission.candidate_id,
        "applicationId": submission.application_id,
        "selectedQuestions": list(submission.selected_questions),
        "answers": {
            qid: answer_to_json(value) for qid, value in submission.answers.items()
        },
        "score": submission.score,
        "maxScore": submission.max_score,
        "percentage": submission.percentage,
        "categoryScores": dict(submission.category_scores),
        "timeSpent": submission.time_spent,
        "status": submission.status,
        "startedAt": submission.started_at,
        "submittedAt": submission.submitted_at,
        "gradedAt": submission.graded_at,
        "flagged": submission.flagged,
        "passed": submission.passed,
        "idempotencyKey": submission.idempotency_key,
    }


def submission_from_wire(data: dict[str, Any]) -> Submission:
    """Parse a wire dict.  Raises KeyError/ValueError on a malformed record."""
    status = data.get("status", "pending")
    if status not in SUBMISSION_STATUSES:
        raise ValueError(f"unknown submission status {status!r}")

    return Submission(
        id=data.get("id"),
        assessment_id=data["assessmentId"],
        candidate_id=data["candidateId"],
        application_id=data["applicationId"],
        selected_questions=tuple(data.get("selectedQuestions") or ()),
        answers={
            qid: parse_answer(value)
            for qid, value in (data.get("answers") or {}).items()
        },
        score=data.get("score"),
        max_score=data.get("maxScore"),
        percentage=data.get("percentage"),
        category_scores=dict(data.get("categoryScores") or {}),
        time_spent=data.get("timeSpent"),
        status=status,
        started_at=data.get("startedAt"),
        submitted_at=data.get("submittedAt"),
        graded_at=data.get("gradedAt"),
        flagged=bool(data.get("flagged", False)),
        passed=data.get("passed"),
        idempotency_key=data.get("idempotencyKey"),
    )
