"""PostgreSQL implementation of SubmissionRepo."""

from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.tables import AssessmentSubmissionRow
from app.models.question import answer_to_json, parse_answer
from app.models.submission import Submission


class PgSubmissionRepo:
    """Satisfies the SubmissionRepo Protocol using PostgreSQL via SQLAlchemy.

    The unique index on idempotency_key backs the duplicate check done by
    the service layer; a racing duplicate surfaces as IntegrityError.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, submission_id: str) -> Submission | None:
        row = await self._session.get(AssessmentSubmissionRow, submission_id)
        if row is None:
            return None
        return _row_to_submission(row)

    async def get_by_idempotency_key(self, key: str) -> Submission | None:
        stmt = select(AssessmentSubmissionRow).where(
            AssessmentSubmissionRow.idempotency_key == key
        )
        row = (await self._session.execute(stmt)).scalar_one_or_none()
        if row is None:
            return None
        return _row_to_submission(row)

    async def add(self, submission: Submission) -> Submission:
        row = AssessmentSubmissionRow(
            id=submission.id or str(uuid.uuid4()),
            assessment_id=submission.assessment_id,
            candidate_id=submission.candidate_id,
            application_id=submission.application_id,
            selected_questions=list(submission.selected_questions),
            answers={
                qid: answer_to_json(value) for qid, value in submission.answers.items()
            },
            score=submission.score,
            max_score=submission.max_score,
            percentage=submission.percentage,
            category_scores=dict(submission.category_scores),
            time_spent=submission.time_spent,
            flagged=submission.flagged,
            passed=submission.passed,
            status=submission.status,
            started_at=submission.started_at,
            submitted_at=submission.submitted_at,
            graded_at=submission.graded_at,
            idempotency_key=submission.idempotency_key,
        )
        self._session.add(row)
        await self._session.flush()
        return _row_to_submission(row)

    async def list_by_candidate(self, candidate_id: str) -> list[Submission]:
        stmt = (
            select(AssessmentSubmissionRow)
            .where(AssessmentSubmissionRow.candidate_id == candidate_id)
            .order_by(AssessmentSubmissionRow.started_at.desc())
        )
        rows = (await self._session.execute(stmt)).scalars().all()
        return [_row_to_submission(r) for r in rows]

    async def list_by_assessment(self, assessment_id: str) -> list[Submission]:
        stmt = (
            select(AssessmentSubmissionRow)
            .where(AssessmentSubmissionRow.assessment_id == assessment_id)
            .order_by(AssessmentSubmissionRow.started_at.desc())
        )
        rows = (await self._session.execute(stmt)).scalars().all()
        return [_row_to_submission(r) for r in rows]


def _row_to_submission(row: AssessmentSubmissionRow) -> Submission:
    return Submission(
        id=row.id,
        assessment_id=row.assessment_id,
        candidate_id=row.candidate_id,
        application_id=row.application_id,
        selected_questions=tuple(row.selected_questions or ()),
        answers={qid: parse_answer(v) for qid, v in (row.answers or {}).items()},
        score=row.score,
        max_score=row.max_score,
        percentage=row.percentage,
        category_scores=dict(row.category_scores or {}),
        time_spent=row.time_spent,
        status=row.status,  # type: ignore[arg-type]
        started_at=row.started_at,
        submitted_at=row.submitted_at,
        graded_at=row.graded_at,
        flagged=row.flagged,
        passed=row.passed,
        idempotency_key=row.idempotency_key,
    )
