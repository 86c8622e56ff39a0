"""PostgreSQL implementation of AssessmentRepo."""

from __future__ import annotations

from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.tables import AssessmentRow
from app.models.assessment import AssessmentDefinition

_LIST_COLUMNS = ("categories", "difficulty", "questions")


class PgAssessmentRepo:
    """Satisfies the AssessmentRepo Protocol using PostgreSQL via SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, assessment_id: str) -> AssessmentDefinition | None:
        row = await self._session.get(AssessmentRow, assessment_id)
        if row is None:
            return None
        return _row_to_assessment(row)

    async def add(self, assessment: AssessmentDefinition) -> None:
        row = AssessmentRow(
            id=assessment.id,
            title=assessment.title,
            description=assessment.description,
            type=assessment.type,
            categories=list(assessment.categories),
            difficulty=list(assessment.difficulty),
            question_count=assessment.question_count,
            randomize_questions=assessment.randomize_questions,
            shuffle_options=assessment.shuffle_options,
            questions=list(assessment.questions),
            time_limit=assessment.time_limit,
            passing_score=assessment.passing_score,
            allow_review=assessment.allow_review,
            show_results=assessment.show_results,
            prevent_cheating=assessment.prevent_cheating,
            job_id=assessment.job_id,
            created_by=assessment.created_by,
            created_at=assessment.created_at,
        )
        self._session.add(row)
        await self._session.flush()

    async def list_all(self) -> list[AssessmentDefinition]:
        stmt = select(AssessmentRow).order_by(AssessmentRow.created_at.desc())
        rows = (await self._session.execute(stmt)).scalars().all()
        return [_row_to_assessment(r) for r in rows]

    async def list_by_job(self, job_id: str) -> list[AssessmentDefinition]:
        stmt = (
            select(AssessmentRow)
            .where(AssessmentRow.job_id == job_id)
            .order_by(AssessmentRow.created_at.desc())
        )
        rows = (await self._session.execute(stmt)).scalars().all()
        return [_row_to_assessment(r) for r in rows]

    async def update(
        self, assessment_id: str, **changes: Any
    ) -> AssessmentDefinition | None:
        row = await self._session.get(AssessmentRow, assessment_id)
        if row is None:
            return None
        for name, value in changes.items():
            setattr(row, name, list(value) if name in _LIST_COLUMNS else value)
        await self._session.flush()
        return _row_to_assessment(row)

    async def delete(self, assessment_id: str) -> bool:
        stmt = delete(AssessmentRow).where(AssessmentRow.id == assessment_id)
        result = await self._session.execute(stmt)
        return result.rowcount > 0


def _row_to_assessment(row: AssessmentRow) -> AssessmentDefinition:
    return AssessmentDefinition(
        id=row.id,
        title=row.title,
        description=row.description,
        type=row.type,  # type: ignore[arg-type]
        categories=tuple(row.categories or ()),
        difficulty=tuple(row.difficulty or ()),  # type: ignore[arg-type]
        question_count=row.question_count,
        randomize_questions=row.randomize_questions,
        shuffle_options=row.shuffle_options,
        questions=tuple(row.questions or ()),
        time_limit=row.time_limit,
        passing_score=row.passing_score,
        allow_review=row.allow_review,
        show_results=row.show_results,
        prevent_cheating=row.prevent_cheating,
        job_id=row.job_id,
        created_by=row.created_by,
        created_at=row.created_at,
    )
