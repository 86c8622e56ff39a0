"""PostgreSQL implementation of QuestionRepo."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.tables import QuestionBankRow
from app.models.question import ChoiceAnswer, InvalidAnswer, Question, parse_answer


class PgQuestionRepo:
    """Satisfies the QuestionRepo Protocol using PostgreSQL via SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, question_id: str) -> Question | None:
        row = await self._session.get(QuestionBankRow, question_id)
        if row is None:
            return None
        return _row_to_question(row)

    async def get_many(self, question_ids: Iterable[str]) -> list[Question]:
        ids = list(question_ids)
        if not ids:
            return []
        stmt = select(QuestionBankRow).where(QuestionBankRow.id.in_(ids))
        rows = (await self._session.execute(stmt)).scalars().all()
        by_id = {row.id: _row_to_question(row) for row in rows}
        return [by_id[qid] for qid in ids if qid in by_id]

    async def list_all(self) -> list[Question]:
        stmt = select(QuestionBankRow).order_by(QuestionBankRow.created_at)
        rows = (await self._session.execute(stmt)).scalars().all()
        return [_row_to_question(r) for r in rows]

    async def list_by_category(self, category: str) -> list[Question]:
        stmt = (
            select(QuestionBankRow)
            .where(QuestionBankRow.category == category)
            .order_by(QuestionBankRow.created_at)
        )
        rows = (await self._session.execute(stmt)).scalars().all()
        return [_row_to_question(r) for r in rows]

    async def list_filtered(
        self, categories: Iterable[str], difficulties: Iterable[str]
    ) -> list[Question]:
        cats = list(categories)
        diffs = list(difficulties)
        stmt = select(QuestionBankRow)
        if cats:
            stmt = stmt.where(QuestionBankRow.category.in_(cats))
        if diffs:
            stmt = stmt.where(QuestionBankRow.difficulty.in_(diffs))
        rows = (
            (await self._session.execute(stmt.order_by(QuestionBankRow.created_at)))
            .scalars()
            .all()
        )
        return [_row_to_question(r) for r in rows]

    async def add(self, question: Question) -> None:
        self._session.add(_question_to_row(question))
        await self._session.flush()

    async def add_many(self, questions: Iterable[Question]) -> None:
        self._session.add_all([_question_to_row(q) for q in questions])
        await self._session.flush()

    async def update(self, question_id: str, **changes: Any) -> Question | None:
        row = await self._session.get(QuestionBankRow, question_id)
        if row is None:
            return None
        for name, value in changes.items():
            if name == "correct_answer":
                value = _answer_column(value)
            elif name in ("options", "tags"):
                value = list(value)
            setattr(row, name, value)
        await self._session.flush()
        return _row_to_question(row)

    async def delete(self, question_id: str) -> bool:
        stmt = delete(QuestionBankRow).where(QuestionBankRow.id == question_id)
        result = await self._session.execute(stmt)
        return result.rowcount > 0

    async def list_categories(self) -> list[str]:
        stmt = (
            select(QuestionBankRow.category)
            .distinct()
            .order_by(QuestionBankRow.category)
        )
        return list((await self._session.execute(stmt)).scalars().all())


def _answer_column(answer: ChoiceAnswer | None) -> dict[str, Any] | None:
    if answer is None:
        return None
    return {"kind": answer.kind, "value": answer.value}


def _question_to_row(q: Question) -> QuestionBankRow:
    return QuestionBankRow(
        id=q.id,
        question=q.question,
        type=q.type,
        category=q.category,
        difficulty=q.difficulty,
        options=list(q.options),
        correct_answer=_answer_column(q.correct_answer),
        explanation=q.explanation,
        points=q.points,
        tags=list(q.tags),
        created_by=q.created_by,
        created_at=q.created_at,
    )


def _row_to_question(row: QuestionBankRow) -> Question:
    correct: ChoiceAnswer | InvalidAnswer | None = None
    if row.correct_answer is not None:
        correct = parse_answer(row.correct_answer)
    if isinstance(correct, InvalidAnswer):
        # A stored key that is not a choice index can never be matched.
        correct = ChoiceAnswer(value=-1)
    return Question(
        id=row.id,
        question=row.question,
        type=row.type,
        category=row.category,
        difficulty=row.difficulty,  # type: ignore[arg-type]
        options=tuple(row.options or ()),
        correct_answer=correct,
        explanation=row.explanation,
        points=row.points or 1,
        tags=tuple(row.tags or ()),
        created_by=row.created_by,
        created_at=row.created_at,
    )
