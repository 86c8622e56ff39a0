from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace
from typing import Any, Protocol

from app.models.question import Question


class QuestionRepo(Protocol):
    async def get(self, question_id: str) -> Question | None: ...
    async def get_many(self, question_ids: Iterable[str]) -> list[Question]: ...
    async def list_all(self) -> list[Question]: ...
    async def list_by_category(self, category: str) -> list[Question]: ...
    async def list_filtered(
        self, categories: Iterable[str], difficulties: Iterable[str]
    ) -> list[Question]: ...
    async def add(self, question: Question) -> None: ...
    async def add_many(self, questions: Iterable[Question]) -> None: ...
    async def update(self, question_id: str, **changes: Any) -> Question | None: ...
    async def delete(self, question_id: str) -> bool: ...
    async def list_categories(self) -> list[str]: ...


class InMemoryQuestionRepo:
    def __init__(self) -> None:
        self._by_id: dict[str, Question] = {}

    async def get(self, question_id: str) -> Question | None:
        return self._by_id.get(question_id)

    async def get_many(self, question_ids: Iterable[str]) -> list[Question]:
        # Keeps the caller's order and skips unknown ids.
        return [self._by_id[qid] for qid in question_ids if qid in self._by_id]

    async def list_all(self) -> list[Question]:
        return list(self._by_id.values())

    async def list_by_category(self, category: str) -> list[Question]:
        return [q for q in self._by_id.values() if q.category == category]

    async def list_filtered(
        self, categories: Iterable[str], difficulties: Iterable[str]
    ) -> list[Question]:
        # An empty filter set means "no restriction" on that axis.
        cats = set(categories)
        diffs = set(difficulties)
        return [
            q
            for q in self._by_id.values()
            if (not cats or q.category in cats)
            and (not diffs or q.difficulty in diffs)
        ]

    async def add(self, question: Question) -> None:
        if question.id in self._by_id:
            raise ValueError("question id already exists")
        self._by_id[question.id] = question

    async def add_many(self, questions: Iterable[Question]) -> None:
        batch = list(questions)
        ids = [q.id for q in batch]
        if len(set(ids)) != len(ids) or any(qid in self._by_id for qid in ids):
            raise ValueError("question id already exists")
        for q in batch:
            self._by_id[q.id] = q

    async def update(self, question_id: str, **changes: Any) -> Question | None:
        existing = self._by_id.get(question_id)
        if existing is None:
            return None
        updated = replace(existing, **changes)
        self._by_id[question_id] = updated
        return updated

    async def delete(self, question_id: str) -> bool:
        return self._by_id.pop(question_id, None) is not None

    async def list_categories(self) -> list[str]:
        return sorted({q.category for q in self._by_id.values()})
