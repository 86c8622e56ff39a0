from __future__ import annotations

from dataclasses import replace
from typing import Protocol
from uuid import uuid4

from app.models.submission import Submission


class SubmissionRepo(Protocol):
    async def get(self, submission_id: str) -> Submission | None: ...
    async def get_by_idempotency_key(self, key: str) -> Submission | None: ...
    async def add(self, submission: Submission) -> Submission: ...
    async def list_by_candidate(self, candidate_id: str) -> list[Submission]: ...
    async def list_by_assessment(self, assessment_id: str) -> list[Submission]: ...


class InMemorySubmissionRepo:
    def __init__(self) -> None:
        self._by_id: dict[str, Submission] = {}
        self._by_key: dict[str, str] = {}

    async def get(self, submission_id: str) -> Submission | None:
        return self._by_id.get(submission_id)

    async def get_by_idempotency_key(self, key: str) -> Submission | None:
        submission_id = self._by_key.get(key)
        if submission_id is None:
            return None
        return self._by_id.get(submission_id)

    async def add(self, submission: Submission) -> Submission:
        """Persist and return the stored record with its id assigned."""
        key = submission.idempotency_key
        if key is not None and key in self._by_key:
            raise ValueError("idempotency key already used")
        stored = replace(submission, id=submission.id or str(uuid4()))
        self._by_id[stored.id] = stored  # type: ignore[index]
        if key is not None:
            self._by_key[key] = stored.id  # type: ignore[assignment]
        return stored

    async def list_by_candidate(self, candidate_id: str) -> list[Submission]:
        return _newest_first(
            s for s in self._by_id.values() if s.candidate_id == candidate_id
        )

    async def list_by_assessment(self, assessment_id: str) -> list[Submission]:
        return _newest_first(
            s for s in self._by_id.values() if s.assessment_id == assessment_id
        )


def _newest_first(submissions) -> list[Submission]:
    return sorted(submissions, key=lambda s: s.started_at or 0, reverse=True)
