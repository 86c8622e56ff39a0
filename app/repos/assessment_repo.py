from __future__ import annotations

from dataclasses import replace
from typing import Any, Protocol

from app.models.assessment import AssessmentDefinition


class AssessmentRepo(Protocol):
    async def get(self, assessment_id: str) -> AssessmentDefinition | None: ...
    async def add(self, assessment: AssessmentDefinition) -> None: ...
    async def list_all(self) -> list[AssessmentDefinition]: ...
    async def list_by_job(self, job_id: str) -> list[AssessmentDefinition]: ...
    async def update(
        self, assessment_id: str, **changes: Any
    ) -> AssessmentDefinition | None: ...
    async def delete(self, assessment_id: str) -> bool: ...


class InMemoryAssessmentRepo:
    def __init__(self) -> None:
        self._by_id: dict[str, AssessmentDefinition] = {}

    async def get(self, assessment_id: str) -> AssessmentDefinition | None:
        return self._by_id.get(assessment_id)

    async def add(self, assessment: AssessmentDefinition) -> None:
        if assessment.id in self._by_id:
            raise ValueError("assessment id already exists")
        self._by_id[assessment.id] = assessment

    async def list_all(self) -> list[AssessmentDefinition]:
        # Newest first, like the HR assessments page.
        return sorted(self._by_id.values(), key=lambda a: a.created_at, reverse=True)

    async def list_by_job(self, job_id: str) -> list[AssessmentDefinition]:
        return [a for a in await self.list_all() if a.job_id == job_id]

    async def update(
        self, assessment_id: str, **changes: Any
    ) -> AssessmentDefinition | None:
        existing = self._by_id.get(assessment_id)
        if existing is None:
            return None
        updated = replace(existing, **changes)
        self._by_id[assessment_id] = updated
        return updated

    async def delete(self, assessment_id: str) -> bool:
        return self._by_id.pop(assessment_id, None) is not None
