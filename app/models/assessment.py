from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import Literal
from uuid import uuid4

from app.models.question import DIFFICULTIES, Difficulty

SelectionMode = Literal["auto", "manual", "hybrid"]


@dataclass(frozen=True, slots=True)
class AssessmentDefinition:
    """Template a candidate's concrete question set is drawn from.

    auto and hybrid pull from the question bank by (categories, difficulty);
    manual uses the embedded ``questions`` id list as-is.
    """

    id: str
    title: str
    created_by: str
    description: str | None = None
    type: SelectionMode = "auto"
    categories: tuple[str, ...] = ()
    difficulty: tuple[Difficulty, ...] = DIFFICULTIES
    question_count: int = 20
    randomize_questions: bool = True
    shuffle_options: bool = True
    questions: tuple[str, ...] = ()
    time_limit: int = 60  # minutes
    passing_score: int = 70  # percent
    allow_review: bool = True
    show_results: bool = True
    prevent_cheating: bool = True  # full-screen + visibility warnings
    job_id: str | None = None
    created_at: int = 0

    @property
    def draws_from_bank(self) -> bool:
        return self.type != "manual"

    def passed(self, percentage: int) -> bool:
        return percentage >= self.passing_score

    @staticmethod
    def new(*, title: str, created_by: str, **fields: object) -> AssessmentDefinition:
        return AssessmentDefinition(
            id=str(uuid4()),
            title=title,
            created_by=created_by,
            created_at=int(datetime.datetime.now(datetime.UTC).timestamp()),
            **fields,  # type: ignore[arg-type]
        )
