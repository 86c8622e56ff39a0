"""Request/response bodies shared by the assessment routers.

Everything on the wire is camelCase (``questionCount``, ``maxScore``);
handlers and services see snake_case attributes.  Input models accept
either spelling.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from app.models.assessment import AssessmentDefinition, SelectionMode
from app.models.question import (
    DIFFICULTIES,
    ChoiceAnswer,
    Difficulty,
    Question,
    answer_to_json,
    parse_answer,
)
from app.models.submission import SubmissionStatus


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _choice_key(raw: Any) -> ChoiceAnswer:
    answer = parse_answer(raw)
    if not isinstance(answer, ChoiceAnswer) or answer.value < 0:
        raise ValueError('correctAnswer must be {"kind": "choice", "value": <index>}')
    return answer


# ---------------------------------------------------------------------------
# Questions
# ---------------------------------------------------------------------------


class QuestionIn(CamelModel):
    question: str = Field(min_length=1)
    type: Literal["mcq"] = "mcq"
    category: str = Field(min_length=1)
    difficulty: Difficulty
    options: list[str] = Field(min_length=2)
    correct_answer: Any
    explanation: str | None = None
    points: int = Field(default=1, ge=1)
    tags: list[str] | None = None

    @field_validator("correct_answer")
    @classmethod
    def check_key(cls, v: Any) -> dict[str, Any]:
        return answer_to_json(_choice_key(v))

    @model_validator(mode="after")
    def key_in_range(self) -> QuestionIn:
        if self.correct_answer["value"] >= len(self.options):
            raise ValueError(
                f"correctAnswer {self.correct_answer['value']} out of range "
                f"for {len(self.options)} options"
            )
        return self

    def to_question(self, created_by: str) -> Question:
        return Question.new(
            question=self.question,
            category=self.category,
            difficulty=self.difficulty,
            options=tuple(self.options),
            correct_answer=_choice_key(self.correct_answer),
            explanation=self.explanation,
            points=self.points,
            tags=tuple(self.tags) if self.tags is not None else None,
            created_by=created_by,
        )


class QuestionUpdate(CamelModel):
    question: str | None = Field(default=None, min_length=1)
    category: str | None = Field(default=None, min_length=1)
    difficulty: Difficulty | None = None
    options: list[str] | None = Field(default=None, min_length=2)
    correct_answer: Any = None
    explanation: str | None = None
    points: int | None = Field(default=None, ge=1)
    tags: list[str] | None = None

    @field_validator("correct_answer")
    @classmethod
    def check_key(cls, v: Any) -> dict[str, Any] | None:
        return None if v is None else answer_to_json(_choice_key(v))

    def to_changes(self) -> dict[str, Any]:
        changes = {
            k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None
        }
        if "correct_answer" in changes:
            changes["correct_answer"] = _choice_key(changes["correct_answer"])
        for name in ("options", "tags"):
            if changes.get(name) is not None:
                changes[name] = tuple(changes[name])
        return changes


class CandidateQuestionOut(CamelModel):
    """What a candidate sees: no answer key, no explanation."""

    id: str
    question: str
    type: str
    category: str
    difficulty: str
    options: list[str]
    points: int

    @classmethod
    def from_question(cls, q: Question) -> CandidateQuestionOut:
        return cls(
            id=q.id,
            question=q.question,
            type=q.type,
            category=q.category,
            difficulty=q.difficulty,
            options=list(q.options),
            points=q.points,
        )


class QuestionOut(CandidateQuestionOut):
    correct_answer: dict[str, Any] | None
    explanation: str | None
    tags: list[str]
    created_by: str | None
    created_at: int

    @classmethod
    def from_question(cls, q: Question) -> QuestionOut:
        return cls(
            id=q.id,
            question=q.question,
            type=q.type,
            category=q.category,
            difficulty=q.difficulty,
            options=list(q.options),
            points=q.points,
            correct_answer=(
                answer_to_json(q.correct_answer) if q.correct_answer else None
            ),
            explanation=q.explanation,
            tags=list(q.tags),
            created_by=q.created_by,
            created_at=q.created_at,
        )


class GenerateSetIn(CamelModel):
    categories: list[str] = Field(default_factory=list)
    difficulties: list[Difficulty] = Field(default_factory=list)
    count: int = Field(ge=0)


# ---------------------------------------------------------------------------
# Assessments
# ---------------------------------------------------------------------------


class AssessmentIn(CamelModel):
    title: str = Field(min_length=1)
    description: str | None = None
    type: SelectionMode = "auto"
    categories: list[str] = Field(default_factory=list)
    difficulty: list[Difficulty] = Field(default_factory=lambda: list(DIFFICULTIES))
    question_count: int = Field(default=20, ge=1)
    questions: list[str] = Field(default_factory=list)
    time_limit: int = Field(default=60, ge=1)
    passing_score: int = Field(default=70, ge=0, le=100)
    randomize_questions: bool = True
    shuffle_options: bool = True
    allow_review: bool = True
    show_results: bool = True
    prevent_cheating: bool = True
    job_id: str | None = None

    def to_definition(self, created_by: str) -> AssessmentDefinition:
        fields = self.model_dump()
        for name in ("categories", "difficulty", "questions"):
            fields[name] = tuple(fields[name])
        title = fields.pop("title")
        return AssessmentDefinition.new(title=title, created_by=created_by, **fields)


_NULLABLE_ASSESSMENT_FIELDS = frozenset({"description", "job_id"})


class AssessmentUpdate(CamelModel):
    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    type: SelectionMode | None = None
    categories: list[str] | None = None
    difficulty: list[Difficulty] | None = None
    question_count: int | None = Field(default=None, ge=1)
    questions: list[str] | None = None
    time_limit: int | None = Field(default=None, ge=1)
    passing_score: int | None = Field(default=None, ge=0, le=100)
    randomize_questions: bool | None = None
    shuffle_options: bool | None = None
    allow_review: bool | None = None
    show_results: bool | None = None
    prevent_cheating: bool | None = None
    job_id: str | None = None

    def to_changes(self) -> dict[str, Any]:
        changes = {
            k: v
            for k, v in self.model_dump(exclude_unset=True).items()
            if v is not None or k in _NULLABLE_ASSESSMENT_FIELDS
        }
        for name in ("categories", "difficulty", "questions"):
            if name in changes:
                changes[name] = tuple(changes[name])
        return changes


class AssessmentOut(CamelModel):
    id: str
    title: str
    description: str | None
    type: str
    categories: list[str]
    difficulty: list[str]
    question_count: int
    questions: list[str]
    time_limit: int
    passing_score: int
    randomize_questions: bool
    shuffle_options: bool
    allow_review: bool
    show_results: bool
    prevent_cheating: bool
    job_id: str | None
    created_by: str
    created_at: int

    @classmethod
    def from_definition(cls, a: AssessmentDefinition) -> AssessmentOut:
        return cls(
            id=a.id,
            title=a.title,
            description=a.description,
            type=a.type,
            categories=list(a.categories),
            difficulty=list(a.difficulty),
            question_count=a.question_count,
            questions=list(a.questions),
            time_limit=a.time_limit,
            passing_score=a.passing_score,
            randomize_questions=a.randomize_questions,
            shuffle_options=a.shuffle_options,
            allow_review=a.allow_review,
            show_results=a.show_results,
            prevent_cheating=a.prevent_cheating,
            job_id=a.job_id,
            created_by=a.created_by,
            created_at=a.created_at,
        )


class SessionStartOut(CamelModel):
    assessment: AssessmentOut
    questions: list[CandidateQuestionOut]


# ---------------------------------------------------------------------------
# Submissions
# ---------------------------------------------------------------------------


class SubmissionIn(CamelModel):
    """Submission body.  Scores are accepted but recomputed server-side."""

    assessment_id: str = Field(min_length=1)
    candidate_id: str = Field(min_length=1)
    application_id: str = Field(min_length=1)
    selected_questions: list[str] = Field(default_factory=list)
    answers: dict[str, Any] = Field(default_factory=dict)
    score: int | None = None
    max_score: int | None = None
    percentage: int | None = None
    category_scores: dict[str, int] = Field(default_factory=dict)
    time_spent: int | None = Field(default=None, ge=0)
    status: SubmissionStatus = "submitted"
    started_at: int | None = None
    submitted_at: int | None = None
    idempotency_key: str | None = None


class SubmissionOut(CamelModel):
    id: str
    assessment_id: str
    candidate_id: str
    application_id: str
    selected_questions: list[str]
    answers: dict[str, Any]
    score: int | None
    max_score: int | None
    percentage: int | None
    category_scores: dict[str, int]
    time_spent: int | None
    status: str
    started_at: int | None
    submitted_at: int | None
    graded_at: int | None
    flagged: bool
    passed: bool | None
    idempotency_key: str | None
