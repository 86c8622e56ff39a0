"""SQLAlchemy table definitions.

These map to the frozen dataclass domain models in app/models/.
Repos convert between SQLAlchemy rows and domain dataclasses.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.db.engine import Base


def _new_id() -> str:
    return str(uuid.uuid4())


# --- Question bank ---


class QuestionBankRow(Base):
    __tablename__ = "question_bank"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    question: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(
        String(16), nullable=False, default="mcq"
    )  # mcq|coding|essay
    category: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    difficulty: Mapped[str] = mapped_column(
        String(16), nullable=False, default="medium"
    )  # easy|medium|hard
    options: Mapped[list[str]] = mapped_column(JSONB, nullable=False, default=list)
    correct_answer: Mapped[Any] = mapped_column(JSONB, nullable=False)
    explanation: Mapped[str | None] = mapped_column(Text, nullable=True)
    points: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    tags: Mapped[list[str]] = mapped_column(JSONB, nullable=False, default=list)
    created_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


# --- Assessment definitions ---


class AssessmentRow(Base):
    __tablename__ = "assessments"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(
        String(16), nullable=False, default="auto"
    )  # auto|manual|hybrid
    categories: Mapped[list[str]] = mapped_column(JSONB, nullable=False, default=list)
    difficulty: Mapped[list[str]] = mapped_column(JSONB, nullable=False, default=list)
    question_count: Mapped[int] = mapped_column(Integer, nullable=False, default=20)
    randomize_questions: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    shuffle_options: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    questions: Mapped[list[str]] = mapped_column(JSONB, nullable=False, default=list)
    time_limit: Mapped[int] = mapped_column(Integer, nullable=False, default=60)
    passing_score: Mapped[int] = mapped_column(Integer, nullable=False, default=70)
    allow_review: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    show_results: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    prevent_cheating: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    job_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_by: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


# --- Submissions ---


class AssessmentSubmissionRow(Base):
    __tablename__ = "assessment_submissions"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    assessment_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("assessments.id"), nullable=False, index=True
    )
    candidate_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    application_id: Mapped[str] = mapped_column(String(64), nullable=False)
    selected_questions: Mapped[list[str]] = mapped_column(
        JSONB, nullable=False, default=list
    )
    answers: Mapped[dict[str, Any]] = mapped_column(JSONB, nullable=False, default=dict)
    score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    max_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    percentage: Mapped[int | None] = mapped_column(Integer, nullable=True)
    category_scores: Mapped[dict[str, int]] = mapped_column(
        JSONB, nullable=False, default=dict
    )
    time_spent: Mapped[int | None] = mapped_column(Integer, nullable=True)
    flagged: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    passed: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    status: Mapped[str] = mapped_column(
        String(32), nullable=False, default="pending"
    )  # pending|in_progress|submitted|graded
    started_at: Mapped[int | None] = mapped_column(Integer, nullable=True)
    submitted_at: Mapped[int | None] = mapped_column(Integer, nullable=True)
    graded_at: Mapped[int | None] = mapped_column(Integer, nullable=True)
    idempotency_key: Mapped[str | None] = mapped_column(
        String(255), unique=True, nullable=True
    )
