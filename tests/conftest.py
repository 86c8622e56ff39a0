from __future__ import annotations

import os
import random
import sys
from pathlib import Path

# Settings are read at import time; keep the dev-only startup seeding off.
os.environ.setdefault("APP_ENV", "test")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.api import dependencies  # noqa: E402
from app.api.dependencies import get_rng  # noqa: E402
from app.main import app  # noqa: E402
from app.models.assessment import AssessmentDefinition  # noqa: E402
from app.models.question import ChoiceAnswer, Question  # noqa: E402
from app.services.cache import cache_service  # noqa: E402

# Ensure repo root is on sys.path so `import app` works under pytest.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

HR_HEADERS = {"X-Actor-Id": "sarah.johnson", "X-Actor-Role": "hr"}
CANDIDATE_HEADERS = {"X-Actor-Id": "cand-1", "X-Actor-Role": "candidate"}


@pytest.fixture(autouse=True)
def reset_repos() -> None:
    """Clear the in-memory question, assessment and submission stores."""
    dependencies.question_repo._by_id.clear()
    dependencies.assessment_repo._by_id.clear()
    dependencies.submission_repo._by_id.clear()
    dependencies.submission_repo._by_key.clear()


@pytest.fixture(autouse=True)
def reset_cache() -> None:
    """Clear cache between tests."""
    if hasattr(cache_service, "_store"):
        cache_service._store.clear()  # type: ignore[union-attr]


@pytest.fixture(autouse=True)
def seeded_rng():
    """Pin question selection so API tests are deterministic."""
    app.dependency_overrides[get_rng] = lambda: random.Random(1234)
    yield
    app.dependency_overrides.pop(get_rng, None)


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


# ---------------------------------------------------------------------------
# Domain builders
# ---------------------------------------------------------------------------


def make_question(
    qid: str,
    category: str = "HTML",
    difficulty: str = "easy",
    correct: int = 0,
    points: int = 1,
    options: tuple[str, ...] = ("a", "b", "c", "d"),
) -> Question:
    return Question(
        id=qid,
        question=f"Question {qid}?",
        category=category,
        difficulty=difficulty,  # type: ignore[arg-type]
        options=options,
        correct_answer=ChoiceAnswer(value=correct),
        explanation=f"Because {qid}.",
        points=points,
        tags=(category.lower(), difficulty),
    )


def make_assessment(aid: str = "a-1", **fields: object) -> AssessmentDefinition:
    return AssessmentDefinition(
        id=aid,
        title=fields.pop("title", "Frontend screen"),  # type: ignore[arg-type]
        created_by="sarah.johnson",
        **fields,  # type: ignore[arg-type]
    )


def store_questions(*questions: Question) -> None:
    """Put questions straight into the in-memory bank."""
    for q in questions:
        dependencies.question_repo._by_id[q.id] = q


def store_assessment(assessment: AssessmentDefinition) -> None:
    dependencies.assessment_repo._by_id[assessment.id] = assessment
