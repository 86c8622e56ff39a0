from __future__ import annotations

import logging
import random
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.engine import get_async_session
from app.models.actor import Actor
from app.repos.assessment_repo import AssessmentRepo, InMemoryAssessmentRepo
from app.repos.pg_assessment_repo import PgAssessmentRepo
from app.repos.pg_question_repo import PgQuestionRepo
from app.repos.pg_submission_repo import PgSubmissionRepo
from app.repos.question_repo import InMemoryQuestionRepo, QuestionRepo
from app.repos.submission_repo import InMemorySubmissionRepo, SubmissionRepo
from app.services.question_selector import SYSTEM_RNG

logger = logging.getLogger(__name__)

# In-memory stores used when DATABASE_URL is not configured.  Module-level
# so every request in the process sees the same data; tests reset them in
# conftest.py.
question_repo = InMemoryQuestionRepo()
assessment_repo = InMemoryAssessmentRepo()
submission_repo = InMemorySubmissionRepo()


def require_actor(
    x_actor_id: Annotated[str | None, Header()] = None,
    x_actor_role: Annotated[str | None, Header()] = None,
) -> Actor:
    """Resolve the caller from the X-Actor-Id header.

    Identity is taken as given (there is no authentication); the header
    only has to be present and non-blank.
    """
    if x_actor_id is None or not x_actor_id.strip():
        logger.warning("Request rejected: missing X-Actor-Id header")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-Actor-Id header required",
        )
    return Actor(actor_id=x_actor_id.strip(), role=x_actor_role or None)


def get_question_repo(
    session: Annotated[AsyncSession | None, Depends(get_async_session)],
) -> QuestionRepo:
    if session is None:
        return question_repo
    return PgQuestionRepo(session)


def get_assessment_repo(
    session: Annotated[AsyncSession | None, Depends(get_async_session)],
) -> AssessmentRepo:
    if session is None:
        return assessment_repo
    return PgAssessmentRepo(session)


def get_submission_repo(
    session: Annotated[AsyncSession | None, Depends(get_async_session)],
) -> SubmissionRepo:
    if session is None:
        return submission_repo
    return PgSubmissionRepo(session)


def get_rng() -> random.Random:
    """Random source for question selection; tests override with a seeded one."""
    return SYSTEM_RNG


ActorDep = Annotated[Actor, Depends(require_actor)]
QuestionRepoDep = Annotated[QuestionRepo, Depends(get_question_repo)]
AssessmentRepoDep = Annotated[AssessmentRepo, Depends(get_assessment_repo)]
SubmissionRepoDep = Annotated[SubmissionRepo, Depends(get_submission_repo)]
RngDep = Annotated[random.Random, Depends(get_rng)]


def optional_actor(
    x_actor_id: Annotated[str | None, Header()] = None,
    x_actor_role: Annotated[str | None, Header()] = None,
) -> Actor | None:
    """Like require_actor, for reads that work without an identity."""
    if x_actor_id is None or not x_actor_id.strip():
        return None
    return Actor(actor_id=x_actor_id.strip(), role=x_actor_role or None)


OptionalActorDep = Annotated[Actor | None, Depends(optional_actor)]
