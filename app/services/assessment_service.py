"""Assessment orchestration: definitions, session question sets, grading.

Routers call into this module with repositories and an explicit Actor;
it raises domain exceptions and leaves HTTP translation to the routers.
"""

from __future__ import annotations

import datetime
import json
import logging
import random
from collections import Counter
from dataclasses import replace
from typing import Any

from app.core.metrics import SUBMISSIONS
from app.models.actor import Actor
from app.models.assessment import AssessmentDefinition
from app.models.question import Question, answer_to_json
from app.models.submission import Submission
from app.repos.assessment_repo import AssessmentRepo
from app.repos.question_repo import QuestionRepo
from app.repos.submission_repo import SubmissionRepo
from app.services.question_selector import (
    SYSTEM_RNG,
    AssessmentConfigurationError,
    generate_assessment_set,
)
from app.services.scorer import score_submission

logger = logging.getLogger(__name__)


class AssessmentNotFoundError(LookupError):
    pass


class AssessmentInUseError(Exception):
    """The definition already has submissions graded against it."""


class UnknownQuestionError(ValueError):
    """A submission references question ids the bank does not hold."""


class DuplicateQuestionError(ValueError):
    """A submission lists the same question id more than once."""


class SubmissionConflictError(Exception):
    """Idempotency key reused with a different submission payload."""


def _now() -> int:
    return int(datetime.datetime.now(datetime.UTC).timestamp())


# ---------------------------------------------------------------------------
# Definitions
# ---------------------------------------------------------------------------


async def validate_definition(
    definition: AssessmentDefinition, questions: QuestionRepo
) -> None:
    """Raise AssessmentConfigurationError if no question could ever be drawn."""
    if definition.question_count < 1:
        raise AssessmentConfigurationError("question_count must be at least 1")

    if not definition.draws_from_bank:
        if not definition.questions:
            raise AssessmentConfigurationError(
                "manual assessments need at least one question id"
            )
        found = await questions.get_many(definition.questions)
        missing = set(definition.questions) - {q.id for q in found}
        if missing:
            raise AssessmentConfigurationError(
                f"unknown question ids: {', '.join(sorted(missing))}"
            )
        return

    pool = await questions.list_filtered(definition.categories, definition.difficulty)
    if not pool:
        raise AssessmentConfigurationError(
            "no questions match categories="
            f"{list(definition.categories) or 'any'} "
            f"difficulty={list(definition.difficulty) or 'any'}"
        )


async def create_assessment(
    definition: AssessmentDefinition,
    *,
    actor: Actor,
    assessments: AssessmentRepo,
    questions: QuestionRepo,
) -> AssessmentDefinition:
    await validate_definition(definition, questions)
    await assessments.add(definition)
    logger.info(
        "Assessment created id=%s type=%s by=%s",
        definition.id,
        definition.type,
        actor.actor_id,
        extra={"assessment_id": definition.id},
    )
    return definition


async def update_assessment(
    assessment_id: str,
    changes: dict[str, Any],
    *,
    actor: Actor,
    assessments: AssessmentRepo,
    questions: QuestionRepo,
) -> AssessmentDefinition:
    existing = await assessments.get(assessment_id)
    if existing is None:
        raise AssessmentNotFoundError(assessment_id)

    await validate_definition(replace(existing, **changes), questions)
    updated = await assessments.update(assessment_id, **changes)
    if updated is None:
        raise AssessmentNotFoundError(assessment_id)
    logger.info(
        "Assessment updated id=%s fields=%s by=%s",
        assessment_id,
        sorted(changes),
        actor.actor_id,
        extra={"assessment_id": assessment_id},
    )
    return updated


async def delete_assessment(
    assessment_id: str,
    *,
    actor: Actor,
    assessments: AssessmentRepo,
    submissions: SubmissionRepo,
) -> None:
    if await assessments.get(assessment_id) is None:
        raise AssessmentNotFoundError(assessment_id)
    # Graded submissions keep pointing at their definition.
    graded = await submissions.list_by_assessment(assessment_id)
    if graded:
        raise AssessmentInUseError(
            f"assessment {assessment_id} has {len(graded)} submission(s)"
        )
    if not await assessments.delete(assessment_id):
        raise AssessmentNotFoundError(assessment_id)
    logger.info(
        "Assessment deleted id=%s by=%s",
        assessment_id,
        actor.actor_id,
        extra={"assessment_id": assessment_id},
    )


# ---------------------------------------------------------------------------
# Session question sets
# ---------------------------------------------------------------------------


async def build_question_set(
    definition: AssessmentDefinition,
    questions: QuestionRepo,
    rng: random.Random | None = None,
) -> list[Question]:
    """Realize the concrete, ordered question list for one attempt."""
    rng = rng or SYSTEM_RNG

    if definition.draws_from_bank:
        selected = await generate_assessment_set(
            questions,
            definition.categories,
            definition.difficulty,
            definition.question_count,
            rng,
        )
    else:
        selected = await questions.get_many(definition.questions)
        if definition.randomize_questions:
            selected = rng.sample(selected, len(selected))

    if not selected:
        raise AssessmentConfigurationError(
            f"assessment {definition.id} has no questions available"
        )
    return selected


async def start_assessment(
    assessment_id: str,
    *,
    actor: Actor,
    assessments: AssessmentRepo,
    questions: QuestionRepo,
    rng: random.Random | None = None,
) -> tuple[AssessmentDefinition, list[Question]]:
    definition = await assessments.get(assessment_id)
    if definition is None:
        raise AssessmentNotFoundError(assessment_id)

    selected = await build_question_set(definition, questions, rng)
    logger.info(
        "Question set issued assessment=%s to=%s count=%d",
        assessment_id,
        actor.actor_id,
        len(selected),
        extra={"assessment_id": assessment_id, "candidate_id": actor.actor_id},
    )
    return definition, selected


# ---------------------------------------------------------------------------
# Grading
# ---------------------------------------------------------------------------


def _fingerprint(submission: Submission) -> str:
    return json.dumps(
        {
            "assessment_id": submission.assessment_id,
            "candidate_id": submission.candidate_id,
            "application_id": submission.application_id,
            "selected_questions": list(submission.selected_questions),
            "answers": {
                qid: answer_to_json(v) for qid, v in submission.answers.items()
            },
        },
        sort_keys=True,
        default=str,
    )


async def grade_submission(
    submission: Submission,
    *,
    actor: Actor,
    assessments: AssessmentRepo,
    questions: QuestionRepo,
    submissions: SubmissionRepo,
    idempotency_key: str | None = None,
) -> tuple[Submission, bool]:
    """Score a submission server-side and persist it.

    Returns ``(record, created)``.  ``created`` is False when the
    idempotency key matched an earlier submission with the same payload;
    the earlier record is returned unchanged.  Client-supplied scores are
    ignored; the stored score always comes from score_submission().
    """
    key = idempotency_key or submission.idempotency_key
    log_ctx = {
        "assessment_id": submission.assessment_id,
        "candidate_id": submission.candidate_id,
    }

    if key:
        existing = await submissions.get_by_idempotency_key(key)
        if existing is not None:
            if _fingerprint(existing) != _fingerprint(submission):
                SUBMISSIONS.labels(outcome="conflict").inc()
                logger.warning(
                    "Idempotency key reused with a different payload by=%s",
                    actor.actor_id,
                    extra=log_ctx,
                )
                raise SubmissionConflictError(key)
            SUBMISSIONS.labels(outcome="replayed").inc()
            logger.info("Submission replayed id=%s", existing.id, extra=log_ctx)
            return existing, False

    counts = Counter(submission.selected_questions)
    repeated = sorted(qid for qid, n in counts.items() if n > 1)
    if repeated:
        raise DuplicateQuestionError(
            f"question ids presented more than once: {', '.join(repeated)}"
        )

    definition = await assessments.get(submission.assessment_id)
    if definition is None:
        raise AssessmentNotFoundError(submission.assessment_id)

    presented = await questions.get_many(submission.selected_questions)
    if len(presented) != len(submission.selected_questions):
        missing = set(submission.selected_questions) - {q.id for q in presented}
        raise UnknownQuestionError(
            f"unknown question ids: {', '.join(sorted(missing))}"
        )

    result = score_submission(presented, submission.answers)
    if submission.score is not None and submission.score != result.score:
        logger.warning(
            "Client score %s differs from server score %s",
            submission.score,
            result.score,
            extra=log_ctx,
        )

    now = _now()
    graded = replace(
        submission,
        id=None,
        score=result.score,
        max_score=result.max_score,
        percentage=result.percentage,
        category_scores=result.category_scores,
        passed=definition.passed(result.percentage),
        status="graded",
        submitted_at=submission.submitted_at or now,
        graded_at=now,
        flagged=False,
        idempotency_key=key,
    )
    stored = await submissions.add(graded)
    SUBMISSIONS.labels(outcome="created").inc()
    logger.info(
        "Submission graded id=%s score=%d/%d (%d%%) passed=%s by=%s",
        stored.id,
        result.score,
        result.max_score,
        result.percentage,
        stored.passed,
        actor.actor_id,
        extra=log_ctx,
    )
    return stored, True
