"""Assessment question selection.

select_questions() filters a pool of questions by category and difficulty
and draws a uniform random sample without replacement.  The returned order
is itself random, so two attempts with identical filters usually see
different sets in a different order.

The random source is a parameter.  Production uses the module-level
SystemRandom (OS entropy); tests pass random.Random(seed) to pin output.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable, Sequence

from app.core.metrics import ASSESSMENT_SETS_GENERATED
from app.models.question import DIFFICULTIES, Question
from app.repos.question_repo import QuestionRepo

logger = logging.getLogger(__name__)

SYSTEM_RNG: random.Random = random.SystemRandom()


class AssessmentConfigurationError(Exception):
    """No usable questions for an assessment's filters or question list.

    An operator-facing problem: the assessment cannot start until its
    definition or the question bank changes.
    """


def select_questions(
    questions: Iterable[Question],
    allowed_categories: Iterable[str],
    allowed_difficulties: Iterable[str],
    desired_count: int,
    rng: random.Random | None = None,
) -> list[Question]:
    """Return min(desired_count, matches) random questions passing both filters.

    An empty ``allowed_categories`` means every category; an empty
    ``allowed_difficulties`` means easy, medium and hard.  Asking for more
    questions than match is not an error: the result is just shorter.
    """
    if desired_count < 0:
        raise ValueError(f"desired_count must be >= 0 (got {desired_count})")

    cats = set(allowed_categories)
    diffs = set(allowed_difficulties) or set(DIFFICULTIES)
    matches = [
        q
        for q in questions
        if (not cats or q.category in cats) and q.difficulty in diffs
    ]

    k = min(desired_count, len(matches))
    return (rng or SYSTEM_RNG).sample(matches, k)


async def generate_assessment_set(
    repo: QuestionRepo,
    categories: Sequence[str],
    difficulties: Sequence[str],
    count: int,
    rng: random.Random | None = None,
) -> list[Question]:
    """Draw a question set from the question bank.

    Returns an empty list when nothing matches; callers decide whether that
    is a configuration error.
    """
    pool = await repo.list_filtered(categories, difficulties)
    selected = select_questions(pool, categories, difficulties, count, rng)

    if not selected:
        result = "empty"
        logger.warning(
            "No questions match categories=%s difficulty=%s",
            list(categories) or "*",
            list(difficulties) or "*",
        )
    elif len(selected) < count:
        result = "short"
        logger.info(
            "Question bank has %d of %d requested questions for categories=%s",
            len(selected),
            count,
            list(categories) or "*",
        )
    else:
        result = "full"
    ASSESSMENT_SETS_GENERATED.labels(result=result).inc()

    return selected
