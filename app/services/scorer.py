"""Submission scoring.

score_submission() is a pure function of (questions, answers).  The same
function produces the candidate-side preview score in the session
controller and the authoritative score stored by the submissions API, so
the two can only disagree if their inputs do.

Percentages round half up (33.5 -> 34), computed with integer arithmetic
so no float error leaks into the result.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from app.models.question import Question, parse_answer


@dataclass(frozen=True, slots=True)
class ScoreResult:
    score: int
    max_score: int
    percentage: int
    category_scores: dict[str, int] = field(default_factory=dict)


def round_half_up(numerator: int, denominator: int) -> int:
    """round(numerator / denominator) for non-negative ints, halves going up."""
    if denominator <= 0:
        return 0
    return (2 * numerator + denominator) // (2 * denominator)


def percentage_of(part: int, whole: int) -> int:
    return round_half_up(100 * part, whole) if whole > 0 else 0


def is_correct(question: Question, answer: Any) -> bool:
    """Exact match of a candidate answer against the question's key.

    Both sides go through parse_answer(), so a malformed answer (a string
    index, a bool, an unknown dict shape) is simply wrong.  A question whose
    key is withheld is never answered correctly.
    """
    if question.correct_answer is None or answer is None:
        return False
    return parse_answer(answer) == question.correct_answer


def score_submission(
    questions: Iterable[Question], answers: Mapping[str, Any]
) -> ScoreResult:
    """Score the presented questions against the candidate's answer map.

    max_score sums every presented question's points (default 1); missing
    answers count toward max_score but add nothing to score.  Category
    scores are the percentage of correctly answered questions per category
    (by count, not points); only categories present in ``questions`` appear.
    """
    score = 0
    max_score = 0
    per_category: dict[str, list[int]] = {}  # category -> [correct, total]

    for question in questions:
        points = question.points or 1
        max_score += points

        tally = per_category.setdefault(question.category, [0, 0])
        tally[1] += 1

        if is_correct(question, answers.get(question.id)):
            score += points
            tally[0] += 1

    return ScoreResult(
        score=score,
        max_score=max_score,
        percentage=percentage_of(score, max_score),
        category_scores={
            category: percentage_of(correct, total)
            for category, (correct, total) in per_category.items()
        },
    )
