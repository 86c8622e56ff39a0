from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import Any, Literal
from uuid import uuid4

Difficulty = Literal["easy", "medium", "hard"]
DIFFICULTIES: tuple[Difficulty, ...] = ("easy", "medium", "hard")


@dataclass(frozen=True, slots=True)
class ChoiceAnswer:
    """Single-choice answer: the index of the selected option.

    Used both for a candidate's answer and for a question's correct answer,
    so scoring compares two values of the same closed type.
    """

    value: int
    kind: Literal["choice"] = "choice"


@dataclass(frozen=True, slots=True)
class InvalidAnswer:
    """An answer payload of an unrecognized shape.

    Kept verbatim so it round-trips, but never equal to a ChoiceAnswer,
    which makes it score as incorrect.
    """

    raw: Any
    kind: Literal["invalid"] = "invalid"


AnswerValue = ChoiceAnswer | InvalidAnswer


def parse_answer(raw: Any) -> AnswerValue:
    """Normalize a JSON answer value.

    Accepts ``{"kind": "choice", "value": <int>}`` or a bare int option
    index.  Booleans, numeric strings and floats are not coerced.
    """
    if isinstance(raw, ChoiceAnswer | InvalidAnswer):
        return raw
    if type(raw) is int:
        return ChoiceAnswer(value=raw)
    if isinstance(raw, dict) and raw.get("kind") == "choice" and set(raw) == {
        "kind",
        "value",
    }:
        value = raw["value"]
        if type(value) is int:
            return ChoiceAnswer(value=value)
    return InvalidAnswer(raw=raw)


def answer_to_json(answer: AnswerValue) -> Any:
    if isinstance(answer, ChoiceAnswer):
        return {"kind": answer.kind, "value": answer.value}
    return answer.raw


@dataclass(frozen=True, slots=True)
class Question:
    id: str
    question: str
    category: str
    difficulty: Difficulty
    options: tuple[str, ...]
    correct_answer: ChoiceAnswer | None  # None when withheld from a candidate view
    explanation: str | None = None
    points: int = 1
    type: str = "mcq"  # mcq only; coding|essay are not scored
    tags: tuple[str, ...] = ()
    created_by: str | None = None
    created_at: int = 0

    @staticmethod
    def new(
        *,
        question: str,
        category: str,
        difficulty: Difficulty,
        options: tuple[str, ...],
        correct_answer: ChoiceAnswer | None,
        explanation: str | None = None,
        points: int = 1,
        tags: tuple[str, ...] | None = None,
        created_by: str | None = None,
    ) -> Question:
        return Question(
            id=str(uuid4()),
            question=question,
            category=category,
            difficulty=difficulty,
            options=options,
            correct_answer=correct_answer,
            explanation=explanation,
            points=points,
            tags=tags if tags is not None else (category.lower(), difficulty),
            created_by=created_by,
            created_at=int(datetime.datetime.now(datetime.UTC).timestamp()),
        )
