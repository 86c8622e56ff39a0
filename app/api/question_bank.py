"""Question bank endpoints.

Reads return the full record (answer key and explanation included) to HR
callers and the candidate view to callers whose X-Actor-Role is
``candidate``.  Writes require X-Actor-Id and drop the cached category
list.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, status

from app.api.dependencies import (
    ActorDep,
    OptionalActorDep,
    QuestionRepoDep,
    RngDep,
)
from app.api.schemas import (
    CandidateQuestionOut,
    GenerateSetIn,
    QuestionIn,
    QuestionOut,
    QuestionUpdate,
)
from app.models.actor import Actor
from app.models.question import Difficulty, Question
from app.services import question_bank
from app.services.question_selector import generate_assessment_set

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/question-bank", tags=["question-bank"])


def render_questions(
    questions: list[Question], actor: Actor | None
) -> list[CandidateQuestionOut] | list[QuestionOut]:
    if actor is not None and actor.is_candidate():
        return [CandidateQuestionOut.from_question(q) for q in questions]
    return [QuestionOut.from_question(q) for q in questions]


@router.get("", response_model=None)
async def list_questions(
    repo: QuestionRepoDep,
    actor: OptionalActorDep,
    category: Annotated[list[str] | None, Query()] = None,
    difficulty: Annotated[list[Difficulty] | None, Query()] = None,
):
    questions = await repo.list_filtered(category or (), difficulty or ())
    return render_questions(questions, actor)


@router.get("/categories", response_model=list[str])
async def list_categories(repo: QuestionRepoDep) -> list[str]:
    return await question_bank.list_categories(repo)


@router.get("/category/{category}", response_model=None)
async def list_by_category(
    category: str, repo: QuestionRepoDep, actor: OptionalActorDep
):
    return render_questions(await repo.list_by_category(category), actor)


@router.post("/generate-assessment", response_model=None)
async def generate_set(
    body: GenerateSetIn,
    repo: QuestionRepoDep,
    actor: OptionalActorDep,
    rng: RngDep,
):
    selected = await generate_assessment_set(
        repo, body.categories, body.difficulties, body.count, rng
    )
    return render_questions(selected, actor)


@router.post("", response_model=QuestionOut, status_code=status.HTTP_201_CREATED)
async def create_question(
    body: QuestionIn, repo: QuestionRepoDep, actor: ActorDep
) -> QuestionOut:
    question = await question_bank.add_question(repo, body.to_question(actor.actor_id))
    return QuestionOut.from_question(question)


@router.post(
    "/bulk", response_model=list[QuestionOut], status_code=status.HTTP_201_CREATED
)
async def create_questions(
    body: list[QuestionIn], repo: QuestionRepoDep, actor: ActorDep
) -> list[QuestionOut]:
    questions = await question_bank.add_questions(
        repo, [q.to_question(actor.actor_id) for q in body]
    )
    return [QuestionOut.from_question(q) for q in questions]


@router.get("/{question_id}", response_model=None)
async def get_question(
    question_id: str, repo: QuestionRepoDep, actor: OptionalActorDep
):
    question = await repo.get(question_id)
    if question is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Question not found"
        )
    return render_questions([question], actor)[0]


@router.put("/{question_id}", response_model=QuestionOut)
async def update_question(
    question_id: str, body: QuestionUpdate, repo: QuestionRepoDep, actor: ActorDep
) -> QuestionOut:
    changes = body.to_changes()
    existing = await repo.get(question_id)
    if existing is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Question not found"
        )

    options = changes.get("options", existing.options)
    key = changes.get("correct_answer", existing.correct_answer)
    if key is not None and key.value >= len(options):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
            detail=f"correctAnswer {key.value} out of range for {len(options)} options",
        )

    updated = await question_bank.update_question(repo, question_id, changes)
    if updated is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Question not found"
        )
    logger.info(
        "Question updated id=%s fields=%s by=%s",
        question_id,
        sorted(changes),
        actor.actor_id,
    )
    return QuestionOut.from_question(updated)


@router.delete("/{question_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_question(
    question_id: str, repo: QuestionRepoDep, actor: ActorDep
) -> None:
    if not await question_bank.delete_question(repo, question_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Question not found"
        )
    logger.info("Question deleted id=%s by=%s", question_id, actor.actor_id)
