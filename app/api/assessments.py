"""Assessment definition endpoints and session start.

A definition that could never produce a question (no bank match, unknown
manual ids) is rejected with 422 on create and update.  If the bank
changes afterwards and nothing matches any more, starting a session
returns 409.  Deleting a definition that already has submissions also
returns 409.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, status

from app.api.dependencies import (
    ActorDep,
    AssessmentRepoDep,
    QuestionRepoDep,
    RngDep,
    SubmissionRepoDep,
)
from app.api.schemas import (
    AssessmentIn,
    AssessmentOut,
    AssessmentUpdate,
    CandidateQuestionOut,
    SessionStartOut,
)
from app.services import assessment_service
from app.services.assessment_service import (
    AssessmentInUseError,
    AssessmentNotFoundError,
)
from app.services.question_selector import AssessmentConfigurationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/assessments", tags=["assessments"])


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND, detail="Assessment not found"
    )


@router.post("", response_model=AssessmentOut, status_code=status.HTTP_201_CREATED)
async def create_assessment(
    body: AssessmentIn,
    actor: ActorDep,
    assessments: AssessmentRepoDep,
    questions: QuestionRepoDep,
) -> AssessmentOut:
    try:
        created = await assessment_service.create_assessment(
            body.to_definition(actor.actor_id),
            actor=actor,
            assessments=assessments,
            questions=questions,
        )
    except AssessmentConfigurationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_CONTENT, detail=str(e)
        ) from None
    return AssessmentOut.from_definition(created)


@router.get("", response_model=list[AssessmentOut])
async def list_assessments(
    assessments: AssessmentRepoDep,
    job_id: Annotated[str | None, Query()] = None,
) -> list[AssessmentOut]:
    if job_id:
        found = await assessments.list_by_job(job_id)
    else:
        found = await assessments.list_all()
    return [AssessmentOut.from_definition(a) for a in found]


@router.get("/{assessment_id}", response_model=AssessmentOut)
async def get_assessment(
    assessment_id: str, assessments: AssessmentRepoDep
) -> AssessmentOut:
    definition = await assessments.get(assessment_id)
    if definition is None:
        raise _not_found()
    return AssessmentOut.from_definition(definition)


@router.put("/{assessment_id}", response_model=AssessmentOut)
async def update_assessment(
    assessment_id: str,
    body: AssessmentUpdate,
    actor: ActorDep,
    assessments: AssessmentRepoDep,
    questions: QuestionRepoDep,
) -> AssessmentOut:
    try:
        updated = await assessment_service.update_assessment(
            assessment_id,
            body.to_changes(),
            actor=actor,
            assessments=assessments,
            questions=questions,
        )
    except AssessmentNotFoundError:
        raise _not_found() from None
    except AssessmentConfigurationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_CONTENT, detail=str(e)
        ) from None
    return AssessmentOut.from_definition(updated)


@router.delete("/{assessment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_assessment(
    assessment_id: str,
    actor: ActorDep,
    assessments: AssessmentRepoDep,
    submissions: SubmissionRepoDep,
) -> None:
    try:
        await assessment_service.delete_assessment(
            assessment_id,
            actor=actor,
            assessments=assessments,
            submissions=submissions,
        )
    except AssessmentNotFoundError:
        raise _not_found() from None
    except AssessmentInUseError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from None


@router.post("/{assessment_id}/start", response_model=SessionStartOut)
async def start_assessment(
    assessment_id: str,
    actor: ActorDep,
    assessments: AssessmentRepoDep,
    questions: QuestionRepoDep,
    rng: RngDep,
) -> SessionStartOut:
    """Realize the question set for one attempt.  Answer keys are withheld."""
    try:
        definition, selected = await assessment_service.start_assessment(
            assessment_id,
            actor=actor,
            assessments=assessments,
            questions=questions,
            rng=rng,
        )
    except AssessmentNotFoundError:
        raise _not_found() from None
    except AssessmentConfigurationError as e:
        logger.warning("Session start refused for assessment=%s: %s", assessment_id, e)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from None

    return SessionStartOut(
        assessment=AssessmentOut.from_definition(definition),
        questions=[CandidateQuestionOut.from_question(q) for q in selected],
    )
