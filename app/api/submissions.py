"""Assessment submission endpoints.

POST scores the submission server-side against the question bank and
stores it with status ``graded``; scores in the request body are ignored.

Idempotency: an ``Idempotency-Key`` header (or ``idempotencyKey`` in the
body) makes retries safe.  A repeat with the same payload returns the
stored record with 200; a repeat with a different payload is 409.  A
first-time submission returns 201.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Header, HTTPException, Query, Response, status

from app.api.dependencies import (
    ActorDep,
    AssessmentRepoDep,
    QuestionRepoDep,
    SubmissionRepoDep,
)
from app.api.schemas import SubmissionIn, SubmissionOut
from app.models.submission import submission_from_wire, submission_to_wire
from app.services import assessment_service
from app.services.assessment_service import (
    AssessmentNotFoundError,
    DuplicateQuestionError,
    SubmissionConflictError,
    UnknownQuestionError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/assessment-submissions", tags=["submissions"])


@router.post("", response_model=SubmissionOut, status_code=status.HTTP_201_CREATED)
async def submit_assessment(
    body: SubmissionIn,
    response: Response,
    actor: ActorDep,
    assessments: AssessmentRepoDep,
    questions: QuestionRepoDep,
    submissions: SubmissionRepoDep,
    idempotency_key: Annotated[str | None, Header()] = None,
) -> dict:
    submission = submission_from_wire(body.model_dump(by_alias=True))
    try:
        stored, created = await assessment_service.grade_submission(
            submission,
            actor=actor,
            assessments=assessments,
            questions=questions,
            submissions=submissions,
            idempotency_key=idempotency_key,
        )
    except AssessmentNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Assessment not found"
        ) from None
    except (UnknownQuestionError, DuplicateQuestionError) as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_CONTENT, detail=str(e)
        ) from None
    except SubmissionConflictError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Idempotency key reuse with a different request payload",
        ) from None

    if not created:
        response.status_code = status.HTTP_200_OK
    return submission_to_wire(stored)


@router.get("", response_model=list[SubmissionOut])
async def list_submissions(
    submissions: SubmissionRepoDep,
    candidate_id: Annotated[str | None, Query()] = None,
    assessment_id: Annotated[str | None, Query()] = None,
) -> list[dict]:
    if candidate_id:
        found = await submissions.list_by_candidate(candidate_id)
    elif assessment_id:
        found = await submissions.list_by_assessment(assessment_id)
    else:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
            detail="candidate_id or assessment_id query parameter required",
        )
    if candidate_id and assessment_id:
        found = [s for s in found if s.assessment_id == assessment_id]
    return [submission_to_wire(s) for s in found]


@router.get("/{submission_id}", response_model=SubmissionOut)
async def get_submission(
    submission_id: str, submissions: SubmissionRepoDep
) -> dict:
    stored = await submissions.get(submission_id)
    if stored is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Submission not found"
        )
    return submission_to_wire(stored)
