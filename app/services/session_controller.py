"""Timed assessment session: one candidate attempt from start to submission.

States::

    not_started -> in_progress -> submitting -> submitted
                                             -> auto_submitted
                   in_progress <- submitting     (persistence failed)

The countdown is driven either by calling tick() once per elapsed second
or by the asyncio task from start_countdown().  When the remaining time
reaches zero the session submits whatever answers it has.  A manual
submit and the timer can both ask to submit; the ``_submitting`` flag lets
only the first through.  Everything runs on one event loop, so a plain
flag is enough.

Full-screen and tab-visibility handling is best effort and advisory: a
refused full-screen request is logged, a hidden tab produces a warning.
Neither affects the score.
"""

from __future__ import annotations

import asyncio
import datetime
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any, Literal, Protocol
from uuid import uuid4

from app.core.metrics import SESSION_EVENTS
from app.models.assessment import AssessmentDefinition
from app.models.question import AnswerValue, Question, parse_answer
from app.models.submission import Submission
from app.services.question_selector import AssessmentConfigurationError
from app.services.scorer import round_half_up, score_submission

logger = logging.getLogger(__name__)

SessionState = Literal[
    "not_started", "in_progress", "submitting", "submitted", "auto_submitted"
]

Submitter = Callable[[Submission], Awaitable[Submission]]
Sleep = Callable[[float], Awaitable[Any]]

# The clock also runs while a submit is in flight.  Reaching zero then only
# marks the session expired; the in-flight submit carries the answers.
_CLOCK_RUNNING: tuple[SessionState, ...] = ("in_progress", "submitting")

TAB_SWITCH_WARNING = "Tab switching detected. Please stay focused on the assessment."
SUBMIT_FAILED_WARNING = "Failed to submit assessment. Please try again."


class SessionStateError(Exception):
    """Operation not allowed in the session's current state."""


class SubmissionFailedError(Exception):
    """Persisting the submission failed; the session is open for a retry."""


class Presentation(Protocol):
    """Candidate-facing surface the session drives."""

    async def enter_fullscreen(self) -> None: ...
    async def exit_fullscreen(self) -> None: ...
    def set_leave_guard(self, enabled: bool) -> None: ...
    def warn(self, message: str) -> None: ...


class HeadlessPresentation:
    """No-op surface for server-side or scripted sessions."""

    async def enter_fullscreen(self) -> None:
        return None

    async def exit_fullscreen(self) -> None:
        return None

    def set_leave_guard(self, enabled: bool) -> None:
        return None

    def warn(self, message: str) -> None:
        return None


def _epoch_now() -> int:
    return int(datetime.datetime.now(datetime.UTC).timestamp())


@dataclass(frozen=True, slots=True)
class SessionContext:
    """Who is taking the assessment, passed in rather than looked up."""

    candidate_id: str
    application_id: str


class TimedSession:
    def __init__(
        self,
        assessment: AssessmentDefinition,
        questions: Sequence[Question],
        context: SessionContext,
        submitter: Submitter,
        *,
        presentation: Presentation | None = None,
        clock: Callable[[], int] = _epoch_now,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.assessment = assessment
        self.questions: tuple[Question, ...] = tuple(questions)
        self.context = context
        self.idempotency_key = str(uuid4())

        self._submitter = submitter
        self._presentation: Presentation = presentation or HeadlessPresentation()
        self._clock = clock
        self._sleep = sleep

        self._state: SessionState = "not_started"
        self._submitting = False
        self._remaining = 0
        self._expired = False
        self._started_at: int | None = None
        self._fullscreen = False
        self._countdown: asyncio.Task[None] | None = None
        self._question_ids = frozenset(q.id for q in self.questions)

        self.answers: dict[str, AnswerValue] = {}
        self.flagged_questions: set[int] = set()
        self.visibility_warnings = 0
        self.result: Submission | None = None

    # -- read-only state -------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def remaining_seconds(self) -> int:
        return self._remaining

    @property
    def is_submitting(self) -> bool:
        return self._submitting

    @property
    def is_expired(self) -> bool:
        """True once the countdown has reached zero; answers are frozen."""
        return self._expired

    @property
    def is_fullscreen(self) -> bool:
        return self._fullscreen

    @property
    def answered_count(self) -> int:
        return len(self.answers)

    @property
    def time_limit_seconds(self) -> int:
        return self.assessment.time_limit * 60

    @property
    def time_spent_minutes(self) -> int:
        if self._state == "not_started":
            return 0
        return round_half_up(self.time_limit_seconds - self._remaining, 60)

    def format_remaining(self) -> str:
        mins, secs = divmod(self._remaining, 60)
        return f"{mins}:{secs:02d}"

    def should_confirm_leave(self) -> bool:
        """True while leaving the page would lose an unsubmitted attempt."""
        return self._state == "in_progress" and not self._submitting

    # -- lifecycle -------------------------------------------------------

    async def start(self) -> None:
        if self._state != "not_started":
            raise SessionStateError(f"cannot start a session in state {self._state}")
        if not self.questions:
            raise AssessmentConfigurationError(
                f"assessment {self.assessment.id} has no questions to present"
            )

        self._remaining = self.time_limit_seconds
        self._started_at = self._clock()
        self._state = "in_progress"
        self._presentation.set_leave_guard(True)
        SESSION_EVENTS.labels(event="started").inc()
        logger.info(
            "Assessment session started assessment=%s candidate=%s questions=%d "
            "limit=%ds",
            self.assessment.id,
            self.context.candidate_id,
            len(self.questions),
            self._remaining,
            extra=self._log_context(),
        )

        if self.assessment.prevent_cheating:
            await self._enter_fullscreen()

    def start_countdown(self) -> asyncio.Task[None]:
        """Run the one-second countdown as a task on the current loop."""
        if self._state != "in_progress":
            raise SessionStateError("countdown requires an in-progress session")
        if self._countdown is None or self._countdown.done():
            self._countdown = asyncio.create_task(self.run_countdown())
        return self._countdown

    async def run_countdown(self) -> None:
        while self._state in _CLOCK_RUNNING and self._remaining > 0:
            await self._sleep(1)
            try:
                await self.tick()
            except SubmissionFailedError:
                # Time is up and the auto-submit did not persist; the
                # candidate retries with submit().
                return

    async def tick(self) -> Submission | None:
        """Advance the clock by one second; auto-submits at zero.

        The clock keeps running while a manual submit is in flight; reaching
        zero then only marks the session expired because the in-flight
        submit wins.
        """
        if self._state not in _CLOCK_RUNNING or self._remaining <= 0:
            return None
        self._remaining -= 1
        if self._remaining == 0:
            self._expired = True
            return await self._submit(auto=True)
        return None

    def answer(self, question_id: str, value: Any) -> bool:
        """Record an answer.

        Ignored outside in_progress, while submitting, after time ran out and
        for unknown ids.
        """
        if self._state != "in_progress" or self._submitting or self._expired:
            logger.debug(
                "Answer ignored in state=%s expired=%s", self._state, self._expired
            )
            return False
        if question_id not in self._question_ids:
            logger.warning(
                "Answer for question=%s not in this session", question_id
            )
            return False
        self.answers[question_id] = parse_answer(value)
        return True

    def toggle_flag(self, index: int) -> bool:
        """Mark or unmark a question for the candidate's own review."""
        if not 0 <= index < len(self.questions):
            raise IndexError(f"question index {index} out of range")
        if index in self.flagged_questions:
            self.flagged_questions.discard(index)
            return False
        self.flagged_questions.add(index)
        return True

    async def submit(self) -> Submission | None:
        """Manual submit.  Returns None if a submission already happened.

        After time ran out this is the retry of the expired attempt, so it
        is recorded as an auto-submit.
        """
        if self._state == "not_started":
            raise SessionStateError("cannot submit before the session starts")
        return await self._submit(auto=self._expired)

    def on_visibility_change(self, hidden: bool) -> None:
        """Tab hidden/shown.  Warns only; scoring is unaffected."""
        if not hidden or self._state != "in_progress":
            return
        if not self.assessment.prevent_cheating:
            return
        self.visibility_warnings += 1
        SESSION_EVENTS.labels(event="visibility_warning").inc()
        logger.warning(
            "Tab hidden during assessment=%s candidate=%s (count=%d)",
            self.assessment.id,
            self.context.candidate_id,
            self.visibility_warnings,
            extra=self._log_context(),
        )
        self._presentation.warn(TAB_SWITCH_WARNING)

    # -- internals -------------------------------------------------------

    def build_submission(self) -> Submission:
        """Snapshot of the attempt as it would be sent right now."""
        if all(q.correct_answer is not None for q in self.questions):
            preview = score_submission(self.questions, self.answers)
            scores: dict[str, Any] = {
                "score": preview.score,
                "max_score": preview.max_score,
                "percentage": preview.percentage,
                "category_scores": preview.category_scores,
            }
        else:
            scores = {}

        return Submission(
            assessment_id=self.assessment.id,
            candidate_id=self.context.candidate_id,
            application_id=self.context.application_id,
            selected_questions=tuple(q.id for q in self.questions),
            answers=dict(self.answers),
            time_spent=self.time_spent_minutes,
            status="submitted",
            started_at=self._started_at,
            submitted_at=self._clock(),
            idempotency_key=self.idempotency_key,
            **scores,
        )

    async def _submit(self, *, auto: bool) -> Submission | None:
        if self._submitting or self._state != "in_progress":
            return None

        self._submitting = True
        self._state = "submitting"
        self._presentation.set_leave_guard(False)

        submission = self.build_submission()
        try:
            persisted = await self._submitter(submission)
        except Exception as exc:
            self._submitting = False
            self._state = "in_progress"
            # Unsaved attempt: the guard stays on even after time ran out.
            self._presentation.set_leave_guard(True)
            SESSION_EVENTS.labels(event="submit_failed").inc()
            logger.warning(
                "Submission failed for assessment=%s candidate=%s auto=%s: %s",
                self.assessment.id,
                self.context.candidate_id,
                auto,
                exc,
                extra=self._log_context(),
            )
            self._presentation.warn(SUBMIT_FAILED_WARNING)
            raise SubmissionFailedError(str(exc)) from exc

        self._stop_countdown()
        if self._fullscreen:
            await self._exit_fullscreen()

        self._state = "auto_submitted" if auto else "submitted"
        self.result = persisted
        SESSION_EVENTS.labels(event=self._state).inc()
        logger.info(
            "Assessment %s assessment=%s candidate=%s answered=%d/%d",
            "auto-submitted" if auto else "submitted",
            self.assessment.id,
            self.context.candidate_id,
            len(self.answers),
            len(self.questions),
            extra=self._log_context(),
        )
        return persisted

    def _stop_countdown(self) -> None:
        task = self._countdown
        self._countdown = None
        if task is None or task.done():
            return
        # Auto-submit runs inside the countdown task; it ends on its own.
        if task is not asyncio.current_task():
            task.cancel()

    async def _enter_fullscreen(self) -> None:
        try:
            await self._presentation.enter_fullscreen()
        except Exception as exc:
            SESSION_EVENTS.labels(event="fullscreen_failed").inc()
            logger.warning("Fullscreen not supported or denied: %s", exc)
            return
        self._fullscreen = True

    async def _exit_fullscreen(self) -> None:
        try:
            await self._presentation.exit_fullscreen()
        except Exception as exc:
            logger.warning("Exit fullscreen failed: %s", exc)
            return
        self._fullscreen = False

    def _log_context(self) -> dict[str, str]:
        return {
            "assessment_id": self.assessment.id,
            "candidate_id": self.context.candidate_id,
        }
