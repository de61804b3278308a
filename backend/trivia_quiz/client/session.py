"""Client-side quiz session engine.

A :class:`QuizSession` is one timed attempt. It moves through
``LOADING -> IN_PROGRESS -> SUBMITTING -> COMPLETED`` (or ``FAILED``) and
never goes back. Commands that mutate answers or the current question are
synchronous; only ``fetch_questions`` and ``submit`` suspend.

The submit guard flips the phase to ``SUBMITTING`` before the first await,
so whichever of the manual click and the countdown expiry gets there first
is the only one that reaches the network. A failed submission keeps the
latch; retrying means building a new session.
"""
import asyncio
import logging
import time
from datetime import datetime
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Tuple
from uuid import uuid4

from trivia_quiz.client.api_client import SubmissionTransport
from trivia_quiz.client.countdown import CountdownScheduler
from trivia_quiz.client.errors import (
    FetchError,
    InvalidAnswerError,
    NavigationError,
    QuizEngineError,
    SessionStateError,
    SubmissionError,
)
from trivia_quiz.client.models import (
    Phase,
    Question,
    SessionConfig,
    SubmissionOutcome,
    Trigger,
)
from trivia_quiz.client.question_source import QuestionSource
from trivia_quiz.core.timeutil import utcnow
from trivia_quiz.services.scoring import NOT_ANSWERED, percentage

logger = logging.getLogger(__name__)

FETCH_FAILED_MESSAGE = (
    "Failed to load quiz questions. Please check your internet connection and try again."
)
SUBMIT_FAILED_MESSAGE = (
    "Failed to submit quiz. Please check your internet connection and try again."
)

PhaseListener = Callable[[Phase, Phase], None]

_ALLOWED_TRANSITIONS = {
    Phase.LOADING: {Phase.IN_PROGRESS, Phase.FAILED},
    Phase.IN_PROGRESS: {Phase.SUBMITTING},
    Phase.SUBMITTING: {Phase.COMPLETED, Phase.FAILED},
    Phase.COMPLETED: set(),
    Phase.FAILED: set(),
}


def _success_message(trigger: Trigger, score: int, correct: int, total: int, email_sent: bool) -> str:
    if trigger is Trigger.AUTO:
        prefix = "Time's up! Your quiz has been auto-submitted."
    else:
        prefix = "Quiz submitted successfully!"
    message = f"{prefix} Score: {score}% ({correct}/{total})."
    if email_sent:
        message += " Check your email for detailed results!"
    return message


class QuizSession:
    def __init__(
        self,
        config: SessionConfig,
        source: QuestionSource,
        transport: SubmissionTransport,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        now: Callable[[], datetime] = utcnow,
    ):
        self.config = config
        self._source = source
        self._transport = transport
        self._now = now
        self._phase = Phase.LOADING
        self._fetch_requested = False
        self._questions: Tuple[Question, ...] = ()
        self._answers: Dict[int, str] = {}
        self._current_index = 0
        self._listeners: List[PhaseListener] = []
        self._countdown = CountdownScheduler(
            config.duration_seconds,
            on_expire=self._submit_on_deadline,
            clock=clock,
            sleep=sleep,
        )
        self.started_at: Optional[datetime] = None
        self.submission_id: Optional[str] = None
        self.error: Optional[QuizEngineError] = None
        self.message = ""
        self.outcome: Optional[SubmissionOutcome] = None

    # -- state -------------------------------------------------------------

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def finished(self) -> bool:
        return self._phase.is_terminal

    @property
    def questions(self) -> Tuple[Question, ...]:
        return self._questions

    @property
    def answers(self) -> Mapping[int, str]:
        return MappingProxyType(self._answers)

    @property
    def answered_count(self) -> int:
        return len(self._answers)

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def current_question(self) -> Optional[Question]:
        if not self._questions:
            return None
        return self._questions[self._current_index]

    @property
    def countdown(self) -> CountdownScheduler:
        return self._countdown

    @property
    def remaining_seconds(self) -> int:
        return self._countdown.remaining_seconds()

    def options_for(self, index: int) -> Tuple[str, ...]:
        return self._question_at(index, NavigationError).options

    # -- notification channel ---------------------------------------------

    def subscribe(self, listener: PhaseListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _transition(self, new_phase: Phase) -> None:
        previous = self._phase
        if new_phase not in _ALLOWED_TRANSITIONS[previous]:
            raise SessionStateError(f"Cannot move from {previous.value} to {new_phase.value}")
        self._phase = new_phase
        logger.debug("Quiz session %s: %s -> %s", self.submission_id, previous.value, new_phase.value)
        if new_phase is not Phase.IN_PROGRESS:
            self._countdown.cancel()
        for listener in list(self._listeners):
            listener(previous, new_phase)

    def _fail(self, error: QuizEngineError, message: str) -> None:
        self.error = error
        self.message = message
        self._transition(Phase.FAILED)

    # -- commands ----------------------------------------------------------

    async def fetch_questions(self) -> Phase:
        if self._phase is not Phase.LOADING or self._fetch_requested:
            raise SessionStateError("Questions are fetched once, while the session is loading")
        self._fetch_requested = True

        try:
            questions = await self._source.fetch(self.config.question_count)
        except FetchError as exc:
            logger.warning("Failed to initialize quiz: %s", exc.message)
            self._fail(exc, FETCH_FAILED_MESSAGE)
            return self._phase

        if len(questions) != self.config.question_count:
            error = FetchError(
                f"Expected {self.config.question_count} questions, received {len(questions)}."
            )
            self._fail(error, FETCH_FAILED_MESSAGE)
            return self._phase

        self._questions = tuple(questions)
        self.started_at = self._now()
        self.submission_id = uuid4().hex
        self._transition(Phase.IN_PROGRESS)
        self._countdown.start()
        return self._phase

    def _require_in_progress(self, action: str) -> None:
        if self._phase is not Phase.IN_PROGRESS:
            raise SessionStateError(f"Cannot {action} while the quiz is {self._phase.value}")

    def _question_at(self, index: int, error_cls: type) -> Question:
        if not isinstance(index, int) or not 0 <= index < len(self._questions):
            raise error_cls(f"Question index {index!r} is out of range")
        return self._questions[index]

    def select_answer(self, index: int, text: str) -> None:
        self._require_in_progress("select an answer")
        question = self._question_at(index, InvalidAnswerError)
        if text not in question.options:
            raise InvalidAnswerError(f"{text!r} is not an option for question {index}")
        self._answers[index] = text

    def navigate(self, to_index: int) -> Question:
        self._require_in_progress("navigate")
        question = self._question_at(to_index, NavigationError)
        self._current_index = to_index
        return question

    def next_question(self) -> Question:
        return self.navigate(min(self._current_index + 1, len(self._questions) - 1))

    def previous_question(self) -> Question:
        return self.navigate(max(self._current_index - 1, 0))

    def close(self) -> None:
        if not self.finished:
            logger.info("Closing quiz session %s while %s", self.submission_id, self._phase.value)
        self._countdown.cancel()

    # -- submission --------------------------------------------------------

    def build_payload(self, remaining_seconds: int) -> Dict[str, Any]:
        records = []
        correct = 0
        for question in self._questions:
            user_answer = self._answers.get(question.index)
            is_correct = user_answer is not None and user_answer == question.correct_answer
            if is_correct:
                correct += 1
            records.append(
                {
                    "question": question.question,
                    "correctAnswer": question.correct_answer,
                    "userAnswer": user_answer if user_answer is not None else NOT_ANSWERED,
                    "isCorrect": is_correct,
                    "category": question.category,
                    "difficulty": question.difficulty,
                }
            )
        duration = self.config.duration_seconds
        time_taken = min(max(duration - remaining_seconds, 0), duration)
        return {
            "email": self.config.email,
            "score": percentage(correct, len(self._questions)),
            "totalQuestions": len(self._questions),
            "answers": records,
            "timeTaken": time_taken,
            "submissionId": self.submission_id,
        }

    async def submit(self, trigger: Trigger = Trigger.MANUAL) -> SubmissionOutcome:
        if self._phase is not Phase.IN_PROGRESS:
            logger.debug("Ignoring %s submit while %s", trigger.value, self._phase.value)
            return SubmissionOutcome(accepted=False, trigger=trigger, phase=self._phase)

        remaining = 0 if trigger is Trigger.AUTO else self._countdown.remaining_seconds()
        self._transition(Phase.SUBMITTING)
        payload = self.build_payload(remaining)
        logger.info(
            "Submitting quiz %s (%s, %s/%s answered)",
            self.submission_id,
            trigger.value,
            self.answered_count,
            len(self._questions),
        )

        try:
            data = await self._transport.submit(payload)
        except SubmissionError as exc:
            self._fail(exc, SUBMIT_FAILED_MESSAGE)
            self.outcome = SubmissionOutcome(
                accepted=True,
                trigger=trigger,
                phase=self._phase,
                message=self.message,
                errors=(exc.message, *exc.details),
            )
            return self.outcome

        self.message = _success_message(
            trigger, data.final_score, data.correct_answers, data.total_questions, data.email_sent
        )
        self._transition(Phase.COMPLETED)
        self.outcome = SubmissionOutcome(
            accepted=True,
            trigger=trigger,
            phase=self._phase,
            score=data.final_score,
            correct_answers=data.correct_answers,
            total_questions=data.total_questions,
            email_sent=data.email_sent,
            quiz_id=data.quiz_id,
            message=self.message,
        )
        return self.outcome

    async def _submit_on_deadline(self) -> None:
        await self.submit(Trigger.AUTO)
