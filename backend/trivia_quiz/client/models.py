from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from trivia_quiz.core.emails import is_valid_email

DEFAULT_QUESTION_COUNT = 15
DEFAULT_DURATION_SECONDS = 15 * 60
BOOLEAN_OPTIONS = ("True", "False")


class Phase(str, Enum):
    LOADING = "loading"
    IN_PROGRESS = "in_progress"
    SUBMITTING = "submitting"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (Phase.COMPLETED, Phase.FAILED)


class Trigger(str, Enum):
    MANUAL = "manual"
    AUTO = "auto"


class QuestionType(str, Enum):
    MULTIPLE = "multiple"
    BOOLEAN = "boolean"


@dataclass(frozen=True)
class Question:
    index: int
    category: str
    type: QuestionType
    difficulty: str
    question: str
    correct_answer: str
    incorrect_answers: Tuple[str, ...] = ()

    @property
    def options(self) -> Tuple[str, ...]:
        if self.type is QuestionType.BOOLEAN:
            return BOOLEAN_OPTIONS
        return tuple(sorted((self.correct_answer, *self.incorrect_answers)))


@dataclass(frozen=True)
class SessionConfig:
    email: str
    question_count: int = DEFAULT_QUESTION_COUNT
    duration_seconds: int = DEFAULT_DURATION_SECONDS

    def __post_init__(self) -> None:
        if not is_valid_email(self.email):
            raise ValueError("Valid email is required to take the quiz.")
        if self.question_count < 1:
            raise ValueError("question_count must be positive")
        if self.duration_seconds < 1:
            raise ValueError("duration_seconds must be positive")


@dataclass(frozen=True)
class SubmissionOutcome:
    accepted: bool
    trigger: Trigger
    phase: Phase
    score: Optional[int] = None
    correct_answers: Optional[int] = None
    total_questions: Optional[int] = None
    email_sent: bool = False
    quiz_id: Optional[int] = None
    message: str = ""
    errors: Tuple[str, ...] = field(default_factory=tuple)
