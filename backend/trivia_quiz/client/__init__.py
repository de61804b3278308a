from .api_client import QuizApiClient
from .countdown import CountdownScheduler
from .errors import (
    FetchError,
    InvalidAnswerError,
    NavigationError,
    QuizEngineError,
    SessionStateError,
    SubmissionError,
)
from .factory import build_api_client, build_question_source, build_session, build_session_config
from .models import Phase, Question, QuestionType, SessionConfig, SubmissionOutcome, Trigger
from .question_source import OpenTriviaSource, QuestionSource, StaticQuestionSource
from .session import QuizSession

__all__ = [
    "CountdownScheduler",
    "FetchError",
    "InvalidAnswerError",
    "NavigationError",
    "OpenTriviaSource",
    "Phase",
    "Question",
    "QuestionSource",
    "QuestionType",
    "QuizApiClient",
    "QuizEngineError",
    "QuizSession",
    "SessionConfig",
    "SessionStateError",
    "StaticQuestionSource",
    "SubmissionError",
    "SubmissionOutcome",
    "Trigger",
    "build_api_client",
    "build_question_source",
    "build_session",
    "build_session_config",
]
