import logging
from typing import Optional

from trivia_quiz.client.api_client import QuizApiClient, SubmissionTransport
from trivia_quiz.client.models import SessionConfig
from trivia_quiz.client.question_source import DEFAULT_TRIVIA_URL, OpenTriviaSource, QuestionSource
from trivia_quiz.client.session import QuizSession
from trivia_quiz.core.config import Settings

logger = logging.getLogger(__name__)


def build_question_source(settings: Settings) -> OpenTriviaSource:
    url = (settings.trivia_api_url or "").strip()
    if not url:
        logger.warning("TRIVIA_API_URL is empty. Falling back to %s.", DEFAULT_TRIVIA_URL)
        url = DEFAULT_TRIVIA_URL
    return OpenTriviaSource(base_url=url, timeout=settings.http_timeout)


def build_api_client(settings: Settings) -> QuizApiClient:
    return QuizApiClient(settings.quiz_api_base_url, timeout=settings.http_timeout)


def build_session_config(settings: Settings, email: str) -> SessionConfig:
    return SessionConfig(
        email=email,
        question_count=settings.quiz_question_count,
        duration_seconds=settings.quiz_duration_seconds,
    )


def build_session(
    settings: Settings,
    email: str,
    source: Optional[QuestionSource] = None,
    transport: Optional[SubmissionTransport] = None,
    **kwargs,
) -> QuizSession:
    """Wire a session from settings; ``source``/``transport`` override the HTTP defaults."""
    return QuizSession(
        build_session_config(settings, email),
        source=source or build_question_source(settings),
        transport=transport or build_api_client(settings),
        **kwargs,
    )
