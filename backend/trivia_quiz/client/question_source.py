"""Question providers for the quiz session engine.

``OpenTriviaSource`` talks to the Open Trivia DB HTTP API. Every text field is
HTML-entity decoded before it becomes a :class:`Question`, and a batch is
either complete or rejected with :class:`FetchError`.
"""
import html
import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence

import httpx

from trivia_quiz.client.errors import FetchError
from trivia_quiz.client.models import Question, QuestionType

logger = logging.getLogger(__name__)

DEFAULT_TRIVIA_URL = "https://opentdb.com/api.php"

RESPONSE_CODE_MESSAGES = {
    1: "No results: the question pool cannot satisfy the request.",
    2: "Invalid parameter sent to the question provider.",
    3: "Session token not found.",
    4: "Session token has returned all possible questions.",
    5: "Rate limit exceeded. Please wait before requesting more questions.",
}


class QuestionSource(Protocol):
    async def fetch(self, amount: int) -> List[Question]:
        ...


def parse_question(index: int, raw: Dict[str, Any]) -> Question:
    if not isinstance(raw, dict):
        raise FetchError(f"Malformed question record at position {index}")
    try:
        question_type = QuestionType(raw.get("type"))
    except ValueError:
        raise FetchError(f"Unsupported question type: {raw.get('type')!r}")

    text = raw.get("question")
    correct = raw.get("correct_answer")
    if not isinstance(text, str) or not isinstance(correct, str):
        raise FetchError(f"Malformed question record at position {index}")

    incorrect = raw.get("incorrect_answers") or []
    if not isinstance(incorrect, list) or not all(isinstance(item, str) for item in incorrect):
        raise FetchError(f"Malformed question record at position {index}")

    return Question(
        index=index,
        category=html.unescape(str(raw.get("category") or "")),
        type=question_type,
        difficulty=str(raw.get("difficulty") or ""),
        question=html.unescape(text),
        correct_answer=html.unescape(correct),
        incorrect_answers=tuple(html.unescape(item) for item in incorrect),
    )


def parse_questions(payload: Any, amount: int) -> List[Question]:
    if not isinstance(payload, dict):
        raise FetchError("Question provider returned an unexpected body.")

    response_code = payload.get("response_code")
    if response_code != 0:
        message = RESPONSE_CODE_MESSAGES.get(
            response_code, f"API returned error code: {response_code}"
        )
        raise FetchError(message, response_code=response_code)

    results = payload.get("results")
    if not isinstance(results, list) or len(results) < amount:
        count = len(results) if isinstance(results, list) else 0
        raise FetchError(f"Expected {amount} questions, received {count}.", response_code=0)

    return [parse_question(index, raw) for index, raw in enumerate(results[:amount])]


class OpenTriviaSource(QuestionSource):
    def __init__(
        self,
        base_url: str = DEFAULT_TRIVIA_URL,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.transport = transport

    async def fetch(self, amount: int) -> List[Question]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(self.base_url, params={"amount": amount})
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as exc:
            logger.warning("Failed to fetch questions from %s: %s", self.base_url, exc)
            raise FetchError("Failed to fetch questions from API") from exc
        except ValueError as exc:
            raise FetchError("Question provider returned invalid JSON.") from exc
        return parse_questions(payload, amount)


class StaticQuestionSource(QuestionSource):
    """Serves a fixed batch, re-indexed from zero."""

    def __init__(self, questions: Sequence[Question]):
        self.questions = list(questions)
        self.calls = 0

    async def fetch(self, amount: int) -> List[Question]:
        self.calls += 1
        if len(self.questions) < amount:
            raise FetchError(
                f"Expected {amount} questions, received {len(self.questions)}.",
                response_code=1,
            )
        return [
            Question(
                index=index,
                category=item.category,
                type=item.type,
                difficulty=item.difficulty,
                question=item.question,
                correct_answer=item.correct_answer,
                incorrect_answers=item.incorrect_answers,
            )
            for index, item in enumerate(self.questions[:amount])
        ]
