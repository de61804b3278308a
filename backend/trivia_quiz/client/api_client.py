import logging
from typing import Any, Dict, Optional, Protocol

import httpx
from pydantic import ValidationError

from trivia_quiz.client.errors import SubmissionError
from trivia_quiz.schemas.quiz_submit import QuizSubmitData

logger = logging.getLogger(__name__)

SUBMIT_PATH = "/api/quiz"


class SubmissionTransport(Protocol):
    async def submit(self, payload: Dict[str, Any]) -> QuizSubmitData:
        ...


def _extract_error(response: httpx.Response) -> SubmissionError:
    message = f"Submission failed with status {response.status_code}"
    details: list[str] = []
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        message = str(body.get("error") or message)
        raw_details = body.get("details") or []
        if isinstance(raw_details, list):
            details = [str(item) for item in raw_details]
    return SubmissionError(message, status_code=response.status_code, details=details)


def parse_submit_data(body: Any, status_code: Optional[int] = None) -> QuizSubmitData:
    data = body.get("data") if isinstance(body, dict) else None
    if not isinstance(data, dict):
        raise SubmissionError("Quiz server response missing data.", status_code=status_code)
    try:
        return QuizSubmitData.model_validate(data)
    except ValidationError as exc:
        details = [
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
        ]
        logger.warning("Quiz server returned an unexpected body: %s", details)
        raise SubmissionError(
            "Quiz server returned an invalid response.", status_code=status_code, details=details
        ) from exc


class QuizApiClient(SubmissionTransport):
    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or "").strip().rstrip("/")
        self.timeout = timeout
        self.transport = transport
        self.calls = 0

    async def submit(self, payload: Dict[str, Any]) -> QuizSubmitData:
        self.calls += 1
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(f"{self.base_url}{SUBMIT_PATH}", json=payload)
        except httpx.HTTPError as exc:
            logger.warning("Quiz submission request failed: %s", exc)
            raise SubmissionError("Could not reach the quiz server.") from exc

        if response.status_code >= 400:
            error = _extract_error(response)
            logger.warning("Quiz submission rejected (%s): %s", response.status_code, error.message)
            raise error

        try:
            body = response.json()
        except ValueError as exc:
            raise SubmissionError("Quiz server returned invalid JSON.", status_code=response.status_code) from exc
        return parse_submit_data(body, status_code=response.status_code)
