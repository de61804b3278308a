from typing import Optional, Sequence


class QuizEngineError(Exception):
    pass


class FetchError(QuizEngineError):
    """The question provider was unreachable, rate limited or returned too few questions."""

    def __init__(self, message: str, response_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.response_code = response_code


class SubmissionError(QuizEngineError):
    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Sequence[str]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = tuple(details or ())


class SessionStateError(QuizEngineError):
    pass


class InvalidAnswerError(QuizEngineError, ValueError):
    pass


class NavigationError(QuizEngineError, IndexError):
    pass
