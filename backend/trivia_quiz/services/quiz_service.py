import logging
from typing import Any, Dict, Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from trivia_quiz.core.emails import normalize_email
from trivia_quiz.core.timeutil import utcnow
from trivia_quiz.db import models
from trivia_quiz.services.notification import Notifier, dispatch_result_email
from trivia_quiz.services.scoring import score_answers
from trivia_quiz.services.user_service import get_or_create_user, record_attempt

logger = logging.getLogger(__name__)


class QuizSubmitError(Exception):
    def __init__(self, status_code: int, message: str, details: Optional[list[str]] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.details = details


def submit_quiz(
    db: Session,
    notifier: Notifier,
    email: str,
    total_questions: int,
    answers: Iterable[Any],
    time_taken: int,
    submission_id: Optional[str] = None,
) -> Dict[str, Any]:
    normalized_email = normalize_email(email)
    records, summary = score_answers(total_questions, answers)
    completed_at = utcnow()

    try:
        user = get_or_create_user(db, normalized_email)
        result = models.QuizResult(
            user_id=user.id,
            email=normalized_email,
            score=summary.score,
            total_questions=summary.total_questions,
            correct_answers=summary.correct_answers,
            answers_json=records,
            completed_at=completed_at,
            time_taken_seconds=max(int(time_taken or 0), 0),
            submission_id=submission_id,
        )
        db.add(result)
        record_attempt(user, result)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error saving quiz results for %s", normalized_email)
        raise QuizSubmitError(500, "Internal server error")

    db.refresh(result)
    logger.info(
        "Saved quiz result %s for user %s: %s%% (%s/%s)",
        result.id,
        user.id,
        summary.score,
        summary.correct_answers,
        summary.total_questions,
    )

    email_sent = dispatch_result_email(
        notifier,
        normalized_email,
        records,
        summary,
        result.time_taken_seconds,
    )

    return {
        "quiz_id": result.id,
        "final_score": summary.score,
        "correct_answers": summary.correct_answers,
        "total_questions": summary.total_questions,
        "user_id": user.id,
        "email_sent": email_sent,
    }
