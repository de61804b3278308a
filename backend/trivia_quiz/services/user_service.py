import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from trivia_quiz.core.emails import is_valid_email, normalize_email
from trivia_quiz.core.timeutil import utcnow
from trivia_quiz.db import models

logger = logging.getLogger(__name__)


@dataclass
class RegistrationError(Exception):
    status_code: int
    message: str
    details: Optional[Dict[str, object]] = None


def find_user_by_email(db: Session, email: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.email == normalize_email(email)).first()


def get_or_create_user(db: Session, email: str) -> models.User:
    """Return the user for ``email``, adding a pending one if unseen.

    The new row is flushed, not committed; the caller owns the transaction.
    """
    user = find_user_by_email(db, email)
    if user:
        return user
    user = models.User(
        email=normalize_email(email),
        status=models.USER_STATUS_PENDING,
        registered_at=utcnow(),
        total_quizzes_taken=0,
    )
    db.add(user)
    db.flush()
    return user


def record_attempt(user: models.User, result: models.QuizResult) -> None:
    user.status = models.USER_STATUS_COMPLETED
    user.last_quiz_at = result.completed_at
    user.total_quizzes_taken = (user.total_quizzes_taken or 0) + 1
    if user.best_score is None or result.score > user.best_score:
        user.best_score = result.score


def register_email(db: Session, email: Optional[str]) -> Tuple[models.User, bool, str]:
    if not email:
        raise RegistrationError(400, "Email is required")
    if not is_valid_email(email):
        raise RegistrationError(400, "Please enter a valid email address")

    existing = find_user_by_email(db, email)
    if existing:
        if existing.status == models.USER_STATUS_PENDING:
            return existing, False, "Welcome back! You can continue to the quiz."
        return existing, False, "Ready for another challenge? Let's go!"

    user = models.User(
        email=normalize_email(email),
        status=models.USER_STATUS_PENDING,
        registered_at=utcnow(),
        total_quizzes_taken=0,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning("Concurrent registration for %s", normalize_email(email))
        raise RegistrationError(409, "An account with this email already exists.")
    db.refresh(user)
    logger.info("Registered user %s", user.id)
    return user, True, "Registration successful! Get ready for the quiz."
