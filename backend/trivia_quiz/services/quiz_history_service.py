import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from trivia_quiz.core.emails import normalize_email
from trivia_quiz.db import models

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


@dataclass
class QuizHistoryError(Exception):
    status_code: int
    message: str
    details: Optional[List[str]] = None


def serialize_result(result: models.QuizResult) -> Dict[str, Any]:
    return {
        "id": result.id,
        "user_id": result.user_id,
        "email": result.email,
        "score": result.score,
        "total_questions": result.total_questions,
        "correct_answers": result.correct_answers,
        "answers": result.answers_json or [],
        "completed_at": result.completed_at,
        "time_taken": result.time_taken_seconds or 0,
        "notes": result.notes,
        "flagged": bool(result.flagged),
        "updated_at": result.updated_at,
    }


def serialize_user(user: models.User) -> Dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "status": user.status,
        "registered_at": user.registered_at,
        "last_quiz_at": user.last_quiz_at,
        "total_quizzes_taken": user.total_quizzes_taken or 0,
        "best_score": user.best_score,
    }


def list_quiz_results(
    db: Session,
    email: Optional[str],
    user_id: Optional[int],
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
) -> Dict[str, Any]:
    if not email and user_id is None:
        raise QuizHistoryError(400, "Either email or userId is required")

    page = max(page, 1)
    limit = max(1, min(limit, MAX_PAGE_SIZE))

    query = db.query(models.QuizResult)
    if email:
        query = query.filter(models.QuizResult.email == normalize_email(email))
    if user_id is not None:
        query = query.filter(models.QuizResult.user_id == user_id)

    total_results = query.count()
    rows = (
        query.order_by(models.QuizResult.completed_at.desc(), models.QuizResult.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    total_pages = math.ceil(total_results / limit)

    user_stats = None
    if email:
        user_stats = (
            db.query(models.User).filter(models.User.email == normalize_email(email)).first()
        )
    elif user_id is not None:
        user_stats = db.query(models.User).filter(models.User.id == user_id).first()

    items: List[Dict[str, Any]] = [serialize_result(row) for row in rows]
    return {
        "quiz_results": items,
        "user_stats": serialize_user(user_stats) if user_stats else None,
        "pagination": {
            "current_page": page,
            "total_pages": total_pages,
            "total_results": total_results,
            "has_more": page < total_pages,
        },
    }


def _get_result_or_error(db: Session, quiz_id: Optional[int]) -> models.QuizResult:
    if quiz_id is None:
        raise QuizHistoryError(400, "Quiz ID is required")
    result = db.query(models.QuizResult).filter(models.QuizResult.id == quiz_id).first()
    if not result:
        raise QuizHistoryError(404, "Quiz result not found")
    return result


def annotate_quiz_result(
    db: Session,
    quiz_id: Optional[int],
    notes: Optional[str],
    flagged: Optional[bool],
) -> models.QuizResult:
    result = _get_result_or_error(db, quiz_id)
    if notes is not None:
        result.notes = notes
    if flagged is not None:
        result.flagged = flagged
    db.commit()
    db.refresh(result)
    return result


def delete_quiz_result(db: Session, quiz_id: Optional[int]) -> None:
    result = _get_result_or_error(db, quiz_id)
    db.delete(result)
    db.commit()
