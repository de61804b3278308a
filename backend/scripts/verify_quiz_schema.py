import os
import sys
import uuid

BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

from trivia_quiz.core.timeutil import utcnow
from trivia_quiz.db import models
from trivia_quiz.db.session import SessionLocal
from trivia_quiz.services.user_service import record_attempt


def main() -> None:
    email = f"verify-{uuid.uuid4().hex[:8]}@example.com"
    db = SessionLocal()
    try:
        user = models.User(email=email, status=models.USER_STATUS_PENDING, total_quizzes_taken=0)
        db.add(user)
        db.flush()

        result = models.QuizResult(
            user_id=user.id,
            email=email,
            score=100,
            total_questions=1,
            correct_answers=1,
            answers_json=[
                {
                    "question": "Sample question?",
                    "correctAnswer": "True",
                    "userAnswer": "True",
                    "isCorrect": True,
                    "category": "General Knowledge",
                    "difficulty": "easy",
                }
            ],
            completed_at=utcnow(),
            time_taken_seconds=42,
        )
        db.add(result)
        record_attempt(user, result)
        db.commit()

        loaded_user = db.query(models.User).filter(models.User.email == email).first()
        loaded_result = (
            db.query(models.QuizResult).filter(models.QuizResult.user_id == user.id).first()
        )

        print(
            "user_id={user_id} result_id={result_id} status={status} best_score={best_score}".format(
                user_id=loaded_user.id if loaded_user else None,
                result_id=loaded_result.id if loaded_result else None,
                status=loaded_user.status if loaded_user else None,
                best_score=loaded_user.best_score if loaded_user else None,
            )
        )
    finally:
        db.close()


if __name__ == "__main__":
    main()
