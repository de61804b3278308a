from sqlalchemy.exc import SQLAlchemyError

from factories import answer_record, submission_payload

from trivia_quiz.db import models
from trivia_quiz.services import quiz_service


def test_submit_persists_result_and_updates_user(client, db, notifier):
    response = client.post("/api/quiz", json=submission_payload("Player@Example.com", correct=15))

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    data = body["data"]
    assert data["finalScore"] == 100
    assert data["correctAnswers"] == 15
    assert data["totalQuestions"] == 15
    assert data["emailSent"] is True

    result = db.query(models.QuizResult).filter(models.QuizResult.id == data["quizId"]).one()
    assert result.email == "player@example.com"
    assert result.score == 100
    assert result.time_taken_seconds == 120
    assert len(result.answers_json) == 15

    user = db.query(models.User).filter(models.User.id == data["userId"]).one()
    assert user.status == models.USER_STATUS_COMPLETED
    assert user.total_quizzes_taken == 1
    assert user.best_score == 100
    assert user.last_quiz_at is not None

    recipient, content = notifier.sent[0]
    assert recipient == "player@example.com"
    assert content.subject == "Quiz Results - You scored 100%!"


def test_forged_score_is_ignored(client, db):
    payload = submission_payload("forger@example.com", correct=10, score=100)

    response = client.post("/api/quiz", json=payload)

    assert response.status_code == 201
    assert response.json()["data"]["finalScore"] == 67
    assert db.query(models.QuizResult).one().score == 67


def test_forged_correct_flags_are_ignored(client, db):
    payload = submission_payload("forger@example.com", correct=0, total=2)
    payload["answers"] = [
        answer_record("Q1", "yes", "no", is_correct=True),
        answer_record("Q2", "yes", "no", is_correct=True),
    ]

    response = client.post("/api/quiz", json=payload)

    assert response.json()["data"]["finalScore"] == 0
    stored = db.query(models.QuizResult).one()
    assert [item["isCorrect"] for item in stored.answers_json] == [False, False]


def test_retakes_create_separate_results(client, db):
    first = client.post("/api/quiz", json=submission_payload("retake@example.com", correct=12))
    second = client.post("/api/quiz", json=submission_payload("RETAKE@example.com", correct=6))

    assert first.status_code == 201
    assert second.status_code == 201
    assert first.json()["data"]["quizId"] != second.json()["data"]["quizId"]
    assert first.json()["data"]["userId"] == second.json()["data"]["userId"]

    assert db.query(models.QuizResult).count() == 2
    user = db.query(models.User).one()
    assert user.total_quizzes_taken == 2
    assert user.best_score == 80


def test_missing_fields_are_rejected(client, db):
    response = client.post("/api/quiz", json={"email": "a@example.com", "answers": []})

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Validation error"
    assert any("score" in item for item in body["details"])
    assert any("totalQuestions" in item for item in body["details"])
    assert db.query(models.User).count() == 0


def test_answers_must_be_a_list(client, db):
    payload = submission_payload("a@example.com", correct=1)
    payload["answers"] = "everything"

    response = client.post("/api/quiz", json=payload)

    assert response.status_code == 400
    assert db.query(models.QuizResult).count() == 0


def test_invalid_email_is_rejected(client):
    response = client.post("/api/quiz", json=submission_payload("not-an-email", correct=1))
    assert response.status_code == 400


def test_more_answers_than_questions_is_rejected(client):
    payload = submission_payload("a@example.com", correct=3, total=3)
    payload["totalQuestions"] = 2

    response = client.post("/api/quiz", json=payload)

    assert response.status_code == 400


def test_notification_failure_does_not_fail_submission(client, db, notifier):
    notifier.fail = True

    response = client.post("/api/quiz", json=submission_payload("quiet@example.com", correct=5))

    assert response.status_code == 201
    assert response.json()["data"]["emailSent"] is False
    assert db.query(models.QuizResult).count() == 1


def test_persistence_failure_leaves_nothing_committed(client, db, notifier, monkeypatch):
    def broken_record_attempt(user, result):
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(quiz_service, "record_attempt", broken_record_attempt)

    response = client.post("/api/quiz", json=submission_payload("lost@example.com", correct=5))

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
    assert db.query(models.QuizResult).count() == 0
    assert db.query(models.User).count() == 0
    assert notifier.sent == []


def test_error_shape_is_documented(client):
    schema = client.get("/openapi.json").json()

    responses = schema["paths"]["/api/quiz"]["post"]["responses"]
    assert responses["400"]["content"]["application/json"]["schema"]["$ref"].endswith("/ErrorResponse")
    assert "ErrorResponse" in schema["components"]["schemas"]
