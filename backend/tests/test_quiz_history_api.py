from factories import submission_payload


def _submit(client, email, correct):
    response = client.post("/api/quiz", json=submission_payload(email, correct=correct))
    assert response.status_code == 201
    return response.json()["data"]


def test_history_requires_email_or_user_id(client):
    response = client.get("/api/quiz")
    assert response.status_code == 400
    assert response.json()["error"] == "Either email or userId is required"


def test_history_is_newest_first_with_pagination(client):
    first = _submit(client, "history@example.com", 3)
    second = _submit(client, "history@example.com", 9)
    third = _submit(client, "history@example.com", 15)
    _submit(client, "other@example.com", 1)

    response = client.get("/api/quiz", params={"email": "History@Example.com", "limit": 2, "page": 1})

    assert response.status_code == 200
    data = response.json()["data"]
    assert [item["id"] for item in data["quizResults"]] == [third["quizId"], second["quizId"]]
    assert data["pagination"] == {
        "currentPage": 1,
        "totalPages": 2,
        "totalResults": 3,
        "hasMore": True,
    }
    assert data["userStats"]["bestScore"] == 100
    assert data["userStats"]["totalQuizzesTaken"] == 3

    page_two = client.get("/api/quiz", params={"email": "history@example.com", "limit": 2, "page": 2})
    data = page_two.json()["data"]
    assert [item["id"] for item in data["quizResults"]] == [first["quizId"]]
    assert data["pagination"]["hasMore"] is False


def test_history_by_user_id(client):
    submitted = _submit(client, "byid@example.com", 7)

    response = client.get("/api/quiz", params={"userId": submitted["userId"]})

    data = response.json()["data"]
    assert len(data["quizResults"]) == 1
    assert data["quizResults"][0]["correctAnswers"] == 7
    assert data["userStats"]["email"] == "byid@example.com"


def test_annotate_result(client):
    submitted = _submit(client, "notes@example.com", 4)

    response = client.put(
        "/api/quiz",
        params={"quizId": submitted["quizId"]},
        json={"notes": "check question 3", "flagged": True},
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["notes"] == "check question 3"
    assert data["flagged"] is True
    assert data["score"] == submitted["finalScore"]


def test_annotate_missing_result(client):
    response = client.put("/api/quiz", params={"quizId": 999}, json={"flagged": True})
    assert response.status_code == 404

    response = client.put("/api/quiz", json={"flagged": True})
    assert response.status_code == 400


def test_delete_result(client):
    submitted = _submit(client, "gone@example.com", 4)

    response = client.delete("/api/quiz", params={"quizId": submitted["quizId"]})
    assert response.status_code == 200
    assert response.json()["message"] == "Quiz result deleted successfully"

    again = client.delete("/api/quiz", params={"quizId": submitted["quizId"]})
    assert again.status_code == 404
