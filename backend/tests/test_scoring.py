from factories import answer_record

from trivia_quiz.services.scoring import NOT_ANSWERED, percentage, score_answers


def test_percentage_rounds_half_up():
    assert percentage(15, 15) == 100
    assert percentage(10, 15) == 67
    assert percentage(1, 8) == 13
    assert percentage(1, 3) == 33
    assert percentage(0, 15) == 0


def test_percentage_of_empty_quiz_is_zero():
    assert percentage(0, 0) == 0


def test_forged_correct_flags_are_recomputed():
    records = [
        answer_record("Q1", "Paris", "Paris", is_correct=False),
        answer_record("Q2", "Rome", "Madrid", is_correct=True),
        answer_record("Q3", "Oslo", "Oslo"),
    ]
    scored, summary = score_answers(3, records)

    assert [item["isCorrect"] for item in scored] == [True, False, True]
    assert summary.correct_answers == 2
    assert summary.score == 67


def test_equality_is_exact():
    scored, summary = score_answers(1, [answer_record("Q1", "Tom & Jerry", "tom & jerry")])
    assert scored[0]["isCorrect"] is False
    assert summary.score == 0


def test_unanswered_questions_count_against_total():
    records = [answer_record(f"Q{i}", "A", "A") for i in range(10)]
    records += [answer_record(f"Q{i}", "A", NOT_ANSWERED) for i in range(10, 15)]
    scored, summary = score_answers(15, records)

    assert summary.correct_answers == 10
    assert summary.score == 67
    assert all(item["isCorrect"] is False for item in scored[10:])
