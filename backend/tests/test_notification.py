from dataclasses import replace

from trivia_quiz.core.config import load_settings
from trivia_quiz.services.notification import (
    LogNotifier,
    SmtpNotifier,
    dispatch_result_email,
    format_duration,
    render_result_email,
)
from trivia_quiz.services.provider_factory import build_notifier
from trivia_quiz.services.scoring import ScoreSummary

RECORDS = [
    {
        "question": "Capital of <France>?",
        "correctAnswer": "Paris",
        "userAnswer": "Paris",
        "isCorrect": True,
        "category": "Geography",
        "difficulty": "easy",
    },
    {
        "question": "2 + 2?",
        "correctAnswer": "4",
        "userAnswer": "Not answered",
        "isCorrect": False,
        "category": None,
        "difficulty": None,
    },
]
SUMMARY = ScoreSummary(correct_answers=1, total_questions=2, score=50)


def test_format_duration():
    assert format_duration(0) == "0:00"
    assert format_duration(65) == "1:05"
    assert format_duration(900) == "15:00"


def test_render_result_email():
    content = render_result_email("me@example.com", RECORDS, SUMMARY, 125)

    assert content.subject == "Quiz Results - You scored 50%!"
    assert "Your Score: 50% (1/2)" in content.text
    assert "Time Taken: 2:05" in content.text
    assert "Correct Answer: 4" in content.text
    assert "Correct Answer: Paris" not in content.text
    assert "Capital of &lt;France&gt;?" in content.html
    assert "Category: Geography | Difficulty: easy" in content.html


def test_dispatch_swallows_transport_errors():
    class BrokenNotifier:
        def send(self, recipient, content):
            raise OSError("connection reset")

    assert dispatch_result_email(BrokenNotifier(), "me@example.com", RECORDS, SUMMARY, 10) is False


def test_log_notifier_reports_not_sent():
    assert dispatch_result_email(LogNotifier(), "me@example.com", RECORDS, SUMMARY, 10) is False


def test_build_notifier_without_smtp_host():
    settings = replace(load_settings(), smtp_host="")
    assert isinstance(build_notifier(settings), LogNotifier)


def test_build_notifier_with_smtp_host():
    settings = replace(load_settings(), smtp_host="smtp.example.com", email_from="quiz@example.com")
    notifier = build_notifier(settings)
    assert isinstance(notifier, SmtpNotifier)
    assert notifier.sender == "quiz@example.com"
