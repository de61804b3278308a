import html
import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Any, Dict, List, Protocol

from trivia_quiz.services.scoring import ScoreSummary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmailContent:
    subject: str
    html: str
    text: str


class Notifier(Protocol):
    def send(self, recipient: str, content: EmailContent) -> bool:
        ...


def format_duration(seconds: int) -> str:
    seconds = max(int(seconds or 0), 0)
    return f"{seconds // 60}:{seconds % 60:02d}"


def _render_html_answers(records: List[Dict[str, Any]]) -> str:
    blocks = []
    for index, record in enumerate(records, start=1):
        css = "correct" if record.get("isCorrect") else "incorrect"
        lines = [
            f"<strong>Q{index}:</strong> {html.escape(str(record.get('question') or ''))}<br>",
            f"<strong>Your Answer:</strong> {html.escape(str(record.get('userAnswer') or ''))}<br>",
        ]
        if not record.get("isCorrect"):
            lines.append(
                f"<strong>Correct Answer:</strong> {html.escape(str(record.get('correctAnswer') or ''))}<br>"
            )
        if record.get("category"):
            lines.append(
                "<small><em>Category: {category} | Difficulty: {difficulty}</em></small>".format(
                    category=html.escape(str(record.get("category"))),
                    difficulty=html.escape(str(record.get("difficulty") or "")),
                )
            )
        blocks.append(f'<div class="answer {css}">{"".join(lines)}</div>')
    return "\n".join(blocks)


def _render_text_answers(records: List[Dict[str, Any]]) -> str:
    blocks = []
    for index, record in enumerate(records, start=1):
        lines = [
            f"Q{index}: {record.get('question')}",
            f"Your Answer: {record.get('userAnswer')}",
        ]
        if record.get("isCorrect"):
            lines.append("Correct!")
        else:
            lines.append(f"Correct Answer: {record.get('correctAnswer')}")
        if record.get("category"):
            lines.append(f"({record.get('category')} - {record.get('difficulty') or ''})")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def render_result_email(
    email: str,
    records: List[Dict[str, Any]],
    summary: ScoreSummary,
    time_taken: int,
) -> EmailContent:
    incorrect = len(records) - summary.correct_answers
    duration = format_duration(time_taken)
    subject = f"Quiz Results - You scored {summary.score}%!"
    body_html = (
        "<!DOCTYPE html><html><head><style>"
        "body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; }"
        ".answer { margin: 10px 0; padding: 10px; border-radius: 5px; }"
        ".correct { background: #d4edda; border-left: 4px solid #28a745; }"
        ".incorrect { background: #f8d7da; border-left: 4px solid #dc3545; }"
        "</style></head><body>"
        "<h1>Quiz Completed!</h1>"
        f"<p>Congratulations on completing the quiz, {html.escape(email)}!</p>"
        f"<p class=\"score\">{summary.score}%</p>"
        f"<p>Correct: {summary.correct_answers} | Incorrect: {incorrect} | Time Taken: {duration}</p>"
        "<h3>Detailed Results:</h3>"
        f"{_render_html_answers(records)}"
        "<p>Review the questions you got wrong and take another quiz to test your improved knowledge.</p>"
        "<p><small>This email was sent automatically. Please do not reply to this email.</small></p>"
        "</body></html>"
    )
    body_text = (
        f"Quiz Results for {email}\n\n"
        f"Your Score: {summary.score}% ({summary.correct_answers}/{summary.total_questions})\n"
        f"Time Taken: {duration}\n\n"
        "Detailed Results:\n\n"
        f"{_render_text_answers(records)}\n\n"
        "Thank you for using our Quiz Platform!\n"
    )
    return EmailContent(subject=subject, html=body_html, text=body_text)


class SmtpNotifier(Notifier):
    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        username: str = "",
        password: str = "",
        use_tls: bool = True,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.sender = sender
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    def send(self, recipient: str, content: EmailContent) -> bool:
        message = EmailMessage()
        message["Subject"] = content.subject
        message["From"] = f'"Quiz Platform" <{self.sender}>'
        message["To"] = recipient
        message.set_content(content.text)
        message.add_alternative(content.html, subtype="html")

        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as client:
            if self.use_tls:
                client.starttls()
            if self.username:
                client.login(self.username, self.password)
            client.send_message(message)
        logger.info("Quiz results email sent to %s", recipient)
        return True


class LogNotifier(Notifier):
    """Used when no mail transport is configured; nothing is delivered."""

    def send(self, recipient: str, content: EmailContent) -> bool:
        logger.info("No mail transport configured, skipping email to %s: %s", recipient, content.subject)
        return False


def dispatch_result_email(
    notifier: Notifier,
    email: str,
    records: List[Dict[str, Any]],
    summary: ScoreSummary,
    time_taken: int,
) -> bool:
    content = render_result_email(email, records, summary, time_taken)
    try:
        return bool(notifier.send(email, content))
    except Exception as exc:
        logger.warning("Error sending quiz results email to %s: %s", email, exc)
        return False
