import logging

from trivia_quiz.core.config import Settings
from trivia_quiz.services.notification import LogNotifier, Notifier, SmtpNotifier

logger = logging.getLogger(__name__)


def build_notifier(settings: Settings) -> Notifier:
    host = (settings.smtp_host or "").strip()
    sender = (settings.email_from or "").strip()
    if not host:
        logger.warning("SMTP_HOST is missing. Quiz result emails will not be delivered.")
        return LogNotifier()
    if not sender:
        logger.warning("SMTP_HOST=%s but EMAIL_FROM is missing. Falling back to LogNotifier.", host)
        return LogNotifier()
    return SmtpNotifier(
        host=host,
        port=settings.smtp_port,
        sender=sender,
        username=settings.smtp_user,
        password=settings.smtp_password,
        use_tls=settings.smtp_use_tls,
        timeout=settings.http_timeout,
    )
