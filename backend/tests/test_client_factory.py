import asyncio
import dataclasses

from factories import FakeClock, RecordingTransport, make_questions

from trivia_quiz.client.factory import (
    build_api_client,
    build_question_source,
    build_session,
    build_session_config,
)
from trivia_quiz.client.models import Phase
from trivia_quiz.client.question_source import DEFAULT_TRIVIA_URL, StaticQuestionSource
from trivia_quiz.core.config import load_settings


def _settings(**overrides):
    return dataclasses.replace(load_settings(), **overrides)


def test_question_source_uses_configured_url_and_timeout():
    source = build_question_source(_settings(trivia_api_url="https://trivia.test/api.php", http_timeout=3.5))

    assert source.base_url == "https://trivia.test/api.php"
    assert source.timeout == 3.5


def test_question_source_falls_back_to_default_url():
    source = build_question_source(_settings(trivia_api_url="  "))

    assert source.base_url == DEFAULT_TRIVIA_URL


def test_api_client_uses_configured_base_url():
    client = build_api_client(_settings(quiz_api_base_url="http://quiz.test/", http_timeout=2.0))

    assert client.base_url == "http://quiz.test"
    assert client.timeout == 2.0


def test_session_config_reads_count_and_duration():
    config = build_session_config(
        _settings(quiz_question_count=5, quiz_duration_seconds=60), "cfg@example.com"
    )

    assert config.email == "cfg@example.com"
    assert config.question_count == 5
    assert config.duration_seconds == 60


def test_built_session_runs_with_configured_duration():
    clock = FakeClock()
    transport = RecordingTransport()
    session = build_session(
        _settings(quiz_question_count=5, quiz_duration_seconds=30),
        "short@example.com",
        source=StaticQuestionSource(make_questions()),
        transport=transport,
        clock=clock,
        sleep=clock.sleep,
    )

    async def scenario():
        await session.fetch_questions()
        await session.countdown.wait()

    asyncio.run(scenario())

    assert len(session.questions) == 5
    assert session.phase is Phase.COMPLETED
    assert transport.payloads[0]["totalQuestions"] == 5
    assert transport.payloads[0]["timeTaken"] == 30
    assert clock.sleeps == 30
