"""Server-side scoring of submitted outcome records.

Correctness is re-derived from each record's ``userAnswer`` and
``correctAnswer``. Any ``isCorrect`` flag or score sent by the client is
ignored.
"""
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Tuple

NOT_ANSWERED = "Not answered"


@dataclass(frozen=True)
class ScoreSummary:
    correct_answers: int
    total_questions: int
    score: int


def percentage(correct: int, total: int) -> int:
    """Half-up rounded percentage, so 10/15 gives 67 and 1/8 gives 13."""
    if total <= 0:
        return 0
    return (200 * correct + total) // (2 * total)


def _field(record: Any, name: str, alias: str) -> Any:
    if isinstance(record, dict):
        return record.get(alias, record.get(name))
    return getattr(record, name, None)


def score_answers(
    total_questions: int,
    records: Iterable[Any],
) -> Tuple[List[Dict[str, Any]], ScoreSummary]:
    scored: List[Dict[str, Any]] = []
    correct_count = 0
    for record in records:
        user_answer = _field(record, "user_answer", "userAnswer")
        correct_answer = _field(record, "correct_answer", "correctAnswer")
        is_correct = user_answer is not None and user_answer == correct_answer
        if is_correct:
            correct_count += 1
        scored.append(
            {
                "question": _field(record, "question", "question"),
                "correctAnswer": correct_answer,
                "userAnswer": user_answer if user_answer is not None else NOT_ANSWERED,
                "isCorrect": is_correct,
                "category": _field(record, "category", "category"),
                "difficulty": _field(record, "difficulty", "difficulty"),
            }
        )

    correct_count = min(correct_count, total_questions)
    summary = ScoreSummary(
        correct_answers=correct_count,
        total_questions=total_questions,
        score=percentage(correct_count, total_questions),
    )
    return scored, summary
