from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from trivia_quiz.core.emails import is_valid_email


class QuizAnswerRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question: str
    correct_answer: str = Field(..., alias="correctAnswer")
    user_answer: str = Field(..., alias="userAnswer")
    is_correct: Optional[bool] = Field(None, alias="isCorrect")
    category: Optional[str] = None
    difficulty: Optional[str] = None


class QuizSubmitRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(..., min_length=1, max_length=255)
    score: float
    total_questions: int = Field(..., alias="totalQuestions", ge=1)
    answers: List[QuizAnswerRecord]
    time_taken: int = Field(0, alias="timeTaken", ge=0)
    submission_id: Optional[str] = Field(None, alias="submissionId", max_length=64)

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        if not is_valid_email(value):
            raise ValueError("Please enter a valid email address")
        return value.strip()

    @model_validator(mode="after")
    def _check_answer_count(self) -> "QuizSubmitRequest":
        if len(self.answers) > self.total_questions:
            raise ValueError("answers cannot outnumber totalQuestions")
        return self


class QuizSubmitData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    quiz_id: int = Field(..., alias="quizId")
    final_score: int = Field(..., alias="finalScore", ge=0, le=100)
    correct_answers: int = Field(..., alias="correctAnswers", ge=0)
    total_questions: int = Field(..., alias="totalQuestions", ge=1)
    user_id: int = Field(..., alias="userId")
    email_sent: bool = Field(..., alias="emailSent")


class QuizSubmitResponse(BaseModel):
    success: bool = True
    message: str
    data: QuizSubmitData


class ErrorResponse(BaseModel):
    error: str
    details: Optional[List[str]] = None
