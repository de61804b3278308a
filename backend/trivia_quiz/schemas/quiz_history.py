from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class UserStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    email: str
    status: str
    registered_at: Optional[datetime] = Field(None, alias="registeredAt")
    last_quiz_at: Optional[datetime] = Field(None, alias="lastQuizAt")
    total_quizzes_taken: int = Field(0, alias="totalQuizzesTaken")
    best_score: Optional[int] = Field(None, alias="bestScore")


class QuizResultRead(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    user_id: int = Field(..., alias="userId")
    email: str
    score: int
    total_questions: int = Field(..., alias="totalQuestions")
    correct_answers: int = Field(..., alias="correctAnswers")
    answers: List[Dict[str, Any]]
    completed_at: Optional[datetime] = Field(None, alias="completedAt")
    time_taken: int = Field(0, alias="timeTaken")
    notes: Optional[str] = None
    flagged: bool = False
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")


class Pagination(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_page: int = Field(..., alias="currentPage")
    total_pages: int = Field(..., alias="totalPages")
    total_results: int = Field(..., alias="totalResults")
    has_more: bool = Field(..., alias="hasMore")


class QuizHistoryData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    quiz_results: List[QuizResultRead] = Field(..., alias="quizResults")
    user_stats: Optional[UserStats] = Field(None, alias="userStats")
    pagination: Pagination


class QuizHistoryResponse(BaseModel):
    success: bool = True
    data: QuizHistoryData


class QuizResultUpdateRequest(BaseModel):
    notes: Optional[str] = None
    flagged: Optional[bool] = None


class QuizResultUpdateResponse(BaseModel):
    success: bool = True
    message: str
    data: QuizResultRead


class QuizResultDeleteResponse(BaseModel):
    success: bool = True
    message: str
