from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, JSON, String, Text, func
from sqlalchemy.orm import relationship

from .session import Base

USER_STATUS_PENDING = "pending"
USER_STATUS_COMPLETED = "completed"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    status = Column(String(16), nullable=False, default=USER_STATUS_PENDING)
    registered_at = Column(DateTime, server_default=func.now(), nullable=False)
    last_quiz_at = Column(DateTime, nullable=True)
    total_quizzes_taken = Column(Integer, nullable=False, default=0)
    best_score = Column(Integer, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    results = relationship("QuizResult", back_populates="user", cascade="all, delete-orphan")


class QuizResult(Base):
    __tablename__ = "quiz_results"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    email = Column(String(255), nullable=False, index=True)
    score = Column(Integer, nullable=False)
    total_questions = Column(Integer, nullable=False, default=15)
    correct_answers = Column(Integer, nullable=False, default=0)
    answers_json = Column(JSON, nullable=False)
    completed_at = Column(DateTime, nullable=False, index=True)
    time_taken_seconds = Column(Integer, nullable=False, default=0)
    submission_id = Column(String(64), nullable=True, index=True)
    notes = Column(Text, nullable=True)
    flagged = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User", back_populates="results")
