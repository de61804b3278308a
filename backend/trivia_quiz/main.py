import logging

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from trivia_quiz.core.config import load_settings
from trivia_quiz.db.session import get_db
from trivia_quiz.schemas.quiz_history import (
    QuizHistoryResponse,
    QuizResultDeleteResponse,
    QuizResultUpdateRequest,
    QuizResultUpdateResponse,
)
from trivia_quiz.schemas.quiz_submit import ErrorResponse, QuizSubmitRequest, QuizSubmitResponse
from trivia_quiz.schemas.register import RegisterEmailRequest, RegisterEmailResponse
from trivia_quiz.services.notification import Notifier
from trivia_quiz.services.provider_factory import build_notifier
from trivia_quiz.services.quiz_history_service import (
    QuizHistoryError,
    annotate_quiz_result,
    delete_quiz_result,
    list_quiz_results,
    serialize_result,
)
from trivia_quiz.services.quiz_service import QuizSubmitError, submit_quiz
from trivia_quiz.services.user_service import RegistrationError, register_email

settings = load_settings()
notifier = build_notifier(settings)
logger = logging.getLogger(__name__)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}

app = FastAPI(docs_url="/api-docs", redoc_url="/api-redoc")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_notifier() -> Notifier:
    return notifier


def _error_response(status: int, error: str, details: list[str] | None = None) -> JSONResponse:
    content: dict = {"error": error}
    if details:
        content["details"] = details
    return JSONResponse(status_code=status, content=content)


def _format_validation_error(error: dict) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
    message = error.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [_format_validation_error(error) for error in exc.errors()]
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, details)
    return _error_response(400, "Validation error", details)


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/api/register-email", response_model=RegisterEmailResponse)
def register(request: RegisterEmailRequest, db: Session = Depends(get_db)):
    try:
        user, created, message = register_email(db, request.email)
    except RegistrationError as exc:
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": exc.message},
        )
    return JSONResponse(
        status_code=201 if created else 200,
        content={"success": True, "message": message, "userId": str(user.id)},
    )


@app.post("/api/quiz", response_model=QuizSubmitResponse, status_code=201, responses=ERROR_RESPONSES)
def quiz_submit(
    request: QuizSubmitRequest,
    db: Session = Depends(get_db),
    quiz_notifier: Notifier = Depends(get_notifier),
):
    try:
        data = submit_quiz(
            db=db,
            notifier=quiz_notifier,
            email=request.email,
            total_questions=request.total_questions,
            answers=request.answers,
            time_taken=request.time_taken,
            submission_id=request.submission_id,
        )
    except QuizSubmitError as exc:
        return _error_response(exc.status_code, exc.message, exc.details)
    return {"success": True, "message": "Quiz results saved successfully", "data": data}


@app.get("/api/quiz", response_model=QuizHistoryResponse, responses=ERROR_RESPONSES)
def quiz_history(
    db: Session = Depends(get_db),
    email: str | None = Query(None),
    user_id: int | None = Query(None, alias="userId"),
    limit: int = Query(10, ge=1, le=100),
    page: int = Query(1, ge=1),
):
    try:
        data = list_quiz_results(db, email=email, user_id=user_id, page=page, limit=limit)
    except QuizHistoryError as exc:
        return _error_response(exc.status_code, exc.message, exc.details)
    return {"success": True, "data": data}


@app.put("/api/quiz", response_model=QuizResultUpdateResponse, responses=ERROR_RESPONSES)
def quiz_annotate(
    request: QuizResultUpdateRequest,
    db: Session = Depends(get_db),
    quiz_id: int | None = Query(None, alias="quizId"),
):
    try:
        result = annotate_quiz_result(db, quiz_id, notes=request.notes, flagged=request.flagged)
    except QuizHistoryError as exc:
        return _error_response(exc.status_code, exc.message, exc.details)
    return {
        "success": True,
        "message": "Quiz result updated successfully",
        "data": serialize_result(result),
    }


@app.delete("/api/quiz", response_model=QuizResultDeleteResponse, responses=ERROR_RESPONSES)
def quiz_delete(
    db: Session = Depends(get_db),
    quiz_id: int | None = Query(None, alias="quizId"),
):
    try:
        delete_quiz_result(db, quiz_id)
    except QuizHistoryError as exc:
        return _error_response(exc.status_code, exc.message, exc.details)
    return {"success": True, "message": "Quiz result deleted successfully"}
