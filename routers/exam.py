# routers/exam.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bank import DEFAULT_EXAM_SIZE, list_exam_questions
from db import get_db
from deps.auth import CurrentUser
from schemas.exam import (
    QuestionOut,
    QuestionsResponse,
    ResultOut,
    SubmitRequest,
    SubmitResponse,
)
from scoring import get_attempt, submit_attempt

router = APIRouter(prefix="/api/exam", tags=["exam"])


@router.get("/questions", response_model=QuestionsResponse)
def exam_questions(user: CurrentUser, db: Session = Depends(get_db)):
    qs = list_exam_questions(db, limit=DEFAULT_EXAM_SIZE)
    # QuestionOut has no correct_answer field, so the key never leaves the server
    return QuestionsResponse(questions=[QuestionOut.model_validate(q) for q in qs])


@router.post("/submit", response_model=SubmitResponse)
def submit_exam(body: SubmitRequest, user: CurrentUser, db: Session = Depends(get_db)):
    return submit_attempt(db, user.user_id, body.answers, body.time_taken)


@router.get("/results/{attempt_id}", response_model=ResultOut)
def exam_result(attempt_id: str, user: CurrentUser, db: Session = Depends(get_db)):
    return get_attempt(db, user.user_id, attempt_id)
