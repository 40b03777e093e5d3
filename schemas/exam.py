# schemas/exam.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from schemas.auth import _CamelModel


class QuestionOut(BaseModel):
    # snake_case on the wire; deliberately has no correct_answer field
    model_config = ConfigDict(from_attributes=True)
    id: str
    question_text: str
    options: List[str]


class QuestionsResponse(BaseModel):
    questions: List[QuestionOut]


class SubmitRequest(_CamelModel):
    # question id -> selected option index; unanswered questions are absent.
    # Values are kept as sent: anything but a number is submitted but scores 0.
    answers: Optional[Dict[str, Any]] = None
    time_taken: Optional[int] = None


class SubmitResponse(_CamelModel):
    score: int
    total_questions: int
    percentage: int
    time_taken: Optional[int] = None
    attempt_id: str


class ResultOut(_CamelModel):
    score: int
    total_questions: int
    percentage: int
    time_taken: Optional[int] = None
    completed_at: Optional[datetime] = None
