from __future__ import annotations

import json
import logging
import math
from typing import Any, Dict, Mapping, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from bank import answer_key
from errors import NotFoundError
from models import ExamAttempt

logger = logging.getLogger("exam-portal.scoring")


def percentage(score: int, total: int) -> int:
    """round(score / total * 100), half-up; 0 when nothing was answered."""
    if total <= 0:
        return 0
    return math.floor(score / total * 100 + 0.5)


def _is_index(value: Any) -> bool:
    # JSON numbers only; bool is an int subclass and true must not match option 1
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def score_answers(answers: Mapping[str, Any], key: Mapping[str, int]) -> Tuple[int, int]:
    """
    Returns (score, total). `total` is the number of submitted answers, not the
    exam size: a partial answer map yields a smaller total.
    Unknown question ids count towards the total but never score, and so do
    values that are not option indices (strings, booleans, null).
    """
    score = 0
    for qid, selected in answers.items():
        correct = key.get(str(qid))
        if correct is not None and _is_index(selected) and correct == selected:
            score += 1
    return score, len(answers)


def submit_attempt(
    db: Session,
    user_id: str,
    answers: Optional[Dict[str, Any]],
    time_taken: Optional[int],
) -> Dict[str, Any]:
    answers = answers or {}
    score, total = score_answers(answers, answer_key(db))

    # one durable write per submission; resubmitting creates another row
    attempt = ExamAttempt(
        user_id=user_id,
        score=score,
        total_questions=total,
        time_taken=time_taken,
        answers=json.dumps(answers),
    )
    db.add(attempt)
    db.commit()
    db.refresh(attempt)

    logger.info("attempt %s stored for user %s: %d/%d", attempt.id, user_id, score, total)
    return {
        "score": score,
        "total_questions": total,
        "percentage": percentage(score, total),
        "time_taken": time_taken,
        "attempt_id": attempt.id,
    }


def get_attempt(db: Session, user_id: str, attempt_id: str) -> Dict[str, Any]:
    # Ownership is part of the lookup: someone else's attempt is simply "not found".
    stmt = select(ExamAttempt).where(
        ExamAttempt.id == attempt_id, ExamAttempt.user_id == user_id
    )
    a = db.scalars(stmt).first()
    if not a:
        raise NotFoundError("Exam attempt not found")
    return {
        "score": a.score,
        "total_questions": a.total_questions,
        "percentage": percentage(a.score, a.total_questions),
        "time_taken": a.time_taken,
        "completed_at": a.completed_at,
    }
