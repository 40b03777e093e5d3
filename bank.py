# bank.py

from __future__ import annotations

import random as _rnd
from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from models import Question

DEFAULT_EXAM_SIZE = 10


def list_exam_questions(
    db: Session, limit: int = DEFAULT_EXAM_SIZE, rng: Optional[_rnd.Random] = None
) -> List[Question]:
    """Up to `limit` questions, reshuffled on every call.

    The first `limit` rows by creation order are taken, then shuffled in
    memory; the caller serializes them without the answer key.
    """
    limit = max(0, limit)
    stmt = select(Question).order_by(Question.created_at, Question.id).limit(limit)
    qs = list(db.scalars(stmt))
    (rng or _rnd).shuffle(qs)
    return qs


def answer_key(db: Session) -> Dict[str, int]:
    """Authoritative key for all questions: id (as str) -> correct option index."""
    rows = db.execute(select(Question.id, Question.correct_answer)).all()
    return {str(qid): correct for qid, correct in rows}
