import os
import tempfile
import uuid
from datetime import UTC, datetime, timedelta

# Point the app at a throwaway SQLite file before anything imports db.py
_TMP_DIR = tempfile.mkdtemp(prefix="exam-portal-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_DIR}/test.db"
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import delete  # noqa: E402

import models  # noqa: E402
from db import Base, SessionLocal, engine  # noqa: E402
from main import app  # noqa: E402

Base.metadata.create_all(engine)

_client = TestClient(app)


def _seed(keys):
    """Replace the question bank with `keys` (question id -> correct option index)."""
    base = datetime(2026, 1, 1, tzinfo=UTC)
    with SessionLocal() as db:
        db.execute(delete(models.Question))
        for n, (qid, correct) in enumerate(keys.items()):
            db.add(
                models.Question(
                    id=qid,
                    question_text=f"Question {qid}?",
                    options=["A", "B", "C", "D"],
                    correct_answer=correct,
                    created_at=base + timedelta(minutes=n),
                )
            )
        db.commit()


@pytest.fixture
def seed_questions():
    return _seed


@pytest.fixture
def ten_questions():
    """q1..q10, with correct option index n % 4."""
    keys = {f"q{n}": n % 4 for n in range(1, 11)}
    _seed(keys)
    return keys


@pytest.fixture
def new_user():
    """Registers a fresh user and returns (email, password, token)."""

    def _make(password="pw123456", full_name="Test User"):
        email = f"{uuid.uuid4().hex[:12]}@example.com"
        r = _client.post(
            "/api/auth/register",
            json={"email": email, "password": password, "fullName": full_name},
        )
        assert r.status_code == 201, r.text
        return email, password, r.json()["token"]

    return _make
