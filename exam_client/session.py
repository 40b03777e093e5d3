"""Exam session controller.

A small state machine around one sitting of the exam:

    loading -> in_progress -> submitting -> completed
    loading -> error
    submitting -> error

Answers and navigation are purely local; the answer map is sent once, either
by `submit()` on the final question or by the countdown reaching zero. Both go
through `_submit`, whose `in_progress -> submitting` transition is the only
guard against a double submission.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from typing import Any, Dict, List, Optional

import httpx

from exam_client.api import ApiError, ExamApiClient

logger = logging.getLogger("exam-portal.client")

EXAM_DURATION = 30 * 60  # seconds
WARNING_AT = 600
CRITICAL_AT = 300


class SessionState(str, enum.Enum):
    LOADING = "loading"
    IN_PROGRESS = "in_progress"
    SUBMITTING = "submitting"
    COMPLETED = "completed"
    ERROR = "error"


class SessionStateError(RuntimeError):
    """Operation not allowed in the session's current state."""


def format_clock(seconds: int) -> str:
    mins, secs = divmod(max(0, int(seconds)), 60)
    return f"{mins:02d}:{secs:02d}"


def timer_level(seconds: int) -> str:
    if seconds <= CRITICAL_AT:
        return "critical"
    if seconds <= WARNING_AT:
        return "warning"
    return "normal"


class ExamSession:
    def __init__(
        self,
        api: ExamApiClient,
        duration: int = EXAM_DURATION,
        tick_interval: float = 1.0,
    ) -> None:
        self.api = api
        self.duration = duration
        self.tick_interval = tick_interval

        self.state = SessionState.LOADING
        self.questions: List[Dict[str, Any]] = []
        self.answers: Dict[str, int] = {}
        self.index = 0
        self.time_left = duration
        self.result: Optional[Dict[str, Any]] = None
        self.error: Optional[str] = None
        self._timer: Optional[asyncio.Task] = None

    # ---------- Derived views ----------

    @property
    def current_question(self) -> Optional[Dict[str, Any]]:
        if not self.questions:
            return None
        return self.questions[self.index]

    @property
    def is_last_question(self) -> bool:
        return bool(self.questions) and self.index == len(self.questions) - 1

    @property
    def answered_count(self) -> int:
        return len(self.answers)

    @property
    def progress(self) -> float:
        if not self.questions:
            return 0.0
        return (self.index + 1) / len(self.questions)

    @property
    def time_taken(self) -> int:
        return self.duration - self.time_left

    @property
    def clock(self) -> str:
        return format_clock(self.time_left)

    # ---------- Lifecycle ----------

    async def load(self, start_timer: bool = True) -> None:
        if self.state is not SessionState.LOADING:
            raise SessionStateError(f"cannot load questions while {self.state.value}")
        try:
            self.questions = await self.api.get_questions()
        except (ApiError, httpx.HTTPError):
            logger.exception("loading exam questions failed")
            self.state = SessionState.ERROR
            self.error = "Failed to load exam questions"
            return

        self.state = SessionState.IN_PROGRESS
        if start_timer:
            self._timer = asyncio.create_task(self.run_timer())

    async def run_timer(self) -> None:
        while self.state is SessionState.IN_PROGRESS and self.time_left > 0:
            await asyncio.sleep(self.tick_interval)
            await self.tick()

    async def tick(self) -> None:
        if self.state is not SessionState.IN_PROGRESS:
            return
        self.time_left = max(0, self.time_left - 1)
        if self.time_left == 0:
            logger.info("time is up; submitting %d answers", self.answered_count)
            await self._submit()

    async def close(self) -> None:
        timer, self._timer = self._timer, None
        if timer and timer is not asyncio.current_task() and not timer.done():
            timer.cancel()
            try:
                await timer
            except asyncio.CancelledError:
                pass

    # ---------- Answering & navigation ----------

    def select_answer(self, question_id: str, option_index: int) -> None:
        if self.state is not SessionState.IN_PROGRESS:
            raise SessionStateError(f"cannot answer while {self.state.value}")
        self.answers[str(question_id)] = option_index

    def jump(self, index: int) -> None:
        if self.questions:
            self.index = min(max(index, 0), len(self.questions) - 1)

    def next(self) -> None:
        self.jump(self.index + 1)

    def previous(self) -> None:
        self.jump(self.index - 1)

    # ---------- Submission ----------

    async def submit(self) -> Optional[Dict[str, Any]]:
        """Manual submission, offered only on the final question."""
        if not self.is_last_question:
            raise SessionStateError("the exam can only be submitted from the final question")
        if self.state is not SessionState.IN_PROGRESS:
            raise SessionStateError(f"cannot submit while {self.state.value}")
        return await self._submit()

    async def _submit(self) -> Optional[Dict[str, Any]]:
        if self.state is not SessionState.IN_PROGRESS:
            return None
        self.state = SessionState.SUBMITTING
        try:
            result = await self.api.submit(dict(self.answers), self.time_taken)
        except (ApiError, httpx.HTTPError):
            logger.exception("exam submission failed")
            self.state = SessionState.ERROR
            self.error = "Failed to submit exam"
            return None

        self.result = result
        self.state = SessionState.COMPLETED
        await self.close()
        return result
