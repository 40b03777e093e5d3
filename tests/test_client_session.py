import asyncio
import uuid

import httpx
import pytest

from exam_client.api import ApiError, ExamApiClient
from exam_client.context import AuthContext, TokenStore
from exam_client.results import format_duration, summarize
from exam_client.session import (
    ExamSession,
    SessionState,
    SessionStateError,
    format_clock,
    timer_level,
)
from main import app


def _api(token=None):
    return ExamApiClient(
        base_url="http://test", token=token, transport=httpx.ASGITransport(app=app)
    )


async def _logged_in_api():
    api = _api()
    await api.register(f"{uuid.uuid4().hex[:12]}@example.com", "pw123456", "Client")
    return api


def test_full_sitting_manual_submit(ten_questions):
    async def scenario():
        async with await _logged_in_api() as api:
            s = ExamSession(api)
            await s.load(start_timer=False)
            assert s.state is SessionState.IN_PROGRESS
            assert len(s.questions) == 10
            assert s.time_left == 1800

            for q in s.questions:
                s.select_answer(q["id"], ten_questions[q["id"]])
                s.next()
            assert s.is_last_question

            result = await s.submit()
            assert s.state is SessionState.COMPLETED
            assert result["score"] == 10
            assert result["percentage"] == 100

            again = await api.get_result(result["attemptId"])
            assert again["totalQuestions"] == 10
            return result

    result = asyncio.run(scenario())
    assert "Grade: A+ (100%)" in summarize(result)


def test_manual_submit_only_from_the_final_question(ten_questions):
    async def scenario():
        async with await _logged_in_api() as api:
            s = ExamSession(api)
            await s.load(start_timer=False)
            with pytest.raises(SessionStateError):
                await s.submit()
            assert s.state is SessionState.IN_PROGRESS

    asyncio.run(scenario())


def test_navigation_keeps_answers_and_timer(ten_questions):
    async def scenario():
        async with await _logged_in_api() as api:
            s = ExamSession(api)
            await s.load(start_timer=False)
            first = s.current_question["id"]
            s.select_answer(first, 2)
            await s.tick()

            s.jump(7)
            s.previous()
            assert s.index == 6
            s.jump(99)
            assert s.index == 9
            s.next()
            assert s.index == 9
            s.jump(-3)
            assert s.index == 0

            assert s.answers == {first: 2}
            assert s.time_left == 1799
            s.select_answer(first, 3)
            assert s.answered_count == 1
            assert s.progress == pytest.approx(0.1)

    asyncio.run(scenario())


def test_timeout_submits_only_the_answered_questions(ten_questions):
    async def scenario():
        async with await _logged_in_api() as api:
            s = ExamSession(api, duration=3)
            await s.load(start_timer=False)
            for q in s.questions[:3]:
                s.select_answer(q["id"], ten_questions[q["id"]])

            for _ in range(3):
                await s.tick()

            assert s.state is SessionState.COMPLETED
            assert s.time_left == 0
            assert s.result["totalQuestions"] == 3
            assert s.result["score"] == 3
            assert s.result["timeTaken"] == 3

            await s.tick()  # further ticks are no-ops
            assert s.state is SessionState.COMPLETED

    asyncio.run(scenario())


def test_running_timer_auto_submits(ten_questions):
    async def scenario():
        async with await _logged_in_api() as api:
            s = ExamSession(api, duration=2, tick_interval=0.01)
            await s.load()
            timer = s._timer
            assert timer is not None
            await asyncio.wait_for(timer, timeout=5)
            assert s.state is SessionState.COMPLETED
            assert s.result["totalQuestions"] == 0

    asyncio.run(scenario())


class _SlowApi:
    def __init__(self):
        self.submits = 0

    async def get_questions(self):
        return [{"id": "q1", "question_text": "?", "options": ["a", "b"]}]

    async def submit(self, answers, time_taken):
        self.submits += 1
        await asyncio.sleep(0.05)
        return {"score": 0, "totalQuestions": len(answers), "percentage": 0,
                "timeTaken": time_taken, "attemptId": "x"}


def test_timer_and_manual_submit_do_not_double_submit():
    async def scenario():
        api = _SlowApi()
        s = ExamSession(api, duration=1)
        await s.load(start_timer=False)
        manual = asyncio.create_task(s.submit())
        await asyncio.sleep(0)  # manual submission now in flight
        assert s.state is SessionState.SUBMITTING
        await s.tick()  # countdown hits zero meanwhile
        await manual
        return api, s

    api, s = asyncio.run(scenario())
    assert api.submits == 1
    assert s.state is SessionState.COMPLETED


def test_second_manual_submit_is_rejected():
    async def scenario():
        api = _SlowApi()
        s = ExamSession(api)
        await s.load(start_timer=False)
        await s.submit()
        with pytest.raises(SessionStateError):
            await s.submit()
        return api

    assert asyncio.run(scenario()).submits == 1


def test_load_without_token_ends_in_error():
    async def scenario():
        async with _api() as api:
            s = ExamSession(api)
            await s.load()
            return s

    s = asyncio.run(scenario())
    assert s.state is SessionState.ERROR
    assert s.error == "Failed to load exam questions"


def test_failed_submit_ends_in_error(ten_questions):
    async def scenario():
        async with await _logged_in_api() as api:
            s = ExamSession(api)
            await s.load(start_timer=False)
            api.token = "tampered"
            s.jump(len(s.questions) - 1)
            assert await s.submit() is None
            return s

    s = asyncio.run(scenario())
    assert s.state is SessionState.ERROR
    assert s.error == "Failed to submit exam"


def test_api_error_carries_server_message():
    async def scenario():
        async with _api() as api:
            with pytest.raises(ApiError) as exc:
                await api.login(f"{uuid.uuid4().hex}@example.com", "whatever")
            return exc.value

    err = asyncio.run(scenario())
    assert err.status_code == 401
    assert err.message == "Invalid credentials"


def test_auth_context_restore_and_logout(tmp_path):
    store = TokenStore(tmp_path / "session.json")

    async def scenario():
        async with _api() as api:
            ctx = AuthContext(api, store)
            assert ctx.init() is False
            email = f"{uuid.uuid4().hex[:12]}@example.com"
            user = await ctx.register(email, "pw123456", "Ctx")
            assert user["email"] == email
            assert ctx.is_authenticated

        async with _api() as api2:
            restored = AuthContext(api2, store)
            assert restored.init() is True
            assert restored.user["email"] == email
            assert (await api2.get_questions()) is not None

            restored.logout()
            assert not restored.is_authenticated
            assert api2.token is None

    asyncio.run(scenario())
    assert not (tmp_path / "session.json").exists()


def test_clock_helpers():
    assert format_clock(1800) == "30:00"
    assert format_clock(65) == "01:05"
    assert format_clock(-4) == "00:00"
    assert timer_level(601) == "normal"
    assert timer_level(600) == "warning"
    assert timer_level(300) == "critical"
    assert format_duration(125) == "2m 5s"
    assert format_duration(None) == "0m 0s"
