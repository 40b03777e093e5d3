"""Async HTTP client for the exam API.

Provides:
- `ExamApiClient` wrapping `httpx.AsyncClient` with bearer-token handling
- `ApiError` raised for any non-2xx response, carrying the server's message
"""

from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

import httpx

DEFAULT_API_URL = "http://localhost:5000"


class ApiError(Exception):
    """Non-2xx response from the API."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class ExamApiClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ) -> None:
        self.token = token
        self._http = httpx.AsyncClient(
            base_url=base_url or os.getenv("EXAM_API_URL", DEFAULT_API_URL),
            transport=transport,
            timeout=timeout,
        )

    async def __aenter__(self) -> "ExamApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def _headers(self) -> Dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    async def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        resp = await self._http.request(method, path, headers=self._headers(), **kwargs)
        if resp.is_error:
            message = resp.reason_phrase or "Request failed"
            try:
                message = resp.json().get("error", message)
            except ValueError:
                pass
            raise ApiError(resp.status_code, message)
        return resp.json()

    # ---------- Auth ----------

    async def register(self, email: str, password: str, full_name: str) -> Dict[str, Any]:
        data = await self._request(
            "POST",
            "/api/auth/register",
            json={"email": email, "password": password, "fullName": full_name},
        )
        self.token = data["token"]
        return data

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        data = await self._request(
            "POST", "/api/auth/login", json={"email": email, "password": password}
        )
        self.token = data["token"]
        return data

    # ---------- Exam ----------

    async def get_questions(self) -> List[Dict[str, Any]]:
        data = await self._request("GET", "/api/exam/questions")
        return data["questions"]

    async def submit(self, answers: Dict[str, int], time_taken: int) -> Dict[str, Any]:
        return await self._request(
            "POST", "/api/exam/submit", json={"answers": answers, "timeTaken": time_taken}
        )

    async def get_result(self, attempt_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/api/exam/results/{attempt_id}")
