"""Client-side auth state: current user and token, with an explicit lifecycle.

`init()` restores a persisted session, `logout()` tears it down. The context is
passed to whatever needs it rather than living in a module global.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from exam_client.api import ExamApiClient

logger = logging.getLogger("exam-portal.client")


class TokenStore:
    """Persists {token, user} as JSON in a single file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> Optional[Dict[str, Any]]:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            logger.warning("ignoring unreadable session file %s", self.path)
            return None
        if not isinstance(data, dict) or not data.get("token"):
            return None
        return data

    def save(self, token: str, user: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"token": token, "user": user}), encoding="utf-8")

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


class AuthContext:
    def __init__(self, api: ExamApiClient, store: TokenStore) -> None:
        self.api = api
        self.store = store
        self.user: Optional[Dict[str, Any]] = None

    @property
    def token(self) -> Optional[str]:
        return self.api.token

    @property
    def is_authenticated(self) -> bool:
        return bool(self.api.token and self.user)

    def init(self) -> bool:
        """Restore a persisted session; True if one was found."""
        saved = self.store.load()
        if not saved:
            return False
        self.api.token = saved["token"]
        self.user = saved.get("user")
        return True

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        data = await self.api.login(email, password)
        self._remember(data)
        return self.user

    async def register(self, email: str, password: str, full_name: str) -> Dict[str, Any]:
        data = await self.api.register(email, password, full_name)
        self._remember(data)
        return self.user

    def logout(self) -> None:
        self.api.token = None
        self.user = None
        self.store.clear()

    def _remember(self, data: Dict[str, Any]) -> None:
        self.user = data["user"]
        self.store.save(data["token"], self.user)
