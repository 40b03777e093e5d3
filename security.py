"""Password hashing and session tokens.

Provides:
- `hash_password` / `check_password` (bcrypt, salted, cost >= 10)
- `issue_token` to sign a 24h HS256 JWT binding a user id and email
- `decode_token` to validate one and return its `TokenUser`
"""

from __future__ import annotations

import logging
import os
from datetime import UTC, datetime, timedelta

import bcrypt
import jwt
from pydantic import BaseModel

from errors import ForbiddenError

logger = logging.getLogger("exam-portal.auth")

JWT_ALGORITHM = "HS256"
TOKEN_TTL = timedelta(hours=24)
MIN_BCRYPT_ROUNDS = 10
_DEV_SECRET = "fallback-secret"

# bcrypt only looks at the first 72 bytes of a password
_BCRYPT_MAX_BYTES = 72


class TokenUser(BaseModel):
    """Identity carried inside a verified session token."""

    user_id: str
    email: str


_warned_dev_secret = False


def _secret() -> str:
    global _warned_dev_secret
    secret = os.getenv("JWT_SECRET", "")
    if not secret:
        if not _warned_dev_secret:
            logger.warning("JWT_SECRET not configured; using the development secret.")
            _warned_dev_secret = True
        return _DEV_SECRET
    return secret


def _rounds() -> int:
    try:
        rounds = int(os.getenv("BCRYPT_ROUNDS", str(MIN_BCRYPT_ROUNDS)))
    except ValueError:
        rounds = MIN_BCRYPT_ROUNDS
    return max(rounds, MIN_BCRYPT_ROUNDS)


def _pw_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    return bcrypt.hashpw(_pw_bytes(password), bcrypt.gensalt(rounds=_rounds())).decode("ascii")


def check_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_pw_bytes(password), password_hash.encode("ascii"))
    except ValueError:
        # malformed stored hash counts as a mismatch
        return False


_dummy_hash: str | None = None


def burn_password_check(password: str) -> None:
    """Pay the same bcrypt cost as `check_password` when there is no user to check."""
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = hash_password("not-a-real-password")
    check_password(password, _dummy_hash)


def issue_token(user_id: str, email: str, now: datetime | None = None) -> str:
    now = now or datetime.now(UTC)
    payload = {
        "userId": user_id,
        "email": email,
        "iat": now,
        "exp": now + TOKEN_TTL,
    }
    return jwt.encode(payload, _secret(), algorithm=JWT_ALGORITHM)


def decode_token(token: str) -> TokenUser:
    """Validate signature and expiry of `token`.

    Raises:
        ForbiddenError: the token is malformed, badly signed or expired.
    """
    try:
        payload = jwt.decode(token, _secret(), algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise ForbiddenError("Token expired")
    except jwt.InvalidTokenError:
        raise ForbiddenError("Invalid token")

    user_id, email = payload.get("userId"), payload.get("email")
    if not user_id or not email:
        raise ForbiddenError("Invalid token")
    return TokenUser(user_id=str(user_id), email=str(email))
