# schemas/auth.py
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------- Requests ----------

# Fields are optional so that missing ones surface as our own 400 message.


class RegisterRequest(_CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None
    full_name: Optional[str] = None


class LoginRequest(_CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


# ---------- Responses ----------


class UserOut(_CamelModel):
    id: str
    email: str
    full_name: str


class AuthResponse(_CamelModel):
    message: str
    token: str
    user: UserOut
