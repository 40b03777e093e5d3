"""Error taxonomy shared by the routers.

Every subclass carries the HTTP status it maps to; `main.py` renders them as
``{"error": message}``.
"""

from __future__ import annotations


class AppError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        if message:
            self.message = message


class ValidationError(AppError):
    status_code = 400
    message = "Invalid request"


class AuthError(AppError):
    status_code = 401
    message = "Unauthorized"


class ForbiddenError(AuthError):
    status_code = 403
    message = "Forbidden"


class NotFoundError(AppError):
    status_code = 404
    message = "Not found"


# Duplicate registration answers 400, like any other bad registration input.
class ConflictError(AppError):
    status_code = 400
    message = "User already exists"


class ServerError(AppError):
    status_code = 500
