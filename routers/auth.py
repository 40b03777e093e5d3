# routers/auth.py

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from db import get_db
from errors import AuthError, ConflictError, ValidationError
from models import User
from schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserOut
from security import burn_password_check, check_password, hash_password, issue_token

logger = logging.getLogger("exam-portal.auth")

router = APIRouter(prefix="/api/auth", tags=["auth"])

# Same message for unknown email and wrong password (no user enumeration).
INVALID_CREDENTIALS = "Invalid credentials"


def _auth_response(message: str, user: User) -> AuthResponse:
    return AuthResponse(
        message=message,
        token=issue_token(user.id, user.email),
        user=UserOut(id=user.id, email=user.email, full_name=user.full_name),
    )


@router.post("/register", response_model=AuthResponse, status_code=201)
def register(body: RegisterRequest, db: Session = Depends(get_db)):
    if not body.email or not body.password or not body.full_name:
        raise ValidationError("email, password and fullName are required")

    existing = db.scalars(select(User.id).where(User.email == body.email)).first()
    if existing:
        raise ConflictError("User already exists")

    user = User(
        email=body.email,
        password_hash=hash_password(body.password),
        full_name=body.full_name,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # lost a race with a concurrent registration for the same email
        db.rollback()
        raise ConflictError("User already exists")
    db.refresh(user)

    logger.info("registered user %s", user.id)
    return _auth_response("User created successfully", user)


@router.post("/login", response_model=AuthResponse)
def login(body: LoginRequest, db: Session = Depends(get_db)):
    if not body.email or not body.password:
        raise ValidationError("email and password required")

    user = db.scalars(select(User).where(User.email == body.email)).first()
    if not user:
        # same bcrypt cost as a wrong password, so timing does not reveal the email
        burn_password_check(body.password)
        logger.info("failed login attempt")
        raise AuthError(INVALID_CREDENTIALS)
    if not check_password(body.password, user.password_hash):
        logger.info("failed login attempt")
        raise AuthError(INVALID_CREDENTIALS)

    return _auth_response("Login successful", user)
