"""Signup, login with account lockout, and the bearer-token dependency (get_current_user)."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from notekeeper.core.database import get_db
from notekeeper.core.security import create_access_token, verify_access_token
from notekeeper.schemas.auth import (
    AuthResponse,
    CurrentUser,
    LockedResponse,
    LoginRequest,
    SignupRequest,
    UserPublic,
)
from notekeeper.services.accounts import DuplicateEmailError, create_user, get_user_by_id
from notekeeper.services.lockout import LoginOutcome, LoginResult, authenticate

logger = logging.getLogger(__name__)
router = APIRouter()
security = HTTPBearer(auto_error=False)

HTTP_423_LOCKED = 423


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _locked_error(outcome: LoginOutcome) -> HTTPException:
    minutes = outcome.retry_after_minutes
    if outcome.newly_locked:
        message = (
            "Account has been locked due to too many failed login attempts. "
            f"Please try again in {minutes} minute(s)."
        )
    else:
        message = (
            "Account is temporarily locked due to too many failed login attempts. "
            f"Please try again in {minutes} minute(s)."
        )
    return HTTPException(
        status_code=HTTP_423_LOCKED,
        detail={"message": message, "lockUntil": outcome.locked_until.isoformat()},
        headers={"Retry-After": str(minutes * 60)},
    )


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(
    body: SignupRequest,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """
    Register a new account and return a JWT for it.
    Emails are unique regardless of case.
    """
    try:
        user = create_user(db, body.email, body.password)
    except DuplicateEmailError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e

    token = create_access_token(sub=user.id)
    return AuthResponse(
        message="User created successfully",
        token=token,
        user=UserPublic(id=user.id, email=user.email),
    )


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={HTTP_423_LOCKED: {"model": LockedResponse, "description": "Account temporarily locked"}},
)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """
    Authenticate with email and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <token>

    Five consecutive failures lock the account for 30 minutes (423). While
    locked, even the correct password is refused.
    """
    outcome = authenticate(db, body.email, body.password)

    if outcome.result is LoginResult.LOCKED:
        raise _locked_error(outcome)
    if outcome.result is LoginResult.INVALID_CREDENTIALS:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    user = outcome.user
    token = create_access_token(sub=user.id)
    logger.info("Login succeeded", extra={"user_id": user.id})
    return AuthResponse(
        message="Login successful",
        token=token,
        user=UserPublic(id=user.id, email=user.email),
    )


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser:
    """Dependency: require valid Bearer JWT and return the current user. Raises 401 if missing or invalid."""
    if credentials is None:
        raise _unauthorized("No token, authorization denied")

    verification = verify_access_token(credentials.credentials)
    if not verification.ok:
        logger.debug("Bearer token rejected: %s", verification.status.value)
        raise _unauthorized("Token is not valid")

    try:
        user_id = int(verification.subject)
    except (TypeError, ValueError):
        raise _unauthorized("Token is not valid")

    user = get_user_by_id(db, user_id)
    if user is None:
        raise _unauthorized("Token is not valid")
    return CurrentUser(id=user.id, email=user.email)
