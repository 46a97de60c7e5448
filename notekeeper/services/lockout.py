"""
Login attempt tracking and temporary account lockout.

State lives on the User row (failed_attempts, locked_until) so it survives
restarts and is shared by every worker. Each mutation is a single UPDATE whose
CASE expressions are evaluated by the database against the current row, so
concurrent attempts race only at statement granularity (last write wins on
locked_until).

States:
    OPEN    no lock, or a stale lock (locked_until in the past)
    LOCKED  locked_until in the future
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import and_, case, literal, null, or_, update
from sqlalchemy.orm import Session

from notekeeper.core.config import get_settings
from notekeeper.core.security import burn_password_check, verify_password
from notekeeper.models import User
from notekeeper.services.accounts import get_user_by_email

if TYPE_CHECKING:
    from notekeeper.core.config import Settings

logger = logging.getLogger(__name__)


class LockState(str, Enum):
    OPEN = "open"
    LOCKED = "locked"


class LoginResult(str, Enum):
    PROCEED = "proceed"
    INVALID_CREDENTIALS = "invalid_credentials"
    LOCKED = "locked"


@dataclass(frozen=True)
class LoginOutcome:
    """Tagged result of an authentication attempt."""

    result: LoginResult
    user: User | None = None
    locked_until: datetime | None = None
    retry_after_minutes: int | None = None
    newly_locked: bool = False


def as_utc(value: datetime | None) -> datetime | None:
    """SQLite hands back naive datetimes; every stored timestamp is UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


def lock_state(user: User, now: datetime) -> LockState:
    locked_until = as_utc(user.locked_until)
    if locked_until is not None and locked_until > now:
        return LockState.LOCKED
    return LockState.OPEN


def has_stale_lock(user: User, now: datetime) -> bool:
    locked_until = as_utc(user.locked_until)
    return locked_until is not None and locked_until <= now


def minutes_remaining(locked_until: datetime, now: datetime) -> int:
    """Remaining lock time in whole minutes, rounded up (at least 1 while locked)."""
    seconds = (as_utc(locked_until) - now).total_seconds()
    return max(1, math.ceil(seconds / 60))


def record_failed_attempt(
    db: Session,
    user: User,
    now: datetime | None = None,
    settings: Settings | None = None,
) -> User:
    """
    Count one failed password check for user in a single UPDATE.

    A stale lock restarts the counter at 1 and is cleared. When the new count
    reaches LOCKOUT_MAX_ATTEMPTS and the row is not already locked,
    locked_until is set to now + LOCKOUT_DURATION_MINUTES.
    """
    settings = settings or get_settings()
    now = now or datetime.now(UTC)
    lock_expires = now + timedelta(minutes=settings.LOCKOUT_DURATION_MINUTES)

    stale = and_(User.locked_until.is_not(None), User.locked_until <= now)
    not_locked = or_(User.locked_until.is_(None), User.locked_until <= now)
    next_attempts = case((stale, 1), else_=User.failed_attempts + 1)

    stmt = (
        update(User)
        .where(User.id == user.id)
        .values(
            failed_attempts=next_attempts,
            locked_until=case(
                (
                    and_(not_locked, next_attempts >= settings.LOCKOUT_MAX_ATTEMPTS),
                    literal(lock_expires, User.locked_until.type),
                ),
                (stale, null()),
                else_=User.locked_until,
            ),
        )
        .execution_options(synchronize_session=False)
    )
    try:
        db.execute(stmt)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(user)
    return user


def reset_failed_attempts(db: Session, user: User) -> User:
    """Clear the counter and any lock; the only way back to a clean OPEN state."""
    stmt = (
        update(User)
        .where(User.id == user.id)
        .values(failed_attempts=0, locked_until=None)
        .execution_options(synchronize_session=False)
    )
    try:
        db.execute(stmt)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(user)
    return user


def _locked(user: User, now: datetime, newly_locked: bool) -> LoginOutcome:
    locked_until = as_utc(user.locked_until)
    return LoginOutcome(
        result=LoginResult.LOCKED,
        user=user,
        locked_until=locked_until,
        retry_after_minutes=minutes_remaining(locked_until, now),
        newly_locked=newly_locked,
    )


def authenticate(
    db: Session,
    email: str,
    password: str,
    now: datetime | None = None,
    settings: Settings | None = None,
) -> LoginOutcome:
    """
    Run one login attempt through the lockout state machine.

    Unknown email and wrong password both yield INVALID_CREDENTIALS. A locked
    account is refused before the password is checked, without touching its
    counters.
    """
    now = now or datetime.now(UTC)

    user = get_user_by_email(db, email)
    if user is None:
        burn_password_check(password)
        return LoginOutcome(result=LoginResult.INVALID_CREDENTIALS)

    if lock_state(user, now) is LockState.LOCKED:
        logger.info("Login refused: account locked", extra={"user_id": user.id})
        return _locked(user, now, newly_locked=False)

    if not verify_password(password, user.password_hash):
        record_failed_attempt(db, user, now=now, settings=settings)
        if lock_state(user, now) is LockState.LOCKED:
            logger.warning(
                "Account locked after %s failed login attempts",
                user.failed_attempts,
                extra={"user_id": user.id, "locked_until": as_utc(user.locked_until).isoformat()},
            )
            return _locked(user, now, newly_locked=True)
        return LoginOutcome(result=LoginResult.INVALID_CREDENTIALS)

    previous_failures = user.failed_attempts
    reset_failed_attempts(db, user)
    if previous_failures:
        logger.info(
            "Login succeeded; cleared %s failed attempts",
            previous_failures,
            extra={"user_id": user.id},
        )
    return LoginOutcome(result=LoginResult.PROCEED, user=user)
