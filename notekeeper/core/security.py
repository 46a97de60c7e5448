"""Password hashing and JWT creation/verification for authentication."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from functools import lru_cache
from typing import Any

import bcrypt
import jwt

from notekeeper.core.config import settings

logger = logging.getLogger(__name__)

# Min/max lengths for email and password validation.
EMAIL_MAX_LEN = 255
PASSWORD_MIN_LEN = 6
# bcrypt only reads the first 72 bytes of its input.
PASSWORD_MAX_BYTES = 72


def password_too_long(plain_password: str) -> bool:
    """True when the UTF-8 encoding of the password exceeds what bcrypt can hash."""
    return len(plain_password.encode("utf-8")) > PASSWORD_MAX_BYTES


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    if password_too_long(plain_password):
        raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
    pw_bytes = plain_password.encode("utf-8")
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash. Passwords bcrypt cannot hash never match."""
    if password_too_long(plain_password):
        return False
    pw_bytes = plain_password.encode("utf-8")
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


@lru_cache
def _dummy_hash() -> str:
    return hash_password("notekeeper-timing-equalizer")


def burn_password_check(plain_password: str) -> None:
    """Spend one bcrypt verification so unknown accounts answer as slowly as known ones."""
    verify_password(plain_password, _dummy_hash())


def create_access_token(sub: str | int, now: datetime | None = None) -> str:
    """Create a JWT access token with sub (user id), iat and exp."""
    now = now or datetime.now(UTC)
    expire = now + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "sub": str(sub),
        "exp": expire,
        "iat": now,
    }
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.encode(
        payload,
        secret,
        algorithm=settings.JWT_ALGORITHM,
    )


class TokenStatus(str, Enum):
    """Closed set of bearer token verification outcomes."""

    VALID = "valid"
    EXPIRED = "expired"
    BAD_SIGNATURE = "bad_signature"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class TokenVerification:
    """Result of verifying a bearer token; subject is only set when status is VALID."""

    status: TokenStatus
    subject: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is TokenStatus.VALID


def verify_access_token(token: str) -> TokenVerification:
    """
    Validate signature, expiry and required claims of a JWT.

    Never raises: every decoding failure maps to a TokenStatus so callers
    cannot leak parser internals to clients.
    """
    secret = settings.JWT_SECRET.get_secret_value()
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        return TokenVerification(TokenStatus.EXPIRED)
    except jwt.InvalidSignatureError:
        return TokenVerification(TokenStatus.BAD_SIGNATURE)
    except jwt.PyJWTError as e:
        logger.debug("Rejected malformed token: %s", type(e).__name__)
        return TokenVerification(TokenStatus.MALFORMED)

    sub = payload.get("sub")
    if not isinstance(sub, str) or not sub.strip():
        return TokenVerification(TokenStatus.MALFORMED)
    return TokenVerification(TokenStatus.VALID, subject=sub)
