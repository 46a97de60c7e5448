"""User account lookup and creation (credential store access)."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from notekeeper.core.security import hash_password
from notekeeper.models import User

logger = logging.getLogger(__name__)


class DuplicateEmailError(Exception):
    """Raised when signing up with an email that is already registered."""

    def __init__(self, email: str) -> None:
        self.email = email
        self.message = "User already exists with this email"
        super().__init__(self.message)


def normalize_email(email: str) -> str:
    """Emails are unique case-insensitively; store and look them up lowercased."""
    return email.strip().lower()


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def get_user_by_id(db: Session, user_id: int) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def create_user(db: Session, email: str, password: str) -> User:
    """
    Persist a new user with a bcrypt-hashed password.

    Raises DuplicateEmailError if the email is taken, including when a
    concurrent signup wins the unique index between the check and the commit.
    """
    normalized = normalize_email(email)
    if get_user_by_email(db, normalized) is not None:
        raise DuplicateEmailError(normalized)

    user = User(
        email=normalized,
        password_hash=hash_password(password),
        failed_attempts=0,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateEmailError(normalized) from e
    db.refresh(user)
    logger.info("User created", extra={"user_id": user.id})
    return user
