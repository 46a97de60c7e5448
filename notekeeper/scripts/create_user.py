"""
Create a user without going through the signup endpoint. Run from project root:
  python -m notekeeper.scripts.create_user EMAIL PASSWORD
Example:
  python -m notekeeper.scripts.create_user alice@mail.com your-secure-password
"""
import argparse
import logging
import sys

from pydantic import EmailStr, TypeAdapter, ValidationError

from notekeeper.core.database import SessionLocal
from notekeeper.core.security import (
    EMAIL_MAX_LEN,
    PASSWORD_MAX_BYTES,
    PASSWORD_MIN_LEN,
    password_too_long,
)
from notekeeper.services.accounts import DuplicateEmailError, create_user

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)

_email_adapter = TypeAdapter(EmailStr)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Notekeeper user.")
    parser.add_argument("email", help="Email address (case-insensitive, unique)")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN} chars to {PASSWORD_MAX_BYTES} bytes)")
    args = parser.parse_args(argv)

    email = args.email.strip()
    if not email or len(email) > EMAIL_MAX_LEN:
        print("Invalid email length.", file=sys.stderr)
        return 1
    try:
        _email_adapter.validate_python(email)
    except ValidationError:
        print("Please provide a valid email.", file=sys.stderr)
        return 1
    if len(args.password) < PASSWORD_MIN_LEN or password_too_long(args.password):
        print(
            f"Password must be at least {PASSWORD_MIN_LEN} characters and at most {PASSWORD_MAX_BYTES} bytes.",
            file=sys.stderr,
        )
        return 1

    db = SessionLocal()
    try:
        user = create_user(db, email, args.password)
        print(f"Created user '{user.email}' (id={user.id}).")
        return 0
    except DuplicateEmailError as e:
        print(f"User '{e.email}' already exists.", file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
