"""
Clear the failed-login counter and any lock on an account. Run from project root:
  python -m notekeeper.scripts.unlock_user EMAIL
"""
import argparse
import logging
import sys

from notekeeper.core.database import SessionLocal
from notekeeper.services.accounts import get_user_by_email
from notekeeper.services.lockout import reset_failed_attempts

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Unlock a Notekeeper account.")
    parser.add_argument("email", help="Email address of the account to unlock")
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        user = get_user_by_email(db, args.email)
        if user is None:
            print(f"No user with email '{args.email.strip().lower()}'.", file=sys.stderr)
            return 1
        previous = user.failed_attempts
        reset_failed_attempts(db, user)
        logger.info("Account unlocked by operator", extra={"user_id": user.id})
        print(f"Unlocked '{user.email}' (cleared {previous} failed attempts).")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
