"""
Create a wiki user (there is no registration endpoint). Run from project root:
  python -m humpswiki.scripts.create_user USERNAME PASSWORD [role]
Example:
  python -m humpswiki.scripts.create_user randy your-secure-password humper
"""
import argparse
import logging
import sys

from humpswiki.core.config import get_settings
from humpswiki.core.database import Database
from humpswiki.core.security import hash_password
from humpswiki.models.user import User
from humpswiki.schemas.auth import ROLES
from humpswiki.services.auth import normalize_username

logger = logging.getLogger(__name__)

PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128


def create_user(database: Database, username: str, password: str, role: str) -> int:
    username = normalize_username(username)
    if not username or len(username) > 255:
        print("Invalid username length.", file=sys.stderr)
        return 1
    if len(password) < PASSWORD_MIN_LEN or len(password) > PASSWORD_MAX_LEN:
        print(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.",
            file=sys.stderr,
        )
        return 1

    db = database.session()
    try:
        existing = db.query(User).filter(User.username == username).first()
        if existing:
            print(f"User '{username}' already exists.", file=sys.stderr)
            return 1
        db.add(User(username=username, password_hash=hash_password(password), role=role))
        db.commit()
        logger.info("Created user %s with role %s", username, role)
        print(f"Created user '{username}' with role '{role}'.")
        return 0
    finally:
        db.close()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Humps Wiki user (no registration UI).")
    parser.add_argument("username", help="Username (1-255 chars, stored lowercased)")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("role", nargs="?", default="contributor", choices=list(ROLES))
    args = parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    database = Database(settings.DATABASE_URL)
    try:
        return create_user(database, args.username, args.password, args.role)
    finally:
        database.dispose()


if __name__ == "__main__":
    sys.exit(main())
