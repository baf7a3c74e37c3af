"""Credential check and session token issuance for POST /login."""

import logging
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from humpswiki.core.security import (
    create_access_token,
    hash_password,
    is_legacy_hash,
    verify_password,
)
from humpswiki.models import User

if TYPE_CHECKING:
    from humpswiki.core.config import Settings

logger = logging.getLogger(__name__)


class InvalidCredentialsError(Exception):
    """Raised for an unknown user or a wrong password; the two are not distinguished."""

    def __init__(self, message: str = "Invalid username or password") -> None:
        self.message = message
        super().__init__(message)


def normalize_username(username: str) -> str:
    return username.strip().lower()


def authenticate(db: Session, username: str, password: str) -> User:
    """Return the user if the password matches; upgrade legacy base64 passwords to bcrypt."""
    user = db.query(User).filter(User.username == normalize_username(username)).first()
    if user is None or not verify_password(password, user.password_hash):
        logger.warning("Login failed for username=%r", normalize_username(username))
        raise InvalidCredentialsError()
    if is_legacy_hash(user.password_hash):
        user.password_hash = hash_password(password)
        db.commit()
        logger.info("Upgraded legacy password encoding to bcrypt for username=%s", user.username)
    return user


def issue_token(user: User, settings: "Settings") -> str:
    token = create_access_token(user.username, user.role, settings)
    logger.info("Login succeeded: username=%s role=%s", user.username, user.role)
    return token
