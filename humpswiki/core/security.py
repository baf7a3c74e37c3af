"""Password hashing and JWT creation/verification for wiki sessions."""

import base64
import hmac
from collections.abc import Iterable
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt

from humpswiki.schemas.auth import TokenPayload

if TYPE_CHECKING:
    from humpswiki.core.config import Settings

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


class InvalidTokenError(Exception):
    """Raised when a token's signature, expiry or claims do not check out."""

    def __init__(self, message: str = "Invalid or expired token.") -> None:
        self.message = message
        super().__init__(message)


class UnauthorizedRoleError(Exception):
    """Raised when a valid token carries a role outside the required set."""

    def __init__(self, role: str, message: str = "Unauthorized role") -> None:
        self.role = role
        self.message = message
        super().__init__(message)


def hash_password(plain_password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors.
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def is_legacy_hash(stored: str) -> bool:
    """True if the stored value is not a bcrypt hash (old base64-encoded password)."""
    return not stored.startswith(BCRYPT_PREFIXES)


def verify_password(plain_password: str, hashed: str) -> bool:
    """
    Verify a plain password against a stored hash.

    Legacy rows hold base64(password); those are compared in constant time so
    they can be upgraded to bcrypt after the login succeeds.
    """
    if is_legacy_hash(hashed):
        encoded = base64.b64encode(plain_password.encode("utf-8")).decode("ascii")
        return hmac.compare_digest(encoded, hashed)
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def create_access_token(
    username: str,
    role: str,
    settings: "Settings",
    now: datetime | None = None,
) -> str:
    """Create a JWT session token with sub/username, role, iat and exp."""
    now = now or datetime.now(UTC)
    expire = now + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "sub": username,
        "username": username,
        "role": role,
        "exp": expire,
        "iat": now,
    }
    return jwt.encode(
        payload,
        settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str, settings: "Settings") -> dict[str, Any]:
    """
    Decode and validate JWT; return the raw payload.
    Raises jwt.PyJWTError on invalid or expired token.
    """
    return jwt.decode(
        token,
        settings.JWT_SECRET.get_secret_value(),
        algorithms=[settings.JWT_ALGORITHM],
        options={"require": ["exp"]},
    )


def verify_token(token: str, roles: Iterable[str], settings: "Settings") -> TokenPayload:
    """
    Check signature and expiry, then require the token's role to be one of roles.

    Raises InvalidTokenError or UnauthorizedRoleError.
    """
    try:
        payload = decode_access_token(token, settings)
    except jwt.PyJWTError as e:
        raise InvalidTokenError() from e
    username = payload.get("username") or payload.get("sub")
    role = payload.get("role")
    if not username or not isinstance(username, str) or not isinstance(role, str):
        raise InvalidTokenError("Invalid token payload.")
    if role not in set(roles):
        raise UnauthorizedRoleError(role)
    return TokenPayload(
        username=username,
        role=role,
        exp=int(payload["exp"]),
        iat=payload.get("iat"),
    )


def get_username_from_token(token: str, settings: "Settings") -> str:
    """Verify the token and return only its username."""
    try:
        payload = decode_access_token(token, settings)
    except jwt.PyJWTError as e:
        raise InvalidTokenError() from e
    username = payload.get("username") or payload.get("sub")
    if not username or not isinstance(username, str):
        raise InvalidTokenError("Username not found in token.")
    return username
