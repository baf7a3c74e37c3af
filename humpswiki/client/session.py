"""Client-side session state derived from the stored token.

The token is decoded locally without checking its signature, so this state only
decides what to show and where to redirect. The API verifies the token again on
every privileged request.
"""

import json
import logging
import time
from pathlib import Path
from typing import Any, Protocol

import jwt

from humpswiki.schemas.auth import Actor

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login"


class TokenStorage(Protocol):
    def load(self) -> str | None: ...

    def save(self, token: str) -> None: ...

    def clear(self) -> None: ...


class MemoryTokenStorage:
    def __init__(self, token: str | None = None) -> None:
        self._token = token

    def load(self) -> str | None:
        return self._token

    def save(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


class FileTokenStorage:
    """Keeps the token in a small JSON file so it survives restarts."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> str | None:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError):
            logger.warning("Ignoring unreadable token file %s", self.path)
            return None
        token = data.get("token") if isinstance(data, dict) else None
        return token if isinstance(token, str) and token else None

    def save(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"token": token}), encoding="utf-8")

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


def decode_claims(token: str) -> dict[str, Any] | None:
    """Read a token's claims without verifying it; None if it is not a JWT."""
    try:
        claims = jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError:
        return None
    return claims if isinstance(claims, dict) else None


class AuthSession:
    """
    Holds is_authenticated, role and username for the current client.

    Starts in the loading state; restore() resolves it from storage. While
    loading, nothing should render and no redirect is decided.
    """

    def __init__(self, storage: TokenStorage) -> None:
        self.storage = storage
        self.loading = True
        self.token: str | None = None
        self.is_authenticated = False
        self.role: str | None = None
        self.username: str | None = None

    def _apply(self, token: str, claims: dict[str, Any]) -> None:
        self.token = token
        self.is_authenticated = True
        self.role = claims.get("role") or None
        self.username = claims.get("username") or claims.get("sub") or None

    def _reset(self) -> None:
        self.token = None
        self.is_authenticated = False
        self.role = None
        self.username = None

    def restore(self, now: float | None = None) -> bool:
        """Load the stored token; drop it if it is malformed or expired."""
        now = time.time() if now is None else now
        token = self.storage.load()
        claims = decode_claims(token) if token else None
        exp = claims.get("exp") if claims else None
        if token and claims and isinstance(exp, (int, float)) and exp > now:
            self._apply(token, claims)
        else:
            if token:
                logger.info("Discarding expired or malformed stored token")
                self.storage.clear()
            self._reset()
        self.loading = False
        return self.is_authenticated

    def login(self, token: str) -> None:
        claims = decode_claims(token)
        if claims is None:
            raise ValueError("Malformed session token")
        self.storage.save(token)
        self._apply(token, claims)
        self.loading = False

    def logout(self) -> None:
        self.storage.clear()
        self._reset()

    @property
    def actor(self) -> Actor | None:
        if not self.is_authenticated or not self.username:
            return None
        return Actor(username=self.username, role=self.role or "guest")

    def auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    def redirect_for(self, path: str) -> str | None:
        """Where to send the user before rendering path, or None to render it."""
        if self.loading or self.is_authenticated or path == LOGIN_PATH:
            return None
        return LOGIN_PATH
