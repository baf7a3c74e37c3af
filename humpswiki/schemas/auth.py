"""Request/response schemas for login and decoded session tokens."""

from typing import Literal

from pydantic import BaseModel, Field

Role = Literal["contributor", "humper", "admin", "guest"]

ROLES: tuple[str, ...] = ("contributor", "humper", "admin", "guest")


class LoginRequest(BaseModel):
    """Credentials for login."""

    username: str = Field(..., min_length=1, max_length=255, description="Username (case-insensitive)")
    password: str = Field(..., min_length=1, description="Password")


class TokenResponse(BaseModel):
    """Signed session token returned after successful login."""

    message: str = Field(default="Login successful")
    token: str = Field(..., description="JWT session token; send as Authorization: Bearer <token>")


class TokenPayload(BaseModel):
    """Verified claims of a session token."""

    username: str
    role: str
    exp: int
    iat: int | None = None


class Actor(BaseModel):
    """Who is performing an action: the username and role taken from a verified token."""

    username: str
    role: str
