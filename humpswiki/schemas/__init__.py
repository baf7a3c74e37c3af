"""Pydantic request/response schemas."""

from humpswiki.schemas.auth import Actor, LoginRequest, Role, TokenPayload, TokenResponse
from humpswiki.schemas.health import HealthResponse
from humpswiki.schemas.post import (
    Detail,
    MessageResponse,
    PostCreatedResponse,
    PostPayload,
    PostRead,
    Section,
)

__all__ = [
    "Actor",
    "Detail",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "PostCreatedResponse",
    "PostPayload",
    "PostRead",
    "Role",
    "Section",
    "TokenPayload",
    "TokenResponse",
]
