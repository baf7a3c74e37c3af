"""JWT login and auth dependencies (get_app_settings, require_roles)."""

import logging
from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from humpswiki.core.config import Settings
from humpswiki.core.database import get_db
from humpswiki.core.security import (
    InvalidTokenError,
    UnauthorizedRoleError,
    verify_token,
)
from humpswiki.schemas.auth import Actor, LoginRequest, TokenResponse
from humpswiki.services.auth import InvalidCredentialsError, authenticate, issue_token

logger = logging.getLogger(__name__)
router = APIRouter()
security = HTTPBearer(auto_error=False)

BEARER_HEADERS = {"WWW-Authenticate": "Bearer"}


def get_app_settings(request: Request) -> Settings:
    """Dependency: settings the application was created with."""
    return request.app.state.settings


@router.post("/login", response_model=TokenResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> TokenResponse:
    """
    Authenticate with username and password; returns a session token valid for 7 days.
    Include the token in the Authorization header as: Bearer <token>
    """
    try:
        user = authenticate(db, body.username, body.password)
    except InvalidCredentialsError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
        ) from e
    except SQLAlchemyError as e:
        logger.exception("Database error during login")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        ) from e
    return TokenResponse(token=issue_token(user, settings))


def require_roles(*roles: str) -> Callable[..., Actor]:
    """
    Build a dependency that requires a valid Bearer token whose role is in roles.
    Raises 401 if the token is missing, invalid, expired, or carries another role.
    """

    def dependency(
        credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
        settings: Annotated[Settings, Depends(get_app_settings)],
    ) -> Actor:
        if credentials is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="No token provided.",
                headers=BEARER_HEADERS,
            )
        try:
            payload = verify_token(credentials.credentials, roles, settings)
        except InvalidTokenError as e:
            logger.warning("Token rejected: %s", e.message)
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=e.message,
                headers=BEARER_HEADERS,
            ) from e
        except UnauthorizedRoleError as e:
            logger.warning("Role %r not in %s", e.role, list(roles))
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=e.message,
            ) from e
        return Actor(username=payload.username, role=payload.role)

    return dependency
