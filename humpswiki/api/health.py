"""Database connectivity check (GET /connect)."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from humpswiki.api.auth import get_app_settings
from humpswiki.core.config import Settings
from humpswiki.core.database import Database, get_database
from humpswiki.schemas.health import HealthResponse

router = APIRouter()


@router.get("/connect", response_model=HealthResponse)
def connect(
    database: Annotated[Database, Depends(get_database)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> HealthResponse:
    """
    Ping the database and report whether it is reachable.
    Used by the home page and by load balancers.
    """
    if not database.check_connected():
        raise HTTPException(status_code=500, detail="Failed to connect to database.")
    return HealthResponse(environment=settings.APP_ENV)
