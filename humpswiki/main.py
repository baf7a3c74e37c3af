"""FastAPI application factory. No business logic; only wiring and middleware.

Run with: uvicorn humpswiki.main:create_app --factory
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from humpswiki.api import router as api_router
from humpswiki.core.config import Settings, get_settings
from humpswiki.core.database import Database

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed request bodies are client errors like any other validation failure: 400."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request body.", "errors": jsonable_encoder(exc.errors())},
    )


def create_app(
    settings: Settings | None = None,
    database: Database | None = None,
) -> FastAPI:
    """
    Build the application with its own settings and database client.

    The database client is created here (no connection is opened until first
    use) and disposed when the application shuts down.
    """
    settings = settings or get_settings()
    configure_logging(settings)
    database = database or Database(settings.DATABASE_URL, echo=settings.DEBUG)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Humps Wiki API starting (env=%s)", settings.APP_ENV)
        yield
        database.dispose()

    app = FastAPI(
        title="Humps Wiki API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.APP_ENV == "dev" else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, _request_validation_handler)

    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "Humps Wiki API"}

    return app
