"""Database client: engine and session factory with an explicit lifecycle."""

import logging
from collections.abc import Generator

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from humpswiki.models.base import Base

logger = logging.getLogger(__name__)


class Database:
    """
    Owns the SQLAlchemy engine and session factory for one application instance.

    Constructed by create_app (or by scripts), injected into request handlers via
    app.state, and disposed when the application shuts down. Creating the engine
    does not open a connection.
    """

    def __init__(self, url: str, echo: bool = False) -> None:
        kwargs: dict = {"echo": echo}
        if url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            if url in ("sqlite://", "sqlite:///:memory:"):
                # One shared connection, otherwise every session sees an empty database.
                kwargs["poolclass"] = StaticPool
        else:
            kwargs["pool_pre_ping"] = True
        self.url = url
        self.engine = create_engine(url, **kwargs)
        self.session_factory = sessionmaker(
            autocommit=False, autoflush=False, bind=self.engine
        )

    def session(self) -> Session:
        return self.session_factory()

    def create_all(self) -> None:
        """Create all tables from the ORM metadata (tests and local dev; prod uses Alembic)."""
        Base.metadata.create_all(self.engine)

    def check_connected(self) -> bool:
        """Run a trivial query to verify the database is reachable."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            logger.exception("Database connectivity check failed")
            return False

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("Database engine disposed")


def get_database(request: Request) -> Database:
    """Dependency that returns the application's Database."""
    return request.app.state.database


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency that yields a DB session and closes it when done."""
    db = get_database(request).session()
    try:
        yield db
    finally:
        db.close()
