"""Shared builders for tests: settings, an in-memory database, users, tokens and post bodies."""

from fastapi.testclient import TestClient

from humpswiki.core.config import Settings
from humpswiki.core.database import Database
from humpswiki.core.security import create_access_token, hash_password
from humpswiki.main import create_app
from humpswiki.models import User

SECRET = "humps-wiki-test-secret"

# Low bcrypt cost keeps the suite fast; verification works for any cost.
TEST_BCRYPT_ROUNDS = 4


def make_settings(**overrides: object) -> Settings:
    values: dict[str, object] = {"DATABASE_URL": "sqlite://", "JWT_SECRET": SECRET}
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_database() -> Database:
    database = Database("sqlite://")
    database.create_all()
    return database


def add_user(database: Database, username: str, password: str, role: str) -> None:
    db = database.session()
    try:
        db.add(
            User(
                username=username,
                password_hash=hash_password(password, rounds=TEST_BCRYPT_ROUNDS),
                role=role,
            )
        )
        db.commit()
    finally:
        db.close()


def make_client(settings: Settings | None = None) -> tuple[TestClient, Database, Settings]:
    settings = settings or make_settings()
    database = make_database()
    app = create_app(settings=settings, database=database)
    return TestClient(app), database, settings


def auth_header(username: str, role: str, settings: Settings) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(username, role, settings)}"}


def post_body(title: str = "Randy", **overrides: object) -> dict:
    body: dict = {
        "postTitle": title,
        "sections": [{"title": "Bio", "body": "A humper.", "imageURL": ""}],
        "details": [],
        "imageURL": "",
    }
    body.update(overrides)
    return body
