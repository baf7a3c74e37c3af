"""Post persistence: thin queries over the posts table.

Uniqueness of post_title is left to the database; an IntegrityError on insert or
update surfaces as PostConflictError. Other SQLAlchemy errors, on reads as well as
writes, surface as PostStoreError. Nothing is retried.
"""

import logging
from collections.abc import Callable
from typing import TypeVar

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from humpswiki.models import Post

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PostConflictError(Exception):
    """Raised when a write would duplicate an existing post title."""

    def __init__(self, message: str = "Post title must be unique") -> None:
        self.message = message
        super().__init__(message)


class PostStoreError(Exception):
    """Raised when the database fails for a reason other than a duplicate title."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


def _commit(db: Session, failure_message: str) -> None:
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise PostConflictError() from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Database error: %s", failure_message)
        raise PostStoreError(failure_message, cause=e) from e


def insert_post(db: Session, post: Post) -> Post:
    """Insert a new post and return it with its id assigned."""
    db.add(post)
    _commit(db, "Failed to create post")
    db.refresh(post)
    return post


def commit_update(db: Session, post: Post) -> Post:
    """Persist changes already applied to a loaded post."""
    _commit(db, "Failed to update post.")
    db.refresh(post)
    return post


def delete_post(db: Session, post: Post) -> None:
    db.delete(post)
    _commit(db, "Failed to delete post")


def _read(db: Session, failure_message: str, query: Callable[[], T]) -> T:
    try:
        return query()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Database error: %s", failure_message)
        raise PostStoreError(failure_message, cause=e) from e


def get_post_by_title(db: Session, title: str) -> Post | None:
    return _read(
        db,
        "Failed to fetch post",
        lambda: db.query(Post).filter(Post.post_title == title).first(),
    )


def get_post_by_id(db: Session, post_id: int) -> Post | None:
    return _read(db, "Failed to fetch post", lambda: db.get(Post, post_id))


def list_posts(db: Session) -> list[Post]:
    return _read(db, "Failed to fetch posts", lambda: db.query(Post).order_by(Post.id).all())


def list_members(db: Session) -> list[Post]:
    """Posts flagged as member pages."""
    return _read(
        db,
        "Failed to fetch members",
        lambda: db.query(Post).filter(Post.is_member.is_(True)).order_by(Post.id).all(),
    )


def sample_posts(db: Session, size: int = 3) -> list[Post]:
    """Return up to size posts chosen at random."""
    return _read(
        db,
        "Failed to fetch posts",
        lambda: db.query(Post).order_by(func.random()).limit(size).all(),
    )
