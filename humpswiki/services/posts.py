"""Post mutations: field validation, ownership checks, and author/modification stamping.

Validation runs before any database access, so a rejected payload never writes.
"""

import logging
from datetime import UTC, datetime

from sqlalchemy.orm import Session

from humpswiki.core.policy import can_perform
from humpswiki.models import Post
from humpswiki.schemas.auth import Actor
from humpswiki.schemas.post import PostPayload
from humpswiki.schemas.post_rules import validate_post_payload
from humpswiki.services import post_store

logger = logging.getLogger(__name__)


class PostNotFoundError(Exception):
    """Raised when no post matches the requested title or id."""

    def __init__(self, message: str = "Post not found.") -> None:
        self.message = message
        super().__init__(message)


class PermissionDeniedError(Exception):
    """Raised when the actor's role is allowed in general but not on this post."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


def _dump_sections(payload: PostPayload) -> list[dict]:
    return [s.model_dump(by_alias=True) for s in payload.sections]


def _dump_details(payload: PostPayload) -> list[dict]:
    return [d.model_dump() for d in payload.details]


def create_post(db: Session, payload: PostPayload, actor: Actor) -> Post:
    """Validate and insert a new post authored by actor."""
    validate_post_payload(payload)
    if not can_perform(actor, "create"):
        raise PermissionDeniedError("You are not allowed to create posts.")
    post = Post(
        author=actor.username,
        post_title=payload.post_title,
        sections=_dump_sections(payload),
        details=_dump_details(payload),
        image_url=payload.image_url,
        created_date=datetime.now(UTC),
    )
    try:
        post = post_store.insert_post(db, post)
    except post_store.PostConflictError:
        logger.info("Duplicate post title rejected: %r", payload.post_title)
        raise
    logger.info("Post created: id=%s title=%r author=%s", post.id, post.post_title, actor.username)
    return post


def edit_post(db: Session, title: str, payload: PostPayload, actor: Actor) -> Post:
    """Replace title, sections, details and image of the post currently titled title."""
    validate_post_payload(payload)
    post = post_store.get_post_by_title(db, title)
    if post is None:
        raise PostNotFoundError()
    if not can_perform(actor, "edit", post):
        raise PermissionDeniedError("You are not allowed to edit this post.")
    post.post_title = payload.post_title
    post.sections = _dump_sections(payload)
    post.details = _dump_details(payload)
    post.image_url = payload.image_url
    post.modified_author = actor.username
    post.modified_date = datetime.now(UTC)
    try:
        post = post_store.commit_update(db, post)
    except post_store.PostConflictError:
        logger.info("Rename onto existing title rejected: %r -> %r", title, payload.post_title)
        raise
    logger.info("Post updated: id=%s title=%r by=%s", post.id, post.post_title, actor.username)
    return post


def delete_post(db: Session, post_id: int, actor: Actor) -> None:
    post = post_store.get_post_by_id(db, post_id)
    if post is None:
        raise PostNotFoundError("Post not found")
    if not can_perform(actor, "delete", post):
        raise PermissionDeniedError("You are not allowed to delete this post.")
    post_store.delete_post(db, post)
    logger.info("Post deleted: id=%s by=%s", post_id, actor.username)


def get_post(db: Session, title: str) -> Post:
    post = post_store.get_post_by_title(db, title)
    if post is None:
        raise PostNotFoundError("Post not found")
    return post
