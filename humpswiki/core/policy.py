"""Who may do what to a post.

can_perform is the single authorization rule for posts. API handlers call it
before mutating (authoritative); the presentation helpers call it to decide
which edit/delete controls to show.
"""

from typing import Literal, Protocol

from humpswiki.schemas.auth import Actor

Action = Literal["view", "create", "edit", "delete"]

# Roles allowed to call the mutating endpoints at all.
EDITOR_ROLES: tuple[str, ...] = ("contributor", "humper", "admin")


class PostLike(Protocol):
    author: str
    post_title: str


def _is_author(actor: Actor, post: PostLike | None) -> bool:
    return post is not None and post.author == actor.username


def _is_subject(actor: Actor, post: PostLike | None) -> bool:
    """A member's own page is the post titled with their username."""
    return post is not None and post.post_title.strip().lower() == actor.username


def can_perform(actor: Actor | None, action: Action, post: PostLike | None = None) -> bool:
    """Return True if actor may perform action on post (post is ignored for view/create)."""
    if action == "view":
        return True
    if actor is None:
        return False
    if action == "create":
        return actor.role in EDITOR_ROLES
    if action == "edit":
        if post is None:
            return False
        if actor.role in ("admin", "humper"):
            return True
        if actor.role == "contributor" and _is_author(actor, post):
            return True
        return actor.role != "guest" and _is_subject(actor, post)
    if action == "delete":
        if post is None:
            return False
        if actor.role == "admin":
            return True
        return actor.role in ("contributor", "humper") and _is_author(actor, post)
    return False
