"""Search, sort, paging and card summaries for the posts list.

The API returns every post; these helpers do the list view's work over that
full list.
"""

import math
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from humpswiki.core.policy import can_perform
from humpswiki.presentation.placeholders import post_href, strip_placeholders
from humpswiki.schemas.auth import Actor
from humpswiki.schemas.post import PostRead

SortBy = Literal["title", "created", "modified"]

ITEMS_PER_PAGE = 10
SUMMARY_CHAR_LIMIT = 100
NO_BODY_TEXT = "No body available."


class Page(BaseModel):
    items: list[PostRead]
    page: int
    total_pages: int


class PostCard(BaseModel):
    """What the list view shows for one post."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    post_title: str = Field(alias="postTitle")
    href: str
    summary: str
    image_url: str = Field(default="", alias="imageURL")
    author: str
    created_date: datetime | None = Field(default=None, alias="createdDate")
    modified_author: str | None = Field(default=None, alias="modifiedAuthor")
    modified_date: datetime | None = Field(default=None, alias="modifiedDate")
    can_edit: bool = Field(default=False, alias="canEdit")
    can_delete: bool = Field(default=False, alias="canDelete")


def truncate_text(text: str, limit: int) -> str:
    return text if len(text) <= limit else f"{text[:limit]}..."


def search_posts(posts: list[PostRead], query: str) -> list[PostRead]:
    """Case-insensitive substring match on the title; an empty query keeps everything."""
    needle = query.strip().lower()
    if not needle:
        return list(posts)
    return [p for p in posts if needle in p.post_title.lower()]


def _timestamp(value: datetime | None) -> float:
    if value is None:
        return float("-inf")
    return value.timestamp()


def sort_posts(
    posts: list[PostRead],
    sort_by: SortBy = "created",
    flipped: bool = False,
) -> list[PostRead]:
    """
    Titles sort A to Z and dates newest first; flipped reverses the order.
    Posts never modified sort by their creation date under "modified".
    """
    if sort_by == "title":
        return sorted(posts, key=lambda p: p.post_title.lower(), reverse=flipped)
    field = "modified_date" if sort_by == "modified" else "created_date"
    return sorted(
        posts,
        key=lambda p: _timestamp(getattr(p, field) or p.created_date),
        reverse=not flipped,
    )


def paginate(posts: list[PostRead], page: int = 1, per_page: int = ITEMS_PER_PAGE) -> Page:
    """Slice one page; page numbers start at 1 and are clamped to the valid range."""
    total_pages = math.ceil(len(posts) / per_page) if posts else 0
    page = min(max(page, 1), max(total_pages, 1))
    start = (page - 1) * per_page
    return Page(items=posts[start : start + per_page], page=page, total_pages=total_pages)


def summarize(post: PostRead, limit: int = SUMMARY_CHAR_LIMIT) -> str:
    """First section body as plain text, truncated for a card."""
    if not post.sections:
        return NO_BODY_TEXT
    return truncate_text(strip_placeholders(post.sections[0].body), limit)


def post_card(post: PostRead, actor: Actor | None) -> PostCard:
    return PostCard(
        id=post.id,
        post_title=post.post_title,
        href=post_href(post.post_title),
        summary=summarize(post),
        image_url=post.image_url,
        author=post.author,
        created_date=post.created_date,
        modified_author=post.modified_author,
        modified_date=post.modified_date,
        can_edit=can_perform(actor, "edit", post),
        can_delete=can_perform(actor, "delete", post),
    )


def strip_post_placeholders(post: PostRead) -> PostRead:
    """Copy of post with placeholders removed from every section body (home and members views)."""
    sections = [
        s.model_copy(update={"body": strip_placeholders(s.body)}) for s in post.sections
    ]
    return post.model_copy(update={"sections": sections})
