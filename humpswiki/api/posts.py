"""Post endpoints: create, edit, delete (token required) and the public reads."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from humpswiki.api.auth import get_app_settings, require_roles
from humpswiki.core.config import Settings
from humpswiki.core.database import get_db
from humpswiki.core.policy import EDITOR_ROLES
from humpswiki.schemas.auth import Actor
from humpswiki.schemas.post import (
    MessageResponse,
    PostCreatedResponse,
    PostPayload,
    PostRead,
)
from humpswiki.schemas.post_rules import (
    InvalidTitleError,
    PostValidationError,
    decode_title_param,
)
from humpswiki.services import post_store
from humpswiki.services.post_store import PostConflictError, PostStoreError
from humpswiki.services.posts import (
    PermissionDeniedError,
    PostNotFoundError,
    create_post,
    delete_post,
    edit_post,
    get_post,
)

router = APIRouter()

require_editor = require_roles(*EDITOR_ROLES)

# Range of the integer primary key on posts.id
POST_ID_MIN = 1
POST_ID_MAX = 2**31 - 1


def _to_read(posts: list) -> list[PostRead]:
    return [PostRead.model_validate(p) for p in posts]


@router.post(
    "/createPost",
    response_model=PostCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
def create(
    body: PostPayload,
    db: Annotated[Session, Depends(get_db)],
    actor: Annotated[Actor, Depends(require_editor)],
) -> PostCreatedResponse:
    """Create a post authored by the token's user. Titles are unique."""
    try:
        post = create_post(db, body, actor)
    except PostValidationError as e:
        raise HTTPException(status_code=400, detail=e.message) from e
    except PermissionDeniedError as e:
        raise HTTPException(status_code=403, detail=e.message) from e
    except PostConflictError as e:
        raise HTTPException(status_code=400, detail=e.message) from e
    except PostStoreError as e:
        raise HTTPException(status_code=500, detail="Failed to create post") from e
    return PostCreatedResponse(post_id=post.id, post_title=post.post_title)


@router.put("/editPost", response_model=MessageResponse)
def edit(
    body: PostPayload,
    db: Annotated[Session, Depends(get_db)],
    actor: Annotated[Actor, Depends(require_editor)],
    title: str | None = None,
) -> MessageResponse:
    """
    Replace the post currently titled `title` (sections, details, image, and
    optionally its title). `%` in the title must be sent as `%25` before encoding.
    """
    try:
        current_title = decode_title_param(title)
        edit_post(db, current_title, body, actor)
    except (InvalidTitleError, PostValidationError) as e:
        raise HTTPException(status_code=400, detail=e.message) from e
    except PostNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from e
    except PermissionDeniedError as e:
        raise HTTPException(status_code=403, detail=e.message) from e
    except PostConflictError as e:
        raise HTTPException(status_code=400, detail=e.message) from e
    except PostStoreError as e:
        raise HTTPException(status_code=500, detail="Failed to update post.") from e
    return MessageResponse(message="Post updated successfully.")


@router.delete("/deletePost", response_model=MessageResponse)
def delete(
    db: Annotated[Session, Depends(get_db)],
    actor: Annotated[Actor, Depends(require_editor)],
    post_id: Annotated[str | None, Query(alias="id")] = None,
) -> MessageResponse:
    """Delete a post by id. Contributors and humpers may delete only their own posts."""
    try:
        parsed_id = int(post_id) if post_id else None
    except ValueError:
        parsed_id = None
    if parsed_id is None or not POST_ID_MIN <= parsed_id <= POST_ID_MAX:
        raise HTTPException(status_code=400, detail="Invalid ID format")
    try:
        delete_post(db, parsed_id, actor)
    except PostNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from e
    except PermissionDeniedError as e:
        raise HTTPException(status_code=403, detail=e.message) from e
    except (PostConflictError, PostStoreError) as e:
        raise HTTPException(status_code=500, detail="Failed to delete post") from e
    return MessageResponse(message="Post deleted successfully")


@router.get("/getPost", response_model=PostRead)
def read_post(
    db: Annotated[Session, Depends(get_db)],
    title: str | None = None,
) -> PostRead:
    try:
        post = get_post(db, decode_title_param(title))
    except InvalidTitleError as e:
        raise HTTPException(status_code=400, detail=e.message) from e
    except PostNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from e
    except PostStoreError as e:
        raise HTTPException(status_code=500, detail="Failed to fetch post") from e
    return PostRead.model_validate(post)


@router.get("/getPosts", response_model=list[PostRead])
def read_posts(db: Annotated[Session, Depends(get_db)]) -> list[PostRead]:
    try:
        return _to_read(post_store.list_posts(db))
    except PostStoreError as e:
        raise HTTPException(status_code=500, detail="Failed to fetch posts") from e


@router.get("/getRandomPosts", response_model=list[PostRead])
def read_random_posts(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> list[PostRead]:
    try:
        return _to_read(post_store.sample_posts(db, settings.RANDOM_SAMPLE_SIZE))
    except PostStoreError as e:
        raise HTTPException(status_code=500, detail="Failed to fetch posts") from e


@router.get("/getMembers", response_model=list[PostRead])
def read_members(db: Annotated[Session, Depends(get_db)]) -> list[PostRead]:
    try:
        return _to_read(post_store.list_members(db))
    except PostStoreError as e:
        raise HTTPException(status_code=500, detail="Failed to fetch members") from e
