"""Post field rules and the ?title= codec, shared by the API and its clients.

Only pydantic schemas are imported here, so front ends can check a form or build
a title URL without the database stack.
"""

from urllib.parse import quote, unquote

from humpswiki.schemas.post import (
    DETAIL_BODY_MAX_LENGTH,
    IMAGE_URL_MAX_LENGTH,
    SECTION_BODY_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    Detail,
    PostPayload,
    Section,
)

REQUIRED_MESSAGE = "Post Title and at least one Section are required."
TITLE_MESSAGE = f"Post title must not exceed {TITLE_MAX_LENGTH} characters."
IMAGE_URL_MESSAGE = f"Image URL must not exceed {IMAGE_URL_MAX_LENGTH} characters."
SECTION_MESSAGE = (
    f"Each section must have a title not exceeding {TITLE_MAX_LENGTH} characters, "
    f"a body not exceeding {SECTION_BODY_MAX_LENGTH} characters, and neither can be empty. "
    f"If provided, the image URL must not exceed {IMAGE_URL_MAX_LENGTH} characters."
)
DETAIL_MESSAGE = (
    f"Each detail must have a title not exceeding {TITLE_MAX_LENGTH} characters "
    f"and a body not exceeding {DETAIL_BODY_MAX_LENGTH} characters, and neither can be empty."
)


class PostValidationError(Exception):
    """Raised when a post payload breaks a length or emptiness rule."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidTitleError(Exception):
    """Raised when a title query parameter cannot be decoded."""

    def __init__(self, message: str = "Invalid title format") -> None:
        self.message = message
        super().__init__(message)


def _is_valid_section(section: Section) -> bool:
    return (
        bool(section.title.strip())
        and bool(section.body.strip())
        and len(section.title) <= TITLE_MAX_LENGTH
        and len(section.body) <= SECTION_BODY_MAX_LENGTH
        and len(section.image_url) <= IMAGE_URL_MAX_LENGTH
    )


def _is_valid_detail(detail: Detail) -> bool:
    return (
        bool(detail.title.strip())
        and bool(detail.body.strip())
        and len(detail.title) <= TITLE_MAX_LENGTH
        and len(detail.body) <= DETAIL_BODY_MAX_LENGTH
    )


def validate_post_payload(payload: PostPayload) -> None:
    """Raise PostValidationError with the first rule the payload breaks."""
    if not payload.post_title.strip() or not payload.sections:
        raise PostValidationError(REQUIRED_MESSAGE)
    if len(payload.post_title) > TITLE_MAX_LENGTH:
        raise PostValidationError(TITLE_MESSAGE)
    if len(payload.image_url) > IMAGE_URL_MAX_LENGTH:
        raise PostValidationError(IMAGE_URL_MESSAGE)
    for section in payload.sections:
        if not _is_valid_section(section):
            raise PostValidationError(SECTION_MESSAGE)
    for detail in payload.details:
        if not _is_valid_detail(detail):
            raise PostValidationError(DETAIL_MESSAGE)


def encode_title_param(title: str) -> str:
    """
    Encode a post title for a ?title= query value.

    Literal '%' is escaped to '%25' before percent-encoding so that
    decode_title_param, which decodes once more after the framework, gives the
    title back unchanged.
    """
    return quote(title.replace("%", "%25"), safe="")


def decode_title_param(raw: str | None) -> str:
    """Decode a ?title= value (already decoded once by the framework)."""
    if not raw:
        raise InvalidTitleError()
    try:
        return unquote(raw, errors="strict")
    except UnicodeDecodeError as e:
        raise InvalidTitleError() from e
