"""Form checks run before submitting a post; the API repeats them authoritatively."""

from humpswiki.schemas.post import PostPayload
from humpswiki.schemas.post_rules import PostValidationError, validate_post_payload


def check_post_form(payload: PostPayload) -> str | None:
    """Return the message to show in the form's error banner, or None if the form is valid."""
    try:
        validate_post_payload(payload)
    except PostValidationError as e:
        return e.message
    return None
