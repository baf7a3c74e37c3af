"""SQLAlchemy ORM models."""

from humpswiki.models.base import Base
from humpswiki.models.post import Post
from humpswiki.models.user import User

__all__ = ["Base", "Post", "User"]
