"""ORM model for wiki posts."""

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String, false, func
from sqlalchemy.dialects.postgresql import JSONB

from humpswiki.models.base import Base

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests).
JSONDocument = JSON().with_variant(JSONB(), "postgresql")


class Post(Base):
    """
    A titled wiki page with ordered sections and details.

    sections: list of {"title", "body", "imageURL"}; details: list of {"title", "body"}.
    post_title is unique; the database enforces it so concurrent creates of the
    same title are resolved by the store.
    """

    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    post_title = Column(String(75), nullable=False, unique=True, index=True)
    author = Column(String(255), nullable=False)
    sections = Column(JSONDocument, nullable=False, default=list)
    details = Column(JSONDocument, nullable=False, default=list)
    image_url = Column(String(500), nullable=False, default="")
    is_member = Column(Boolean, nullable=False, default=False, server_default=false())
    created_date = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    modified_author = Column(String(255), nullable=True)
    modified_date = Column(DateTime(timezone=True), nullable=True)
