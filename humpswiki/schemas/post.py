"""Pydantic schemas for posts: write payloads and read representations.

JSON uses the wiki's camelCase field names (postTitle, imageURL, createdDate);
Python attributes are snake_case with aliases.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

# Field bounds shared by the API handlers and the form checks.
TITLE_MAX_LENGTH = 75
SECTION_BODY_MAX_LENGTH = 1500
DETAIL_BODY_MAX_LENGTH = 1500
IMAGE_URL_MAX_LENGTH = 500


class Section(BaseModel):
    """One body section of a post."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str = ""
    body: str = ""
    image_url: str = Field(default="", alias="imageURL")


class Detail(BaseModel):
    """A key-fact pair shown beside the post body."""

    model_config = ConfigDict(extra="ignore")

    title: str = ""
    body: str = ""


class PostPayload(BaseModel):
    """
    Body of POST /createPost and PUT /editPost.

    Lengths and emptiness are not enforced here; validate_post_payload reports
    them with the wiki's own messages and a 400.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    post_title: str = Field(default="", alias="postTitle")
    sections: list[Section] = Field(default_factory=list)
    details: list[Detail] = Field(default_factory=list)
    image_url: str = Field(default="", alias="imageURL")


class PostRead(BaseModel):
    """A stored post as returned by the read endpoints."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: int
    author: str
    post_title: str = Field(alias="postTitle")
    sections: list[Section]
    details: list[Detail]
    image_url: str = Field(default="", alias="imageURL")
    is_member: bool = Field(default=False, alias="isMember")
    created_date: datetime | None = Field(default=None, alias="createdDate")
    modified_author: str | None = Field(default=None, alias="modifiedAuthor")
    modified_date: datetime | None = Field(default=None, alias="modifiedDate")


class PostCreatedResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = "Post created"
    post_id: int = Field(alias="postId")
    post_title: str = Field(alias="postTitle")


class MessageResponse(BaseModel):
    message: str
