"""
Post schemas.

Request models accept camelCase keys (``isPublished``, ``featuredImage``...)
from JSON bodies and from form fields alike, and response models always
serialize by alias. Raw image bytes never appear in any response model.
"""

from typing import Annotated, Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator

from postdesk.configs import MAX_EXCERPT_LENGTH, MAX_TITLE_LENGTH

Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=MAX_TITLE_LENGTH)]
Content = Annotated[str, StringConstraints(min_length=1)]
Excerpt = Annotated[str, StringConstraints(max_length=MAX_EXCERPT_LENGTH)]


def parse_flag(value: Any) -> bool:
    """
    Interpret a boolean sent as JSON or as a form string.

    Only ``true`` and ``"true"`` (any case) are true.
    """
    if isinstance(value, bool):
        return value
    return isinstance(value, str) and value.strip().lower() == "true"


def parse_tags(value: Any) -> list[str]:
    """
    Normalize tags given as a list or as a comma-separated string.

    Items are trimmed and blanks dropped; order and duplicates are kept.

    Examples
    --------
    >>> parse_tags("python, web,, api ")
    ['python', 'web', 'api']
    """
    if value is None:
        return []
    items = value.split(",") if isinstance(value, str) else list(value)
    return [str(item).strip() for item in items if str(item).strip()]


class PostCreate(BaseModel):
    """Post creation payload (request body or form fields)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: Title = Field(..., description="Post title", examples=["Hello World!!"])
    content: Content = Field(..., description="Post body")
    excerpt: Excerpt | None = Field(default=None, description="Short excerpt")
    category_id: UUID = Field(..., alias="category", description="Category ID")
    tags: list[str] = Field(default_factory=list, description="Ordered tags")
    is_published: bool | None = Field(
        default=None,
        alias="isPublished",
        description="Publish immediately (deployment default when omitted)",
    )

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tags(cls, value: Any) -> list[str]:
        return parse_tags(value)

    @field_validator("is_published", mode="before")
    @classmethod
    def _parse_published(cls, value: Any) -> bool | None:
        return None if value is None else parse_flag(value)

    @field_validator("excerpt", mode="before")
    @classmethod
    def _blank_excerpt(cls, value: Any) -> Any:
        return None if value == "" else value


class PostUpdate(BaseModel):
    """Partial post update; only provided fields change."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: Title | None = None
    content: Content | None = None
    excerpt: Excerpt | None = None
    category_id: UUID | None = Field(default=None, alias="category")
    tags: list[str] | None = None
    is_published: bool | None = Field(default=None, alias="isPublished")
    remove_featured_image: bool = Field(
        default=False,
        alias="removeFeaturedImage",
        description="Clear the current featured image",
    )
    regenerate_slug: bool = Field(
        default=False,
        alias="regenerateSlug",
        description="Derive a new slug when the title changes",
    )

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tags(cls, value: Any) -> list[str] | None:
        return None if value is None else parse_tags(value)

    @field_validator("is_published", mode="before")
    @classmethod
    def _parse_published(cls, value: Any) -> bool | None:
        return None if value is None else parse_flag(value)

    @field_validator("excerpt", mode="before")
    @classmethod
    def _blank_excerpt(cls, value: Any) -> Any:
        return None if value == "" else value

    @field_validator("remove_featured_image", "regenerate_slug", mode="before")
    @classmethod
    def _parse_flags(cls, value: Any) -> bool:
        return parse_flag(value)

    def changes(self) -> dict[str, Any]:
        """Return the post fields explicitly set on this update."""
        return self.model_dump(
            exclude_unset=True,
            exclude={"remove_featured_image", "regenerate_slug"},
        )


class CommentCreate(BaseModel):
    content: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class AuthorSummary(BaseModel):
    """Author information shown next to posts and comments."""

    id: UUID
    username: str


class CategorySummary(BaseModel):
    id: UUID
    name: str


class FeaturedImageInfo(BaseModel):
    """Attachment metadata; the bytes are served by ``GET /posts/{id}/image``."""

    model_config = ConfigDict(populate_by_name=True)

    content_type: str = Field(alias="contentType")
    filename: str | None = None


class CommentResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user: AuthorSummary | None = None
    content: str
    created_at: str = Field(alias="createdAt")


class PostListItem(BaseModel):
    """Post as it appears in listings and search results."""

    model_config = ConfigDict(populate_by_name=True)

    id: UUID
    title: str
    slug: str
    content: str
    excerpt: str | None = None
    tags: list[str] = Field(default_factory=list)
    is_published: bool = Field(alias="isPublished")
    view_count: int = Field(alias="viewCount")
    author: AuthorSummary | None = None
    category: CategorySummary | None = None
    has_featured_image: bool = Field(alias="hasFeaturedImage")
    featured_image: FeaturedImageInfo | None = Field(default=None, alias="featuredImage")
    comment_count: int = Field(default=0, alias="commentCount")
    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")


class PostDetail(PostListItem):
    """Single post, with its comments and canonical URL."""

    comments: list[CommentResponse] = Field(default_factory=list)
    url: str


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int
