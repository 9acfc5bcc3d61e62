"""Post database model using SQLModel."""

from datetime import UTC, datetime
from typing import Any, cast
from uuid import UUID, uuid4

from pydantic import ConfigDict
from sqlalchemy import JSON, Boolean, DateTime, Index, Integer, LargeBinary, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, ForeignKey, SQLModel, String

from postdesk.configs import MAX_EXCERPT_LENGTH, MAX_TITLE_LENGTH

# JSONB on PostgreSQL, plain JSON text elsewhere (SQLite in development and tests)
JSONList = JSON().with_variant(JSONB(), "postgresql")


class PostDB(SQLModel, table=True):
    """
    Post database model.

    The post is the aggregate root: comments live in an embedded JSON list and
    the featured image is stored inline as raw bytes plus its MIME type and
    original filename. Neither has a lifecycle of its own.
    """

    __tablename__ = cast("declared_attr[str]", "posts")

    __table_args__ = (
        Index("ix_posts_tags_gin", "tags", postgresql_using="gin"),
        Index("ix_posts_published_created", "is_published", "created_at"),
        Index("ix_posts_category_published", "category_id", "is_published"),
    )

    # Primary key
    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        nullable=False,
        description="Post ID",
    )

    # Foreign keys
    author_id: UUID = Field(
        sa_column=Column(
            "author_id",
            ForeignKey("users.uuid", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        description="Author ID (foreign key to users.uuid), immutable after creation",
    )
    category_id: UUID = Field(
        sa_column=Column(
            "category_id",
            ForeignKey("categories.id", ondelete="RESTRICT"),
            nullable=False,
            index=True,
        ),
        description="Category ID (foreign key to categories.id)",
    )

    # Required fields
    title: str = Field(
        sa_column=Column(String(MAX_TITLE_LENGTH), nullable=False),
        description="Post title",
    )
    slug: str = Field(
        sa_column=Column(String(120), unique=True, nullable=False, index=True),
        description="URL-friendly slug (unique)",
    )
    content: str = Field(
        sa_column=Column(Text, nullable=False),
        description="Post body",
    )

    # Optional fields
    excerpt: str | None = Field(
        default=None,
        sa_column=Column(String(MAX_EXCERPT_LENGTH)),
        description="Short excerpt",
    )
    tags: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSONList, nullable=False),
        description="Ordered tags, duplicates allowed",
    )

    # Metadata fields
    is_published: bool = Field(
        default=False,
        sa_column=Column(Boolean, nullable=False, index=True),
        description="Whether the post is visible in listings and search",
    )
    view_count: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, server_default="0"),
        description="Detail views, only ever incremented",
    )

    # Embedded comments: [{"user_id": str | None, "content": str, "created_at": iso str}]
    comments: list[dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JSONList, nullable=False),
        description="Embedded comment records in append order",
    )

    # Featured image, all three set together or all null
    featured_image_data: bytes | None = Field(
        default=None,
        sa_column=Column(LargeBinary),
        description="Raw image bytes",
    )
    featured_image_content_type: str | None = Field(
        default=None,
        sa_column=Column(String(50)),
        description="Image MIME type",
    )
    featured_image_filename: str | None = Field(
        default=None,
        sa_column=Column(String(255)),
        description="Original upload filename",
    )

    # Timestamps (timezone-aware)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
        description="Creation timestamp",
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Last update timestamp",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000",
                "author_id": "123e4567-e89b-12d3-a456-426614174000",
                "category_id": "9b2f0d1c-4a57-4c5e-8a3b-0f6f2e7d1a11",
                "title": "Hello World",
                "slug": "hello-world",
                "content": "My first post.",
                "is_published": True,
                "view_count": 0,
                "tags": ["intro"],
            },
        },
    )

    @property
    def has_featured_image(self) -> bool:
        """Presence flag that never touches the (possibly deferred) bytes column."""
        return self.featured_image_content_type is not None
