"""Category database model using SQLModel."""

from datetime import UTC, datetime
from typing import cast
from uuid import UUID, uuid4

from sqlalchemy import DateTime
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, SQLModel, String


class CategoryDB(SQLModel, table=True):
    """Named grouping that every post belongs to."""

    __tablename__ = cast("declared_attr[str]", "categories")

    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        nullable=False,
        description="Category ID",
    )
    name: str = Field(
        sa_column=Column(String(50), unique=True, nullable=False, index=True),
        description="Category name (unique)",
    )
    slug: str = Field(
        sa_column=Column(String(60), unique=True, nullable=False, index=True),
        description="URL-friendly slug derived from the name (unique)",
    )
    description: str | None = Field(
        default=None,
        sa_column=Column(String(200)),
        description="Short description",
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Creation timestamp",
    )
