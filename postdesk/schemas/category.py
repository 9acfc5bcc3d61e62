from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

from postdesk.configs import MAX_CATEGORY_NAME_LENGTH


class CategoryCreate(BaseModel):
    """Category creation payload."""

    name: Annotated[
        str,
        StringConstraints(strip_whitespace=True, min_length=1, max_length=MAX_CATEGORY_NAME_LENGTH),
    ] = Field(..., examples=["Technology"])
    description: Annotated[str, StringConstraints(max_length=200)] | None = Field(
        default=None,
        examples=["Software, gadgets and the web"],
    )


class CategoryResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: UUID
    name: str
    slug: str
    description: str | None = None
    created_at: str = Field(alias="createdAt")
