from postdesk.schemas.auth import Principal, TokenData
from postdesk.schemas.category import CategoryCreate, CategoryResponse
from postdesk.schemas.common import (
    DataResponse,
    ErrorResponse,
    HealthCheckResponse,
    MessageResponse,
    PageResponse,
)
from postdesk.schemas.post import (
    AuthorSummary,
    CategorySummary,
    CommentCreate,
    CommentResponse,
    FeaturedImageInfo,
    Pagination,
    PostCreate,
    PostDetail,
    PostListItem,
    PostUpdate,
)

__all__ = [
    "AuthorSummary",
    "CategoryCreate",
    "CategoryResponse",
    "CategorySummary",
    "CommentCreate",
    "CommentResponse",
    "DataResponse",
    "ErrorResponse",
    "FeaturedImageInfo",
    "HealthCheckResponse",
    "MessageResponse",
    "PageResponse",
    "Pagination",
    "PostCreate",
    "PostDetail",
    "PostListItem",
    "PostUpdate",
    "Principal",
    "TokenData",
]
