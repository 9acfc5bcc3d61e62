from typing import Generic, TypeVar

from pydantic import BaseModel

from postdesk.schemas.post import Pagination

DataT = TypeVar("DataT")


class DataResponse(BaseModel, Generic[DataT]):
    """Success envelope: ``{"success": true, "data": ...}``."""

    success: bool = True
    data: DataT


class PageResponse(BaseModel, Generic[DataT]):
    """Success envelope for paginated listings."""

    success: bool = True
    data: list[DataT]
    pagination: Pagination


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    success: bool = False
    error: str


class HealthCheckResponse(BaseModel):
    status: str
    version: str
    timestamp: str
    database: str
