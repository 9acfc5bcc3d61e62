"""
Upload-related error classes.

This module defines custom exceptions for featured image uploads. Every
rejection is a client error and answers 400.
"""

from starlette.status import HTTP_400_BAD_REQUEST

from postdesk.errors.base import BaseAppError, create_exception_handler
from postdesk.monitoring import get_logger

logger = get_logger(__name__)


class UploadError(BaseAppError):
    """Base exception for upload-related errors."""

    def __init__(
        self,
        detail: str = "Upload failed",
        status_code: int = HTTP_400_BAD_REQUEST,
    ) -> None:
        super().__init__(detail=detail, status_code=status_code)


class ImageTooLargeError(UploadError):
    """Exception raised when uploaded image exceeds size limit."""

    def __init__(
        self,
        max_size_mb: int = 5,
        actual_size_mb: float | None = None,
    ) -> None:
        detail = f"File too large. Maximum size is {max_size_mb}MB."
        if actual_size_mb is not None:
            detail += f" Your file is {actual_size_mb:.1f}MB."
        super().__init__(detail=detail)
        self.max_size_mb = max_size_mb
        self.actual_size_mb = actual_size_mb


class UnsupportedImageTypeError(UploadError):
    """Exception raised when the declared type or extension is not allowed, or they disagree."""

    def __init__(
        self,
        content_type: str,
        filename: str | None = None,
    ) -> None:
        super().__init__(detail="Only image files (JPEG, JPG, PNG, GIF, WEBP) are allowed!")
        self.content_type = content_type
        self.filename = filename


class InvalidImageError(UploadError):
    """Exception raised when uploaded bytes are not a readable image."""

    def __init__(
        self,
        detail: str = "This file doesn't appear to be a valid image. Please try a different file.",
    ) -> None:
        super().__init__(detail=detail)


class TooManyFilesError(UploadError):
    """Exception raised when more than one image is attached to a request."""

    def __init__(self) -> None:
        super().__init__(detail="Only one featured image may be uploaded per request")


upload_exception_handler = create_exception_handler(logger)
