from postdesk.errors.auth import ForbiddenError, UserAuthenticationError, auth_exception_handler
from postdesk.errors.base import (
    BASE_EXCEPTION,
    BaseAppError,
    create_exception_handler,
    error_body,
)
from postdesk.errors.database import (
    DatabaseConnectionError,
    DatabaseError,
    DatabaseInitializationError,
    DuplicateEntryError,
    DuplicateNameError,
    DuplicateSlugError,
    RecordNotFoundError,
    database_exception_handler,
)
from postdesk.errors.http import http_exception_handler, unhandled_exception_handler
from postdesk.errors.upload import (
    ImageTooLargeError,
    InvalidImageError,
    TooManyFilesError,
    UnsupportedImageTypeError,
    UploadError,
    upload_exception_handler,
)
from postdesk.errors.validation import (
    ValidationError,
    request_validation_exception_handler,
    validation_exception_handler,
)

__all__ = [
    "BASE_EXCEPTION",
    "BaseAppError",
    "DatabaseConnectionError",
    "DatabaseError",
    "DatabaseInitializationError",
    "DuplicateEntryError",
    "DuplicateNameError",
    "DuplicateSlugError",
    "ForbiddenError",
    "ImageTooLargeError",
    "InvalidImageError",
    "RecordNotFoundError",
    "TooManyFilesError",
    "UnsupportedImageTypeError",
    "UploadError",
    "UserAuthenticationError",
    "ValidationError",
    "auth_exception_handler",
    "create_exception_handler",
    "database_exception_handler",
    "error_body",
    "http_exception_handler",
    "request_validation_exception_handler",
    "unhandled_exception_handler",
    "upload_exception_handler",
    "validation_exception_handler",
]
