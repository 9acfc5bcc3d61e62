"""Authentication and authorization errors."""

from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from postdesk.errors.base import BaseAppError, create_exception_handler
from postdesk.monitoring import get_logger

logger = get_logger(__name__)


class UserAuthenticationError(BaseAppError):
    """Raised when a bearer token is missing, invalid, or names an unknown user."""

    def __init__(self, detail: str = "Could not validate credentials") -> None:
        super().__init__(detail, HTTP_401_UNAUTHORIZED)
        self.headers = {"WWW-Authenticate": "Bearer"}


class ForbiddenError(BaseAppError):
    """Raised when an authenticated principal may not perform an action."""

    def __init__(self, detail: str = "Not authorized to perform this action") -> None:
        super().__init__(detail, HTTP_403_FORBIDDEN)


auth_exception_handler = create_exception_handler(logger)
