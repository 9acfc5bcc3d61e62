from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import Request
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR
from structlog.stdlib import BoundLogger

from postdesk.configs import DEFAULT_ERROR_MESSAGE, settings
from postdesk.utils.helpers import host

BASE_EXCEPTION = (
    OSError,
    PermissionError,
    MemoryError,
    RuntimeError,
    ConnectionError,
    TimeoutError,
)


class BaseAppError(Exception):
    """Base exception class for application errors."""

    def __init__(
        self,
        detail: str = DEFAULT_ERROR_MESSAGE,
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code

    def __str__(self) -> str:
        return self.detail


def error_body(message: str, **extra: Any) -> dict[str, Any]:
    """Build the error payload shared by every failing response."""
    return {"success": False, "error": message, **extra}


def public_message(status_code: int, detail: str) -> str:
    """
    Return the message a client may see for an error.

    Server errors are reduced to a generic message in production.
    """
    if status_code < HTTP_500_INTERNAL_SERVER_ERROR:
        return detail
    if settings.DEBUG or not settings.is_production:
        return f"{DEFAULT_ERROR_MESSAGE}: {detail}" if detail != DEFAULT_ERROR_MESSAGE else detail
    return DEFAULT_ERROR_MESSAGE


def create_exception_handler(
    logger: BoundLogger,
) -> Callable[[Request, Exception], Awaitable[ORJSONResponse]]:
    """
    Create a standardized exception handler for the application.

    Args:
        logger: Logger instance to use for logging exceptions.

    Returns:
        A callable exception handler.
    """

    async def handler(request: Request, exc: Exception) -> ORJSONResponse:
        status_code = getattr(exc, "status_code", HTTP_500_INTERNAL_SERVER_ERROR)
        detail = getattr(exc, "detail", None) or str(exc) or DEFAULT_ERROR_MESSAGE

        if status_code >= HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(
                f"{detail} for ip: {host(request)} for endpoint {request.url.path}",
                exc_info=exc,
            )
        else:
            logger.warning(f"{detail} for ip: {host(request)} for endpoint {request.url.path}")

        return ORJSONResponse(
            content=error_body(public_message(status_code, detail)),
            status_code=status_code,
            headers=getattr(exc, "headers", None),
        )

    return handler
