"""Handlers that reshape framework and unexpected errors into the standard error body."""

from typing import cast

from fastapi import Request
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import HTTP_404_NOT_FOUND, HTTP_500_INTERNAL_SERVER_ERROR

from postdesk.configs import DEFAULT_ERROR_MESSAGE
from postdesk.errors.base import error_body, public_message
from postdesk.monitoring import get_logger
from postdesk.utils.helpers import host

logger = get_logger(__name__)


async def http_exception_handler(request: Request, exc: Exception) -> ORJSONResponse:
    """Render framework HTTP exceptions (401, unknown routes, 405) as error bodies."""
    http_exc = cast(StarletteHTTPException, exc)
    detail = http_exc.detail if isinstance(http_exc.detail, str) else DEFAULT_ERROR_MESSAGE
    if http_exc.status_code == HTTP_404_NOT_FOUND and detail == "Not Found":
        detail = f"Route not found: {request.method} {request.url.path}"

    logger.info(f"{http_exc.status_code} {detail} for ip: {host(request)}")

    return ORJSONResponse(
        status_code=http_exc.status_code,
        content=error_body(detail),
        headers=getattr(http_exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> ORJSONResponse:
    """Log an unexpected failure in full and answer with a generic 500."""
    logger.error(
        f"Unhandled error for ip: {host(request)} at endpoint {request.url.path}",
        exc_info=exc,
    )
    return ORJSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(public_message(HTTP_500_INTERNAL_SERVER_ERROR, str(exc))),
    )
