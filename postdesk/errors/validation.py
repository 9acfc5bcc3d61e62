"""Validation error handling for FastAPI."""

from typing import cast

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.status import HTTP_400_BAD_REQUEST

from postdesk.errors.base import BaseAppError, create_exception_handler, error_body
from postdesk.monitoring import get_logger
from postdesk.utils.helpers import host

logger = get_logger(__name__)


class ValidationError(BaseAppError):
    """Missing, oversized or malformed input."""

    def __init__(
        self,
        detail: str = "Validation Error",
        errors: list[dict] | None = None,
    ) -> None:
        super().__init__(detail=detail, status_code=HTTP_400_BAD_REQUEST)
        self.errors = errors or []

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError) -> "ValidationError":
        """Collapse a pydantic error into a single readable message."""
        formatted = format_errors(exc.errors())
        return cls(detail=summarize(formatted), errors=formatted)


def format_errors(errors: list | tuple) -> list[dict]:
    """Reduce pydantic error dicts to field/message/type triples."""
    formatted_errors = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        formatted_errors.append(
            {
                "field": ".".join(loc),
                "message": error.get("msg", "Invalid value"),
                "type": error.get("type", "validation_error"),
            },
        )
    return formatted_errors


def summarize(formatted_errors: list[dict]) -> str:
    """Build the client-facing message from the first failing field."""
    if not formatted_errors:
        return "Validation failed"
    first = formatted_errors[0]
    message = first["message"].removeprefix("Value error, ")
    return f"{first['field']}: {message}" if first["field"] else message


async def request_validation_exception_handler(
    request: Request,
    exc: Exception,
) -> ORJSONResponse:
    """
    Handle FastAPI request validation errors with the standard error body.

    Args:
        request: The incoming request.
        exc: The RequestValidationError exception.

    Returns:
        ORJSONResponse with a 400 status.
    """
    formatted_errors = format_errors(cast(RequestValidationError, exc).errors())

    logger.warning(
        f"Validation error for ip: {host(request)} at endpoint {request.url.path}",
        errors=formatted_errors,
    )

    return ORJSONResponse(
        status_code=HTTP_400_BAD_REQUEST,
        content=error_body(summarize(formatted_errors)),
    )


validation_exception_handler = create_exception_handler(logger)
