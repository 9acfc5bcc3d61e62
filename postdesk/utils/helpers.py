from collections.abc import MutableMapping
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request
from fastapi.routing import APIRoute
from starlette.routing import BaseRoute, Match, Route


def host(request: Request) -> str:
    """Return the host IP address."""
    return request.client.host if request.client else "unknown"


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(tz=UTC)


def today_str() -> str:
    """Return the current UTC time as an ISO 8601 string."""
    return utc_now().isoformat(timespec="seconds")


def isoformat(value: datetime | None) -> str | None:
    """
    Serialize a stored timestamp as ISO 8601 UTC.

    SQLite hands back naive datetimes for timezone-aware columns; those are
    treated as UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat()


def positive_int(value: str | int | None, default: int) -> int:
    """
    Parse a lenient positive integer query value.

    Anything missing, non-numeric or non-positive falls back to ``default``.

    Examples
    --------
    >>> positive_int("3", 1)
    3
    >>> positive_int("abc", 1)
    1
    >>> positive_int("-2", 10)
    10
    """
    if value is None:
        return default
    try:
        parsed = int(str(value).strip())
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def get_summary(request: Request) -> str | None:
    """Extract route summary from request."""

    scope: MutableMapping[str, Any] = request.scope
    app: FastAPI = scope["app"]
    routes: list[BaseRoute] = app.routes

    summary = None
    for route in routes:
        is_api_route = type(route) is APIRoute
        is_route = type(route) is Route
        if is_api_route and route.matches(scope)[0] == Match.FULL:
            summary = route.summary
            break
        if is_route and route.matches(scope)[0] == Match.FULL:
            summary = route.name
            break

    return summary
