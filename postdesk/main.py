# postdesk/main.py

"""Postdesk API: posts, categories, comments and featured images."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from postdesk.configs import settings
from postdesk.db import ping_db
from postdesk.errors import (
    BaseAppError,
    DatabaseError,
    ForbiddenError,
    UploadError,
    UserAuthenticationError,
    ValidationError,
    auth_exception_handler,
    create_exception_handler,
    database_exception_handler,
    http_exception_handler,
    request_validation_exception_handler,
    unhandled_exception_handler,
    upload_exception_handler,
    validation_exception_handler,
)
from postdesk.managers import limiter, rate_limit_exceeded_handler
from postdesk.middleware import (
    LoggingMiddleware,
    SecurityHeadersMiddleware,
    configure_cors,
    lifespan,
)
from postdesk.monitoring import get_logger
from postdesk.routes import categories_router, posts_router
from postdesk.schemas import HealthCheckResponse
from postdesk.utils import today_str

logger = get_logger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description="Blog posts with categories, comments and embedded featured images",
    version=settings.APP_VERSION,
    lifespan=lifespan,
    debug=settings.DEBUG,
    swagger_ui_parameters={
        "docExpansion": "none",
        "operationsSorter": "method",
    },
)

configure_cors(app)

app.add_middleware(LoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")

routes = [posts_router, categories_router]

_ = [app.include_router(router) for router in routes]

errors = [
    (RateLimitExceeded, rate_limit_exceeded_handler),
    (ValidationError, validation_exception_handler),
    (DatabaseError, database_exception_handler),
    (UploadError, upload_exception_handler),
    (ForbiddenError, auth_exception_handler),
    (UserAuthenticationError, auth_exception_handler),
    (BaseAppError, create_exception_handler(logger)),
    (RequestValidationError, request_validation_exception_handler),
    (StarletteHTTPException, http_exception_handler),
    (Exception, unhandled_exception_handler),
]

_ = [app.add_exception_handler(exc_type, handler) for exc_type, handler in errors]

app.state.limiter = limiter


@app.get(
    "/health",
    tags=["🩺 Health"],
    summary="Health check endpoint",
    response_model=HealthCheckResponse,
    response_class=ORJSONResponse,
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "status": "ok",
                        "version": "1.0.0",
                        "timestamp": "2025-01-01T00:00:00+00:00",
                        "database": "connected",
                    },
                },
            },
        },
    },
    operation_id="health_check",
)
@limiter.exempt
async def health_check(request: Request) -> HealthCheckResponse:
    """
    Health check endpoint.

    Returns
    -------
    HealthCheckResponse
        Service version, time, and whether the database answers.
    """
    database_ok = await ping_db()
    return HealthCheckResponse(
        status="ok" if database_ok else "degraded",
        version=app.version,
        timestamp=today_str(),
        database="connected" if database_ok else "unreachable",
    )


@app.get("/", tags=["🏠 Root"], response_class=ORJSONResponse, operation_id="root")
@limiter.exempt
async def root(request: Request) -> dict[str, str]:
    """Welcome message."""
    return {"message": f"Welcome to the {app.title}", "docs": "/docs"}
