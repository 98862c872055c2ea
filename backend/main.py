# ruff: noqa: E402
# E402 disabled: load_dotenv() must run before other imports for Sentry DSN

import time
from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import sentry_sdk
from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

from core.correlation import (
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from core.logging_config import configure_logging
from core.sentry_config import init_sentry
from init_db import init_db
from models.config import settings
from models.exceptions import (
    AlreadyExistsException,
    AuthenticationException,
    BusinessRuleException,
    ConflictException,
    DomainException,
    NotFoundException,
    PermissionDeniedException,
    ValidationException,
)
from repositories.database import create_store
from routers import (
    activities_router,
    admin_router,
    auth_router,
    discussions_router,
    friends_router,
    groups_router,
    messages_router,
    papers_router,
    resources_router,
    search_router,
    sessions_router,
    users_router,
)

# Initialize Sentry BEFORE app creation
init_sentry()

# Configure logging with Loguru
configure_logging(settings.ENVIRONMENT)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler.

    - Create the in-memory store and attach it to ``app.state``.
    - Seed the admin and sample accounts when `SEED_ON_STARTUP` is enabled.
    """
    app.state.store = create_store()

    if settings.SEED_ON_STARTUP:
        init_db(app.state.store)
    else:
        logger.info("SEED_ON_STARTUP disabled; starting with an empty store")

    try:
        yield
    finally:
        app.state.store.reset()
        logger.info("Store cleared on shutdown")


app = FastAPI(title="StudySphere API", lifespan=lifespan)


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Inject correlation ID into request context and Sentry."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Process request with correlation ID tracking."""
        # Check for incoming correlation ID (from frontend)
        correlation_id = (
            request.headers.get("X-Correlation-ID") or generate_correlation_id()
        )
        set_correlation_id(correlation_id)
        sentry_sdk.set_tag("correlation_id", correlation_id)

        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log all incoming requests with performance monitoring."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Process request and log timing information."""
        start_time = time.perf_counter()

        client_host = request.client.host if request.client else "unknown"
        logger.info(f"Request: {request.method} {request.url.path} from {client_host}")

        response = await call_next(request)

        duration = time.perf_counter() - start_time
        logger.info(
            f"Response: {request.method} {request.url.path} "
            f"status={response.status_code} duration={duration:.3f}s"
        )

        if duration > settings.SLOW_REQUEST_THRESHOLD:
            logger.warning(
                f"Slow request: {request.method} {request.url.path} "
                f"took {duration:.2f}s (threshold: {settings.SLOW_REQUEST_THRESHOLD}s)"
            )

        response.headers["X-Response-Time"] = f"{duration:.3f}s"
        return response


# Middleware runs in reverse order of registration
app.add_middleware(CorrelationIdMiddleware)
app.add_middleware(RequestLoggingMiddleware)

# In development, allow all origins for mobile/network testing
cors_origins = ["*"] if settings.ENVIRONMENT == "development" else settings.CORS_ORIGINS
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=settings.ENVIRONMENT != "development",
    allow_methods=["*"],
    allow_headers=["*"],
)

# Uploaded papers and resources are served back from the upload directory
uploads_dir = Path(settings.UPLOAD_DIR)
uploads_dir.mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=uploads_dir), name="uploads")


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch all unhandled exceptions with full Sentry capture."""
    correlation_id = get_correlation_id() or generate_correlation_id()

    sentry_sdk.set_tag("correlation_id", correlation_id)
    sentry_sdk.capture_exception(exc)

    # repr() escapes curly braces that loguru would treat as placeholders
    logger.exception(
        f"Unhandled exception: {exc!r}",
        correlation_id=correlation_id,
        path=str(request.url.path),
        method=request.method,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "Internal server error",
            "correlation_id": correlation_id,
        },
    )


def _domain_error_response(
    request: Request, exc: DomainException, status_code: int, label: str
) -> JSONResponse:
    sentry_sdk.set_tag("correlation_id", exc.correlation_id)
    sentry_sdk.set_tag("exception_type", exc.__class__.__name__)

    logger.warning(
        f"{label}: {exc.message}",
        correlation_id=exc.correlation_id,
        exception_type=exc.__class__.__name__,
        path=str(request.url.path),
    )

    return JSONResponse(
        status_code=status_code,
        content={
            "detail": exc.message,
            "correlation_id": exc.correlation_id,
        },
    )


@app.exception_handler(NotFoundException)
async def not_found_exception_handler(
    request: Request, exc: NotFoundException
) -> JSONResponse:
    """Handle not found exceptions."""
    return _domain_error_response(
        request, exc, status.HTTP_404_NOT_FOUND, "Not found"
    )


@app.exception_handler(AlreadyExistsException)
async def already_exists_exception_handler(
    request: Request, exc: AlreadyExistsException
) -> JSONResponse:
    """Handle already exists exceptions."""
    return _domain_error_response(
        request, exc, status.HTTP_409_CONFLICT, "Already exists"
    )


@app.exception_handler(ConflictException)
async def conflict_exception_handler(
    request: Request, exc: ConflictException
) -> JSONResponse:
    """Handle conflict exceptions (friend requests, memberships, admin roles)."""
    return _domain_error_response(request, exc, status.HTTP_409_CONFLICT, "Conflict")


@app.exception_handler(ValidationException)
async def validation_exception_handler(
    request: Request, exc: ValidationException
) -> JSONResponse:
    """Handle validation exceptions."""
    return _domain_error_response(
        request, exc, status.HTTP_422_UNPROCESSABLE_CONTENT, "Validation error"
    )


@app.exception_handler(PermissionDeniedException)
async def permission_denied_exception_handler(
    request: Request, exc: PermissionDeniedException
) -> JSONResponse:
    """Handle permission denied exceptions, bans included."""
    return _domain_error_response(
        request, exc, status.HTTP_403_FORBIDDEN, "Permission denied"
    )


@app.exception_handler(BusinessRuleException)
async def business_rule_exception_handler(
    request: Request, exc: BusinessRuleException
) -> JSONResponse:
    """Handle business rule exceptions."""
    return _domain_error_response(
        request, exc, status.HTTP_400_BAD_REQUEST, "Business rule violation"
    )


@app.exception_handler(AuthenticationException)
async def authentication_exception_handler(
    request: Request, exc: AuthenticationException
) -> JSONResponse:
    """Handle authentication exceptions."""
    response = _domain_error_response(
        request, exc, status.HTTP_401_UNAUTHORIZED, "Authentication failed"
    )
    response.headers["WWW-Authenticate"] = "Bearer"
    return response


@app.exception_handler(DomainException)
async def domain_exception_handler(
    request: Request, exc: DomainException
) -> JSONResponse:
    """Handle generic domain exceptions with Sentry integration."""
    # Unexpected at this level, so capture it
    sentry_sdk.capture_exception(exc)
    return _domain_error_response(
        request, exc, status.HTTP_400_BAD_REQUEST, "Domain exception"
    )


# Include routers
app.include_router(auth_router.router, prefix="/api")
app.include_router(users_router.router, prefix="/api")
app.include_router(papers_router.router, prefix="/api")
app.include_router(resources_router.router, prefix="/api")
app.include_router(discussions_router.router, prefix="/api")
app.include_router(groups_router.router, prefix="/api")
app.include_router(sessions_router.router, prefix="/api")
app.include_router(activities_router.router, prefix="/api")
app.include_router(friends_router.router, prefix="/api")
app.include_router(messages_router.router, prefix="/api")
app.include_router(search_router.router, prefix="/api")
app.include_router(admin_router.router, prefix="/api")


@app.get("/")
def read_root():
    return {"message": "Welcome to StudySphere API"}


@app.get("/api/health")
def health_check():
    return {"status": "healthy"}
