"""FastAPI application entry point."""
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from api.routers import analytics, bookmarks, folders, health, shared, tags
from core.config import get_settings
from records.factory import create_record_client
from services.exceptions import (
    NotFoundError,
    RemoteFailureError,
    ServiceUnavailableError,
    ValidationError,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifespan - startup and shutdown."""
    # Startup: construct the record client once and share it across requests
    record_client = create_record_client(get_settings())
    app.state.record_client = record_client

    yield

    # Shutdown: release the client's connections
    await record_client.close()
    app.state.record_client = None


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        """Process request and add security headers to response."""
        response = await call_next(request)
        # HSTS: enforce HTTPS for 1 year, including subdomains
        response.headers["Strict-Transport-Security"] = (
            "max-age=31536000; includeSubDomains"
        )
        # Prevent MIME type sniffing
        response.headers["X-Content-Type-Options"] = "nosniff"
        # Prevent clickjacking - API shouldn't be framed
        response.headers["X-Frame-Options"] = "DENY"
        return response


app_settings = get_settings()

app = FastAPI(
    title="Linkvault API",
    description="Bookmark manager with tags, folders, sharing and usage analytics.",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(ValidationError)
async def validation_exception_handler(
    _request: Request, exc: ValidationError,
) -> JSONResponse:
    """Field-level validation failures raised by the service layer."""
    return JSONResponse(
        status_code=422,
        content={"detail": exc.message, "field": exc.field},
    )


@app.exception_handler(NotFoundError)
async def not_found_exception_handler(
    _request: Request, exc: NotFoundError,
) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(RemoteFailureError)
async def remote_failure_exception_handler(
    request: Request, exc: RemoteFailureError,
) -> JSONResponse:
    """Record store and upstream failures; per-record errors of a partial batch are listed."""
    logger.warning("Upstream failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=502,
        content={"detail": exc.message, "errors": exc.errors},
    )


@app.exception_handler(ServiceUnavailableError)
async def service_unavailable_exception_handler(
    _request: Request, exc: ServiceUnavailableError,
) -> JSONResponse:
    return JSONResponse(status_code=503, content={"detail": exc.message})


# Security headers middleware (runs after CORS, adds headers to responses)
app.add_middleware(SecurityHeadersMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=app_settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(bookmarks.router)
app.include_router(folders.router)
app.include_router(shared.router)
app.include_router(tags.router)
app.include_router(analytics.router)
