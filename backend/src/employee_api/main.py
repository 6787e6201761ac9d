"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from employee_api.config import Settings, get_settings
from employee_api.exceptions import EmployeeAPIError
from employee_api.middleware.error_handler import (
    employee_api_exception_handler,
    generic_exception_handler,
    http_exception_handler,
    sqlalchemy_exception_handler,
    validation_exception_handler,
)
from employee_api.routers import auth, employees
from employee_api.security.rate_limit import limiter

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

# Sent on every response
BASE_SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}

# Only set when the handler did not choose a value
DEFAULT_HEADERS = {
    "Cache-Control": "no-store, max-age=0",
    "Vary": "Accept, Authorization, Origin",
}

HSTS_VALUE = "max-age=31536000; includeSubDomains"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds hardening headers to every response."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        response.headers.update(BASE_SECURITY_HEADERS)
        for name, value in DEFAULT_HEADERS.items():
            response.headers.setdefault(name, value)
        if get_settings().environment == "production":
            response.headers["Strict-Transport-Security"] = HSTS_VALUE
        return response


async def _seed_director() -> None:
    """Create the initial Director when seeding is enabled."""
    from employee_api.database import async_session_maker
    from employee_api.services.seed_service import ensure_seed_director

    async with async_session_maker() as session:
        if await ensure_seed_director(session):
            await session.commit()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Seed on startup if configured, release the pool on shutdown."""
    from employee_api.database import engine

    if get_settings().seed_admin_enabled:
        logger.info("Seeding initial Director")
        await _seed_director()
    try:
        yield
    finally:
        await engine.dispose()


async def _rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Answer throttled requests with an RFC 7807 problem document and Retry-After."""
    return JSONResponse(
        status_code=429,
        content={
            "type": "https://datatracker.ietf.org/doc/html/rfc6585#section-4",
            "title": "Too many requests",
            "status": 429,
            "detail": "Rate limit exceeded",
            "instance": request.url.path,
        },
        headers={
            "Content-Type": "application/problem+json",
            "Retry-After": "60",
        },
    )


def _allowed_origins(config: Settings) -> list[str]:
    """Validate configured CORS origins.

    Credentials are allowed, so a wildcard origin is a configuration error.
    Entries without an http(s) scheme are dropped.
    """
    origins = config.cors_origins_list
    if "*" in origins:
        raise ValueError(
            "CORS_ORIGINS cannot contain '*' while credentials are allowed. "
            "List explicit origins instead."
        )
    return [origin for origin in origins if origin.startswith(("http://", "https://"))]


def _register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    # Policy rejections keep their message; everything else is sanitized
    app.add_exception_handler(EmployeeAPIError, employee_api_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)


def create_app() -> FastAPI:
    """Build the application with middleware, handlers and routers."""
    config = get_settings()

    app = FastAPI(
        title=config.app_name,
        version="0.1.0",
        description="Employee Directory API",
        lifespan=lifespan,
        docs_url="/docs" if config.debug else None,
        redoc_url="/redoc" if config.debug else None,
    )

    app.state.limiter = limiter
    _register_exception_handlers(app)

    # Middleware runs in reverse order of addition, so CORS sees requests first
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_allowed_origins(config),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
        expose_headers=["Location"],
    )

    app.include_router(auth.router, prefix=f"{API_PREFIX}/auth", tags=["Authentication"])
    app.include_router(employees.router, prefix=f"{API_PREFIX}/employees", tags=["Employees"])

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    return app


app = create_app()
