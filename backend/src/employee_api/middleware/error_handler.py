"""Exception handlers turning errors into JSON without leaking internals.

Policy rejections raised by the services are shown verbatim. Everything else
is reduced to a whitelisted message unless debug mode is on.
"""

import logging
from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from employee_api.config import get_settings
from employee_api.exceptions import EmployeeAlreadyExistsError, EmployeeAPIError
from employee_api.utils.secure_logging import log_error

logger = logging.getLogger(__name__)

# Generic message per status code
SAFE_ERROR_MESSAGES = {
    400: "Invalid request",
    401: "Authentication required",
    403: "Access denied",
    404: "Resource not found",
    405: "Method not allowed",
    409: "Conflict with existing resource",
    422: "Invalid input data",
    429: "Too many requests",
    500: "Internal server error",
    503: "Service temporarily unavailable",
}

# Framework messages that may reach the client unchanged
ALLOWED_ERROR_PATTERNS = [
    "Invalid credentials",
    "Authentication required",
    "Invalid or expired token",
    "Access denied",
    "Resource not found",
    "Employee not found",
]

MAX_VALIDATION_ERRORS = 3


def _json_error(
    request: Request,
    status_code: int,
    content: dict[str, Any],
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build an error response.

    Handlers run outside the CORS middleware, so allowed origins get their
    CORS headers here.
    """
    merged = dict(headers or {})
    origin = request.headers.get("origin")
    if origin and origin in get_settings().cors_origins_list:
        merged["Access-Control-Allow-Origin"] = origin
        merged["Access-Control-Allow-Credentials"] = "true"
    return JSONResponse(status_code=status_code, content=content, headers=merged)


def is_safe_error_message(message: str) -> bool:
    """Check whether a message matches the whitelist (case-insensitive)."""
    lowered = message.lower()
    return any(pattern.lower() in lowered for pattern in ALLOWED_ERROR_PATTERNS)


def _field_name(loc: Any) -> str:
    """Last named element of a validation error location."""
    for part in reversed(list(loc or [])):
        if isinstance(part, str):
            return part
    return "field"


def sanitize_error_detail(detail: Any, status_code: int) -> str:
    """Reduce an error detail to something safe to show.

    Args:
        detail: A message string or a list of validation error dicts
        status_code: HTTP status code, used for the fallback message

    Returns:
        The whitelisted message, up to three ``field: msg`` entries, or the
        generic message for the status code
    """
    if isinstance(detail, str) and is_safe_error_message(detail):
        return detail

    if isinstance(detail, list):
        entries = []
        for error in detail:
            if not isinstance(error, dict):
                continue
            field = _field_name(error.get("loc"))
            if not field.startswith("_"):
                entries.append(f"{field}: {error.get('msg', 'Invalid value')}")
        if entries:
            return "; ".join(entries[:MAX_VALIDATION_ERRORS])

    return SAFE_ERROR_MESSAGES.get(status_code, "Request failed")


async def employee_api_exception_handler(request: Request, exc: EmployeeAPIError) -> JSONResponse:
    """Render a policy rejection with its own status and message."""
    logger.info(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.message}")

    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == status.HTTP_401_UNAUTHORIZED else None
    return _json_error(request, exc.status_code, {"detail": exc.message}, headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render framework HTTP errors, keeping their headers."""
    detail = exc.detail if get_settings().debug else sanitize_error_detail(exc.detail, exc.status_code)
    return _json_error(request, exc.status_code, {"detail": detail}, exc.headers)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request validation failures as 422."""
    errors = exc.errors()
    logger.warning(f"Validation error for {request.url.path}: {len(errors)} error(s)")

    detail = errors if get_settings().debug else sanitize_error_detail(
        errors, status.HTTP_422_UNPROCESSABLE_ENTITY
    )
    return _json_error(request, status.HTTP_422_UNPROCESSABLE_ENTITY, {"detail": detail})


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Render database errors.

    Unique violations that got past the repository become 409. Anything
    else is a 500 without database details.
    """
    log_error(logger, f"Database error for {request.url.path}", exc)

    if isinstance(exc, IntegrityError):
        message = str(exc).lower()
        if "unique" in message or "duplicate" in message:
            return _json_error(
                request,
                status.HTTP_409_CONFLICT,
                {"detail": EmployeeAlreadyExistsError().message},
            )

    content: dict[str, Any] = {"detail": "Database error occurred"}
    if get_settings().debug:
        content["type"] = type(exc).__name__
    return _json_error(request, status.HTTP_500_INTERNAL_SERVER_ERROR, content)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render unexpected exceptions as 500, logging the traceback."""
    logger.error(f"Unhandled exception for {request.url.path}: {exc}", exc_info=True)

    if get_settings().debug:
        content = {"detail": str(exc), "type": type(exc).__name__}
    else:
        content = {"detail": SAFE_ERROR_MESSAGES[500]}
    return _json_error(request, status.HTTP_500_INTERNAL_SERVER_ERROR, content)
