"""Logging helpers that keep credentials and personal data out of logs.

Outside debug mode exception text is scrubbed before it is logged:
connection strings, file paths, email addresses and long token-like values
are replaced by placeholders.
"""

import logging
import re
from typing import Any

from employee_api.config import get_settings

MAX_MESSAGE_LENGTH = 200

_SCRUBBERS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"(postgres(?:ql)?(?:\+asyncpg)?|sqlite(?:\+aiosqlite)?|https?)://\S+"), "[URL]"),
    (re.compile(r"['\"]?(/[\w./\-]+|[A-Z]:\\[^\s'\"]+)['\"]?"), "[PATH]"),
    (re.compile(r"[\w.+-]+@[\w-]+\.[\w.-]+"), "[EMAIL]"),
    # bcrypt hashes and JWTs
    (re.compile(r"[\w\-$./]{32,}"), "[TOKEN]"),
]


def is_debug_mode() -> bool:
    """Check if application is running in debug mode."""
    return get_settings().debug


def sanitize_exception_message(error: Exception) -> str:
    """Scrub an exception's text for production logs.

    Args:
        error: The exception to describe

    Returns:
        Scrubbed message, truncated to ``MAX_MESSAGE_LENGTH`` characters
    """
    message = str(error)
    for pattern, placeholder in _SCRUBBERS:
        message = pattern.sub(placeholder, message)
    if len(message) > MAX_MESSAGE_LENGTH:
        message = message[: MAX_MESSAGE_LENGTH - 3] + "..."
    return message


def _log(
    logger: logging.Logger,
    level: int,
    message: str,
    error: Exception | None,
    context: dict[str, Any],
) -> None:
    if is_debug_mode():
        text = f"{message}: {error}" if error else message
        logger.log(level, text, exc_info=level >= logging.ERROR and error is not None, extra=context)
    elif error:
        logger.log(level, f"{message}: {sanitize_exception_message(error)}")
    else:
        logger.log(level, message)


def log_error(
    logger: logging.Logger,
    message: str,
    error: Exception | None = None,
    **context: Any,
) -> None:
    """Log an error, with full details and traceback only in debug mode.

    Args:
        logger: The logger instance to use
        message: Generic message without personal data
        error: Optional exception to describe
        **context: Extra fields attached in debug mode
    """
    _log(logger, logging.ERROR, message, error, context)


def log_warning(
    logger: logging.Logger,
    message: str,
    error: Exception | None = None,
    **context: Any,
) -> None:
    """Log a warning, scrubbing the exception text outside debug mode."""
    _log(logger, logging.WARNING, message, error, context)
