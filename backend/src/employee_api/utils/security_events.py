"""Security event logging for authentication and role-sensitive operations.

Events go to a dedicated ``security`` logger so they can be routed
separately from application logs. Each record carries the structured
event under the ``security_event`` attribute for JSON formatters.
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class SecurityEventType(str, Enum):
    """Types of security events that are logged."""

    # Authentication events
    LOGIN_SUCCESS = "login_success"
    LOGIN_FAILED = "login_failed"

    # Account management
    BOOTSTRAP_REGISTERED = "bootstrap_registered"
    EMPLOYEE_REGISTERED = "employee_registered"
    EMPLOYEE_CREATED = "employee_created"
    EMPLOYEE_UPDATED = "employee_updated"
    EMPLOYEE_DELETED = "employee_deleted"

    # Policy rejections
    ROLE_ESCALATION_DENIED = "role_escalation_denied"


security_logger = logging.getLogger("security")


def _describe(actor_document_number: int | None, target_document_number: int | None) -> str:
    parts = [f"actor={actor_document_number if actor_document_number is not None else '-'}"]
    if target_document_number is not None:
        parts.append(f"target={target_document_number}")
    return " ".join(parts)


def log_security_event(
    event_type: SecurityEventType,
    actor_document_number: int | None = None,
    actor_role: str | None = None,
    target_document_number: int | None = None,
    ip_address: str | None = None,
    details: dict[str, Any] | None = None,
    success: bool = True,
) -> None:
    """Log a security event.

    Successful events are logged at INFO, rejected ones at WARNING.

    Args:
        event_type: The type of security event
        actor_document_number: Document number of the caller, if known
        actor_role: Role name of the caller, if known
        target_document_number: Document number of the affected employee
        ip_address: The client IP address
        details: Additional event-specific details
        success: Whether the operation succeeded
    """
    actor = {
        "document_number": actor_document_number,
        "role": actor_role,
        "ip_address": ip_address,
    }
    event: dict[str, Any] = {
        "event_type": event_type.value,
        "occurred_at": datetime.now(timezone.utc).isoformat(),
        "success": success,
        "actor": actor,
        "target": (
            {"document_number": target_document_number}
            if target_document_number is not None
            else None
        ),
        "details": details or {},
    }

    level = logging.INFO if success else logging.WARNING
    outcome = "ok" if success else "denied"
    security_logger.log(
        level,
        f"Security event {event_type.value} ({outcome}) "
        f"{_describe(actor_document_number, target_document_number)}",
        extra={"security_event": event},
    )
