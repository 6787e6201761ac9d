"""Domain-specific exceptions for the employee API.

These exceptions provide a clean separation between the policy rules in the
service layer and HTTP responses. Each class carries the status code the
error handler renders it with.
"""

from typing import Any


class EmployeeAPIError(Exception):
    """Base exception for all employee API errors."""

    status_code: int = 400

    def __init__(self, message: str = "An error occurred", details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


# =============================================================================
# Validation Errors (400)
# =============================================================================


class InvalidInputError(EmployeeAPIError):
    """Raised when a payload violates a business rule."""

    status_code = 400


# =============================================================================
# Authentication Errors (401)
# =============================================================================


class UnauthenticatedError(EmployeeAPIError):
    """Raised when credentials are missing or wrong."""

    status_code = 401


class InvalidCredentialsError(UnauthenticatedError):
    """Raised on a failed login.

    The message is identical for an unknown document number and a wrong
    password.
    """

    def __init__(self) -> None:
        super().__init__("Invalid credentials.")


# =============================================================================
# Permission Errors (403)
# =============================================================================


class ForbiddenError(EmployeeAPIError):
    """Raised when the caller's role is too low for the operation."""

    status_code = 403


# =============================================================================
# Resource Not Found Errors (404)
# =============================================================================


class NotFoundError(EmployeeAPIError):
    """Base class for resource not found errors."""

    status_code = 404


class EmployeeNotFoundError(NotFoundError):
    """Raised when an employee cannot be found."""

    def __init__(self, document_number: int | None = None) -> None:
        details = {"document_number": document_number} if document_number is not None else {}
        super().__init__("Employee not found", details)


# =============================================================================
# Conflict Errors (409)
# =============================================================================


class ConflictError(EmployeeAPIError):
    """Base class for resource conflict errors."""

    status_code = 409


class EmployeeAlreadyExistsError(ConflictError):
    """Raised when the store rejects a duplicate document number or email."""

    def __init__(self) -> None:
        super().__init__("Employee with this document number or email already exists.")
