"""Data transfer objects package."""

from employee_api.models.dto.auth import AuthResponse, LoginRequest, RegisterRequest
from employee_api.models.dto.employee import EmployeeCreate, EmployeeResponse, EmployeeUpdate

__all__ = [
    "AuthResponse",
    "LoginRequest",
    "RegisterRequest",
    "EmployeeCreate",
    "EmployeeResponse",
    "EmployeeUpdate",
]
