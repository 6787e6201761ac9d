"""Authentication DTOs."""

from pydantic import BaseModel

from employee_api.models.domain.employee import EmployeeRole
from employee_api.models.dto.employee import EmployeeCreate


class RegisterRequest(EmployeeCreate):
    """Self-service registration request.

    ``role`` is ignored for the very first account, which always becomes a
    Director.
    """


class LoginRequest(BaseModel):
    """Login request.

    Fields are unconstrained; an attempt that matches no stored credential
    is rejected as invalid credentials.
    """

    document_number: int
    password: str


class AuthResponse(BaseModel):
    """Issued access token plus the identity it asserts."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int
    document_number: int
    email: str
    role: EmployeeRole
