"""Employee DTOs."""

from datetime import date
from typing import Annotated

from pydantic import BaseModel, EmailStr, Field, StringConstraints, field_validator

from employee_api.constants.validation import (
    MAX_DOCUMENT_NUMBER,
    MAX_EMAIL_LENGTH,
    MAX_NAME_LENGTH,
    MAX_PASSWORD_BYTES,
    MAX_PASSWORD_LENGTH,
    MAX_PHONE_NUMBER,
    MIN_PASSWORD_LENGTH,
)
from employee_api.models.domain.employee import EmployeeRole, Gender

DocumentNumber = Annotated[int, Field(ge=1, le=MAX_DOCUMENT_NUMBER)]
PersonName = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=MAX_NAME_LENGTH)
]
# Sign is checked by the policy rules, not here
PhoneNumber = Annotated[int, Field(le=MAX_PHONE_NUMBER)]


def check_password_bytes(value: str | None) -> str | None:
    """Reject passwords whose UTF-8 encoding exceeds bcrypt's input limit."""
    if value is not None and len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"must be at most {MAX_PASSWORD_BYTES} bytes when UTF-8 encoded")
    return value


class EmployeeFields(BaseModel):
    """Fields shared by every employee write request."""

    document_number: DocumentNumber = Field(description="Externally assigned unique document number")
    first_name: PersonName
    last_name: PersonName
    email: EmailStr = Field(description="Employee email address, unique")
    birth_date: date = Field(description="Date of birth; the employee must be 18+")
    gender: Gender = Gender.UNSPECIFIED
    manager_document_number: DocumentNumber | None = Field(
        default=None, description="Document number of the employee's manager"
    )
    role: EmployeeRole = EmployeeRole.EMPLOYEE
    phones: list[PhoneNumber] | None = Field(
        default=None,
        description="Phone numbers; at least two distinct positive numbers",
    )

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("email")
    @classmethod
    def check_email_length(cls, value: str) -> str:
        if len(value) > MAX_EMAIL_LENGTH:
            raise ValueError(f"must be at most {MAX_EMAIL_LENGTH} characters")
        return value


class EmployeeCreate(EmployeeFields):
    """DTO for creating an employee as an authenticated caller."""

    password: str = Field(min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return check_password_bytes(value)


class EmployeeUpdate(EmployeeFields):
    """DTO for updating an employee.

    The target is identified by ``document_number``, which itself is never
    changed. A blank ``password`` keeps the current one.
    """

    password: str | None = Field(default=None, max_length=MAX_PASSWORD_LENGTH)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str | None) -> str | None:
        return check_password_bytes(value)


class EmployeeResponse(BaseModel):
    """Employee response DTO."""

    id: int
    document_number: int
    first_name: str
    last_name: str
    email: str
    birth_date: date
    gender: Gender
    role: EmployeeRole
    manager_document_number: int | None = None
    manager_name: str | None = None
    phones: list[int] = []
