"""Domain models package."""

from employee_api.models.domain.employee import EmployeeRole, Gender
from employee_api.models.domain.identity import CallerIdentity, IssuedIdentity

__all__ = [
    "EmployeeRole",
    "Gender",
    "CallerIdentity",
    "IssuedIdentity",
]
