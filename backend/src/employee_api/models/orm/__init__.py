"""SQLAlchemy ORM models package."""

from employee_api.models.orm.base import Base
from employee_api.models.orm.employee import EmployeeORM
from employee_api.models.orm.employee_phone import EmployeePhoneORM

__all__ = [
    "Base",
    "EmployeeORM",
    "EmployeePhoneORM",
]
