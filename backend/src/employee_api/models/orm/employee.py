"""Employee ORM model."""

from datetime import date

from sqlalchemy import Date, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from employee_api.models.domain.employee import EmployeeRole, Gender
from employee_api.models.orm.base import Base, IdentityMixin, IntEnumType, TimestampMixin


class EmployeeORM(Base, IdentityMixin, TimestampMixin):
    """Employee database model."""

    __tablename__ = "employees"

    document_number: Mapped[int] = mapped_column(Integer, unique=True, nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    birth_date: Mapped[date] = mapped_column(Date, nullable=False)
    gender: Mapped[Gender] = mapped_column(
        IntEnumType(Gender), nullable=False, default=Gender.UNSPECIFIED
    )
    role: Mapped[EmployeeRole] = mapped_column(
        IntEnumType(EmployeeRole), nullable=False, default=EmployeeRole.EMPLOYEE
    )
    password_hash: Mapped[str] = mapped_column(String(500), nullable=False)

    # Manager relationship - surrogate id of another employee, not its document number
    manager_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("employees.id", ondelete="SET NULL"),
        nullable=True,
    )

    # Load explicitly with selectinload() when needed
    manager: Mapped["EmployeeORM | None"] = relationship(
        "EmployeeORM",
        remote_side="EmployeeORM.id",
        foreign_keys=[manager_id],
        lazy="select",
    )

    # Phones are owned rows; always loaded with the employee
    phones: Mapped[list["EmployeePhoneORM"]] = relationship(
        "EmployeePhoneORM",
        back_populates="employee",
        lazy="selectin",
        order_by="EmployeePhoneORM.id",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_employees_manager_id", "manager_id"),
    )

    @property
    def display_name(self) -> str:
        """First and last name joined by a space."""
        return f"{self.first_name} {self.last_name}"


# Import here to avoid circular import
from employee_api.models.orm.employee_phone import EmployeePhoneORM  # noqa: E402, F401
