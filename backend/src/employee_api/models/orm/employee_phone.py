"""Employee phone ORM model."""

from sqlalchemy import BigInteger, ForeignKey, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from employee_api.models.orm.base import Base, IdentityMixin


class EmployeePhoneORM(Base, IdentityMixin):
    """Phone number owned by an employee.

    Rows have no lifecycle of their own: they are created, kept or removed
    only through the owning employee's ``phones`` collection.
    """

    __tablename__ = "employee_phones"

    employee_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("employees.id", ondelete="CASCADE"),
        nullable=False,
    )
    phone_number: Mapped[int] = mapped_column(BigInteger, nullable=False)

    employee: Mapped["EmployeeORM"] = relationship(
        "EmployeeORM",
        back_populates="phones",
        lazy="select",
    )

    __table_args__ = (
        Index("idx_employee_phones_employee_id", "employee_id"),
    )


# Import here to avoid circular import
from employee_api.models.orm.employee import EmployeeORM  # noqa: E402, F401
