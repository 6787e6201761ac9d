"""Employee repository."""

import logging
from datetime import date

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from employee_api.exceptions import EmployeeAlreadyExistsError
from employee_api.models.domain.employee import EmployeeRole, Gender
from employee_api.models.orm.employee import EmployeeORM
from employee_api.models.orm.employee_phone import EmployeePhoneORM
from employee_api.repositories.base import BaseRepository
from employee_api.utils.secure_logging import log_warning
from employee_api.utils.validation import distinct_phones

logger = logging.getLogger(__name__)


def _is_unique_violation(exc: IntegrityError) -> bool:
    message = str(exc.orig).lower() if exc.orig is not None else str(exc).lower()
    return "unique" in message or "duplicate" in message


class EmployeeRepository(BaseRepository[EmployeeORM]):
    """Repository for employee operations.

    Every employee comes back with its phones loaded. The manager is only
    loaded by the ``*_with_details`` queries.
    """

    model = EmployeeORM

    async def get_by_document_number(self, document_number: int) -> EmployeeORM | None:
        """Get employee by document number.

        Args:
            document_number: Employee document number

        Returns:
            EmployeeORM or None if not found
        """
        result = await self.session.execute(
            select(EmployeeORM).where(EmployeeORM.document_number == document_number)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> EmployeeORM | None:
        """Get employee by email, compared exactly after trimming.

        Args:
            email: Employee email address

        Returns:
            EmployeeORM or None if not found
        """
        result = await self.session.execute(
            select(EmployeeORM).where(EmployeeORM.email == email.strip())
        )
        return result.scalar_one_or_none()

    async def exists_any(self) -> bool:
        """Check whether the store holds at least one employee."""
        result = await self.session.execute(select(exists().where(EmployeeORM.id.is_not(None))))
        return bool(result.scalar())

    async def document_number_exists(self, document_number: int) -> bool:
        """Check if a document number is already taken."""
        result = await self.session.execute(
            select(exists().where(EmployeeORM.document_number == document_number))
        )
        return bool(result.scalar())

    async def email_exists(self, email: str, exclude_id: int | None = None) -> bool:
        """Check if an email is already taken.

        Args:
            email: Email to check
            exclude_id: Employee id to ignore (the row being updated)

        Returns:
            True if another employee uses the email
        """
        condition = EmployeeORM.email == email.strip()
        if exclude_id is not None:
            condition = condition & (EmployeeORM.id != exclude_id)
        result = await self.session.execute(select(exists().where(condition)))
        return bool(result.scalar())

    async def get_all_with_details(self) -> list[EmployeeORM]:
        """Get all employees with manager and phones, ordered by id."""
        result = await self.session.execute(
            select(EmployeeORM)
            .options(selectinload(EmployeeORM.manager))
            .order_by(EmployeeORM.id)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def get_with_details(self, document_number: int) -> EmployeeORM | None:
        """Get one employee with manager and phones by document number."""
        result = await self.session.execute(
            select(EmployeeORM)
            .options(selectinload(EmployeeORM.manager))
            .where(EmployeeORM.document_number == document_number)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def create_employee(
        self,
        *,
        document_number: int,
        first_name: str,
        last_name: str,
        email: str,
        birth_date: date,
        gender: Gender,
        role: EmployeeRole,
        password_hash: str,
        phones: list[int],
        manager: EmployeeORM | None = None,
    ) -> EmployeeORM:
        """Insert an employee together with its phone rows.

        Phones are deduplicated and stored in submission order.

        Raises:
            EmployeeAlreadyExistsError: If the store rejects the document
                number or email as a duplicate
        """
        employee = EmployeeORM(
            document_number=document_number,
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            email=email.strip(),
            birth_date=birth_date,
            gender=gender,
            role=role,
            password_hash=password_hash,
            manager=manager,
            phones=[EmployeePhoneORM(phone_number=number) for number in distinct_phones(phones)],
        )
        self.session.add(employee)
        await self.save()
        return employee

    def replace_phones(self, employee: EmployeeORM, phones: list[int]) -> None:
        """Reconcile the employee's phone rows with a submitted list.

        Rows whose number is no longer wanted are removed, new numbers are
        appended, and unchanged numbers keep their row (and id). Submitting
        the same list twice changes nothing.

        Args:
            employee: Employee with phones loaded
            phones: Submitted phone numbers
        """
        wanted = distinct_phones(phones)
        wanted_set = set(wanted)

        for phone in [p for p in employee.phones if p.phone_number not in wanted_set]:
            employee.phones.remove(phone)

        existing = {p.phone_number for p in employee.phones}
        for number in wanted:
            if number not in existing:
                employee.phones.append(EmployeePhoneORM(phone_number=number))
                existing.add(number)

    async def save(self) -> None:
        """Flush pending changes.

        Raises:
            EmployeeAlreadyExistsError: On a unique constraint violation
        """
        try:
            await self.session.flush()
        except IntegrityError as e:
            await self.session.rollback()
            if _is_unique_violation(e):
                log_warning(logger, "Unique constraint rejected employee write", e)
                raise EmployeeAlreadyExistsError() from e
            raise
