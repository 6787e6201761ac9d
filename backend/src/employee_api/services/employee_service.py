"""Employee service: authenticated reads and mutations of the directory."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from employee_api.exceptions import (
    ConflictError,
    EmployeeNotFoundError,
    ForbiddenError,
    InvalidInputError,
)
from employee_api.models.domain.employee import EmployeeRole
from employee_api.models.domain.identity import CallerIdentity
from employee_api.models.dto.employee import EmployeeCreate, EmployeeResponse, EmployeeUpdate
from employee_api.models.orm.employee import EmployeeORM
from employee_api.repositories.employee_repository import EmployeeRepository
from employee_api.security.password import get_password_service
from employee_api.utils.security_events import SecurityEventType, log_security_event
from employee_api.utils.validation import MINOR_MESSAGE, is_minor, phone_validation_error

logger = logging.getLogger(__name__)


class EmployeeService:
    """Service for employee directory operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.employee_repo = EmployeeRepository(session)
        self.password_service = get_password_service()

    async def list_employees(self) -> list[EmployeeResponse]:
        """List all employees ordered by id."""
        employees = await self.employee_repo.get_all_with_details()
        return [self._to_response(e) for e in employees]

    async def get_employee(self, document_number: int) -> EmployeeResponse:
        """Get a single employee.

        Raises:
            EmployeeNotFoundError: If no employee has the document number
        """
        employee = await self.employee_repo.get_with_details(document_number)
        if employee is None:
            raise EmployeeNotFoundError(document_number)
        return self._to_response(employee)

    async def create_employee(
        self,
        data: EmployeeCreate,
        caller: CallerIdentity,
        ip_address: str | None = None,
    ) -> EmployeeResponse:
        """Create an employee on behalf of an authenticated caller.

        The role check comes first here, before any input rule. Rules are
        evaluated in order and the first failure is raised.

        Args:
            data: Employee data
            caller: Authenticated caller
            ip_address: Client IP for security logging

        Returns:
            Created employee

        Raises:
            ForbiddenError: Requested role above the caller's role
            InvalidInputError: Bad phones, minor, or invalid manager
            ConflictError: Document number or email already taken
        """
        logger.info(
            f"Create employee doc={data.document_number} requested by doc={caller.document_number}"
        )

        if not caller.can_act_on(data.role):
            self._log_escalation(caller, data.document_number, data.role, ip_address)
            raise ForbiddenError("You cannot create a user with higher permissions than yours.")

        self._check_phones_and_age(data)

        if await self.employee_repo.document_number_exists(data.document_number):
            raise ConflictError("Document number already exists.")

        if await self.employee_repo.email_exists(data.email):
            raise ConflictError("Email already exists.")

        manager = await self._resolve_manager(data)

        employee = await self.employee_repo.create_employee(
            document_number=data.document_number,
            first_name=data.first_name,
            last_name=data.last_name,
            email=data.email,
            birth_date=data.birth_date,
            gender=data.gender,
            role=data.role,
            password_hash=self.password_service.hash_password(data.password),
            phones=data.phones or [],
            manager=manager,
        )

        logger.info(f"Employee created id={employee.id} doc={employee.document_number}")
        log_security_event(
            SecurityEventType.EMPLOYEE_CREATED,
            actor_document_number=caller.document_number,
            actor_role=caller.role.display_name,
            target_document_number=employee.document_number,
            ip_address=ip_address,
            details={"role": employee.role.display_name},
        )

        return await self.get_employee(employee.document_number)

    async def update_employee(
        self,
        data: EmployeeUpdate,
        caller: CallerIdentity,
        ip_address: str | None = None,
    ) -> EmployeeResponse:
        """Replace the mutable fields of an existing employee.

        The target is identified by ``data.document_number``, which is never
        changed. The password is only re-hashed when a non-blank value is
        supplied. Phones are reconciled so unchanged numbers keep their rows.

        Args:
            data: Employee data
            caller: Authenticated caller
            ip_address: Client IP for security logging

        Returns:
            Updated employee

        Raises:
            EmployeeNotFoundError: If the target does not exist
            ForbiddenError: Requested role above the caller's role
            InvalidInputError: Bad phones, minor, or invalid manager
            ConflictError: Email used by another employee
        """
        logger.info(
            f"Update employee doc={data.document_number} requested by doc={caller.document_number}"
        )

        employee = await self.employee_repo.get_by_document_number(data.document_number)
        if employee is None:
            raise EmployeeNotFoundError(data.document_number)

        if not caller.can_act_on(data.role):
            self._log_escalation(caller, data.document_number, data.role, ip_address)
            raise ForbiddenError("You cannot assign a higher role than yours.")

        self._check_phones_and_age(data)

        if await self.employee_repo.email_exists(data.email, exclude_id=employee.id):
            raise ConflictError("Email already exists.")

        manager = await self._resolve_manager(data)

        employee.first_name = data.first_name
        employee.last_name = data.last_name
        employee.email = data.email
        employee.birth_date = data.birth_date
        employee.gender = data.gender
        employee.role = data.role
        employee.manager = manager

        if data.password and data.password.strip():
            employee.password_hash = self.password_service.hash_password(data.password)

        self.employee_repo.replace_phones(employee, data.phones or [])
        await self.employee_repo.save()

        logger.info(f"Employee updated id={employee.id} doc={employee.document_number}")
        log_security_event(
            SecurityEventType.EMPLOYEE_UPDATED,
            actor_document_number=caller.document_number,
            actor_role=caller.role.display_name,
            target_document_number=employee.document_number,
            ip_address=ip_address,
            details={"role": employee.role.display_name},
        )

        return await self.get_employee(employee.document_number)

    async def delete_employee(
        self,
        document_number: int,
        caller: CallerIdentity,
        ip_address: str | None = None,
    ) -> None:
        """Delete an employee and its phones.

        Employees managed by the deleted one keep existing without a manager.

        Raises:
            EmployeeNotFoundError: If the target does not exist
            ForbiddenError: Target role above the caller's role
        """
        logger.info(
            f"Delete employee doc={document_number} requested by doc={caller.document_number}"
        )

        employee = await self.employee_repo.get_by_document_number(document_number)
        if employee is None:
            raise EmployeeNotFoundError(document_number)

        if not caller.can_act_on(employee.role):
            self._log_escalation(caller, document_number, employee.role, ip_address)
            raise ForbiddenError("You cannot delete a user with higher permissions than yours.")

        await self.employee_repo.delete(employee)

        logger.info(f"Employee deleted doc={document_number}")
        log_security_event(
            SecurityEventType.EMPLOYEE_DELETED,
            actor_document_number=caller.document_number,
            actor_role=caller.role.display_name,
            target_document_number=document_number,
            ip_address=ip_address,
        )

    def _check_phones_and_age(self, data: EmployeeCreate | EmployeeUpdate) -> None:
        phones_error = phone_validation_error(data.phones)
        if phones_error:
            raise InvalidInputError(phones_error)
        if is_minor(data.birth_date):
            raise InvalidInputError(MINOR_MESSAGE)

    async def _resolve_manager(self, data: EmployeeCreate | EmployeeUpdate) -> EmployeeORM | None:
        """Resolve the manager referenced by the request.

        Raises:
            InvalidInputError: Self reference, unknown manager, or a manager
                with a lower role than the employee
        """
        if data.manager_document_number is None:
            return None

        if data.manager_document_number == data.document_number:
            raise InvalidInputError(
                "Manager document number cannot be the same as document number."
            )

        manager = await self.employee_repo.get_by_document_number(data.manager_document_number)
        if manager is None:
            raise InvalidInputError("Manager document number does not exist.")

        if manager.role < data.role:
            raise InvalidInputError("Manager must have an equal or higher role than the employee.")

        return manager

    def _log_escalation(
        self,
        caller: CallerIdentity,
        target_document_number: int,
        role: EmployeeRole,
        ip_address: str | None,
    ) -> None:
        log_security_event(
            SecurityEventType.ROLE_ESCALATION_DENIED,
            actor_document_number=caller.document_number,
            actor_role=caller.role.display_name,
            target_document_number=target_document_number,
            ip_address=ip_address,
            details={"role": role.display_name},
            success=False,
        )

    @staticmethod
    def _to_response(employee: EmployeeORM) -> EmployeeResponse:
        manager = employee.manager
        return EmployeeResponse(
            id=employee.id,
            document_number=employee.document_number,
            first_name=employee.first_name,
            last_name=employee.last_name,
            email=employee.email,
            birth_date=employee.birth_date,
            gender=employee.gender,
            role=employee.role,
            manager_document_number=manager.document_number if manager else None,
            manager_name=manager.display_name if manager else None,
            phones=[p.phone_number for p in sorted(employee.phones, key=lambda p: p.id)],
        )
