"""Authentication service: self-service registration and login."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from employee_api.config import get_settings
from employee_api.constants.validation import MAX_DOCUMENT_NUMBER
from employee_api.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidCredentialsError,
    InvalidInputError,
    UnauthenticatedError,
)
from employee_api.models.domain.employee import EmployeeRole
from employee_api.models.domain.identity import CallerIdentity
from employee_api.models.dto.auth import AuthResponse, RegisterRequest
from employee_api.models.orm.employee import EmployeeORM
from employee_api.repositories.employee_repository import EmployeeRepository
from employee_api.security.auth import create_access_token
from employee_api.security.password import get_password_service
from employee_api.utils.security_events import SecurityEventType, log_security_event
from employee_api.utils.validation import MINOR_MESSAGE, is_minor, phone_validation_error

logger = logging.getLogger(__name__)


class AuthService:
    """Service for registration and authentication."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.employee_repo = EmployeeRepository(session)
        self.password_service = get_password_service()

    async def register(
        self,
        data: RegisterRequest,
        caller: CallerIdentity | None = None,
        ip_address: str | None = None,
    ) -> AuthResponse:
        """Register an employee and issue an access token for it.

        The very first employee of an empty store may register without
        authentication and always becomes a Director. Afterwards the caller
        must be authenticated and may not request a role above their own.

        Rules are evaluated in order and the first failure is raised.

        Args:
            data: Registration data
            caller: Authenticated caller, or None for anonymous requests
            ip_address: Client IP for security logging

        Returns:
            AuthResponse for the new employee

        Raises:
            InvalidInputError: Bad phones, minor, self or unknown manager
            ConflictError: Document number or email already taken
            UnauthenticatedError: Store not empty and no caller
            ForbiddenError: Requested role above the caller's role
        """
        logger.info(f"Register attempt doc={data.document_number}")

        phones_error = phone_validation_error(data.phones)
        if phones_error:
            raise InvalidInputError(phones_error)

        if is_minor(data.birth_date):
            raise InvalidInputError(MINOR_MESSAGE)

        if (
            data.manager_document_number is not None
            and data.manager_document_number == data.document_number
        ):
            raise InvalidInputError(
                "Manager document number cannot be the same as document number."
            )

        if await self.employee_repo.document_number_exists(data.document_number):
            raise ConflictError("Document number already exists.")

        if await self.employee_repo.email_exists(data.email):
            raise ConflictError("Email already exists.")

        manager: EmployeeORM | None = None
        if data.manager_document_number is not None:
            manager = await self.employee_repo.get_by_document_number(
                data.manager_document_number
            )
            if manager is None:
                raise InvalidInputError("Manager document number does not exist.")

        # Check-then-insert is not atomic: two concurrent first registrations
        # with different document numbers can both become Directors.
        is_bootstrap = not await self.employee_repo.exists_any()
        if is_bootstrap:
            final_role = EmployeeRole.DIRECTOR
            logger.warning("Bootstrap register: first user will be created as Director.")
        else:
            if caller is None:
                raise UnauthenticatedError(
                    "Register requires authentication after the first user."
                )
            if not caller.can_act_on(data.role):
                log_security_event(
                    SecurityEventType.ROLE_ESCALATION_DENIED,
                    actor_document_number=caller.document_number,
                    actor_role=caller.role.display_name,
                    target_document_number=data.document_number,
                    ip_address=ip_address,
                    details={"requested_role": data.role.display_name},
                    success=False,
                )
                raise ForbiddenError(
                    "You cannot create a user with higher permissions than yours."
                )
            final_role = data.role

        employee = await self.employee_repo.create_employee(
            document_number=data.document_number,
            first_name=data.first_name,
            last_name=data.last_name,
            email=data.email,
            birth_date=data.birth_date,
            gender=data.gender,
            role=final_role,
            password_hash=self.password_service.hash_password(data.password),
            phones=data.phones or [],
            manager=manager,
        )

        logger.info(
            f"User registered id={employee.id} doc={employee.document_number} "
            f"role={employee.role.display_name}"
        )
        log_security_event(
            SecurityEventType.BOOTSTRAP_REGISTERED
            if is_bootstrap
            else SecurityEventType.EMPLOYEE_REGISTERED,
            actor_document_number=caller.document_number if caller else None,
            actor_role=caller.role.display_name if caller else None,
            target_document_number=employee.document_number,
            ip_address=ip_address,
            details={"role": employee.role.display_name},
        )

        return self._issue(employee)

    async def authenticate(
        self,
        document_number: int,
        password: str,
        ip_address: str | None = None,
    ) -> AuthResponse:
        """Authenticate with document number and password.

        Args:
            document_number: Employee document number
            password: Plain text password
            ip_address: Client IP for security logging

        Returns:
            AuthResponse with a fresh access token

        Raises:
            InvalidCredentialsError: Unknown document number or wrong password
        """
        logger.info(f"Login attempt doc={document_number}")

        employee: EmployeeORM | None = None
        # Out-of-range numbers cannot be stored, so they cannot match
        if 1 <= document_number <= MAX_DOCUMENT_NUMBER:
            employee = await self.employee_repo.get_by_document_number(document_number)

        if employee is None or not self.password_service.verify_password(
            password, employee.password_hash
        ):
            log_security_event(
                SecurityEventType.LOGIN_FAILED,
                actor_document_number=document_number,
                ip_address=ip_address,
                success=False,
            )
            raise InvalidCredentialsError()

        # Upgrade hashes made with an older cost factor
        if self.password_service.needs_rehash(employee.password_hash):
            employee.password_hash = self.password_service.hash_password(password)
            await self.employee_repo.save()

        log_security_event(
            SecurityEventType.LOGIN_SUCCESS,
            actor_document_number=employee.document_number,
            actor_role=employee.role.display_name,
            ip_address=ip_address,
        )
        logger.info(
            f"Login success doc={employee.document_number} role={employee.role.display_name}"
        )

        return self._issue(employee)

    def _issue(self, employee: EmployeeORM) -> AuthResponse:
        """Build the token response asserting the employee's identity."""
        settings = get_settings()
        token = create_access_token(
            employee_id=employee.id,
            email=employee.email,
            document_number=employee.document_number,
            role=employee.role,
        )
        return AuthResponse(
            access_token=token,
            expires_in=settings.jwt_expiration_minutes * 60,
            document_number=employee.document_number,
            email=employee.email,
            role=employee.role,
        )
