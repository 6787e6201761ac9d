"""Tests for registration and login."""

from datetime import date

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from employee_api.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidCredentialsError,
    InvalidInputError,
    UnauthenticatedError,
)
from employee_api.models.domain.employee import EmployeeRole
from employee_api.models.dto.auth import RegisterRequest
from employee_api.security.auth import decode_token
from employee_api.security.password import PasswordService
from employee_api.services.auth_service import AuthService
from employee_api.utils.validation import utc_today


def _register_request(document_number: int, **overrides) -> RegisterRequest:
    data = {
        "document_number": document_number,
        "first_name": "Ana",
        "last_name": "Souza",
        "email": f"user{document_number}@example.com",
        "birth_date": date(1990, 5, 17),
        "role": EmployeeRole.EMPLOYEE,
        "phones": [11911111111, 11922222222],
        "password": "secret123",
    }
    data.update(overrides)
    return RegisterRequest(**data)


class TestBootstrapRegistration:
    """The first registration of an empty store."""

    async def test_first_user_becomes_director(self, session: AsyncSession) -> None:
        service = AuthService(session)

        response = await service.register(_register_request(1000, role=EmployeeRole.EMPLOYEE))

        assert response.role is EmployeeRole.DIRECTOR
        assert response.document_number == 1000
        assert response.token_type == "bearer"
        assert response.expires_in == 60 * 60
        claims = decode_token(response.access_token)
        assert claims["role"] == "Director"
        assert claims["document_number"] == 1000

    async def test_second_anonymous_registration_rejected(self, session: AsyncSession) -> None:
        service = AuthService(session)
        await service.register(_register_request(1000))

        with pytest.raises(UnauthenticatedError) as exc_info:
            await service.register(_register_request(2000))

        assert exc_info.value.message == "Register requires authentication after the first user."

    async def test_bootstrap_still_validates_input(self, session: AsyncSession) -> None:
        service = AuthService(session)

        with pytest.raises(InvalidInputError):
            await service.register(_register_request(1000, phones=[5, -5]))


class TestSteadyStateRegistration:
    """Registration once the store holds employees."""

    async def test_equal_role_allowed(self, add_employee, caller_for, session: AsyncSession) -> None:
        director = await add_employee(1000, role=EmployeeRole.DIRECTOR)
        service = AuthService(session)

        response = await service.register(
            _register_request(2000, role=EmployeeRole.DIRECTOR), caller=caller_for(director)
        )

        assert response.role is EmployeeRole.DIRECTOR

    async def test_requested_role_kept(self, add_employee, caller_for, session: AsyncSession) -> None:
        director = await add_employee(1000, role=EmployeeRole.DIRECTOR)
        service = AuthService(session)

        response = await service.register(
            _register_request(2000, role=EmployeeRole.LEADER), caller=caller_for(director)
        )

        assert response.role is EmployeeRole.LEADER

    async def test_higher_role_forbidden(self, add_employee, caller_for, session: AsyncSession) -> None:
        leader = await add_employee(1000, role=EmployeeRole.LEADER)
        service = AuthService(session)

        with pytest.raises(ForbiddenError) as exc_info:
            await service.register(
                _register_request(2000, role=EmployeeRole.DIRECTOR), caller=caller_for(leader)
            )

        assert exc_info.value.message == "You cannot create a user with higher permissions than yours."

    async def test_input_rules_run_before_authentication(self, add_employee, session: AsyncSession) -> None:
        """An anonymous request with bad phones reports the phones, not the missing caller."""
        await add_employee(1000, role=EmployeeRole.DIRECTOR)
        service = AuthService(session)

        with pytest.raises(InvalidInputError) as exc_info:
            await service.register(_register_request(2000, phones=[1]))

        assert exc_info.value.message == "Employee must have more than one phone (min 2)."

    async def test_minor_rejected(self, add_employee, caller_for, session: AsyncSession) -> None:
        director = await add_employee(1000, role=EmployeeRole.DIRECTOR)
        today = utc_today()
        service = AuthService(session)

        with pytest.raises(InvalidInputError) as exc_info:
            await service.register(
                _register_request(2000, birth_date=date(today.year - 17, 1, 1)),
                caller=caller_for(director),
            )

        assert exc_info.value.message == "Employee must not be a minor (must be 18+)."

    async def test_self_manager_rejected(self, add_employee, caller_for, session: AsyncSession) -> None:
        director = await add_employee(1000, role=EmployeeRole.DIRECTOR)
        service = AuthService(session)

        with pytest.raises(InvalidInputError) as exc_info:
            await service.register(
                _register_request(2000, manager_document_number=2000), caller=caller_for(director)
            )

        assert exc_info.value.message == "Manager document number cannot be the same as document number."

    async def test_duplicate_document_number(self, add_employee, caller_for, session: AsyncSession) -> None:
        director = await add_employee(1000, role=EmployeeRole.DIRECTOR)
        service = AuthService(session)

        with pytest.raises(ConflictError) as exc_info:
            await service.register(_register_request(1000, email="other@example.com"), caller=caller_for(director))

        assert exc_info.value.message == "Document number already exists."

    async def test_duplicate_email(self, add_employee, caller_for, session: AsyncSession) -> None:
        director = await add_employee(1000, role=EmployeeRole.DIRECTOR, email="boss@example.com")
        service = AuthService(session)

        with pytest.raises(ConflictError) as exc_info:
            await service.register(
                _register_request(2000, email="  boss@example.com "), caller=caller_for(director)
            )

        assert exc_info.value.message == "Email already exists."

    async def test_email_local_part_case_is_significant(
        self, add_employee, caller_for, session: AsyncSession
    ) -> None:
        director = await add_employee(1000, role=EmployeeRole.DIRECTOR, email="boss@example.com")
        service = AuthService(session)

        response = await service.register(
            _register_request(2000, email="Boss@example.com"), caller=caller_for(director)
        )

        assert response.email == "Boss@example.com"

    async def test_unknown_manager_rejected(self, add_employee, caller_for, session: AsyncSession) -> None:
        director = await add_employee(1000, role=EmployeeRole.DIRECTOR)
        service = AuthService(session)

        with pytest.raises(InvalidInputError) as exc_info:
            await service.register(
                _register_request(2000, manager_document_number=9999), caller=caller_for(director)
            )

        assert exc_info.value.message == "Manager document number does not exist."

    async def test_manager_role_not_checked_on_register(
        self, add_employee, caller_for, session: AsyncSession
    ) -> None:
        director = await add_employee(1000, role=EmployeeRole.DIRECTOR)
        await add_employee(1500, role=EmployeeRole.EMPLOYEE)
        service = AuthService(session)

        response = await service.register(
            _register_request(2000, role=EmployeeRole.LEADER, manager_document_number=1500),
            caller=caller_for(director),
        )

        assert response.role is EmployeeRole.LEADER


class TestAuthenticate:
    """Login with document number and password."""

    async def test_login_success(self, add_employee, session: AsyncSession) -> None:
        await add_employee(1000, role=EmployeeRole.LEADER, password="s3cret!!")
        service = AuthService(session)

        response = await service.authenticate(1000, "s3cret!!")

        assert response.role is EmployeeRole.LEADER
        assert decode_token(response.access_token)["document_number"] == 1000

    async def test_wrong_password_and_unknown_user_look_the_same(
        self, add_employee, session: AsyncSession
    ) -> None:
        await add_employee(1000, password="s3cret!!")
        service = AuthService(session)

        with pytest.raises(InvalidCredentialsError) as wrong_password:
            await service.authenticate(1000, "nope")
        with pytest.raises(InvalidCredentialsError) as unknown_user:
            await service.authenticate(4242, "s3cret!!")

        assert wrong_password.value.message == unknown_user.value.message == "Invalid credentials."
        assert wrong_password.value.status_code == 401

    @pytest.mark.parametrize("document_number", [0, -1, 2**31, 2**63])
    async def test_out_of_range_document_number(
        self, add_employee, session: AsyncSession, document_number: int
    ) -> None:
        await add_employee(1000, password="s3cret!!")

        with pytest.raises(InvalidCredentialsError):
            await AuthService(session).authenticate(document_number, "s3cret!!")


class TestRehashOnLogin:
    """Stored hashes follow the configured cost factor."""

    async def test_login_upgrades_old_hash(self, add_employee, session: AsyncSession) -> None:
        employee = await add_employee(1000, password="s3cret!!")
        employee.password_hash = PasswordService(rounds=5).hash_password("s3cret!!")
        await session.commit()
        service = AuthService(session)

        await service.authenticate(1000, "s3cret!!")

        assert service.password_service.needs_rehash(employee.password_hash) is False
        assert service.password_service.verify_password("s3cret!!", employee.password_hash)
