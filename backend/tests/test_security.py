"""Tests for password hashing, access tokens and role ordering."""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from jose import jwt

from employee_api.config import get_settings
from employee_api.models.domain.employee import EmployeeRole
from employee_api.models.domain.identity import CallerIdentity
from employee_api.security.auth import (
    create_access_token,
    decode_token,
    get_current_employee,
    get_optional_employee,
    identity_from_payload,
)
from employee_api.security.password import PasswordService


class TestPasswordService:
    """bcrypt hashing."""

    def test_hash_and_verify(self) -> None:
        service = PasswordService(rounds=4)
        hashed = service.hash_password("secret123")

        assert hashed != "secret123"
        assert service.verify_password("secret123", hashed) is True
        assert service.verify_password("wrong", hashed) is False

    def test_hashes_are_salted(self) -> None:
        service = PasswordService(rounds=4)
        assert service.hash_password("secret123") != service.hash_password("secret123")

    @pytest.mark.parametrize("stored", ["", "not-a-bcrypt-hash"])
    def test_invalid_stored_hash_never_matches(self, stored: str) -> None:
        assert PasswordService(rounds=4).verify_password("secret123", stored) is False


class TestRoles:
    """Role ordering and name mapping."""

    def test_roles_are_ordered(self) -> None:
        assert EmployeeRole.EMPLOYEE < EmployeeRole.LEADER < EmployeeRole.DIRECTOR
        assert [int(r) for r in EmployeeRole] == [1, 2, 3]

    def test_display_name_round_trip(self) -> None:
        for role in EmployeeRole:
            assert EmployeeRole.from_display_name(role.display_name) is role

    @pytest.mark.parametrize("value", [None, "", "Admin", "superuser"])
    def test_unknown_name_degrades_to_employee(self, value: str | None) -> None:
        assert EmployeeRole.from_display_name(value) is EmployeeRole.EMPLOYEE

    @pytest.mark.parametrize(
        "caller_role,target_role,allowed",
        [
            (EmployeeRole.EMPLOYEE, EmployeeRole.EMPLOYEE, True),
            (EmployeeRole.EMPLOYEE, EmployeeRole.LEADER, False),
            (EmployeeRole.LEADER, EmployeeRole.DIRECTOR, False),
            (EmployeeRole.LEADER, EmployeeRole.EMPLOYEE, True),
            (EmployeeRole.DIRECTOR, EmployeeRole.DIRECTOR, True),
        ],
    )
    def test_can_act_on(
        self, caller_role: EmployeeRole, target_role: EmployeeRole, allowed: bool
    ) -> None:
        caller = CallerIdentity(
            subject_id=1, email="a@example.com", document_number=1, role=caller_role
        )
        assert caller.can_act_on(target_role) is allowed


class TestAccessToken:
    """Token issuing and verification."""

    def test_token_carries_identity_claims(self) -> None:
        token = create_access_token(
            employee_id=7, email="boss@example.com", document_number=1000, role=EmployeeRole.LEADER
        )
        payload = decode_token(token)

        assert payload["sub"] == "7"
        assert payload["nameid"] == "7"
        assert payload["email"] == "boss@example.com"
        assert payload["document_number"] == 1000
        assert payload["role"] == "Leader"

        identity = identity_from_payload(payload)
        assert identity.subject_id == 7
        assert identity.document_number == 1000
        assert identity.role is EmployeeRole.LEADER

    def test_tampered_token_rejected(self) -> None:
        token = create_access_token(
            employee_id=1, email="a@example.com", document_number=1, role=EmployeeRole.EMPLOYEE
        )
        with pytest.raises(HTTPException) as exc_info:
            decode_token(token[:-2] + ("aa" if not token.endswith("aa") else "bb"))
        assert exc_info.value.status_code == 401

    def test_expired_token_rejected(self) -> None:
        settings = get_settings()
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {
                "sub": "1",
                "email": "a@example.com",
                "document_number": 1,
                "role": "Director",
                "iss": settings.jwt_issuer,
                "aud": settings.jwt_audience,
                "iat": now - timedelta(hours=2),
                "exp": now - timedelta(hours=1),
            },
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )
        with pytest.raises(HTTPException):
            decode_token(token)

    def test_wrong_audience_rejected(self) -> None:
        settings = get_settings()
        token = jwt.encode(
            {
                "sub": "1",
                "aud": "someone-else",
                "iss": settings.jwt_issuer,
                "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
            },
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )
        with pytest.raises(HTTPException):
            decode_token(token)

    def test_missing_claim_rejected(self) -> None:
        with pytest.raises(HTTPException):
            identity_from_payload({"sub": "1", "role": "Director"})

    async def test_current_employee_requires_credentials(self) -> None:
        with pytest.raises(HTTPException) as exc_info:
            await get_current_employee(None)
        assert exc_info.value.status_code == 401

    async def test_optional_employee_ignores_bad_token(self) -> None:
        bad = HTTPAuthorizationCredentials(scheme="Bearer", credentials="garbage")
        assert await get_optional_employee(bad) is None
        assert await get_optional_employee(None) is None

    async def test_optional_employee_decodes_valid_token(self) -> None:
        token = create_access_token(
            employee_id=3, email="c@example.com", document_number=30, role=EmployeeRole.DIRECTOR
        )
        caller = await get_optional_employee(
            HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)
        )
        assert caller is not None
        assert caller.role is EmployeeRole.DIRECTOR
        assert caller.document_number == 30


class TestRehash:
    """Cost factor upgrades."""

    def test_needs_rehash_when_cost_differs(self) -> None:
        old = PasswordService(rounds=4).hash_password("secret123")

        assert PasswordService(rounds=4).needs_rehash(old) is False
        assert PasswordService(rounds=5).needs_rehash(old) is True
        assert PasswordService(rounds=4).needs_rehash("garbage") is True
