"""Authentication utilities: token issuing and bearer-token dependencies."""

from datetime import datetime, timedelta, timezone
from typing import Annotated, Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from employee_api.config import get_settings
from employee_api.models.domain.employee import EmployeeRole
from employee_api.models.domain.identity import CallerIdentity, IssuedIdentity

security = HTTPBearer(auto_error=False)

# Claim names
CLAIM_EMAIL = "email"
CLAIM_DOCUMENT_NUMBER = "document_number"
CLAIM_ROLE = "role"
CLAIM_NAME_IDENTIFIER = "nameid"


def create_access_token(
    employee_id: int,
    email: str,
    document_number: int,
    role: EmployeeRole,
) -> str:
    """Create a signed JWT access token.

    Args:
        employee_id: Employee surrogate id (``sub`` and ``nameid`` claims)
        email: Employee email
        document_number: Employee document number
        role: Employee role, embedded by name

    Returns:
        JWT token string
    """
    settings = get_settings()
    now = datetime.now(timezone.utc)
    expire = now + timedelta(minutes=settings.jwt_expiration_minutes)

    payload = {
        "sub": str(employee_id),
        CLAIM_NAME_IDENTIFIER: str(employee_id),
        CLAIM_EMAIL: email,
        CLAIM_DOCUMENT_NUMBER: document_number,
        CLAIM_ROLE: EmployeeRole(role).display_name,
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "exp": expire,
        "iat": now,
    }

    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict[str, Any]:
    """Decode and verify a JWT token.

    Signature, expiry, issuer and audience are all verified.

    Args:
        token: JWT token string

    Returns:
        Token payload

    Raises:
        HTTPException: If token is invalid or expired
    """
    settings = get_settings()

    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
        )
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


def identity_from_payload(payload: dict[str, Any]) -> IssuedIdentity:
    """Build the typed identity from a verified token payload.

    Raises:
        HTTPException: If a mandatory claim is missing or malformed
    """
    try:
        return IssuedIdentity(
            subject_id=int(payload["sub"]),
            email=payload[CLAIM_EMAIL],
            document_number=int(payload[CLAIM_DOCUMENT_NUMBER]),
            role=EmployeeRole.from_display_name(payload.get(CLAIM_ROLE)),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


async def get_current_employee(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)] = None,
) -> CallerIdentity:
    """Get the authenticated caller from the bearer token.

    Raises:
        HTTPException: If the token is missing or invalid
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_token(credentials.credentials)
    return CallerIdentity(**identity_from_payload(payload).model_dump())


async def get_optional_employee(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)] = None,
) -> CallerIdentity | None:
    """Get the caller if a valid bearer token was sent.

    Used by endpoints that allow anonymous access: a missing or invalid
    token yields ``None`` instead of an error.
    """
    if credentials is None:
        return None
    try:
        return await get_current_employee(credentials)
    except HTTPException:
        return None
