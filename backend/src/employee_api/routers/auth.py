"""Authentication router."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from employee_api.dependencies import get_auth_service
from employee_api.models.domain.identity import CallerIdentity
from employee_api.models.dto.auth import AuthResponse, LoginRequest, RegisterRequest
from employee_api.security.auth import get_optional_employee
from employee_api.security.rate_limit import (
    AUTH_LOGIN_LIMIT,
    AUTH_REGISTER_LIMIT,
    get_real_client_ip,
    limiter,
)
from employee_api.services.auth_service import AuthService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/register", response_model=AuthResponse)
@limiter.limit(AUTH_REGISTER_LIMIT)
async def register(
    request: Request,
    body: RegisterRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    caller: Annotated[CallerIdentity | None, Depends(get_optional_employee)],
) -> AuthResponse:
    """Register an employee and return an access token.

    The first employee may register anonymously and becomes a Director.
    After that a bearer token is required and the requested role may not
    exceed the caller's role.
    """
    return await auth_service.register(
        body,
        caller=caller,
        ip_address=get_real_client_ip(request),
    )


@router.post("/login", response_model=AuthResponse)
@limiter.limit(AUTH_LOGIN_LIMIT)
async def login(
    request: Request,
    body: LoginRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    """Authenticate with document number and password."""
    return await auth_service.authenticate(
        body.document_number,
        body.password,
        ip_address=get_real_client_ip(request),
    )
