"""Employees router."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Request, Response, status

from employee_api.constants.validation import MAX_DOCUMENT_NUMBER
from employee_api.dependencies import get_employee_service
from employee_api.models.domain.identity import CallerIdentity
from employee_api.models.dto.employee import EmployeeCreate, EmployeeResponse, EmployeeUpdate
from employee_api.security.auth import get_current_employee
from employee_api.security.rate_limit import get_real_client_ip
from employee_api.services.employee_service import EmployeeService

router = APIRouter()

DocumentNumberPath = Annotated[int, Path(ge=1, le=MAX_DOCUMENT_NUMBER)]


@router.get("", response_model=list[EmployeeResponse])
async def list_employees(
    current_employee: Annotated[CallerIdentity, Depends(get_current_employee)],
    service: Annotated[EmployeeService, Depends(get_employee_service)],
) -> list[EmployeeResponse]:
    """List all employees ordered by id."""
    return await service.list_employees()


@router.get("/{document_number}", response_model=EmployeeResponse)
async def get_employee(
    document_number: DocumentNumberPath,
    current_employee: Annotated[CallerIdentity, Depends(get_current_employee)],
    service: Annotated[EmployeeService, Depends(get_employee_service)],
) -> EmployeeResponse:
    """Get an employee by document number."""
    return await service.get_employee(document_number)


@router.post("", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
async def create_employee(
    request: Request,
    response: Response,
    body: EmployeeCreate,
    current_employee: Annotated[CallerIdentity, Depends(get_current_employee)],
    service: Annotated[EmployeeService, Depends(get_employee_service)],
) -> EmployeeResponse:
    """Create an employee. The requested role may not exceed the caller's."""
    created = await service.create_employee(
        body,
        current_employee,
        ip_address=get_real_client_ip(request),
    )
    response.headers["Location"] = str(
        request.url_for("get_employee", document_number=created.document_number)
    )
    return created


@router.put("", response_model=EmployeeResponse)
async def update_employee(
    request: Request,
    body: EmployeeUpdate,
    current_employee: Annotated[CallerIdentity, Depends(get_current_employee)],
    service: Annotated[EmployeeService, Depends(get_employee_service)],
) -> EmployeeResponse:
    """Update the employee identified by the document number in the body."""
    return await service.update_employee(
        body,
        current_employee,
        ip_address=get_real_client_ip(request),
    )


@router.delete("/{document_number}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_employee(
    request: Request,
    document_number: DocumentNumberPath,
    current_employee: Annotated[CallerIdentity, Depends(get_current_employee)],
    service: Annotated[EmployeeService, Depends(get_employee_service)],
) -> Response:
    """Delete an employee. The target's role may not exceed the caller's."""
    await service.delete_employee(
        document_number,
        current_employee,
        ip_address=get_real_client_ip(request),
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
