"""Admin panel endpoints: employees, all time entries and invoices."""

import secrets
from datetime import date
from typing import Annotated

from fastapi import APIRouter, HTTPException, Path, status

from paytrack.api.dependencies import AppSettings, Employees, Invoices, TimeEntries
from paytrack.api.schemas import (
    AdminTimeEntryResponse,
    AdminVerifyRequest,
    CreatedResponse,
    EmployeeAdminResponse,
    EmployeeCreate,
    EmployeeUpdate,
    ErrorResponse,
    InvoiceResponse,
    SuccessResponse,
    TimeEntryResponse,
)
from paytrack.services import PinConflictError, TimeEntryNotFoundError

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/verify", response_model=SuccessResponse)
async def verify_admin(settings: AppSettings, payload: AdminVerifyRequest) -> SuccessResponse:
    """Check the admin password. Always fails when none is configured."""
    expected = settings.admin_password
    ok = expected is not None and secrets.compare_digest(
        payload.password.encode(), expected.encode()
    )
    return SuccessResponse(success=ok)


# ============================================================================
# Employees
# ============================================================================


@router.get("/employees", response_model=list[EmployeeAdminResponse])
async def list_employees(employees: Employees) -> list[EmployeeAdminResponse]:
    """List all employees."""
    return [EmployeeAdminResponse.model_validate(e) for e in await employees.list_employees()]


@router.post(
    "/employees",
    response_model=CreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
)
async def create_employee(employees: Employees, payload: EmployeeCreate) -> CreatedResponse:
    """Add an employee."""
    try:
        employee = await employees.create_employee(
            name=payload.name,
            pin=payload.pin,
            email=payload.email,
            hourly_wage=payload.hourly_wage,
            commission_rate=payload.commission_rate,
            pay_type=payload.pay_type.value,
        )
    except PinConflictError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="PIN already exists",
        )
    return CreatedResponse(id=employee.id)


@router.put(
    "/employees/{employee_id}",
    response_model=EmployeeAdminResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_employee(
    employees: Employees,
    employee_id: Annotated[int, Path()],
    payload: EmployeeUpdate,
) -> EmployeeAdminResponse:
    """Replace an employee's details."""
    try:
        employee = await employees.update_employee(
            employee_id,
            name=payload.name,
            pin=payload.pin,
            email=payload.email or None,
            hourly_wage=payload.hourly_wage,
            commission_rate=payload.commission_rate,
            pay_type=payload.pay_type.value,
        )
    except PinConflictError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="PIN already exists",
        )
    return EmployeeAdminResponse.model_validate(employee)


@router.delete(
    "/employees/{employee_id}",
    response_model=SuccessResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_employee(
    employees: Employees,
    employee_id: Annotated[int, Path()],
) -> SuccessResponse:
    """Delete an employee with all their entries and invoices."""
    await employees.delete_employee(employee_id)
    return SuccessResponse(success=True)


# ============================================================================
# Time entries
# ============================================================================


@router.get("/time-entries", response_model=list[AdminTimeEntryResponse])
async def list_all_time_entries(
    time_entries: TimeEntries,
    start_date: date | None = None,
    end_date: date | None = None,
    employee_id: int | None = None,
) -> list[AdminTimeEntryResponse]:
    """List entries across employees, newest first."""
    rows = await time_entries.list_all(
        start_date=start_date, end_date=end_date, employee_id=employee_id
    )
    return [
        AdminTimeEntryResponse(
            **TimeEntryResponse.model_validate(entry).model_dump(),
            employee_name=employee.name,
            hourly_wage=employee.hourly_wage,
            commission_rate=employee.commission_rate,
            pay_type=employee.pay_type,
        )
        for entry, employee in rows
    ]


@router.delete(
    "/time-entries/{entry_id}",
    response_model=SuccessResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_any_time_entry(
    time_entries: TimeEntries,
    entry_id: Annotated[int, Path()],
) -> SuccessResponse:
    """Delete any entry with its children."""
    try:
        await time_entries.delete_entry(entry_id)
    except TimeEntryNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )
    return SuccessResponse(success=True)


# ============================================================================
# Invoices
# ============================================================================


@router.get("/invoices", response_model=list[InvoiceResponse])
async def list_invoices(invoices: Invoices) -> list[InvoiceResponse]:
    """List all invoices, most recent first."""
    rows = await invoices.list_invoices()
    responses = []
    for invoice, employee_name in rows:
        response = InvoiceResponse.model_validate(invoice)
        response.employee_name = employee_name
        responses.append(response)
    return responses
