"""Time entry endpoints for the employee app."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, HTTPException, Path, Query, status

from paytrack.api.dependencies import Employees, TimeEntries
from paytrack.api.schemas import (
    ConflictResponse,
    ErrorResponse,
    SuccessResponse,
    TimeEntryCreate,
    TimeEntryResponse,
)
from paytrack.services import TimeEntryConflictError, TimeEntryNotFoundError

router = APIRouter(prefix="/employees/{employee_id}/time-entries", tags=["time-entries"])


@router.get(
    "/conflict",
    response_model=ConflictResponse,
    responses={404: {"model": ErrorResponse}},
)
async def check_conflict(
    employees: Employees,
    time_entries: TimeEntries,
    employee_id: Annotated[int, Path()],
    work_date: Annotated[date, Query(alias="date")],
) -> ConflictResponse:
    """Report whether the employee already logged the given date."""
    await employees.get(employee_id)
    existing = await time_entries.find_for_date(employee_id, work_date)
    if existing is None:
        return ConflictResponse(has_conflict=False)
    return ConflictResponse(
        has_conflict=True,
        existing_entry=TimeEntryResponse.model_validate(existing),
    )


@router.post(
    "",
    response_model=TimeEntryResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_time_entry(
    employees: Employees,
    time_entries: TimeEntries,
    employee_id: Annotated[int, Path()],
    payload: TimeEntryCreate,
) -> TimeEntryResponse:
    """Submit a day's hours with client services and product sales."""
    await employees.get(employee_id)
    try:
        entry = await time_entries.create_entry(
            employee_id=employee_id,
            work_date=payload.work_date,
            hours=payload.hours,
            start_time=payload.start_time,
            end_time=payload.end_time,
            break_minutes=payload.break_minutes,
            description=payload.description,
            clients=[c.to_record() for c in payload.clients],
            product_sales=[s.to_record() for s in payload.product_sales],
            replace_existing=payload.replace_existing,
        )
    except TimeEntryConflictError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        )
    return TimeEntryResponse.model_validate(entry)


@router.get(
    "",
    response_model=list[TimeEntryResponse],
    responses={404: {"model": ErrorResponse}},
)
async def list_time_entries(
    employees: Employees,
    time_entries: TimeEntries,
    employee_id: Annotated[int, Path()],
) -> list[TimeEntryResponse]:
    """List the employee's entries, newest first."""
    await employees.get(employee_id)
    entries = await time_entries.list_for_employee(employee_id)
    return [TimeEntryResponse.model_validate(e) for e in entries]


@router.delete(
    "/{entry_id}",
    response_model=SuccessResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_time_entry(
    time_entries: TimeEntries,
    employee_id: Annotated[int, Path()],
    entry_id: Annotated[int, Path()],
) -> SuccessResponse:
    """Delete one of the employee's own entries."""
    try:
        await time_entries.delete_entry(entry_id, employee_id=employee_id)
    except TimeEntryNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )
    return SuccessResponse(success=True)
