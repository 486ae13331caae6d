"""Employee self-service endpoints: PIN login and PIN change."""

from typing import Annotated

from fastapi import APIRouter, HTTPException, Path, status

from paytrack.api.dependencies import Employees
from paytrack.api.schemas import (
    ChangePinRequest,
    EmployeeProfile,
    ErrorResponse,
    SuccessResponse,
    VerifyPinRequest,
)
from paytrack.services import InvalidPinError, PinConflictError

router = APIRouter(tags=["employees"])


@router.post(
    "/verify-pin",
    response_model=EmployeeProfile,
    responses={401: {"model": ErrorResponse}},
)
async def verify_pin(employees: Employees, payload: VerifyPinRequest) -> EmployeeProfile:
    """Log an employee in by PIN."""
    employee = await employees.verify_pin(payload.pin)
    if employee is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid PIN",
        )
    return EmployeeProfile.model_validate(employee)


@router.post(
    "/employees/{employee_id}/change-pin",
    response_model=SuccessResponse,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def change_pin(
    employees: Employees,
    employee_id: Annotated[int, Path()],
    payload: ChangePinRequest,
) -> SuccessResponse:
    """Change an employee's PIN."""
    try:
        await employees.change_pin(employee_id, payload.current_pin, payload.new_pin)
    except InvalidPinError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except PinConflictError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        )
    return SuccessResponse(success=True, message="PIN changed successfully")
