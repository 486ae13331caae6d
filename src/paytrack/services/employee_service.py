"""Employee lookup, PIN management and admin maintenance."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from paytrack.calculators.types import PayType
from paytrack.database import unit_of_work
from paytrack.models import Employee, Invoice, TimeEntry
from paytrack.services.time_entry_service import delete_entry_tree

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "pin", "email", "hourly_wage", "commission_rate", "pay_type")


class EmployeeNotFoundError(Exception):
    """Raised when an employee does not exist."""

    def __init__(self, employee_id: int):
        self.employee_id = employee_id
        super().__init__(f"Employee {employee_id} not found")


class InvalidPinError(Exception):
    """Raised when a PIN does not match."""


class PinConflictError(Exception):
    """Raised when a PIN is already used by another employee."""

    def __init__(self, pin: str):
        self.pin = pin
        super().__init__("PIN already in use by another employee")


class EmployeeService:
    """Service for employee records."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, employee_id: int) -> Employee:
        """Get an employee by ID.

        Raises:
            EmployeeNotFoundError: If the employee does not exist
        """
        employee = await self.session.get(Employee, employee_id)
        if employee is None:
            raise EmployeeNotFoundError(employee_id)
        return employee

    async def verify_pin(self, pin: str) -> Employee | None:
        """Return the employee with this PIN, or None."""
        return await self.session.scalar(select(Employee).where(Employee.pin == pin))

    async def _pin_taken(self, pin: str, exclude_id: int | None = None) -> bool:
        query = select(Employee.id).where(Employee.pin == pin)
        if exclude_id is not None:
            query = query.where(Employee.id != exclude_id)
        return await self.session.scalar(query) is not None

    async def change_pin(self, employee_id: int, current_pin: str, new_pin: str) -> None:
        """Change an employee's PIN after checking the current one.

        Raises:
            InvalidPinError: If ``current_pin`` is wrong
            PinConflictError: If ``new_pin`` belongs to another employee
        """
        employee = await self.session.scalar(
            select(Employee).where(Employee.id == employee_id, Employee.pin == current_pin)
        )
        if employee is None:
            raise InvalidPinError("Current PIN is incorrect")
        if await self._pin_taken(new_pin, exclude_id=employee_id):
            raise PinConflictError(new_pin)

        try:
            async with unit_of_work(self.session):
                employee.pin = new_pin
                await self.session.flush()
        except IntegrityError as exc:
            raise PinConflictError(new_pin) from exc

        logger.info("Changed PIN for employee %s", employee_id)

    async def list_employees(self) -> list[Employee]:
        result = await self.session.execute(select(Employee).order_by(Employee.id))
        return list(result.scalars().all())

    async def create_employee(
        self,
        name: str,
        pin: str,
        email: str | None = None,
        hourly_wage: Decimal | None = None,
        commission_rate: Decimal | None = None,
        pay_type: str | None = None,
    ) -> Employee:
        """Create an employee.

        Raises:
            PinConflictError: If the PIN is already in use
        """
        if await self._pin_taken(pin):
            raise PinConflictError(pin)

        employee = Employee(
            name=name,
            pin=pin,
            email=email or None,
            hourly_wage=hourly_wage or Decimal("0"),
            commission_rate=commission_rate or Decimal("0"),
            pay_type=PayType(pay_type or PayType.HOURLY.value).value,
        )
        try:
            async with unit_of_work(self.session):
                self.session.add(employee)
                await self.session.flush()
        except IntegrityError as exc:
            raise PinConflictError(pin) from exc

        logger.info("Created employee %s", employee.id)
        return employee

    async def update_employee(self, employee_id: int, **fields: Any) -> Employee:
        """Update an employee's details.

        Raises:
            EmployeeNotFoundError: If the employee does not exist
            PinConflictError: If the new PIN belongs to another employee
        """
        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        employee = await self.get(employee_id)
        pin = fields.get("pin")
        if pin is not None and await self._pin_taken(pin, exclude_id=employee_id):
            raise PinConflictError(pin)

        if "pay_type" in fields:
            fields["pay_type"] = PayType(fields["pay_type"] or PayType.HOURLY.value).value
        for money_field in ("hourly_wage", "commission_rate"):
            if money_field in fields and fields[money_field] is None:
                fields[money_field] = Decimal("0")

        try:
            async with unit_of_work(self.session):
                for key, value in fields.items():
                    setattr(employee, key, value)
                await self.session.flush()
        except IntegrityError as exc:
            raise PinConflictError(pin or "") from exc

        return employee

    async def delete_employee(self, employee_id: int) -> None:
        """Delete an employee with their entries, entry children and invoices.

        Raises:
            EmployeeNotFoundError: If the employee does not exist
        """
        await self.get(employee_id)
        entry_ids = list(
            (
                await self.session.execute(
                    select(TimeEntry.id).where(TimeEntry.employee_id == employee_id)
                )
            ).scalars()
        )

        async with unit_of_work(self.session):
            await delete_entry_tree(self.session, entry_ids)
            await self.session.execute(delete(Invoice).where(Invoice.employee_id == employee_id))
            await self.session.execute(delete(Employee).where(Employee.id == employee_id))

        logger.info(
            "Deleted employee %s with %d time entries", employee_id, len(entry_ids)
        )
