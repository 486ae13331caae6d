"""Time entry service: one entry per employee per day, with owned children."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date
from decimal import Decimal

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from paytrack.calculators.types import ClientEntryRecord, ProductSaleRecord, TimeEntryRecord
from paytrack.database import unit_of_work
from paytrack.models import ClientEntry, Employee, ProductSale, TimeEntry

logger = logging.getLogger(__name__)


class TimeEntryNotFoundError(Exception):
    """Raised when a time entry does not exist or belongs to someone else."""

    def __init__(self, entry_id: int):
        self.entry_id = entry_id
        super().__init__(f"Time entry {entry_id} not found")


class TimeEntryConflictError(Exception):
    """Raised when the employee already has an entry for the date."""

    def __init__(self, existing: TimeEntryRecord):
        self.existing = existing
        super().__init__(
            f"Employee {existing.employee_id} already has time entry "
            f"{existing.entry_id} on {existing.work_date.isoformat()}"
        )


async def delete_entry_tree(session: AsyncSession, entry_ids: Sequence[int]) -> None:
    """Delete time entries and everything they own, children first.

    Runs inside the caller's unit of work.
    """
    if not entry_ids:
        return
    ids = list(entry_ids)
    await session.execute(delete(ProductSale).where(ProductSale.time_entry_id.in_(ids)))
    await session.execute(delete(ClientEntry).where(ClientEntry.time_entry_id.in_(ids)))
    await session.execute(delete(TimeEntry).where(TimeEntry.id.in_(ids)))


class TimeEntryService:
    """Reads and writes time entries as whole ownership trees."""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _with_children(self):
        return select(TimeEntry).options(
            selectinload(TimeEntry.clients),
            selectinload(TimeEntry.product_sales),
        )

    async def find_for_date(self, employee_id: int, work_date: date) -> TimeEntry | None:
        """Get the employee's entry for a date, if any."""
        result = await self.session.execute(
            self._with_children()
            .where(TimeEntry.employee_id == employee_id, TimeEntry.work_date == work_date)
            .order_by(TimeEntry.id)
        )
        return result.scalars().first()

    async def create_entry(
        self,
        employee_id: int,
        work_date: date,
        hours: Decimal,
        start_time: str | None = None,
        end_time: str | None = None,
        break_minutes: int = 0,
        description: str | None = None,
        clients: Sequence[ClientEntryRecord] = (),
        product_sales: Sequence[ProductSaleRecord] = (),
        replace_existing: bool = False,
    ) -> TimeEntry:
        """Create an entry and its children in one unit of work.

        Raises:
            TimeEntryConflictError: If an entry exists for the date and
                ``replace_existing`` is False
        """
        existing = await self.find_for_date(employee_id, work_date)
        if existing is not None and not replace_existing:
            raise TimeEntryConflictError(existing.to_record())
        replaced_id = existing.id if existing is not None else None

        entry = TimeEntry(
            employee_id=employee_id,
            work_date=work_date,
            hours=hours,
            start_time=start_time or None,
            end_time=end_time or None,
            break_minutes=break_minutes or 0,
            description=description or "",
            clients=[
                ClientEntry(
                    client_name=c.client_name,
                    procedure_name=c.procedure_name or "",
                    notes=c.notes or "",
                    amount_earned=c.amount_earned or Decimal("0"),
                    tip_amount=c.tip_amount or Decimal("0"),
                    tip_received_cash=bool(c.tip_received_cash),
                )
                for c in clients
            ],
            product_sales=[
                ProductSale(
                    product_name=s.product_name,
                    sale_amount=s.sale_amount or Decimal("0"),
                    commission_amount=s.commission_amount or Decimal("0"),
                    notes=s.notes or "",
                )
                for s in product_sales
            ],
        )

        async with unit_of_work(self.session):
            if replaced_id is not None:
                await delete_entry_tree(self.session, [replaced_id])
            self.session.add(entry)
            await self.session.flush()

        if replaced_id is not None:
            logger.info(
                "Replaced time entry %s with %s for employee %s on %s",
                replaced_id, entry.id, employee_id, work_date.isoformat(),
            )
        else:
            logger.info(
                "Created time entry %s for employee %s on %s",
                entry.id, employee_id, work_date.isoformat(),
            )
        return entry

    async def delete_entry(self, entry_id: int, employee_id: int | None = None) -> None:
        """Delete an entry with its client entries and product sales.

        When ``employee_id`` is given the entry must belong to that employee.

        Raises:
            TimeEntryNotFoundError: If no matching entry exists
        """
        query = select(TimeEntry.id).where(TimeEntry.id == entry_id)
        if employee_id is not None:
            query = query.where(TimeEntry.employee_id == employee_id)
        found = await self.session.scalar(query)
        if found is None:
            raise TimeEntryNotFoundError(entry_id)

        async with unit_of_work(self.session):
            await delete_entry_tree(self.session, [entry_id])

        logger.info("Deleted time entry %s", entry_id)

    async def list_for_employee(self, employee_id: int) -> list[TimeEntry]:
        """All entries for an employee with children, newest first."""
        result = await self.session.execute(
            self._with_children()
            .where(TimeEntry.employee_id == employee_id)
            .order_by(TimeEntry.work_date.desc(), TimeEntry.created_at.desc(), TimeEntry.id.desc())
        )
        return list(result.scalars().all())

    async def records_in_range(
        self, employee_id: int, start: date, end: date
    ) -> list[TimeEntryRecord]:
        """Engine snapshots for an employee over an inclusive date range."""
        result = await self.session.execute(
            self._with_children()
            .where(
                TimeEntry.employee_id == employee_id,
                TimeEntry.work_date >= start,
                TimeEntry.work_date <= end,
            )
            .order_by(TimeEntry.work_date, TimeEntry.id)
        )
        return [entry.to_record() for entry in result.scalars().all()]

    async def list_all(
        self,
        start_date: date | None = None,
        end_date: date | None = None,
        employee_id: int | None = None,
    ) -> list[tuple[TimeEntry, Employee]]:
        """Entries across employees for the admin view, newest first."""
        query = (
            self._with_children()
            .add_columns(Employee)
            .join(Employee, TimeEntry.employee_id == Employee.id)
        )
        if start_date is not None and end_date is not None:
            query = query.where(TimeEntry.work_date >= start_date, TimeEntry.work_date <= end_date)
        if employee_id is not None:
            query = query.where(TimeEntry.employee_id == employee_id)
        query = query.order_by(
            TimeEntry.work_date.desc(), TimeEntry.created_at.desc(), TimeEntry.id.desc()
        )

        result = await self.session.execute(query)
        return [(entry, employee) for entry, employee in result.all()]
